"""Generic JSON receiver for JSON POSTs guarded by a shared code."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aiohttp import web

from hookgate.webhooks.receivers.base import WebhookReceiver

if TYPE_CHECKING:
    from hookgate.webhooks.receivers.base import DispatchContext
    from hookgate.webhooks.request import MaterializedRequest

logger = logging.getLogger(__name__)

CODE_PARAMETER = "code"
ACTION_PARAMETER = "action"
DEFAULT_ACTION = "change"


class GenericJsonReceiver(WebhookReceiver):
    """Receiver for providers without a dedicated signature scheme.

    The caller proves knowledge of the function's key by passing it as the
    ``code`` query parameter. An optional ``action`` parameter names the event.
    """

    name = "genericjson"

    async def receive(
        self,
        receiver_id: str,
        context: DispatchContext,
        request: MaterializedRequest,
    ) -> web.StreamResponse:
        error = self.ensure_secure_connection(context, request)
        if error is not None:
            return error

        if request.method != "POST":
            return self.create_bad_method_response(request)

        secret = await self.get_secret(receiver_id, context)
        if secret is None:
            return self.create_not_configured_response(receiver_id)

        if secret.requires_key:
            code = request.query.get(CODE_PARAMETER, "")
            if not code:
                logger.info("Webhook rejected: missing code (id=%s)", receiver_id)
                return web.json_response(
                    {"error": f"The '{CODE_PARAMETER}' query parameter is required"},
                    status=400,
                )
            if not self.secure_compare(code, secret.key):
                logger.warning("Webhook rejected: code mismatch (id=%s)", receiver_id)
                return web.json_response({"error": "unauthorized"}, status=401)

        data, error = self.read_as_json(request)
        if error is not None:
            return error

        action = request.query.get(ACTION_PARAMETER) or DEFAULT_ACTION
        return await self.execute_webhook(receiver_id, context, request, [action], data)
