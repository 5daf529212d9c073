"""Webhook dispatch gateway.

Routes a request for a webhook function through the function's receiver and,
once the receiver has validated it, resumes into the caller's callback to run
the function::

    gateway = WebhookGateway(registry, config_provider, settings)
    response = await gateway.handle(binding, request, invoke_function)

Misconfigured functions (not a webhook, unknown receiver) fail closed with
500. Receiver rejections are returned as the receiver produced them. Errors
raised by the callback propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from aiohttp import web

from hookgate.webhooks.errors import MissingResumeCallbackError
from hookgate.webhooks.handler import DelegatingHandler
from hookgate.webhooks.receivers.base import DispatchContext
from hookgate.webhooks.request import MaterializedRequest

if TYPE_CHECKING:
    from hookgate.config import Settings
    from hookgate.webhooks.handler import ResumeCallback
    from hookgate.webhooks.registry import ReceiverRegistry
    from hookgate.webhooks.secrets import ReceiverConfigProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionWebhookBinding:
    """Webhook configuration of one function, as supplied by the function registry."""

    function_name: str
    is_webhook: bool = False
    receiver_name: str = ""


def _server_error(message: str) -> web.Response:
    return web.json_response({"error": message}, status=500)


class WebhookGateway:
    """Dispatches webhook requests to receivers and resumes into the function."""

    def __init__(
        self,
        registry: ReceiverRegistry,
        config: ReceiverConfigProvider,
        settings: Settings,
    ) -> None:
        self._registry = registry
        self._config = config
        self._settings = settings
        self._handler = DelegatingHandler()

    async def handle(
        self,
        binding: FunctionWebhookBinding,
        request: web.Request,
        resume: ResumeCallback,
    ) -> web.StreamResponse:
        """Validate ``request`` with the function's receiver, then call ``resume``.

        A request object must only be dispatched once.
        """
        if not binding.is_webhook:
            logger.warning("Function '%s' is not configured as a webhook", binding.function_name)
            return _server_error("function is not configured as a webhook")

        receiver = self._registry.get(binding.receiver_name)
        if receiver is None:
            logger.warning(
                "No webhook receiver '%s' for function '%s' (registered: %s)",
                binding.receiver_name,
                binding.function_name,
                self._registry.names,
            )
            return _server_error("webhook receiver is not registered")

        materialized = await MaterializedRequest.from_request(request)
        context = DispatchContext(
            config=self._config,
            handler=self._handler,
            resume=resume,
            require_https=self._settings.require_https,
        )
        receiver_id = binding.function_name.lower()

        try:
            return await receiver.receive(receiver_id, context, materialized)
        except MissingResumeCallbackError:
            logger.exception("Webhook dispatch failed: function=%s", binding.function_name)
            return _server_error("internal error")
