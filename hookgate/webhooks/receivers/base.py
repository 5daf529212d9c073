"""Base types for webhook receivers.

A receiver validates inbound requests for one provider (signature, method,
payload shape). When it is satisfied it calls :meth:`WebhookReceiver.execute_webhook`,
which hands control to the completion handler carried by the
:class:`DispatchContext`. On failure it returns its own error response and the
handler is never reached.
"""

from __future__ import annotations

import hmac
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from aiohttp import web

from hookgate.webhooks.handler import HandlerContext

if TYPE_CHECKING:
    from hookgate.webhooks.handler import DelegatingHandler, ResumeCallback
    from hookgate.webhooks.request import MaterializedRequest
    from hookgate.webhooks.secrets import ReceiverConfigProvider, SecretMaterial

logger = logging.getLogger(__name__)


@dataclass
class DispatchContext:
    """Per-request collaborators passed explicitly into ``receive()``.

    Attributes:
        config: Resolves secrets for the function being called.
        handler: Completion handler run after successful validation.
        resume: Callback that invokes the function. Used at most once.
        require_https: Reject non-local plain HTTP requests.
    """

    config: ReceiverConfigProvider
    handler: DelegatingHandler
    resume: ResumeCallback
    require_https: bool = False
    _resumed: bool = field(default=False, init=False, repr=False)

    def take_resume(self) -> ResumeCallback | None:
        """Return the resume callback on the first call and None afterwards."""
        if self._resumed:
            return None
        self._resumed = True
        return self.resume


class WebhookReceiver(ABC):
    """Abstract base for provider-specific receivers.

    Receivers hold no per-request state. A single instance serves all
    concurrent requests for its provider.

    Example::

        class MyReceiver(WebhookReceiver):
            name = "mine"

            async def receive(self, receiver_id, context, request):
                if request.method != "POST":
                    return self.create_bad_method_response(request)
                return await self.execute_webhook(receiver_id, context, request, ["event"], None)
    """

    name: str = ""

    @abstractmethod
    async def receive(
        self,
        receiver_id: str,
        context: DispatchContext,
        request: MaterializedRequest,
    ) -> web.StreamResponse:
        """Validate ``request`` and either execute the webhook or return an error."""
        ...

    # -- Helpers for subclasses ----------------------------------------------

    def ensure_secure_connection(
        self, context: DispatchContext, request: MaterializedRequest
    ) -> web.Response | None:
        """Return a 400 response if HTTPS is required and not used, else None."""
        if not context.require_https or request.is_local:
            return None
        if request.scheme == "https":
            return None
        logger.warning("Webhook rejected: %s receiver requires HTTPS", self.name)
        return web.json_response(
            {"error": f"The '{self.name}' WebHook receiver requires HTTPS"},
            status=400,
        )

    async def get_secret(
        self,
        receiver_id: str,
        context: DispatchContext,
        override_setting: str | None = None,
    ) -> SecretMaterial | None:
        return await context.config.get_secret(receiver_id, self.name, override_setting)

    def create_bad_method_response(self, request: MaterializedRequest) -> web.Response:
        logger.info("Webhook rejected: %s receiver does not support %s", self.name, request.method)
        return web.json_response(
            {"error": f"The HTTP '{request.method}' method is not supported"},
            status=405,
        )

    def create_not_configured_response(self, receiver_id: str) -> web.Response:
        logger.warning("Webhook rejected: no %s secret configured for '%s'", self.name, receiver_id)
        return web.json_response(
            {"error": f"The '{self.name}' WebHook receiver is not configured"},
            status=500,
        )

    def read_as_json(self, request: MaterializedRequest) -> tuple[Any, web.Response | None]:
        """Parse the body as JSON. Returns ``(data, None)`` or ``(None, error_response)``."""
        if not request.is_json:
            return None, web.json_response(
                {"error": "The WebHook request must contain an entity body formatted as JSON"},
                status=400,
            )
        try:
            return request.json(), None
        except ValueError:
            logger.info("Webhook rejected: invalid JSON (%s)", self.name)
            return None, web.json_response({"error": "invalid JSON"}, status=400)

    @staticmethod
    def secure_compare(a: str, b: str) -> bool:
        """Compare two strings in constant time."""
        return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))

    async def execute_webhook(
        self,
        receiver_id: str,
        context: DispatchContext,
        request: MaterializedRequest,
        actions: list[str],
        data: Any,
    ) -> web.StreamResponse:
        """Hand a validated request to the completion handler and return its response."""
        handler_context = HandlerContext(
            receiver=self.name,
            receiver_id=receiver_id,
            request=request,
            resume=context.take_resume(),
            actions=actions,
            data=data,
        )
        await context.handler.on_validated(self.name, handler_context)
        if handler_context.response is None:
            return web.json_response({"ok": True})
        return handler_context.response
