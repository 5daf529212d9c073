"""Async HTTP server exposing registered functions.

Uses aiohttp's AppRunner/TCPSite for non-blocking start/stop. Webhook
functions are dispatched through the :class:`WebhookGateway`; plain HTTP
functions are invoked directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aiohttp import web

from hookgate.functions import FunctionRegistry
from hookgate.webhooks.gateway import WebhookGateway
from hookgate.webhooks.request import MaterializedRequest

if TYPE_CHECKING:
    from hookgate.config import Settings
    from hookgate.functions import FunctionDef
    from hookgate.webhooks.handler import ResumeCallback

logger = logging.getLogger(__name__)

GATEWAY_KEY = web.AppKey("gateway", WebhookGateway)
FUNCTIONS_KEY = web.AppKey("functions", FunctionRegistry)


def _make_invoker(function: FunctionDef) -> ResumeCallback:
    """Wrap a function handler so its failures become a 500 response."""

    async def invoke(request: MaterializedRequest) -> web.StreamResponse:
        try:
            return await function.handler(request)
        except web.HTTPException:
            raise
        except Exception:
            logger.exception("Function failed: %s", function.name)
            return web.json_response({"error": "function invocation failed"}, status=500)

    return invoke


async def _handle_function(request: web.Request) -> web.StreamResponse:
    """Route /api/<function> to the registered function."""
    name = request.match_info["function"]
    functions = request.app[FUNCTIONS_KEY]

    function = functions.get(name)
    if function is None:
        logger.warning("Function 404: no function named %s", name)
        return web.json_response({"error": "unknown function"}, status=404)

    invoke = _make_invoker(function)
    if function.binding.is_webhook:
        gateway = request.app[GATEWAY_KEY]
        return await gateway.handle(function.binding, request, invoke)

    response = await invoke(await MaterializedRequest.from_request(request))
    if response is None:
        return web.json_response({"ok": True})
    return response


async def _health(request: web.Request) -> web.Response:
    """GET /health — basic liveness check."""
    return web.json_response({"status": "ok"})


def create_web_app(
    gateway: WebhookGateway,
    functions: FunctionRegistry,
    settings: Settings,
) -> web.Application:
    """Build the aiohttp Application with routes."""
    app = web.Application(client_max_size=settings.max_body_bytes)
    app[GATEWAY_KEY] = gateway
    app[FUNCTIONS_KEY] = functions
    app.router.add_get("/health", _health)
    # All methods reach the function so receivers can answer 405 themselves.
    app.router.add_route("*", "/api/{function}", _handle_function)
    return app


class WebhookServer:
    """Manages the aiohttp server lifecycle."""

    def __init__(
        self,
        gateway: WebhookGateway,
        functions: FunctionRegistry,
        settings: Settings,
    ) -> None:
        self._gateway = gateway
        self._functions = functions
        self._settings = settings
        self.port = settings.webhook_port
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Start listening for function requests."""
        if not self._functions.names:
            logger.warning("No functions registered, server disabled")
            return

        app = create_web_app(self._gateway, self._functions, self._settings)
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._settings.webhook_host, self.port)
        await site.start()
        logger.info(
            "Function server listening on port %d (functions: %s)",
            self.port,
            self._functions.names,
        )

    async def stop(self) -> None:
        """Shut down the server gracefully."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Function server stopped")
