"""hookgate entry point."""

import asyncio
import contextlib
import importlib
import logging

from hookgate.config import settings
from hookgate.functions import function_registry
from hookgate.webhooks.gateway import WebhookGateway
from hookgate.webhooks.registry import ReceiverRegistry, default_receivers
from hookgate.webhooks.secrets import FileSecretStore, ReceiverConfigProvider
from hookgate.webhooks.server import WebhookServer

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level),
)
logger = logging.getLogger(__name__)


def build_gateway() -> WebhookGateway:
    """Wire the receiver registry and secret provider from settings."""
    registry = ReceiverRegistry.build(default_receivers())
    config = ReceiverConfigProvider(
        FileSecretStore(settings.secrets_path),
        settings.receiver_secret_overrides,
    )
    return WebhookGateway(registry, config, settings)


async def serve() -> None:
    """Run the function server until cancelled."""
    # Import function modules so they register with the function_registry.
    for module in settings.get_function_modules():
        importlib.import_module(module)
        logger.info("Loaded function module: %s", module)

    server = WebhookServer(build_gateway(), function_registry, settings)
    await server.start()
    try:
        await asyncio.Event().wait()
    finally:
        await server.stop()


def main() -> None:
    logger.info("Starting hookgate on port %d...", settings.webhook_port)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve())


if __name__ == "__main__":
    main()
