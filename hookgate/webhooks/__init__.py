"""Webhook dispatch: receivers, secret resolution, and the dispatch gateway."""

from hookgate.webhooks.gateway import FunctionWebhookBinding, WebhookGateway
from hookgate.webhooks.handler import DelegatingHandler, HandlerContext
from hookgate.webhooks.registry import ReceiverRegistry, default_receivers
from hookgate.webhooks.request import MaterializedRequest
from hookgate.webhooks.secrets import ReceiverConfigProvider, SecretMaterial

__all__ = [
    "DelegatingHandler",
    "FunctionWebhookBinding",
    "HandlerContext",
    "MaterializedRequest",
    "ReceiverConfigProvider",
    "ReceiverRegistry",
    "SecretMaterial",
    "WebhookGateway",
    "default_receivers",
]
