"""Provider-specific webhook receivers."""

from hookgate.webhooks.receivers.base import DispatchContext, WebhookReceiver
from hookgate.webhooks.receivers.generic import GenericJsonReceiver

__all__ = [
    "DispatchContext",
    "GenericJsonReceiver",
    "WebhookReceiver",
]
