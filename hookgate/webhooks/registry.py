"""Receiver registry — case-insensitive catalog of webhook receivers."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from hookgate.webhooks.errors import ReceiverConfigurationError
from hookgate.webhooks.receivers import GenericJsonReceiver, WebhookReceiver

logger = logging.getLogger(__name__)


def default_receivers() -> list[WebhookReceiver]:
    """Receivers available to every deployment."""
    return [GenericJsonReceiver()]


class ReceiverRegistry:
    """Immutable mapping of receiver name to receiver.

    Built once at startup::

        registry = ReceiverRegistry.build(default_receivers())
        receiver = registry.get("GenericJson")
    """

    def __init__(self, receivers: dict[str, WebhookReceiver]) -> None:
        self._receivers = receivers

    @classmethod
    def build(cls, receivers: Iterable[WebhookReceiver]) -> ReceiverRegistry:
        """Index ``receivers`` by lower-cased name.

        Raises ReceiverConfigurationError if there are none, or if two share a
        name ignoring case.
        """
        lookup: dict[str, WebhookReceiver] = {}
        for receiver in receivers:
            key = receiver.name.lower()
            if not key:
                msg = f"Receiver {type(receiver).__name__} has no name"
                raise ReceiverConfigurationError(msg)
            if key in lookup:
                msg = f"Receiver '{receiver.name}' is already registered"
                raise ReceiverConfigurationError(msg)
            lookup[key] = receiver
            logger.info("Registered webhook receiver: %s", receiver.name)

        if not lookup:
            msg = "No webhook receivers registered"
            raise ReceiverConfigurationError(msg)
        return cls(lookup)

    def get(self, name: str) -> WebhookReceiver | None:
        """Look up a receiver by name, ignoring case."""
        return self._receivers.get(name.lower())

    @property
    def names(self) -> list[str]:
        """All registered receiver names."""
        return [receiver.name for receiver in self._receivers.values()]
