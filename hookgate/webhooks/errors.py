"""Exceptions raised by the webhook dispatch layer."""


class WebhookError(Exception):
    """Base class for webhook dispatch errors."""


class ReceiverConfigurationError(WebhookError):
    """The receiver set is unusable (empty or duplicate names). Raised at startup."""


class MissingResumeCallbackError(WebhookError):
    """A request passed validation but carries no callback to resume into."""
