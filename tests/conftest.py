"""Shared test fixtures."""

import pytest

from hookgate.config import Settings
from hookgate.webhooks.registry import ReceiverRegistry, default_receivers
from hookgate.webhooks.secrets import (
    FunctionSecrets,
    InMemorySecretStore,
    ReceiverConfigProvider,
)

TEST_KEY = "test-key-123"


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (environment ignored under pytest)."""
    return Settings()


@pytest.fixture
def secret_store() -> InMemorySecretStore:
    """Store holding a receiver key for the function 'foo'."""
    return InMemorySecretStore({"foo": FunctionSecrets(webhook_receiver_key=TEST_KEY)})


@pytest.fixture
def config_provider(secret_store: InMemorySecretStore) -> ReceiverConfigProvider:
    return ReceiverConfigProvider(secret_store)


@pytest.fixture
def registry() -> ReceiverRegistry:
    return ReceiverRegistry.build(default_receivers())
