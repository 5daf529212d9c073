"""Tests for receiver secret resolution."""

import json

from hookgate.webhooks.secrets import (
    FileSecretStore,
    FunctionSecrets,
    InMemorySecretStore,
    ReceiverConfigProvider,
    SecretStore,
    override_setting_name,
)

# -- Helpers -----------------------------------------------------------------


def _store() -> InMemorySecretStore:
    return InMemorySecretStore({"foo": FunctionSecrets(webhook_receiver_key="default-key")})


# -- Tri-state overrides -----------------------------------------------------


async def test_absent_override_uses_default_secret() -> None:
    provider = ReceiverConfigProvider(_store())
    secret = await provider.get_secret("foo", "genericjson")
    assert secret is not None
    assert secret.key == "default-key"
    assert secret.requires_key


async def test_empty_override_disables_key() -> None:
    provider = ReceiverConfigProvider(_store(), {"genericjson.foo": ""})
    secret = await provider.get_secret("foo", "genericjson")
    assert secret is not None
    assert secret.key is None
    assert not secret.requires_key


async def test_value_override_used_verbatim() -> None:
    provider = ReceiverConfigProvider(_store(), {"genericjson.foo": "X"})
    secret = await provider.get_secret("foo", "genericjson")
    assert secret.key == "X"


async def test_override_for_other_provider_is_ignored() -> None:
    provider = ReceiverConfigProvider(_store(), {"github.foo": "X"})
    secret = await provider.get_secret("foo", "genericjson")
    assert secret.key == "default-key"


async def test_override_keys_are_case_insensitive() -> None:
    provider = ReceiverConfigProvider(_store(), {"GenericJson.Foo": "X"})
    secret = await provider.get_secret("foo", "genericjson")
    assert secret.key == "X"


async def test_explicit_override_setting_name() -> None:
    provider = ReceiverConfigProvider(_store(), {"shared_hook_key": "shared"})
    secret = await provider.get_secret("foo", "genericjson", "shared_hook_key")
    assert secret.key == "shared"


async def test_not_configured_returns_none() -> None:
    provider = ReceiverConfigProvider(_store())
    assert await provider.get_secret("bar", "genericjson") is None


async def test_empty_stored_key_is_not_configured() -> None:
    store = InMemorySecretStore({"foo": FunctionSecrets(webhook_receiver_key="")})
    provider = ReceiverConfigProvider(store)
    assert await provider.get_secret("foo", "genericjson") is None


def test_override_setting_name_format() -> None:
    assert override_setting_name("GitHub", "MyFunc") == "github.myfunc"


# -- Stores ------------------------------------------------------------------


async def test_in_memory_store_is_case_insensitive() -> None:
    store = InMemorySecretStore({"Foo": FunctionSecrets(webhook_receiver_key="k")})
    secrets = await store.get_function_secrets("foo")
    assert secrets.webhook_receiver_key == "k"


async def test_file_store_reads_function_file(tmp_path) -> None:
    (tmp_path / "foo.json").write_text(json.dumps({"webHookReceiverKey": "from-file"}))
    store = FileSecretStore(tmp_path)

    secrets = await store.get_function_secrets("Foo")
    assert secrets == FunctionSecrets(webhook_receiver_key="from-file")


async def test_file_store_missing_file_returns_none(tmp_path) -> None:
    store = FileSecretStore(tmp_path)
    assert await store.get_function_secrets("nope") is None


async def test_file_store_picks_up_rotated_key(tmp_path) -> None:
    path = tmp_path / "foo.json"
    path.write_text(json.dumps({"webHookReceiverKey": "old"}))
    provider = ReceiverConfigProvider(FileSecretStore(tmp_path))
    assert (await provider.get_secret("foo", "genericjson")).key == "old"

    path.write_text(json.dumps({"webHookReceiverKey": "new"}))
    assert (await provider.get_secret("foo", "genericjson")).key == "new"


def test_stores_satisfy_protocol(tmp_path) -> None:
    assert isinstance(InMemorySecretStore(), SecretStore)
    assert isinstance(FileSecretStore(tmp_path), SecretStore)


async def test_file_store_ignores_malformed_json(tmp_path, caplog) -> None:
    (tmp_path / "foo.json").write_text("{not json")
    store = FileSecretStore(tmp_path)

    with caplog.at_level("WARNING", logger="hookgate.webhooks.secrets"):
        assert await store.get_function_secrets("foo") is None
    assert "foo.json" in caplog.text


async def test_file_store_ignores_non_object_json(tmp_path, caplog) -> None:
    (tmp_path / "foo.json").write_text(json.dumps(["not", "an", "object"]))
    store = FileSecretStore(tmp_path)

    with caplog.at_level("WARNING", logger="hookgate.webhooks.secrets"):
        assert await store.get_function_secrets("foo") is None
    assert "foo.json" in caplog.text


async def test_file_store_ignores_non_string_key(tmp_path) -> None:
    (tmp_path / "foo.json").write_text(json.dumps({"webHookReceiverKey": 42}))
    provider = ReceiverConfigProvider(FileSecretStore(tmp_path))
    assert await provider.get_secret("foo", "genericjson") is None
