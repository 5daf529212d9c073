"""Receiver secret resolution.

Receivers ask :class:`ReceiverConfigProvider` for the key that protects a
given function's webhook. Keys come from an external :class:`SecretStore`
and can be overridden per provider and function from settings.

Override resolution is tri-state:

- no override configured: use the store's key for the function
  (``None`` if the store has none, i.e. the receiver is not configured)
- override set to ``""``: no key at all, the receiver skips its secret check
- override set to any other value: use that value verbatim
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FunctionSecrets:
    """Secrets stored for one function."""

    webhook_receiver_key: str | None = None


@dataclass(frozen=True)
class SecretMaterial:
    """Key material handed to a receiver.

    ``key is None`` means the receiver must not apply a secret check.
    """

    key: str | None

    @property
    def requires_key(self) -> bool:
        return self.key is not None


@runtime_checkable
class SecretStore(Protocol):
    """Protocol for the external store holding per-function secrets."""

    async def get_function_secrets(self, function_name: str) -> FunctionSecrets | None:
        """Return the function's secrets, or None if it has none."""
        ...


class InMemorySecretStore:
    """Secret store backed by a plain mapping of function name to secrets."""

    def __init__(self, secrets: Mapping[str, FunctionSecrets] | None = None) -> None:
        self._secrets = {name.lower(): value for name, value in (secrets or {}).items()}

    async def get_function_secrets(self, function_name: str) -> FunctionSecrets | None:
        return self._secrets.get(function_name.lower())


class FileSecretStore:
    """Secret store reading ``<function>.json`` files from a directory.

    Each file holds ``{"webHookReceiverKey": "..."}``. Files are read on every
    lookup so rotated keys take effect without a restart.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _path_for(self, function_name: str) -> Path:
        return self.root / f"{function_name.lower()}.json"

    def _read(self, path: Path) -> FunctionSecrets | None:
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring secrets file with invalid JSON: %s", path)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring secrets file without a JSON object: %s", path)
            return None
        key = data.get("webHookReceiverKey")
        if key is not None and not isinstance(key, str):
            logger.warning("Ignoring non-string webHookReceiverKey in %s", path)
            return None
        return FunctionSecrets(webhook_receiver_key=key)

    async def get_function_secrets(self, function_name: str) -> FunctionSecrets | None:
        path = self._path_for(function_name)
        return await asyncio.to_thread(self._read, path)


def override_setting_name(provider_name: str, function_id: str) -> str:
    """Default override key for a provider/function pair."""
    return f"{provider_name}.{function_id}".lower()


class ReceiverConfigProvider:
    """Resolves the key a receiver should validate a function's webhooks with."""

    def __init__(self, store: SecretStore, overrides: Mapping[str, str] | None = None) -> None:
        self._store = store
        self._overrides = {name.lower(): value for name, value in (overrides or {}).items()}

    async def get_secret(
        self,
        function_id: str,
        provider_name: str,
        override_setting: str | None = None,
    ) -> SecretMaterial | None:
        """Return the secret for ``function_id``, or None if nothing is configured."""
        setting = (override_setting or override_setting_name(provider_name, function_id)).lower()

        if setting in self._overrides:
            value = self._overrides[setting]
            if value == "":
                logger.debug("Secret check disabled by override: %s", setting)
                return SecretMaterial(key=None)
            return SecretMaterial(key=value)

        secrets = await self._store.get_function_secrets(function_id)
        if secrets is None or not secrets.webhook_receiver_key:
            return None
        return SecretMaterial(key=secrets.webhook_receiver_key)
