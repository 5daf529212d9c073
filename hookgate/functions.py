"""Function registry — the functions this host can invoke over HTTP."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from hookgate.webhooks.gateway import FunctionWebhookBinding

if TYPE_CHECKING:
    from aiohttp import web

    from hookgate.webhooks.request import MaterializedRequest

logger = logging.getLogger(__name__)

# Function signature: async (request: MaterializedRequest) -> web.StreamResponse
FunctionHandler = Callable[["MaterializedRequest"], Awaitable["web.StreamResponse"]]


@dataclass(frozen=True)
class FunctionDef:
    """A registered function and its webhook binding."""

    binding: FunctionWebhookBinding
    handler: FunctionHandler

    @property
    def name(self) -> str:
        return self.binding.function_name


class FunctionRegistry:
    """Registry for named functions.

    Usage::

        functions = FunctionRegistry()

        @functions.webhook("deploy", receiver="genericjson")
        async def deploy(request: MaterializedRequest) -> web.Response:
            ...
    """

    def __init__(self) -> None:
        self._functions: dict[str, FunctionDef] = {}

    def _register(self, binding: FunctionWebhookBinding) -> Callable[[FunctionHandler], FunctionHandler]:
        def decorator(fn: FunctionHandler) -> FunctionHandler:
            if not inspect.iscoroutinefunction(fn):
                msg = f"Function handler '{binding.function_name}' must be an async function"
                raise TypeError(msg)
            key = binding.function_name.lower()
            if key in self._functions:
                msg = f"Function '{binding.function_name}' is already registered"
                raise ValueError(msg)
            self._functions[key] = FunctionDef(binding=binding, handler=fn)
            logger.info(
                "Registered function: %s (webhook=%s)",
                binding.function_name,
                binding.receiver_name or "no",
            )
            return fn

        return decorator

    def webhook(self, name: str, *, receiver: str) -> Callable[[FunctionHandler], FunctionHandler]:
        """Decorator registering a function triggered through a webhook receiver."""
        return self._register(
            FunctionWebhookBinding(function_name=name, is_webhook=True, receiver_name=receiver)
        )

    def http(self, name: str) -> Callable[[FunctionHandler], FunctionHandler]:
        """Decorator registering a plain HTTP function (no webhook validation)."""
        return self._register(FunctionWebhookBinding(function_name=name))

    def get(self, name: str) -> FunctionDef | None:
        """Look up a function by name, ignoring case."""
        return self._functions.get(name.lower())

    @property
    def names(self) -> list[str]:
        """All registered function names."""
        return [f.name for f in self._functions.values()]


function_registry = FunctionRegistry()
