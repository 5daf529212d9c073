"""MaterializedRequest — an inbound request with its body read into memory.

aiohttp request bodies are a stream that can be consumed once. The gateway
reads the body a single time and hands the same immutable snapshot to the
receiver for validation and then to the function being invoked, so both see
identical bytes.

The body is held entirely in memory. Its size is bounded by the aiohttp
application's ``client_max_size`` (``Settings.max_body_bytes``); a larger
body fails with 413 before any receiver runs.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from multidict import CIMultiDict, CIMultiDictProxy, MultiDict, MultiDictProxy

if TYPE_CHECKING:
    from aiohttp import web

_LOCAL_ADDRESSES = frozenset({"127.0.0.1", "::1"})


@dataclass(frozen=True)
class MaterializedRequest:
    """Immutable snapshot of an HTTP request, body included."""

    method: str
    scheme: str
    host: str
    path: str
    body: bytes = b""
    query: MultiDictProxy[str] = field(default_factory=lambda: MultiDictProxy(MultiDict()))
    headers: CIMultiDictProxy[str] = field(
        default_factory=lambda: CIMultiDictProxy(CIMultiDict())
    )
    match_info: dict[str, str] = field(default_factory=dict)
    remote: str | None = None

    @classmethod
    async def from_request(cls, request: web.Request) -> MaterializedRequest:
        """Read the full body of ``request`` and snapshot it."""
        body = await request.read()
        return cls(
            method=request.method,
            scheme=request.scheme,
            host=request.host,
            path=request.path,
            body=body,
            query=request.query,
            headers=request.headers,
            match_info=dict(request.match_info),
            remote=request.remote,
        )

    @property
    def content_type(self) -> str:
        raw = self.headers.get("Content-Type", "")
        return raw.split(";", 1)[0].strip().lower()

    @property
    def is_json(self) -> bool:
        """True for ``application/json`` and ``+json`` media types."""
        ctype = self.content_type
        return ctype == "application/json" or ctype.endswith("+json")

    @property
    def is_local(self) -> bool:
        """True when the peer address is a loopback address.

        The Host header is client-controlled and is never consulted.
        """
        return self.remote in _LOCAL_ADDRESSES

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding)

    def json(self) -> Any:
        """Parse the body as JSON. Raises ``ValueError`` on malformed input."""
        return json.loads(self.body)
