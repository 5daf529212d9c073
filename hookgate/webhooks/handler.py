"""Completion adapter — resumes into the function once a receiver is satisfied."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from hookgate.webhooks.errors import MissingResumeCallbackError

if TYPE_CHECKING:
    from aiohttp import web

    from hookgate.webhooks.request import MaterializedRequest

logger = logging.getLogger(__name__)

# Callback signature: async (request: MaterializedRequest) -> web.StreamResponse
ResumeCallback = Callable[["MaterializedRequest"], Awaitable["web.StreamResponse"]]


@dataclass
class HandlerContext:
    """State handed from a receiver to the handler after successful validation."""

    receiver: str
    receiver_id: str
    request: MaterializedRequest
    resume: ResumeCallback | None
    actions: list[str] = field(default_factory=list)
    data: Any = None
    response: web.StreamResponse | None = None


class DelegatingHandler:
    """Handler that invokes the request's resume callback.

    Receivers call :meth:`on_validated` only after every provider check has
    passed, so the function runs strictly after validation and inside the
    same request/response cycle.
    """

    async def on_validated(self, receiver_name: str, context: HandlerContext) -> None:
        resume = context.resume
        if resume is None:
            msg = (
                f"Request for '{context.receiver_id}' passed '{receiver_name}' "
                "validation but has no resume callback"
            )
            raise MissingResumeCallbackError(msg)

        # Single use: a second call on the same context must not re-run the function.
        context.resume = None
        logger.debug(
            "Webhook validated: receiver=%s, id=%s, actions=%s",
            receiver_name,
            context.receiver_id,
            context.actions,
        )
        context.response = await resume(context.request)
