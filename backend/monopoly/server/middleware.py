"""ASGI middleware for the Monopoly service."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send


class SlashNormalizationMiddleware:
    """Strip trailing slashes so that /players/ is handled the same as /players.

    Rewrites the path before routing instead of relying on Starlette's
    307 redirect, which many HTTP clients do not follow for PUT and DELETE.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path: str = scope["path"]
            if len(path) > 1 and path.endswith("/"):
                scope["path"] = path.rstrip("/")
        await self.app(scope, receive, send)


class RequestLogContextMiddleware:
    """Bind a request id, method and path to the structlog context of each request.

    Every log line emitted while the request is handled (including storage
    failures) carries these fields.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        with structlog.contextvars.bound_contextvars(
            request_id=uuid.uuid4().hex[:12],
            method=scope["method"],
            path=scope["path"],
        ):
            await self.app(scope, receive, send)
