"""Starlette application for the Monopoly data service.

Routes map HTTP methods and paths onto the player and game handlers. Storage
failures never reach clients in detail: not-found lookups become a bare 404,
any storage error becomes a bare 500 and is logged with its full traceback.
"""

from __future__ import annotations

import contextlib
from http import HTTPStatus
from typing import TYPE_CHECKING, cast

import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

# Registers the row_id path convertor used by the routes below.
import monopoly.server.convertors  # noqa: F401
from monopoly.server.middleware import RequestLogContextMiddleware, SlashNormalizationMiddleware
from monopoly.server.settings import ServiceSettings
from monopoly.views import (
    create_player,
    delete_game,
    delete_player,
    read_game,
    read_games,
    read_player,
    read_players,
    update_player,
)
from monopoly.views.responses import InvalidBodyError
from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.db import (
    ConnectionPool,
    NotFoundError,
    QueryExecutor,
    SqliteGameRepository,
    SqlitePlayerRepository,
    StorageError,
    TransactionCoordinator,
)
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

BANNER = "Hello, CS 262 Monopoly service!"


def _status_response(status: HTTPStatus) -> PlainTextResponse:
    return PlainTextResponse(status.phrase, status_code=status)


async def _not_found_handler(_request: Request, _exc: Exception) -> Response:
    return _status_response(HTTPStatus.NOT_FOUND)


async def _storage_error_handler(request: Request, exc: Exception) -> Response:
    """Log the full storage failure server-side and return an uninformative 500."""
    logger.error(
        "storage failure",
        method=request.method,
        path=request.url.path,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return _status_response(HTTPStatus.INTERNAL_SERVER_ERROR)


async def _invalid_body_handler(_request: Request, exc: Exception) -> Response:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.BAD_REQUEST)


async def _http_error_handler(_request: Request, exc: Exception) -> Response:
    http_exc = cast("HTTPException", exc)
    if http_exc.status_code in {HTTPStatus.NO_CONTENT, HTTPStatus.NOT_MODIFIED}:
        return Response(status_code=http_exc.status_code, headers=http_exc.headers)
    return PlainTextResponse(http_exc.detail or "", status_code=http_exc.status_code, headers=http_exc.headers)


async def read_hello(_request: Request) -> PlainTextResponse:
    return PlainTextResponse(BANNER)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


def create_app(settings: ServiceSettings | None = None) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = ServiceSettings()  # type: ignore[call-arg]

    routes = [
        Route("/", read_hello, methods=["GET"], name="read_hello"),
        Route("/health", health, methods=["GET"], name="health"),
        Route("/players", read_players, methods=["GET"], name="read_players"),
        Route("/players", create_player, methods=["POST"], name="create_player"),
        Route("/players/{player_id:row_id}", read_player, methods=["GET"], name="read_player"),
        Route("/players/{player_id:row_id}", update_player, methods=["PUT"], name="update_player"),
        Route("/players/{player_id:row_id}", delete_player, methods=["DELETE"], name="delete_player"),
        Route("/games", read_games, methods=["GET"], name="read_games"),
        Route("/games/{game_id:row_id}", read_game, methods=["GET"], name="read_game"),
        Route("/games/{game_id:row_id}", delete_game, methods=["DELETE"], name="delete_game"),
    ]

    # One pool per process, handed to every component that needs it.
    pool = ConnectionPool(settings.database_path, size=settings.pool_size)
    executor = QueryExecutor(pool)
    transactions = TransactionCoordinator(pool)

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        pool.open()
        try:
            yield
        finally:
            pool.close()

    app = Starlette(
        routes=routes,
        lifespan=lifespan,
        exception_handlers={
            HTTPException: _http_error_handler,
            NotFoundError: _not_found_handler,
            StorageError: _storage_error_handler,
            InvalidBodyError: _invalid_body_handler,
        },
    )
    app.add_middleware(SlashNormalizationMiddleware)  # type: ignore[arg-type]
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_middleware(RequestLogContextMiddleware)  # type: ignore[arg-type]

    app.state.settings = settings
    app.state.pool = pool
    app.state.player_repository = SqlitePlayerRepository(executor, transactions)
    app.state.game_repository = SqliteGameRepository(executor, transactions)

    logger.info("monopoly service ready", database_path=settings.database_path, pool_size=settings.pool_size)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory monopoly.server.app:get_app."""
    s = ServiceSettings()  # type: ignore[call-arg]
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s)


def main() -> None:  # pragma: no cover
    """Run the service on the configured host and port."""
    s = ServiceSettings()  # type: ignore[call-arg]
    setup_logging(log_dir=s.log_dir)
    logger.info("listening", host=s.host, port=s.port)
    uvicorn.run(create_app(settings=s), host=s.host, port=s.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    main()
