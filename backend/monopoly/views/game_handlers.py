"""Game resource handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from monopoly.views.responses import json_response, return_data_or_404

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import JSONResponse

    from shared.dal.game_repository import GameRepository


def _games(request: Request) -> GameRepository:
    return request.app.state.game_repository


async def read_games(request: Request) -> JSONResponse:
    return json_response(await _games(request).list_games())


async def read_game(request: Request) -> JSONResponse:
    """Return the game's players with their scores, best score first."""
    game_id: int = request.path_params["game_id"]
    return return_data_or_404(await _games(request).get_game_scores(game_id))


async def delete_game(request: Request) -> JSONResponse:
    game_id: int = request.path_params["game_id"]
    return return_data_or_404(await _games(request).delete_game(game_id))
