"""Player resource handlers: list, read, create, update and delete."""

from __future__ import annotations

from typing import TYPE_CHECKING

from monopoly.views.responses import json_response, parse_body, return_data_or_404
from shared.dal.models import PlayerInput

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import JSONResponse

    from shared.dal.player_repository import PlayerRepository


def _players(request: Request) -> PlayerRepository:
    return request.app.state.player_repository


async def read_players(request: Request) -> JSONResponse:
    # A list is never None, so an empty table is a 200 with [].
    return json_response(await _players(request).list_players())


async def read_player(request: Request) -> JSONResponse:
    player_id: int = request.path_params["player_id"]
    return return_data_or_404(await _players(request).get_player(player_id))


async def create_player(request: Request) -> JSONResponse:
    """Create a player; the database assigns the id, which is returned as {id}."""
    player = await parse_body(request, PlayerInput)
    return json_response(await _players(request).create_player(player))


async def update_player(request: Request) -> JSONResponse:
    player_id: int = request.path_params["player_id"]
    player = await parse_body(request, PlayerInput)
    return return_data_or_404(await _players(request).update_player(player_id, player))


async def delete_player(request: Request) -> JSONResponse:
    """Delete a player together with all of their game scores."""
    player_id: int = request.path_params["player_id"]
    return return_data_or_404(await _players(request).delete_player(player_id))
