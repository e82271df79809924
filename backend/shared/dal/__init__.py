"""Data access layer: repository interfaces and shared persistence models."""

from shared.dal.game_repository import GameRepository
from shared.dal.models import Game, GameInput, Player, PlayerInput, PlayerScore, RecordId, ScoreInput
from shared.dal.player_repository import PlayerRepository

__all__ = [
    "Game",
    "GameInput",
    "GameRepository",
    "Player",
    "PlayerInput",
    "PlayerRepository",
    "PlayerScore",
    "RecordId",
    "ScoreInput",
]
