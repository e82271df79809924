"""Abstract interface for game and score persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Game, GameInput, PlayerScore, RecordId, ScoreInput


class GameRepository(ABC):
    """Abstract interface for game persistence, including each game's player scores."""

    @abstractmethod
    async def list_games(self) -> list[Game]: ...

    @abstractmethod
    async def get_game(self, game_id: int) -> Game | None: ...

    @abstractmethod
    async def get_game_scores(self, game_id: int) -> list[PlayerScore] | None: ...

    @abstractmethod
    async def create_game(self, game: GameInput) -> RecordId: ...

    @abstractmethod
    async def record_score(self, score: ScoreInput) -> ScoreInput: ...

    @abstractmethod
    async def delete_game(self, game_id: int) -> RecordId | None: ...
