"""Abstract interface for player persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.dal.models import Player, PlayerInput, RecordId


class PlayerRepository(ABC):
    """Abstract interface for player persistence.

    Lookups, updates and deletes return None when no player has the given id.
    """

    @abstractmethod
    async def list_players(self) -> list[Player]: ...

    @abstractmethod
    async def get_player(self, player_id: int) -> Player | None: ...

    @abstractmethod
    async def create_player(self, player: PlayerInput) -> RecordId: ...

    @abstractmethod
    async def update_player(self, player_id: int, player: PlayerInput) -> RecordId | None: ...

    @abstractmethod
    async def delete_player(self, player_id: int) -> RecordId | None: ...
