"""SQLite-backed player repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shared.dal.models import Player, RecordId
from shared.dal.player_repository import PlayerRepository
from shared.db.executor import fits_row_id

if TYPE_CHECKING:
    from shared.dal.models import PlayerInput
    from shared.db.executor import QueryExecutor
    from shared.db.transaction import TransactionCoordinator

logger = structlog.get_logger()

_SELECT_PLAYERS = "SELECT id, email, name FROM Player ORDER BY id"
_SELECT_PLAYER = "SELECT id, email, name FROM Player WHERE id = :id"
_INSERT_PLAYER = "INSERT INTO Player (email, name) VALUES (:email, :name) RETURNING id"
_UPDATE_PLAYER = "UPDATE Player SET email = :email, name = :name WHERE id = :id RETURNING id"
_DELETE_PLAYER_SCORES = "DELETE FROM PlayerGame WHERE playerID = :id"
_DELETE_PLAYER = "DELETE FROM Player WHERE id = :id RETURNING id"


class SqlitePlayerRepository(PlayerRepository):
    """SQLite implementation of PlayerRepository.

    Deleting a player removes the player's PlayerGame rows and the Player
    row in one transaction.
    """

    def __init__(self, executor: QueryExecutor, transactions: TransactionCoordinator) -> None:
        self._executor = executor
        self._transactions = transactions

    async def list_players(self) -> list[Player]:
        return await self._executor.query_many(_SELECT_PLAYERS, {}, Player)

    async def get_player(self, player_id: int) -> Player | None:
        if not fits_row_id(player_id):
            return None
        return await self._executor.query_one_or_none(_SELECT_PLAYER, {"id": player_id}, Player)

    async def create_player(self, player: PlayerInput) -> RecordId:
        """Insert a player and return the id assigned by the database."""
        created = await self._executor.query_exactly_one(_INSERT_PLAYER, player.model_dump(), RecordId)
        logger.info("player created", player_id=created.id)
        return created

    async def update_player(self, player_id: int, player: PlayerInput) -> RecordId | None:
        if not fits_row_id(player_id):
            return None
        updated = await self._executor.query_one_or_none(
            _UPDATE_PLAYER,
            {**player.model_dump(), "id": player_id},
            RecordId,
        )
        if updated is not None:
            logger.info("player updated", player_id=player_id)
        return updated

    async def delete_player(self, player_id: int) -> RecordId | None:
        """Delete the player's scores, then the player. Returns None if no such player."""
        if not fits_row_id(player_id):
            return None
        params = {"id": player_id}

        async def delete_scores(tx: QueryExecutor, _previous: object) -> int:
            return await tx.execute(_DELETE_PLAYER_SCORES, params)

        async def delete_player(tx: QueryExecutor, _scores_deleted: int) -> RecordId | None:
            return await tx.query_one_or_none(_DELETE_PLAYER, params, RecordId)

        deleted = await self._transactions.run_transaction([delete_scores, delete_player])
        if deleted is not None:
            logger.info("player deleted", player_id=player_id)
        return deleted
