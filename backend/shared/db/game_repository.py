"""SQLite-backed game repository."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shared.dal.game_repository import GameRepository
from shared.dal.models import Game, PlayerScore, RecordId, ScoreInput
from shared.db.executor import fits_row_id

if TYPE_CHECKING:
    from shared.dal.models import GameInput
    from shared.db.executor import QueryExecutor
    from shared.db.transaction import TransactionCoordinator

logger = structlog.get_logger()

_SELECT_GAMES = "SELECT id, time FROM Game ORDER BY id"
_SELECT_GAME = "SELECT id, time FROM Game WHERE id = :id"
_SELECT_GAME_SCORES = """\
SELECT P.id, P.name, P.email, PG.score
FROM PlayerGame AS PG
JOIN Player AS P ON PG.playerID = P.id
WHERE PG.gameID = :id
ORDER BY PG.score DESC"""
_INSERT_GAME = "INSERT INTO Game (time) VALUES (:time) RETURNING id"
_INSERT_SCORE = (
    "INSERT INTO PlayerGame (gameID, playerID, score) VALUES (:game_id, :player_id, :score) "
    "RETURNING gameID, playerID, score"
)
_DELETE_GAME_SCORES = "DELETE FROM PlayerGame WHERE gameID = :id"
_DELETE_GAME = "DELETE FROM Game WHERE id = :id RETURNING id"


class SqliteGameRepository(GameRepository):
    """SQLite implementation of GameRepository.

    Scores live in the PlayerGame association table and are always read or
    removed through their game (or player).
    """

    def __init__(self, executor: QueryExecutor, transactions: TransactionCoordinator) -> None:
        self._executor = executor
        self._transactions = transactions

    async def list_games(self) -> list[Game]:
        return await self._executor.query_many(_SELECT_GAMES, {}, Game)

    async def get_game(self, game_id: int) -> Game | None:
        if not fits_row_id(game_id):
            return None
        return await self._executor.query_one_or_none(_SELECT_GAME, {"id": game_id}, Game)

    async def get_game_scores(self, game_id: int) -> list[PlayerScore] | None:
        """Return the game's players ordered best score first, or None if the game does not exist.

        The existence check and the standings read share one transaction so a
        concurrent delete cannot slip between them.
        """
        if not fits_row_id(game_id):
            return None
        params = {"id": game_id}

        async def find_game(tx: QueryExecutor, _previous: object) -> Game | None:
            return await tx.query_one_or_none(_SELECT_GAME, params, Game)

        async def read_scores(tx: QueryExecutor, game: Game | None) -> list[PlayerScore] | None:
            if game is None:
                return None
            return await tx.query_many(_SELECT_GAME_SCORES, params, PlayerScore)

        return await self._transactions.run_transaction([find_game, read_scores])

    async def create_game(self, game: GameInput) -> RecordId:
        created = await self._executor.query_exactly_one(_INSERT_GAME, game.model_dump(), RecordId)
        logger.info("game created", game_id=created.id)
        return created

    async def record_score(self, score: ScoreInput) -> ScoreInput:
        """Link a player to a game with a score. Unknown player or game ids raise QueryError."""
        return await self._executor.query_exactly_one(_INSERT_SCORE, score.model_dump(), ScoreInput)

    async def delete_game(self, game_id: int) -> RecordId | None:
        """Delete the game's scores, then the game. Returns None if no such game."""
        if not fits_row_id(game_id):
            return None
        params = {"id": game_id}

        async def delete_scores(tx: QueryExecutor, _previous: object) -> int:
            return await tx.execute(_DELETE_GAME_SCORES, params)

        async def delete_game(tx: QueryExecutor, _scores_deleted: int) -> RecordId | None:
            return await tx.query_one_or_none(_DELETE_GAME, params, RecordId)

        deleted = await self._transactions.run_transaction([delete_scores, delete_game])
        if deleted is not None:
            logger.info("game deleted", game_id=game_id)
        return deleted
