"""Sample Monopoly data set for local development."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from shared.dal.models import GameInput, PlayerInput, ScoreInput
from shared.db.game_repository import SqliteGameRepository
from shared.db.player_repository import SqlitePlayerRepository
from shared.db.transaction import TransactionCoordinator

if TYPE_CHECKING:
    from shared.db.connection import ConnectionPool

logger = structlog.get_logger()

SAMPLE_PLAYERS = [
    PlayerInput(email="me@calvin.edu", name="Me"),
    PlayerInput(email="king@gmail.edu", name="The King"),
    PlayerInput(email="dog@gmail.edu", name="Dogbreath"),
]

SAMPLE_GAMES = [
    GameInput(time="2006-06-27 08:00:00"),
    GameInput(time="2006-06-28 13:20:00"),
    GameInput(time="2006-06-29 18:41:00"),
]

# (game index, player index, score) into the lists above
SAMPLE_SCORES = [
    (0, 0, 0),
    (0, 1, 0),
    (0, 2, 2350),
    (1, 0, 1000),
    (1, 1, 0),
    (1, 2, 500),
    (2, 1, 0),
    (2, 2, 5500),
]


async def seed_sample_data(pool: ConnectionPool) -> bool:
    """Load the sample players, games and scores in one transaction.

    Returns False without writing anything when the database already has players.
    """
    transactions = TransactionCoordinator(pool)
    async with transactions.transaction() as tx:
        players = SqlitePlayerRepository(tx, transactions)
        games = SqliteGameRepository(tx, transactions)

        if await players.list_players():
            logger.info("database already has players, skipping seed", path=pool.path)
            return False

        player_ids = [(await players.create_player(player)).id for player in SAMPLE_PLAYERS]
        game_ids = [(await games.create_game(game)).id for game in SAMPLE_GAMES]
        for game_index, player_index, score in SAMPLE_SCORES:
            await games.record_score(
                ScoreInput(game_id=game_ids[game_index], player_id=player_ids[player_index], score=score),
            )

    logger.info("seeded sample data", players=len(player_ids), games=len(game_ids), scores=len(SAMPLE_SCORES))
    return True
