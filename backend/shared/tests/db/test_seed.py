"""Tests for the sample data loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

from shared.db.seed import SAMPLE_GAMES, SAMPLE_PLAYERS, SAMPLE_SCORES, seed_sample_data

if TYPE_CHECKING:
    from shared.db.connection import ConnectionPool
    from shared.db.game_repository import SqliteGameRepository
    from shared.db.player_repository import SqlitePlayerRepository


class TestSeedSampleData:
    async def test_loads_players_games_and_scores(
        self,
        pool: ConnectionPool,
        player_repo: SqlitePlayerRepository,
        game_repo: SqliteGameRepository,
    ) -> None:
        assert await seed_sample_data(pool) is True

        assert len(await player_repo.list_players()) == len(SAMPLE_PLAYERS)
        games = await game_repo.list_games()
        assert len(games) == len(SAMPLE_GAMES)

        total_scores = 0
        for game in games:
            scores = await game_repo.get_game_scores(game.id)
            assert scores is not None
            assert [s.score for s in scores] == sorted((s.score for s in scores), reverse=True)
            total_scores += len(scores)
        assert total_scores == len(SAMPLE_SCORES)

    async def test_second_run_is_a_no_op(self, pool: ConnectionPool, player_repo: SqlitePlayerRepository) -> None:
        await seed_sample_data(pool)

        assert await seed_sample_data(pool) is False
        assert len(await player_repo.list_players()) == len(SAMPLE_PLAYERS)
