"""Tests for TransactionCoordinator: ordering, commit, rollback, and cancellation."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING

import pytest

from shared.dal.models import RecordId
from shared.db.errors import QueryError, TransactionError

if TYPE_CHECKING:
    from shared.db.executor import QueryExecutor
    from shared.db.transaction import TransactionCoordinator

_INSERT_GAME = "INSERT INTO Game (time) VALUES (:time) RETURNING id"


def _count_games(raw_db: sqlite3.Connection) -> int:
    return raw_db.execute("SELECT COUNT(*) FROM Game").fetchone()[0]


async def _insert_game(tx: QueryExecutor, _previous: object) -> RecordId:
    return await tx.query_exactly_one(_INSERT_GAME, {"time": "2025-01-01 10:00"}, RecordId)


async def _broken_step(tx: QueryExecutor, _previous: object) -> None:
    await tx.execute("INSERT INTO NoSuchTable VALUES (:x)", {"x": 1})


class TestRunTransaction:
    async def test_returns_last_step_result(self, transactions: TransactionCoordinator) -> None:
        async def first(_tx: QueryExecutor, _previous: object) -> int:
            return 1

        async def second(_tx: QueryExecutor, previous: int) -> int:
            return previous + 1

        assert await transactions.run_transaction([first, second]) == 2

    async def test_steps_run_in_order_and_see_prior_effects(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
    ) -> None:
        async def read_back(tx: QueryExecutor, created: RecordId) -> RecordId | None:
            return await tx.query_one_or_none("SELECT id FROM Game WHERE id = :id", {"id": created.id}, RecordId)

        result = await transactions.run_transaction([_insert_game, read_back])

        assert result is not None
        assert _count_games(raw_db) == 1

    async def test_failure_rolls_back_prior_steps(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
    ) -> None:
        with pytest.raises(TransactionError) as exc_info:
            await transactions.run_transaction([_insert_game, _insert_game, _broken_step])

        assert isinstance(exc_info.value.__cause__, QueryError)
        assert _count_games(raw_db) == 0

    async def test_non_storage_error_rolls_back_and_propagates(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
    ) -> None:
        async def explode(_tx: QueryExecutor, _previous: object) -> None:
            raise LookupError("bug in step")

        with pytest.raises(LookupError, match="bug in step"):
            await transactions.run_transaction([_insert_game, explode])

        assert _count_games(raw_db) == 0

    async def test_empty_steps_rejected(self, transactions: TransactionCoordinator) -> None:
        with pytest.raises(ValueError, match="at least one step"):
            await transactions.run_transaction([])

    async def test_connection_reusable_after_rollback(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
    ) -> None:
        for _ in range(5):
            with pytest.raises(TransactionError):
                await transactions.run_transaction([_insert_game, _broken_step])

        await transactions.run_transaction([_insert_game])
        assert _count_games(raw_db) == 1

    async def test_uncommitted_rows_invisible_to_other_connections(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
    ) -> None:
        seen_from_outside: list[int] = []

        async def peek(_tx: QueryExecutor, previous: RecordId) -> RecordId:
            seen_from_outside.append(_count_games(raw_db))
            return previous

        await transactions.run_transaction([_insert_game, peek])

        assert seen_from_outside == [0]
        assert _count_games(raw_db) == 1

    async def test_completes_when_caller_is_cancelled(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
    ) -> None:
        started = asyncio.Event()
        proceed = asyncio.Event()
        finished = asyncio.Event()

        async def wait_for_signal(_tx: QueryExecutor, previous: RecordId) -> RecordId:
            started.set()
            await proceed.wait()
            return previous

        async def mark_finished(_tx: QueryExecutor, previous: RecordId) -> RecordId:
            finished.set()
            return previous

        caller = asyncio.create_task(transactions.run_transaction([_insert_game, wait_for_signal, mark_finished]))
        await started.wait()
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        proceed.set()
        await asyncio.wait_for(finished.wait(), timeout=1)
        for _ in range(100):
            if _count_games(raw_db) == 1:
                break
            await asyncio.sleep(0.01)
        assert _count_games(raw_db) == 1

    async def test_failure_after_cancellation_is_logged_and_rolled_back(
        self,
        transactions: TransactionCoordinator,
        raw_db: sqlite3.Connection,
        caplog,
    ) -> None:
        started = asyncio.Event()
        proceed = asyncio.Event()

        async def wait_for_signal(_tx: QueryExecutor, previous: RecordId) -> RecordId:
            started.set()
            await proceed.wait()
            return previous

        caller = asyncio.create_task(transactions.run_transaction([_insert_game, wait_for_signal, _broken_step]))
        await started.wait()
        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller
        assert transactions.in_flight == 1

        proceed.set()
        for _ in range(100):
            if transactions.in_flight == 0:
                break
            await asyncio.sleep(0.01)
        await asyncio.sleep(0)

        assert transactions.in_flight == 0
        detached = [
            r for r in caplog.records if isinstance(r.msg, dict) and r.msg.get("event") == "detached transaction failed"
        ]
        assert len(detached) == 1
        assert detached[0].msg["error_type"] == "TransactionError"
        assert _count_games(raw_db) == 0

    async def test_awaited_failure_is_not_reported_as_detached(
        self,
        transactions: TransactionCoordinator,
        caplog,
    ) -> None:
        with pytest.raises(TransactionError):
            await transactions.run_transaction([_insert_game, _broken_step])

        assert transactions.in_flight == 0
        assert not [
            r for r in caplog.records if isinstance(r.msg, dict) and r.msg.get("event") == "detached transaction failed"
        ]


class TestTransactionContext:
    async def test_commits_on_success(self, transactions: TransactionCoordinator, raw_db: sqlite3.Connection) -> None:
        async with transactions.transaction() as tx:
            await _insert_game(tx, None)
        assert _count_games(raw_db) == 1

    async def test_rolls_back_on_error(self, transactions: TransactionCoordinator, raw_db: sqlite3.Connection) -> None:
        with pytest.raises(RuntimeError):
            async with transactions.transaction() as tx:
                await _insert_game(tx, None)
                raise RuntimeError("abort")
        assert _count_games(raw_db) == 0
