"""Atomic multi-statement units of work over the connection pool."""

from __future__ import annotations

import asyncio
import contextlib
import sqlite3
from typing import TYPE_CHECKING, Any

import structlog

from shared.db.errors import StorageError, TransactionError
from shared.db.executor import QueryExecutor

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Sequence

    from shared.db.connection import ConnectionPool

    # A step receives the transaction-bound executor and the previous step's result.
    Step = Callable[[QueryExecutor, Any], Awaitable[Any]]

logger = structlog.get_logger()


def _log_detached_failure(task: asyncio.Task[Any]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("detached transaction failed", error_type=type(exc).__name__, exc_info=exc)


class TransactionCoordinator:
    """Runs ordered steps on one pooled connection, all-or-nothing.

    Writers take the database lock up front (BEGIN IMMEDIATE), so two
    transactions touching the same rows run one after the other and the
    second observes the first one's committed result.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool
        self._in_flight: set[asyncio.Task[Any]] = set()

    @property
    def in_flight(self) -> int:
        """Transactions still running, including ones whose caller was cancelled."""
        return len(self._in_flight)

    async def run_transaction(self, steps: Sequence[Step]) -> Any:  # noqa: ANN401
        """Execute steps in order and return the last step's result.

        Any storage failure rolls back every prior step and surfaces as
        TransactionError. The unit of work is shielded from cancellation of
        the calling task, so it always ends in COMMIT or ROLLBACK.
        """
        if not steps:
            raise ValueError("run_transaction needs at least one step")
        task = asyncio.ensure_future(self._run_steps(list(steps)))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            # Nobody awaits the result any more; report a late failure here.
            task.add_done_callback(_log_detached_failure)
            raise

    async def _run_steps(self, steps: list[Step]) -> Any:  # noqa: ANN401
        try:
            async with self.transaction() as tx:
                result = None
                for step in steps:
                    result = await step(tx, result)
        except TransactionError:
            raise
        except StorageError as exc:
            raise TransactionError("Transaction rolled back") from exc
        return result

    @contextlib.asynccontextmanager
    async def transaction(self) -> AsyncIterator[QueryExecutor]:
        """Yield an executor bound to one connection inside BEGIN/COMMIT.

        Leaving the block with an exception rolls back and re-raises it.
        """
        async with self._pool.acquire() as conn:
            await self._control(conn, "BEGIN IMMEDIATE")
            try:
                yield QueryExecutor(connection=conn)
            except BaseException:
                await self._rollback(conn)
                raise
            try:
                await self._control(conn, "COMMIT")
            except TransactionError:
                await self._rollback(conn)
                raise

    @staticmethod
    async def _control(conn: sqlite3.Connection, statement: str) -> None:
        try:
            await asyncio.to_thread(conn.execute, statement)
        except sqlite3.Error as exc:
            logger.error("transaction control failed", statement=statement, error=str(exc), exc_info=True)
            raise TransactionError(f"{statement} failed") from exc

    @staticmethod
    async def _rollback(conn: sqlite3.Connection) -> None:
        if not conn.in_transaction:
            return
        try:
            await asyncio.to_thread(conn.execute, "ROLLBACK")
        except sqlite3.Error:
            logger.exception("rollback failed")
        else:
            logger.warning("transaction rolled back")
