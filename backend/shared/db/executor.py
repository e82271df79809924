"""Parameterized statement execution with typed row mapping."""

from __future__ import annotations

import asyncio
import sqlite3
from typing import TYPE_CHECKING, Any, NamedTuple, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from shared.db.errors import QueryError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from shared.db.connection import ConnectionPool

logger = structlog.get_logger()

RecordT = TypeVar("RecordT", bound=BaseModel)

# SQLite INTEGER is a signed 64-bit value.
MIN_ROW_ID = -(2**63)
MAX_ROW_ID = 2**63 - 1


def fits_row_id(value: object) -> bool:
    """False for ints outside the SQLite INTEGER range, which cannot name any stored row.

    Other values are bound as given and simply match nothing.
    """
    return not isinstance(value, int) or MIN_ROW_ID <= value <= MAX_ROW_ID


class StatementResult(NamedTuple):
    rows: list[dict[str, Any]]
    rowcount: int


def _run_statement(conn: sqlite3.Connection, statement: str, params: Mapping[str, Any]) -> StatementResult:
    """Execute on the calling (worker) thread and drain the cursor."""
    cursor = conn.execute(statement, dict(params))
    try:
        rows = [dict(row) for row in cursor.fetchall()]
        return StatementResult(rows=rows, rowcount=cursor.rowcount)
    finally:
        cursor.close()


class QueryExecutor:
    """Runs one parameterized statement at a time and maps rows to records.

    Values are always passed as bound parameters (``:name`` placeholders);
    callers supply constant statement text. A pool-backed executor borrows a
    connection per call; a connection-bound executor (see
    ``TransactionCoordinator``) reuses the transaction's connection.
    """

    def __init__(
        self,
        pool: ConnectionPool | None = None,
        *,
        connection: sqlite3.Connection | None = None,
    ) -> None:
        if (pool is None) == (connection is None):
            raise ValueError("QueryExecutor needs exactly one of pool or connection")
        self._pool = pool
        self._connection = connection

    async def query_many(
        self,
        statement: str,
        params: Mapping[str, Any],
        record_type: type[RecordT],
    ) -> list[RecordT]:
        """Return every matching row; an empty list is a normal outcome."""
        result = await self._execute(statement, params)
        return [self._to_record(row, record_type, statement) for row in result.rows]

    async def query_one_or_none(
        self,
        statement: str,
        params: Mapping[str, Any],
        record_type: type[RecordT],
    ) -> RecordT | None:
        """Return the single matching row, or None when nothing matches.

        Raises QueryError when more than one row comes back; the statement
        must filter on a unique key.
        """
        result = await self._execute(statement, params)
        if not result.rows:
            return None
        if len(result.rows) > 1:
            logger.error("statement returned multiple rows", statement=statement, count=len(result.rows))
            raise QueryError(f"Expected at most one row, got {len(result.rows)}")
        return self._to_record(result.rows[0], record_type, statement)

    async def query_exactly_one(
        self,
        statement: str,
        params: Mapping[str, Any],
        record_type: type[RecordT],
    ) -> RecordT:
        """Return the one row produced by the statement (typically INSERT ... RETURNING)."""
        result = await self._execute(statement, params)
        if len(result.rows) != 1:
            logger.error("statement did not return exactly one row", statement=statement, count=len(result.rows))
            raise QueryError(f"Expected exactly one row, got {len(result.rows)}")
        return self._to_record(result.rows[0], record_type, statement)

    async def execute(self, statement: str, params: Mapping[str, Any]) -> int:
        """Run a statement that returns no rows and report how many rows it affected."""
        result = await self._execute(statement, params)
        return result.rowcount

    async def _execute(self, statement: str, params: Mapping[str, Any]) -> StatementResult:
        logger.debug("executing statement", statement=statement, params=sorted(params))
        if self._connection is not None:
            return await self._run(self._connection, statement, params)
        if self._pool is None:
            raise RuntimeError("QueryExecutor has neither a pool nor a connection")
        async with self._pool.acquire() as conn:
            return await self._run(conn, statement, params)

    @staticmethod
    async def _run(conn: sqlite3.Connection, statement: str, params: Mapping[str, Any]) -> StatementResult:
        try:
            return await asyncio.to_thread(_run_statement, conn, statement, params)
        # OverflowError: a bound int outside the 64-bit INTEGER range.
        except (sqlite3.Error, OverflowError) as exc:
            logger.error("statement failed", statement=statement, error=str(exc), exc_info=True)
            raise QueryError(str(exc)) from exc

    @staticmethod
    def _to_record(row: dict[str, Any], record_type: type[RecordT], statement: str) -> RecordT:
        try:
            return record_type.model_validate(row)
        except ValidationError as exc:
            logger.error("row does not match record type", statement=statement, record_type=record_type.__name__)
            raise QueryError(f"Row does not match {record_type.__name__}") from exc
