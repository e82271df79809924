"""Fixtures for database layer tests: a pool on a temporary SQLite file."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

import pytest

from shared.db.connection import ConnectionPool
from shared.db.executor import QueryExecutor
from shared.db.game_repository import SqliteGameRepository
from shared.db.player_repository import SqlitePlayerRepository
from shared.db.transaction import TransactionCoordinator

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "monopoly.db"


@pytest.fixture
def pool(db_path: Path):
    pool = ConnectionPool(db_path, size=3)
    pool.open()
    yield pool
    pool.close()


@pytest.fixture
def executor(pool: ConnectionPool) -> QueryExecutor:
    return QueryExecutor(pool)


@pytest.fixture
def transactions(pool: ConnectionPool) -> TransactionCoordinator:
    return TransactionCoordinator(pool)


@pytest.fixture
def player_repo(executor: QueryExecutor, transactions: TransactionCoordinator) -> SqlitePlayerRepository:
    return SqlitePlayerRepository(executor, transactions)


@pytest.fixture
def game_repo(executor: QueryExecutor, transactions: TransactionCoordinator) -> SqliteGameRepository:
    return SqliteGameRepository(executor, transactions)


@pytest.fixture
def raw_db(db_path: Path, pool: ConnectionPool):  # noqa: ARG001
    """A separate plain connection for arranging rows and checking results outside the pool."""
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.execute("PRAGMA foreign_keys=ON")
    yield conn
    conn.close()
