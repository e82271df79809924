"""SQLite connection pool and schema management."""

from __future__ import annotations

import asyncio
import contextlib
import os
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS Player (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL,
    name TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS Game (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    time TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS PlayerGame (
    gameID INTEGER NOT NULL REFERENCES Game (id),
    playerID INTEGER NOT NULL REFERENCES Player (id),
    score INTEGER NOT NULL,
    PRIMARY KEY (gameID, playerID)
);

CREATE INDEX IF NOT EXISTS idx_playergame_player
    ON PlayerGame (playerID);
"""


class ConnectionPool:
    """Fixed-size pool of SQLite connections shared by all request tasks.

    Connections run in autocommit mode; multi-statement units of work issue
    their own BEGIN/COMMIT through TransactionCoordinator. A connection is
    owned by one task at a time, for one statement or one transaction.
    """

    def __init__(self, path: str | Path, size: int = 5) -> None:
        if size < 1:
            raise ValueError("Pool size must be at least 1")
        self._path = str(path)
        self._size = size
        self._connections: list[sqlite3.Connection] = []
        self._idle: asyncio.Queue[sqlite3.Connection] | None = None

    @property
    def path(self) -> str:
        return self._path

    @property
    def size(self) -> int:
        return self._size

    @property
    def is_open(self) -> bool:
        return self._idle is not None

    def open(self) -> None:
        """Open all connections, apply pragmas and schema, and harden file permissions."""
        if self._idle is not None:
            return
        Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        idle: asyncio.Queue[sqlite3.Connection] = asyncio.Queue()
        for _ in range(self._size):
            conn = self._connect()
            self._connections.append(conn)
            idle.put_nowait(conn)
        self._connections[0].executescript(SCHEMA_SQL)
        self._idle = idle

        self._harden_permissions()
        logger.info("connection pool opened", path=self._path, size=self._size)

    def close(self) -> None:
        """Close every pooled connection."""
        for conn in self._connections:
            conn.close()
        self._connections.clear()
        if self._idle is not None:
            self._idle = None
            logger.info("connection pool closed", path=self._path)

    @contextlib.asynccontextmanager
    async def acquire(self) -> AsyncIterator[sqlite3.Connection]:
        """Borrow a connection for the duration of the block.

        Suspends the calling task while every connection is in use.
        """
        idle = self._idle
        if idle is None:
            raise RuntimeError("Connection pool is not open")
        conn = await idle.get()
        try:
            yield conn
        finally:
            idle.put_nowait(conn)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _harden_permissions(self) -> None:
        """Set restrictive file permissions on POSIX systems (best effort)."""
        if os.name != "posix":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
