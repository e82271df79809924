"""SQLite database layer: connection pool, statement execution, transactions and repositories."""

from shared.db.connection import ConnectionPool
from shared.db.errors import NotFoundError, QueryError, StorageError, TransactionError
from shared.db.executor import QueryExecutor
from shared.db.game_repository import SqliteGameRepository
from shared.db.player_repository import SqlitePlayerRepository
from shared.db.transaction import TransactionCoordinator

__all__ = [
    "ConnectionPool",
    "NotFoundError",
    "QueryError",
    "QueryExecutor",
    "SqliteGameRepository",
    "SqlitePlayerRepository",
    "StorageError",
    "TransactionCoordinator",
    "TransactionError",
]
