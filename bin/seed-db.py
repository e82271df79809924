"""Create the Monopoly schema and load the sample data set.

Usage: uv run python bin/seed-db.py

Reads MONOPOLY_DATABASE_PATH like the service does. Does nothing if the
database already contains players.
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from monopoly.server.settings import ServiceSettings
from shared.db import ConnectionPool, StorageError
from shared.db.seed import seed_sample_data
from shared.logging import setup_logging


async def main() -> None:
    settings = ServiceSettings()  # type: ignore[call-arg]
    setup_logging()

    pool = ConnectionPool(settings.database_path, size=1)
    pool.open()
    try:
        try:
            seeded = await seed_sample_data(pool)
        except StorageError as e:
            print(f"Error: {e}")
            sys.exit(1)
        if seeded:
            print(f"Sample data loaded into {settings.database_path}")
        else:
            print(f"{settings.database_path} already has players; nothing to do.")
    finally:
        pool.close()


if __name__ == "__main__":
    asyncio.run(main())
