"""Shared fixtures for Monopoly service tests."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

import pytest
from starlette.testclient import TestClient

from monopoly.server.app import create_app
from monopoly.server.settings import ServiceSettings

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "monopoly.db"


@pytest.fixture
def client(db_path: Path):
    """Client for an app on a fresh database; entering the client runs the lifespan (pool open/close)."""
    app = create_app(settings=ServiceSettings(database_path=str(db_path), pool_size=2))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def raw_db(db_path: Path, client: TestClient):  # noqa: ARG001
    """Direct connection for arranging games and scores, which have no create endpoint."""
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.execute("PRAGMA foreign_keys=ON")
    yield conn
    conn.close()
