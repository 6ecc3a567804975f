from __future__ import annotations

import os
import sqlite3
from pathlib import Path

from alembic import command
from alembic.config import Config


def connect(db_path: str) -> sqlite3.Connection:
    connection = sqlite3.connect(db_path, check_same_thread=False)
    connection.execute("PRAGMA journal_mode=WAL;")
    connection.execute("PRAGMA synchronous=NORMAL;")
    connection.execute("PRAGMA busy_timeout=5000;")
    connection.row_factory = sqlite3.Row
    connection.execute("PRAGMA foreign_keys = ON")
    return connection


def init_db(connection: sqlite3.Connection) -> None:
    run_migrations(connection=connection)


def run_migrations(
    *, connection: sqlite3.Connection | None = None, db_path: str | None = None
) -> None:
    if connection is None and db_path is None:
        db_path = os.getenv("SHIPYARD_DB_PATH", "shipyard.db")

    if connection is not None and db_path is None:
        db_path = _get_connection_path(connection)

    if connection is None and db_path is None:
        raise ValueError("Either connection or db_path must be provided.")

    config = _alembic_config(db_path or "shipyard.db")
    command.upgrade(config, "head")


def _alembic_config(db_path: str) -> Config:
    repo_root = Path(__file__).resolve().parents[1]
    config = Config()
    config.set_main_option("script_location", str(repo_root / "migrations"))
    config.set_main_option("sqlalchemy.url", f"sqlite:///{db_path}")
    return config


def _get_connection_path(connection: sqlite3.Connection) -> str:
    row = connection.execute("PRAGMA database_list").fetchone()
    if row is None:
        return "shipyard.db"
    return row[2] or "shipyard.db"
