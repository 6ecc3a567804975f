from __future__ import annotations

from shipyard import db


def test_connect_applies_sqlite_concurrency_pragmas(tmp_path) -> None:
    db_path = tmp_path / "test.db"

    connection = db.connect(str(db_path))
    try:
        journal_mode = connection.execute("PRAGMA journal_mode").fetchone()[0]
        synchronous = connection.execute("PRAGMA synchronous").fetchone()[0]
        busy_timeout = connection.execute("PRAGMA busy_timeout").fetchone()[0]
        foreign_keys = connection.execute("PRAGMA foreign_keys").fetchone()[0]

        assert str(journal_mode).lower() == "wal"
        assert int(synchronous) == 1
        assert int(busy_timeout) == 5000
        assert int(foreign_keys) == 1
    finally:
        connection.close()


def test_run_migrations_accepts_a_path(tmp_path) -> None:
    db_path = tmp_path / "by-path.db"

    db.run_migrations(db_path=str(db_path))

    connection = db.connect(str(db_path))
    try:
        version = connection.execute("SELECT version_num FROM alembic_version").fetchone()[0]
        assert version == "0001_initial_schema"
    finally:
        connection.close()
