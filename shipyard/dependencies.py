from __future__ import annotations

import os
from functools import lru_cache

from shipyard import db
from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

IMPORT_MAX_BYTES_DEFAULT = 10 * 1024 * 1024


def get_db_path() -> str:
    return os.getenv("SHIPYARD_DB_PATH", "shipyard.db")


def get_import_max_bytes() -> int:
    raw_value = os.getenv("SHIPYARD_IMPORT_MAX_BYTES")
    if not raw_value:
        return IMPORT_MAX_BYTES_DEFAULT
    try:
        value = int(raw_value)
    except ValueError:
        return IMPORT_MAX_BYTES_DEFAULT
    return value if value >= 0 else IMPORT_MAX_BYTES_DEFAULT


@lru_cache(maxsize=8)
def _get_session_factory(db_path: str) -> sessionmaker[Session]:
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_db_session(db_path: str | None = None) -> Session:
    target_db_path = db_path or get_db_path()
    session = _get_session_factory(target_db_path)()
    session.execute(text("PRAGMA foreign_keys = ON"))
    return session


def get_connection():
    connection = db.connect(get_db_path())
    try:
        yield connection
    finally:
        connection.close()
