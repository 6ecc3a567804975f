from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from shipyard.dependencies import create_db_session


def _resolve_db_path(connection: sqlite3.Connection) -> str | None:
    row = connection.execute("PRAGMA database_list").fetchone()
    if row is None:
        return None
    return row[2] or None


@contextmanager
def session_scope(
    connection_or_session: sqlite3.Connection | Session,
) -> Iterator[Session]:
    if isinstance(connection_or_session, Session):
        yield connection_or_session
        return

    session = create_db_session(_resolve_db_path(connection_or_session))
    try:
        yield session
    finally:
        session.close()


@contextmanager
def write_session_scope(
    connection_or_session: sqlite3.Connection | Session,
) -> Iterator[Session]:
    with session_scope(connection_or_session) as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise


@contextmanager
def transaction_scope(
    connection_or_session: sqlite3.Connection | Session,
) -> Iterator[Session]:
    """Yield a session whose writes commit on clean exit and roll back otherwise.

    Repository writers given this session only flush, so nothing becomes visible to
    other connections before the commit here.
    """
    with write_session_scope(connection_or_session) as session:
        yield session
        session.commit()


def save(connection_or_session: sqlite3.Connection | Session, session: Session, model):
    session.add(model)
    if isinstance(connection_or_session, Session):
        session.flush()
    else:
        session.commit()
        session.refresh(model)
    return model
