from __future__ import annotations

import sqlite3
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import Project

from ._db import save, session_scope, write_session_scope
from .environments import list_environments
from .mappers import _to_project


def create_project(
    connection_or_session: sqlite3.Connection | Session,
    key: str,
    name: Optional[str] = None,
) -> Project:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.Project(key=key, name=name or key),
        )
        return _to_project(model)


def load_project(
    connection_or_session: sqlite3.Connection | Session, key: str
) -> Optional[Project]:
    """Load a project by key together with its environments."""
    with session_scope(connection_or_session) as session:
        model = session.scalar(
            select(db_schema.Project).where(db_schema.Project.key == key)
        )
        if model is None:
            return None
        return _to_project(model, list_environments(session, int(model.id)))


def list_projects(connection_or_session: sqlite3.Connection | Session) -> list[Project]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.Project).order_by(db_schema.Project.key)
        ).all()
        return [_to_project(model) for model in models]


def touch_project(
    connection_or_session: sqlite3.Connection | Session, project_id: int
) -> None:
    with write_session_scope(connection_or_session) as session:
        session.execute(
            update(db_schema.Project)
            .where(db_schema.Project.id == project_id)
            .values(last_modified=func.strftime("%Y-%m-%d %H:%M:%f", "now"))
        )
        if not isinstance(connection_or_session, Session):
            session.commit()
