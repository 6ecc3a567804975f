from __future__ import annotations

import sqlite3
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import Environment

from ._db import save, session_scope, write_session_scope
from .mappers import _to_environment


def create_environment(
    connection_or_session: sqlite3.Connection | Session, project_id: int, name: str
) -> Environment:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.Environment(project_id=project_id, name=name),
        )
        return _to_environment(model)


def list_environments(
    connection_or_session: sqlite3.Connection | Session, project_id: int
) -> list[Environment]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.Environment)
            .where(db_schema.Environment.project_id == project_id)
            .order_by(db_schema.Environment.name)
        ).all()
        return [_to_environment(model) for model in models]


def get_environment_by_name(
    connection_or_session: sqlite3.Connection | Session, project_id: int, name: str
) -> Optional[Environment]:
    with session_scope(connection_or_session) as session:
        model = session.scalar(
            select(db_schema.Environment).where(
                db_schema.Environment.project_id == project_id,
                db_schema.Environment.name == name,
            )
        )
        return _to_environment(model) if model else None


def environment_exists(
    connection_or_session: sqlite3.Connection | Session, project_key: str, name: str
) -> bool:
    with session_scope(connection_or_session) as session:
        environment_id = session.scalar(
            select(db_schema.Environment.id)
            .join(
                db_schema.Project,
                db_schema.Project.id == db_schema.Environment.project_id,
            )
            .where(
                db_schema.Project.key == project_key,
                db_schema.Environment.name == name,
            )
        )
    return environment_id is not None
