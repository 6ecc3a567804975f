from __future__ import annotations

import sqlite3
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import Group

from ._db import save, session_scope, write_session_scope
from .mappers import _to_group


def create_group(
    connection_or_session: sqlite3.Connection | Session, name: str
) -> Group:
    with write_session_scope(connection_or_session) as session:
        model = save(connection_or_session, session, db_schema.Group(name=name))
        return _to_group(model)


def load_group(
    connection_or_session: sqlite3.Connection | Session, name: str
) -> Optional[Group]:
    with session_scope(connection_or_session) as session:
        model = session.scalar(
            select(db_schema.Group).where(db_schema.Group.name == name)
        )
        return _to_group(model) if model else None
