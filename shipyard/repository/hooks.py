from __future__ import annotations

import sqlite3
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import Hook, RepositoryPoller

from ._db import save, session_scope, write_session_scope
from .mappers import _to_hook, _to_poller


def create_hook(
    connection_or_session: sqlite3.Connection | Session,
    application_id: int,
    pipeline_id: int,
    repositories_manager: str,
    repository_fullname: str,
) -> Hook:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.Hook(
                uid=uuid.uuid4().hex,
                application_id=application_id,
                pipeline_id=pipeline_id,
                repositories_manager=repositories_manager,
                repository_fullname=repository_fullname,
                enabled=1,
            ),
        )
        return _to_hook(model)


def list_hooks(
    connection_or_session: sqlite3.Connection | Session, application_id: int
) -> list[Hook]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.Hook)
            .where(db_schema.Hook.application_id == application_id)
            .order_by(db_schema.Hook.id)
        ).all()
        return [_to_hook(model) for model in models]


def create_poller(
    connection_or_session: sqlite3.Connection | Session,
    application_id: int,
    pipeline_id: int,
    enabled: bool = True,
    interval: int = 60,
) -> RepositoryPoller:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.RepositoryPoller(
                application_id=application_id,
                pipeline_id=pipeline_id,
                enabled=1 if enabled else 0,
                interval=interval,
            ),
        )
        return _to_poller(model)


def list_pollers(
    connection_or_session: sqlite3.Connection | Session, application_id: int
) -> list[RepositoryPoller]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.RepositoryPoller)
            .where(db_schema.RepositoryPoller.application_id == application_id)
            .order_by(db_schema.RepositoryPoller.id)
        ).all()
        return [_to_poller(model) for model in models]
