from __future__ import annotations

import sqlite3
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import Application, Permission, Pipeline, Trigger

from ._db import save, session_scope, write_session_scope
from .mappers import _to_application, _to_pipeline, _to_trigger


def create_application(
    connection_or_session: sqlite3.Connection | Session,
    project_id: int,
    name: str,
    description: Optional[str] = None,
    repositories_manager: Optional[str] = None,
    repository_fullname: Optional[str] = None,
) -> Application:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.Application(
                project_id=project_id,
                name=name,
                description=description,
                repositories_manager=repositories_manager,
                repository_fullname=repository_fullname,
            ),
        )
        return _to_application(model)


def application_exists(
    connection_or_session: sqlite3.Connection | Session, project_id: int, name: str
) -> bool:
    with session_scope(connection_or_session) as session:
        application_id = session.scalar(
            select(db_schema.Application.id).where(
                db_schema.Application.project_id == project_id,
                db_schema.Application.name == name,
            )
        )
    return application_id is not None


def get_application_by_name(
    connection_or_session: sqlite3.Connection | Session, project_id: int, name: str
) -> Optional[Application]:
    with session_scope(connection_or_session) as session:
        model = session.scalar(
            select(db_schema.Application).where(
                db_schema.Application.project_id == project_id,
                db_schema.Application.name == name,
            )
        )
        return _to_application(model) if model else None


def list_applications(
    connection_or_session: sqlite3.Connection | Session, project_id: int
) -> list[Application]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.Application)
            .where(db_schema.Application.project_id == project_id)
            .order_by(db_schema.Application.name)
        ).all()
        return [_to_application(model) for model in models]


def attach_pipeline(
    connection_or_session: sqlite3.Connection | Session,
    application_id: int,
    pipeline_id: int,
) -> int:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.ApplicationPipeline(
                application_id=application_id, pipeline_id=pipeline_id
            ),
        )
        return int(model.id)


def list_application_pipelines(
    connection_or_session: sqlite3.Connection | Session, application_id: int
) -> list[Pipeline]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.Pipeline)
            .join(
                db_schema.ApplicationPipeline,
                db_schema.ApplicationPipeline.pipeline_id == db_schema.Pipeline.id,
            )
            .where(db_schema.ApplicationPipeline.application_id == application_id)
            .order_by(db_schema.ApplicationPipeline.id)
        ).all()
        return [_to_pipeline(model) for model in models]


def create_trigger(
    connection_or_session: sqlite3.Connection | Session,
    *,
    src_application_id: int,
    src_pipeline_id: int,
    src_environment_id: int,
    dest_application_id: int,
    dest_pipeline_id: int,
    dest_environment_id: int,
    manual: bool = False,
) -> Trigger:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.PipelineTrigger(
                src_application_id=src_application_id,
                src_pipeline_id=src_pipeline_id,
                src_environment_id=src_environment_id,
                dest_application_id=dest_application_id,
                dest_pipeline_id=dest_pipeline_id,
                dest_environment_id=dest_environment_id,
                manual=1 if manual else 0,
            ),
        )
        return _to_trigger(model)


def list_triggers(
    connection_or_session: sqlite3.Connection | Session, src_application_id: int
) -> list[Trigger]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.PipelineTrigger)
            .where(db_schema.PipelineTrigger.src_application_id == src_application_id)
            .order_by(db_schema.PipelineTrigger.id)
        ).all()
        return [_to_trigger(model) for model in models]


def add_application_group(
    connection_or_session: sqlite3.Connection | Session,
    application_id: int,
    group_id: int,
    permission: Permission,
) -> None:
    with write_session_scope(connection_or_session) as session:
        save(
            connection_or_session,
            session,
            db_schema.ApplicationGroup(
                application_id=application_id,
                group_id=group_id,
                role=int(permission),
            ),
        )


def list_application_groups(
    connection_or_session: sqlite3.Connection | Session, application_id: int
) -> list[tuple[str, Permission]]:
    with session_scope(connection_or_session) as session:
        rows = session.execute(
            select(db_schema.Group.name, db_schema.ApplicationGroup.role)
            .join(
                db_schema.ApplicationGroup,
                db_schema.ApplicationGroup.group_id == db_schema.Group.id,
            )
            .where(db_schema.ApplicationGroup.application_id == application_id)
            .order_by(db_schema.Group.name)
        ).all()
    return [(str(name), Permission(role)) for name, role in rows]
