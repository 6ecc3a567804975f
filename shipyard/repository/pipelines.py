from __future__ import annotations

import sqlite3
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import Pipeline, PipelineType

from ._db import save, session_scope, write_session_scope
from .mappers import _to_pipeline


def create_pipeline(
    connection_or_session: sqlite3.Connection | Session,
    project_id: int,
    name: str,
    pipeline_type: PipelineType = PipelineType.BUILD,
) -> Pipeline:
    with write_session_scope(connection_or_session) as session:
        model = save(
            connection_or_session,
            session,
            db_schema.Pipeline(
                project_id=project_id, name=name, type=pipeline_type.value
            ),
        )
        return _to_pipeline(model)


def get_pipeline_by_name(
    connection_or_session: sqlite3.Connection | Session, project_id: int, name: str
) -> Optional[Pipeline]:
    with session_scope(connection_or_session) as session:
        model = session.scalar(
            select(db_schema.Pipeline).where(
                db_schema.Pipeline.project_id == project_id,
                db_schema.Pipeline.name == name,
            )
        )
        return _to_pipeline(model) if model else None


def pipeline_exists(
    connection_or_session: sqlite3.Connection | Session, project_id: int, name: str
) -> bool:
    with session_scope(connection_or_session) as session:
        pipeline_id = session.scalar(
            select(db_schema.Pipeline.id).where(
                db_schema.Pipeline.project_id == project_id,
                db_schema.Pipeline.name == name,
            )
        )
    return pipeline_id is not None


def list_pipelines(
    connection_or_session: sqlite3.Connection | Session, project_id: int
) -> list[Pipeline]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.Pipeline)
            .where(db_schema.Pipeline.project_id == project_id)
            .order_by(db_schema.Pipeline.name)
        ).all()
        return [_to_pipeline(model) for model in models]
