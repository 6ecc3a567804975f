from __future__ import annotations

import json
import sqlite3
from typing import Mapping

from sqlalchemy import select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import NotificationSetting, NotificationType

from ._db import save, session_scope, write_session_scope
from .mappers import _to_notification_setting


def upsert_notification_setting(
    connection_or_session: sqlite3.Connection | Session,
    application_id: int,
    pipeline_id: int,
    environment_id: int,
    notification_type: NotificationType,
    settings: Mapping[str, object],
) -> NotificationSetting:
    payload = json.dumps(dict(settings), sort_keys=True)
    with write_session_scope(connection_or_session) as session:
        model = session.scalar(
            select(db_schema.NotificationSetting).where(
                db_schema.NotificationSetting.application_id == application_id,
                db_schema.NotificationSetting.pipeline_id == pipeline_id,
                db_schema.NotificationSetting.environment_id == environment_id,
                db_schema.NotificationSetting.type == notification_type.value,
            )
        )
        if model is None:
            model = db_schema.NotificationSetting(
                application_id=application_id,
                pipeline_id=pipeline_id,
                environment_id=environment_id,
                type=notification_type.value,
            )
        model.settings = payload
        model = save(connection_or_session, session, model)
        return _to_notification_setting(model)


def list_notification_settings(
    connection_or_session: sqlite3.Connection | Session, application_id: int
) -> list[NotificationSetting]:
    with session_scope(connection_or_session) as session:
        models = session.scalars(
            select(db_schema.NotificationSetting)
            .where(db_schema.NotificationSetting.application_id == application_id)
            .order_by(db_schema.NotificationSetting.id)
        ).all()
        return [_to_notification_setting(model) for model in models]
