from __future__ import annotations

import sqlite3
from typing import Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from shipyard import schema as db_schema
from shipyard.models import AuditLog

from ._db import session_scope, write_session_scope
from .mappers import _to_audit_log


def create_audit_log(
    connection_or_session: sqlite3.Connection | Session,
    username: Optional[str],
    action: str,
    target_type: str,
    target_id: int,
    target_label: str,
    changes: Optional[str] = None,
) -> None:
    with write_session_scope(connection_or_session) as session:
        session.add(
            db_schema.AuditLog(
                username=username,
                target_type=target_type,
                target_id=target_id,
                target_label=target_label,
                action=action,
                changes=changes,
            )
        )
        if isinstance(connection_or_session, Session):
            session.flush()
        else:
            session.commit()


def list_audit_logs(
    connection_or_session: sqlite3.Connection | Session,
    target_type: Optional[str] = "APPLICATION",
    limit: int = 200,
) -> list[AuditLog]:
    statement = select(db_schema.AuditLog)
    if target_type is not None:
        statement = statement.where(db_schema.AuditLog.target_type == target_type)
    statement = statement.order_by(
        desc(db_schema.AuditLog.created_at), desc(db_schema.AuditLog.id)
    ).limit(limit)
    with session_scope(connection_or_session) as session:
        models = session.scalars(statement).all()
        return [_to_audit_log(model) for model in models]
