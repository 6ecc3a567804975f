from __future__ import annotations

import json

from shipyard import schema as db_schema
from shipyard.models import (
    Application,
    AuditLog,
    Environment,
    Group,
    Hook,
    NotificationSetting,
    NotificationType,
    Pipeline,
    PipelineType,
    Project,
    RepositoryPoller,
    Trigger,
)


def _to_project(
    model: db_schema.Project, environments: list[Environment] | None = None
) -> Project:
    return Project(
        id=int(model.id),
        key=str(model.key),
        name=str(model.name),
        last_modified=str(model.last_modified),
        environments=list(environments or []),
    )


def _to_environment(model: db_schema.Environment) -> Environment:
    return Environment(
        id=int(model.id),
        name=str(model.name),
        project_id=int(model.project_id) if model.project_id is not None else None,
    )


def _to_pipeline(model: db_schema.Pipeline) -> Pipeline:
    return Pipeline(
        id=int(model.id),
        project_id=int(model.project_id),
        name=str(model.name),
        pipeline_type=PipelineType(model.type),
    )


def _to_application(model: db_schema.Application) -> Application:
    return Application(
        id=int(model.id),
        project_id=int(model.project_id),
        name=str(model.name),
        description=model.description,
        repositories_manager=model.repositories_manager,
        repository_fullname=model.repository_fullname,
    )


def _to_trigger(model: db_schema.PipelineTrigger) -> Trigger:
    return Trigger(
        id=int(model.id),
        src_application_id=int(model.src_application_id),
        src_pipeline_id=int(model.src_pipeline_id),
        src_environment_id=int(model.src_environment_id),
        dest_application_id=int(model.dest_application_id),
        dest_pipeline_id=int(model.dest_pipeline_id),
        dest_environment_id=int(model.dest_environment_id),
        manual=bool(model.manual),
    )


def _to_group(model: db_schema.Group) -> Group:
    return Group(id=int(model.id), name=str(model.name))


def _to_hook(model: db_schema.Hook) -> Hook:
    return Hook(
        id=int(model.id),
        uid=str(model.uid),
        application_id=int(model.application_id),
        pipeline_id=int(model.pipeline_id),
        repositories_manager=str(model.repositories_manager),
        repository_fullname=str(model.repository_fullname),
        enabled=bool(model.enabled),
    )


def _to_poller(model: db_schema.RepositoryPoller) -> RepositoryPoller:
    return RepositoryPoller(
        id=int(model.id),
        application_id=int(model.application_id),
        pipeline_id=int(model.pipeline_id),
        enabled=bool(model.enabled),
        interval=int(model.interval),
    )


def _to_notification_setting(
    model: db_schema.NotificationSetting,
) -> NotificationSetting:
    return NotificationSetting(
        id=int(model.id),
        application_id=int(model.application_id),
        pipeline_id=int(model.pipeline_id),
        environment_id=int(model.environment_id),
        notification_type=NotificationType(model.type),
        settings=json.loads(model.settings or "{}"),
    )


def _to_audit_log(model: db_schema.AuditLog) -> AuditLog:
    return AuditLog(
        id=int(model.id),
        username=model.username,
        target_type=str(model.target_type),
        target_id=int(model.target_id),
        target_label=str(model.target_label),
        action=str(model.action),
        changes=model.changes,
        created_at=str(model.created_at),
    )
