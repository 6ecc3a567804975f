from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shipyard import repository
from shipyard.imports.aggregator import Emit
from shipyard.imports.errors import (
    ImportDependencyError,
    ImportErrorKind,
    ImportPersistenceError,
)
from shipyard.imports.messages import Message, MessageKind
from shipyard.imports.models import (
    ApplicationDescriptor,
    EnvironmentRef,
    ImportApplyResult,
    PipelineUsage,
    TriggerDescriptor,
)
from shipyard.models import DEFAULT_ENVIRONMENT_ID, Application, Project

logger = logging.getLogger(__name__)


class ApplicationWriter(Protocol):
    def write(
        self,
        session: Session,
        project: Project,
        descriptor: ApplicationDescriptor,
        emit: Emit,
    ) -> Optional[Application]:
        ...


class CreateApplication:
    """Insert the application, its permissions, pipelines and triggers."""

    def write(
        self,
        session: Session,
        project: Project,
        descriptor: ApplicationDescriptor,
        emit: Emit,
    ) -> Optional[Application]:
        binding = descriptor.repository
        with _persistence_step(f"insert application {descriptor.name}"):
            application = repository.create_application(
                session,
                project_id=project.id,
                name=descriptor.name,
                description=descriptor.description,
                repositories_manager=binding.repositories_manager if binding else None,
                repository_fullname=binding.repository_fullname if binding else None,
            )

        for permission in descriptor.permissions:
            group = repository.load_group(session, permission.group_name)
            if group is None:
                emit(Message.of(MessageKind.GROUP_NOT_FOUND, permission.group_name))
                raise ImportDependencyError(
                    ImportErrorKind.GROUP_NOT_FOUND,
                    permission.group_name,
                    f"Group {permission.group_name} not found.",
                )
            with _persistence_step(f"add group {group.name} to {application.name}"):
                repository.add_application_group(
                    session, application.id, group.id, permission.permission
                )

        for usage in descriptor.pipelines:
            pipeline = repository.get_pipeline_by_name(session, project.id, usage.name)
            if pipeline is None:
                emit(Message.of(MessageKind.PIPELINE_NOT_FOUND, usage.name))
                raise ImportDependencyError(
                    ImportErrorKind.PIPELINE_NOT_FOUND,
                    usage.name,
                    f"Pipeline {usage.name} not found.",
                )
            with _persistence_step(f"attach pipeline {usage.name}"):
                repository.attach_pipeline(session, application.id, pipeline.id)
            usage.pipeline_id = pipeline.id
            emit(Message.of(MessageKind.PIPELINE_ATTACHED, usage.name, application.name))

        # Triggers go in once every pipeline is attached so they can target siblings.
        for usage in descriptor.pipelines:
            for trigger in usage.triggers:
                _insert_trigger(session, project, application, usage, trigger, emit)
        return application


class KeepExistingApplication:
    """Leave an already existing application untouched."""

    def write(
        self,
        session: Session,
        project: Project,
        descriptor: ApplicationDescriptor,
        emit: Emit,
    ) -> Optional[Application]:
        emit(Message.of(MessageKind.APPLICATION_UPDATE_SKIPPED, descriptor.name))
        return None


def apply_descriptor(
    session: Session,
    project: Project,
    descriptor: ApplicationDescriptor,
    emit: Emit,
    *,
    writer: Optional[ApplicationWriter] = None,
) -> ImportApplyResult:
    writer = writer or CreateApplication()
    application = writer.write(session, project, descriptor, emit)
    if application is None:
        return ImportApplyResult()

    result = ImportApplyResult(application_id=application.id)
    attached = descriptor.attached_pipelines()
    binding = descriptor.repository

    if binding is not None:
        for hook in descriptor.hooks:
            pipeline_id = _resolve_pipeline(attached, hook.pipeline_name, "hook", emit)
            logger.debug("Insert hook %s(%s)", hook.pipeline_name, pipeline_id)
            with _persistence_step(
                f"insert hook on {project.key}/{application.name} "
                f"for pipeline {hook.pipeline_name}"
            ):
                created = repository.create_hook(
                    session,
                    application.id,
                    pipeline_id,
                    binding.repositories_manager,
                    binding.repository_fullname,
                )
            hook.pipeline_id = pipeline_id
            result.hook_ids.append(created.id)
            emit(
                Message.of(
                    MessageKind.HOOK_CREATED,
                    binding.repository_fullname,
                    hook.pipeline_name,
                )
            )

        for poller in descriptor.pollers:
            pipeline_id = _resolve_pipeline(
                attached, poller.pipeline_name, "poller", emit
            )
            logger.debug("Insert poller %s(%s)", poller.pipeline_name, pipeline_id)
            with _persistence_step(
                f"insert poller on {project.key}/{application.name} "
                f"for pipeline {poller.pipeline_name}"
            ):
                created = repository.create_poller(
                    session,
                    application.id,
                    pipeline_id,
                    enabled=poller.enabled,
                    interval=poller.interval,
                )
            poller.pipeline_id = pipeline_id
            result.poller_ids.append(created.id)
            emit(
                Message.of(
                    MessageKind.POLLER_CREATED,
                    binding.repository_fullname,
                    poller.pipeline_name,
                )
            )

    for notification in descriptor.notifications:
        pipeline_id = _resolve_pipeline(
            attached, notification.pipeline_name, "notification", emit
        )
        environment_id = _project_environment_id(project, notification.environment)
        if environment_id is None:
            emit(
                Message.of(
                    MessageKind.ENVIRONMENT_NOT_FOUND, notification.environment.name
                )
            )
            raise ImportDependencyError(
                ImportErrorKind.ENVIRONMENT_NOT_FOUND,
                str(notification.environment.name),
                f"Environment {notification.environment.name} not found "
                f"for notification on pipeline {notification.pipeline_name}.",
            )
        with _persistence_step(
            f"insert notification on {project.key}/{application.name} "
            f"for pipeline {notification.pipeline_name}"
        ):
            created = repository.upsert_notification_setting(
                session,
                application.id,
                pipeline_id,
                environment_id,
                notification.notification_type,
                notification.settings,
            )
        result.notification_ids.append(created.id)

    return result


def _resolve_pipeline(
    attached: dict[str, int], pipeline_name: str, owner: str, emit: Emit
) -> int:
    pipeline_id = attached.get(pipeline_name)
    if pipeline_id is None:
        emit(Message.of(MessageKind.PIPELINE_NOT_FOUND, pipeline_name))
        raise ImportDependencyError(
            ImportErrorKind.PIPELINE_NOT_FOUND,
            pipeline_name,
            f"Pipeline {pipeline_name} not found for {owner}.",
        )
    return pipeline_id


def _project_environment_id(
    project: Project, environment: EnvironmentRef
) -> Optional[int]:
    if environment.is_default:
        return DEFAULT_ENVIRONMENT_ID
    for known in project.environments:
        if known.name == environment.name:
            return known.id
    return None


def _insert_trigger(
    session: Session,
    project: Project,
    application: Application,
    usage: PipelineUsage,
    trigger: TriggerDescriptor,
    emit: Emit,
) -> None:
    if trigger.dest_application == application.name:
        dest_application_id = application.id
    else:
        dest_application = repository.get_application_by_name(
            session, project.id, trigger.dest_application
        )
        if dest_application is None:
            emit(Message.of(MessageKind.APPLICATION_NOT_FOUND, trigger.dest_application))
            raise ImportDependencyError(
                ImportErrorKind.APPLICATION_NOT_FOUND,
                trigger.dest_application,
                f"Application {trigger.dest_application} not found.",
            )
        dest_application_id = dest_application.id

    dest_pipeline = repository.get_pipeline_by_name(
        session, project.id, trigger.dest_pipeline
    )
    if dest_pipeline is None:
        emit(Message.of(MessageKind.PIPELINE_NOT_FOUND, trigger.dest_pipeline))
        raise ImportDependencyError(
            ImportErrorKind.PIPELINE_NOT_FOUND,
            trigger.dest_pipeline,
            f"Pipeline {trigger.dest_pipeline} not found for trigger "
            f"from {usage.name}.",
        )

    environment_ids = []
    for environment in (trigger.src_environment, trigger.dest_environment):
        environment_id = _session_environment_id(session, project, environment)
        if environment_id is None:
            emit(Message.of(MessageKind.ENVIRONMENT_NOT_FOUND, environment.name))
            raise ImportDependencyError(
                ImportErrorKind.ENVIRONMENT_NOT_FOUND,
                str(environment.name),
                f"Environment {environment.name} not found.",
            )
        environment_ids.append(environment_id)
    src_environment_id, dest_environment_id = environment_ids

    with _persistence_step(
        f"insert trigger {usage.name} -> "
        f"{trigger.dest_application}/{trigger.dest_pipeline}"
    ):
        repository.create_trigger(
            session,
            src_application_id=application.id,
            src_pipeline_id=int(usage.pipeline_id or 0),
            src_environment_id=src_environment_id,
            dest_application_id=dest_application_id,
            dest_pipeline_id=dest_pipeline.id,
            dest_environment_id=dest_environment_id,
            manual=trigger.manual,
        )


def _session_environment_id(
    session: Session, project: Project, environment: EnvironmentRef
) -> Optional[int]:
    if environment.is_default:
        return DEFAULT_ENVIRONMENT_ID
    found = repository.get_environment_by_name(session, project.id, environment.name)
    return found.id if found else None


@contextmanager
def _persistence_step(step: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise ImportPersistenceError(step) from exc
