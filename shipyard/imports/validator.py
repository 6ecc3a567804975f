from __future__ import annotations

from sqlalchemy.orm import Session

from shipyard import repository
from shipyard.imports.aggregator import Emit
from shipyard.imports.errors import ImportErrorKind
from shipyard.imports.messages import Message, MessageKind
from shipyard.imports.models import ApplicationDescriptor, ImportValidationResult
from shipyard.models import Project


def validate_references(
    session: Session,
    project: Project,
    descriptor: ApplicationDescriptor,
    emit: Emit,
) -> ImportValidationResult:
    """Check every reference of the descriptor against the project.

    Nothing stops at the first miss: each missing pipeline, application,
    environment or group is emitted in encounter order and the result keeps the
    kind of the last one as its error.
    """
    result = ImportValidationResult()

    def _missing(kind: MessageKind, error: ImportErrorKind, name: str) -> None:
        message = Message.of(kind, name)
        emit(message)
        result.missing.append(message)
        result.error = error

    for usage in descriptor.pipelines:
        if not repository.pipeline_exists(session, project.id, usage.name):
            _missing(
                MessageKind.PIPELINE_NOT_FOUND,
                ImportErrorKind.PIPELINE_NOT_FOUND,
                usage.name,
            )

        for trigger in usage.triggers:
            if trigger.dest_application != descriptor.name:
                if not repository.application_exists(
                    session, project.id, trigger.dest_application
                ):
                    _missing(
                        MessageKind.APPLICATION_NOT_FOUND,
                        ImportErrorKind.APPLICATION_NOT_FOUND,
                        trigger.dest_application,
                    )
            for environment in (trigger.src_environment, trigger.dest_environment):
                if environment.is_default:
                    continue
                if not repository.environment_exists(
                    session, project.key, environment.name
                ):
                    _missing(
                        MessageKind.ENVIRONMENT_NOT_FOUND,
                        ImportErrorKind.ENVIRONMENT_NOT_FOUND,
                        environment.name,
                    )

    for permission in descriptor.permissions:
        if repository.load_group(session, permission.group_name) is None:
            _missing(
                MessageKind.GROUP_NOT_FOUND,
                ImportErrorKind.GROUP_NOT_FOUND,
                permission.group_name,
            )

    return result
