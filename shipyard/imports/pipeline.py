from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shipyard import repository
from shipyard.imports.aggregator import Emit, MessageAggregator
from shipyard.imports.applier import (
    ApplicationWriter,
    CreateApplication,
    KeepExistingApplication,
    apply_descriptor,
)
from shipyard.imports.decoders import decode_descriptor
from shipyard.imports.errors import (
    ApplicationExistsError,
    ImportAdvisoryError,
    ImportParseError,
    ImportPersistenceError,
    ImportRejectedError,
    ProjectNotFoundError,
    ShipyardImportError,
)
from shipyard.imports.models import (
    ApplicationDescriptor,
    ImportApplyResult,
    ImportOutcome,
    ImportStatus,
    SanityWarning,
)
from shipyard.imports.sanity import check_application_sanity
from shipyard.imports.validator import validate_references
from shipyard.models import Project

logger = logging.getLogger(__name__)

Decoder = Callable[[bytes, str], ApplicationDescriptor]
SanityCheck = Callable[
    [sqlite3.Connection | Session, Project, str], list[SanityWarning]
]


def import_application(
    connection: sqlite3.Connection | Session,
    project_key: str,
    payload: bytes,
    fmt: str,
    *,
    force_update: bool = False,
    locale: Optional[str] = None,
    username: Optional[str] = None,
    decoder: Decoder = decode_descriptor,
    sanity_check: SanityCheck = check_application_sanity,
) -> ImportOutcome:
    """Import an application descriptor into a project.

    Every reference is validated before anything is written, and the writes of
    one import commit together or not at all. The returned outcome always
    carries the rendered diagnostics gathered on the way.
    """
    project = repository.load_project(connection, project_key)
    if project is None:
        return _failed(ProjectNotFoundError(project_key))

    try:
        descriptor = decoder(payload, fmt)
    except ImportParseError as exc:
        logger.warning("Cannot parse application for %s: %s", project_key, exc)
        return _failed(exc)

    exists = repository.application_exists(connection, project.id, descriptor.name)
    if exists and not force_update:
        return ImportOutcome(
            status=ImportStatus.REJECTED,
            error=ApplicationExistsError(descriptor.name),
        )
    writer = KeepExistingApplication() if exists else CreateApplication()

    error: Optional[ShipyardImportError] = None
    applied: Optional[ImportApplyResult] = None
    with MessageAggregator(locale) as aggregator:
        try:
            applied = _validate_and_apply(
                connection, project, descriptor, aggregator.send, writer, username
            )
        except ShipyardImportError as exc:
            error = exc
        except SQLAlchemyError as exc:
            logger.exception("Unable to import application %s", descriptor.name)
            error = ImportPersistenceError(f"import application {descriptor.name}")
            error.__cause__ = exc
        messages = aggregator.close()

    logger.debug("Import of %s/%s >>> %s", project.key, descriptor.name, messages)

    if error is not None:
        status = (
            ImportStatus.REJECTED
            if isinstance(error, ImportRejectedError)
            else ImportStatus.FAILED
        )
        logger.warning(
            "Import of %s/%s %s: %s", project.key, descriptor.name, status.value, error
        )
        return ImportOutcome(status=status, messages=messages, error=error)

    outcome = ImportOutcome(
        status=ImportStatus.SUCCESS, messages=messages, result=applied
    )
    try:
        outcome.warnings = sanity_check(connection, project, descriptor.name)
    except Exception as exc:
        logger.exception("Cannot check warnings for %s", descriptor.name)
        outcome.error = ImportAdvisoryError(descriptor.name)
        outcome.error.__cause__ = exc

    logger.info(
        "Imported application %s into project %s (%d message(s))",
        descriptor.name,
        project.key,
        len(messages),
    )
    return outcome


def _validate_and_apply(
    connection: sqlite3.Connection | Session,
    project: Project,
    descriptor: ApplicationDescriptor,
    emit: Emit,
    writer: ApplicationWriter,
    username: Optional[str],
) -> ImportApplyResult:
    with repository.transaction_scope(connection) as session:
        validation = validate_references(session, project, descriptor, emit)
        if not validation.is_valid:
            raise ImportRejectedError(validation.error, len(validation.missing))

        applied = apply_descriptor(session, project, descriptor, emit, writer=writer)

        repository.touch_project(session, project.id)
        if applied.application_id is not None:
            repository.create_audit_log(
                session,
                username=username,
                action="IMPORT",
                target_type="APPLICATION",
                target_id=applied.application_id,
                target_label=f"{project.key}/{descriptor.name}",
                changes=(
                    f"pipelines={len(descriptor.pipelines)}; "
                    f"hooks={len(applied.hook_ids)}; "
                    f"pollers={len(applied.poller_ids)}; "
                    f"notifications={len(applied.notification_ids)}."
                ),
            )
        return applied


def _failed(error: ShipyardImportError) -> ImportOutcome:
    return ImportOutcome(status=ImportStatus.FAILED, error=error)
