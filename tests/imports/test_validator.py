from __future__ import annotations

from shipyard import repository
from shipyard.imports.errors import ImportErrorKind
from shipyard.imports.messages import render_messages
from shipyard.imports.models import (
    ApplicationDescriptor,
    EnvironmentRef,
    GroupPermission,
    PipelineUsage,
    TriggerDescriptor,
)
from shipyard.imports.validator import validate_references
from shipyard.models import Permission


def _validate(connection, project, descriptor):
    emitted = []
    with repository.session_scope(connection) as session:
        result = validate_references(session, project, descriptor, emitted.append)
    return result, render_messages(emitted)


def test_valid_descriptor_emits_nothing(connection, catalog) -> None:
    descriptor = ApplicationDescriptor(
        name="billing",
        pipelines=[
            PipelineUsage(
                name="build",
                triggers=[
                    TriggerDescriptor(
                        dest_pipeline="deploy",
                        dest_application="legacy-api",
                        src_environment=EnvironmentRef.named("staging"),
                        dest_environment=EnvironmentRef.named("production"),
                    )
                ],
            )
        ],
        permissions=[GroupPermission("developers", Permission.READ)],
    )

    result, messages = _validate(connection, catalog.project, descriptor)

    assert result.is_valid
    assert result.error is None
    assert messages == []


def test_trigger_to_missing_application_is_reported(connection, catalog) -> None:
    descriptor = ApplicationDescriptor(
        name="billing",
        pipelines=[
            PipelineUsage(
                name="build",
                triggers=[
                    TriggerDescriptor(dest_pipeline="deploy", dest_application="deploy-svc")
                ],
            )
        ],
    )

    result, messages = _validate(connection, catalog.project, descriptor)

    assert not result.is_valid
    assert result.error == ImportErrorKind.APPLICATION_NOT_FOUND
    assert messages == ["Application deploy-svc not found"]


def test_trigger_to_the_imported_application_is_not_looked_up(connection, catalog) -> None:
    descriptor = ApplicationDescriptor(
        name="billing",
        pipelines=[
            PipelineUsage(
                name="build",
                triggers=[TriggerDescriptor(dest_pipeline="deploy", dest_application="billing")],
            )
        ],
    )

    result, _ = _validate(connection, catalog.project, descriptor)

    assert result.is_valid


def test_every_missing_reference_is_reported_in_order(connection, catalog) -> None:
    descriptor = ApplicationDescriptor(
        name="billing",
        pipelines=[
            PipelineUsage(
                name="compile",
                triggers=[
                    TriggerDescriptor(
                        dest_pipeline="deploy",
                        dest_application="ghost-app",
                        src_environment=EnvironmentRef.named("qa"),
                        dest_environment=EnvironmentRef.named("production"),
                    )
                ],
            ),
            PipelineUsage(name="build"),
            PipelineUsage(
                name="package",
                triggers=[
                    TriggerDescriptor(
                        dest_pipeline="deploy",
                        dest_application="billing",
                        dest_environment=EnvironmentRef.named("preprod"),
                    )
                ],
            ),
        ],
        permissions=[GroupPermission("auditors", Permission.READ)],
    )

    result, messages = _validate(connection, catalog.project, descriptor)

    assert messages == [
        "Pipeline compile not found",
        "Application ghost-app not found",
        "Environment qa not found",
        "Pipeline package not found",
        "Environment preprod not found",
        "Group auditors not found",
    ]
    assert len(result.missing) == 6
    assert result.error == ImportErrorKind.GROUP_NOT_FOUND


def test_dominant_error_is_the_last_missing_kind(connection, catalog) -> None:
    descriptor = ApplicationDescriptor(
        name="billing",
        pipelines=[
            PipelineUsage(
                name="build",
                triggers=[
                    TriggerDescriptor(
                        dest_pipeline="deploy",
                        dest_application="ghost-app",
                        dest_environment=EnvironmentRef.named("qa"),
                    )
                ],
            ),
        ],
    )

    result, _ = _validate(connection, catalog.project, descriptor)

    assert result.error == ImportErrorKind.ENVIRONMENT_NOT_FOUND


def test_environments_of_other_projects_do_not_count(connection, catalog) -> None:
    other = repository.create_project(connection, key="OTHER")
    repository.create_environment(connection, other.id, "qa")
    descriptor = ApplicationDescriptor(
        name="billing",
        pipelines=[
            PipelineUsage(
                name="build",
                triggers=[
                    TriggerDescriptor(
                        dest_pipeline="deploy",
                        dest_application="billing",
                        dest_environment=EnvironmentRef.named("qa"),
                    )
                ],
            )
        ],
    )

    result, messages = _validate(connection, catalog.project, descriptor)

    assert not result.is_valid
    assert messages == ["Environment qa not found"]


def test_validation_sees_rows_written_in_the_same_transaction(connection, catalog) -> None:
    descriptor = ApplicationDescriptor(name="billing", pipelines=[PipelineUsage(name="lint")])
    emitted = []

    with repository.session_scope(connection) as session:
        repository.create_pipeline(session, catalog.project.id, "lint")
        result = validate_references(session, catalog.project, descriptor, emitted.append)
        session.rollback()

    assert result.is_valid
    assert emitted == []
    assert repository.get_pipeline_by_name(connection, catalog.project.id, "lint") is None
