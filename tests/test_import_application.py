from __future__ import annotations

from contextlib import contextmanager

import pytest
from sqlalchemy.exc import SQLAlchemyError

from shipyard import repository
from shipyard.imports import ImportErrorKind, ImportStatus, import_application
from shipyard.imports.errors import (
    ApplicationExistsError,
    ImportAdvisoryError,
    ImportParseError,
    ImportPersistenceError,
    ImportRejectedError,
    ProjectNotFoundError,
)


def _yaml(text: str) -> bytes:
    return text.encode("utf-8")


BILLING_WITH_HOOK = _yaml(
    """
name: billing
repositories_manager: github
repository_fullname: acme/billing
pipelines:
  build: {}
hooks:
  - pipeline: build
"""
)


def _nothing_persisted(connection, project_id: int) -> bool:
    return not repository.application_exists(connection, project_id, "billing")


def test_trigger_to_missing_application_is_rejected(connection, catalog) -> None:
    payload = _yaml(
        """
name: billing
pipelines:
  build:
    triggers:
      - dest_pipeline: deploy
        dest_application: deploy-svc
"""
    )

    outcome = import_application(connection, "ACME", payload, "yaml")

    assert outcome.status is ImportStatus.REJECTED
    assert isinstance(outcome.error, ImportRejectedError)
    assert outcome.error_kind == ImportErrorKind.APPLICATION_NOT_FOUND
    assert outcome.status_code == 404
    assert outcome.messages == ["Application deploy-svc not found"]
    assert _nothing_persisted(connection, catalog.project.id)


def test_single_hook_is_committed(connection, catalog) -> None:
    outcome = import_application(connection, "ACME", BILLING_WITH_HOOK, "yaml")

    assert outcome.status is ImportStatus.SUCCESS
    assert outcome.error is None
    assert outcome.status_code == 200
    assert [m for m in outcome.messages if m.startswith("Hook created")] == [
        "Hook created on repository acme/billing for pipeline build"
    ]
    application = repository.get_application_by_name(connection, catalog.project.id, "billing")
    assert application is not None
    assert len(repository.list_hooks(connection, application.id)) == 1
    assert outcome.result.hook_ids == [repository.list_hooks(connection, application.id)[0].id]


def test_hook_on_unknown_pipeline_rolls_back(connection, catalog) -> None:
    payload = _yaml(
        """
name: billing
repositories_manager: github
repository_fullname: acme/billing
pipelines:
  build: {}
hooks:
  - pipeline: ghost
pollers:
  - pipeline: build
"""
    )

    outcome = import_application(connection, "ACME", payload, "yaml")

    assert outcome.status is ImportStatus.FAILED
    assert outcome.error_kind == ImportErrorKind.PIPELINE_NOT_FOUND
    assert outcome.status_code == 404
    assert "Pipeline ghost not found" in outcome.messages
    assert not any(m.startswith("Poller created") for m in outcome.messages)
    assert _nothing_persisted(connection, catalog.project.id)
    assert repository.list_audit_logs(connection) == []


def test_existing_application_is_refused_without_messages(connection, catalog) -> None:
    outcome = import_application(connection, "ACME", _yaml("name: legacy-api\n"), "yaml")

    assert outcome.status is ImportStatus.REJECTED
    assert isinstance(outcome.error, ApplicationExistsError)
    assert outcome.status_code == 409
    assert outcome.messages == []


def test_exists_guard_never_opens_a_transaction(connection, catalog, monkeypatch) -> None:
    @contextmanager
    def _forbidden(_connection):
        raise AssertionError("transaction opened")
        yield

    monkeypatch.setattr(repository, "transaction_scope", _forbidden)

    outcome = import_application(connection, "ACME", _yaml("name: legacy-api\n"), "yaml")

    assert outcome.error_kind == ImportErrorKind.ALREADY_EXISTS


def test_force_update_keeps_the_existing_application(connection, catalog) -> None:
    payload = _yaml(
        """
name: legacy-api
repositories_manager: github
repository_fullname: acme/legacy
pipelines:
  build: {}
hooks:
  - pipeline: build
"""
    )

    outcome = import_application(connection, "ACME", payload, "yaml", force_update=True)

    assert outcome.status is ImportStatus.SUCCESS
    assert outcome.messages == ["Application legacy-api already exists, update skipped"]
    assert repository.list_hooks(connection, catalog.existing.id) == []
    assert repository.list_application_pipelines(connection, catalog.existing.id) == []
    assert repository.list_audit_logs(connection) == []


def test_force_update_still_validates_references(connection, catalog) -> None:
    payload = _yaml("name: legacy-api\npipelines:\n  compile: {}\n")

    outcome = import_application(connection, "ACME", payload, "yaml", force_update=True)

    assert outcome.status is ImportStatus.REJECTED
    assert outcome.messages == ["Pipeline compile not found"]


def test_every_missing_reference_is_listed(connection, catalog) -> None:
    payload = _yaml(
        """
name: billing
pipelines:
  compile:
    triggers:
      - dest_pipeline: deploy
        dest_application: ghost-app
        dest_environment: qa
  build: {}
permissions:
  auditors: 4
"""
    )

    outcome = import_application(connection, "ACME", payload, "yaml")

    assert outcome.status is ImportStatus.REJECTED
    assert outcome.messages == [
        "Pipeline compile not found",
        "Application ghost-app not found",
        "Environment qa not found",
        "Group auditors not found",
    ]
    assert outcome.error_kind == ImportErrorKind.GROUP_NOT_FOUND


def test_persistence_failure_rolls_back_everything(connection, catalog, monkeypatch) -> None:
    def _broken_poller(*args, **kwargs):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(repository, "create_poller", _broken_poller)
    payload = BILLING_WITH_HOOK + b"pollers:\n  - pipeline: build\n"

    outcome = import_application(connection, "ACME", payload, "yaml")

    assert outcome.status is ImportStatus.FAILED
    assert isinstance(outcome.error, ImportPersistenceError)
    assert outcome.status_code == 500
    assert isinstance(outcome.error.__cause__, SQLAlchemyError)
    assert _nothing_persisted(connection, catalog.project.id)
    assert repository.list_audit_logs(connection) == []


def test_unknown_project(connection) -> None:
    outcome = import_application(connection, "NOPE", _yaml("name: billing\n"), "yaml")

    assert outcome.status is ImportStatus.FAILED
    assert isinstance(outcome.error, ProjectNotFoundError)
    assert outcome.status_code == 404
    assert outcome.messages == []


def test_unparsable_payload(connection, catalog) -> None:
    outcome = import_application(connection, "ACME", b"{not json", "json")

    assert outcome.status is ImportStatus.FAILED
    assert isinstance(outcome.error, ImportParseError)
    assert outcome.status_code == 400


@pytest.mark.parametrize(
    "payload",
    [
        b"[" * 100000,
        b'{"name": "billing", "pipelines": [{"name": "build"}, {"name": "build"}]}',
        b'{"name": "billing", "repositories_manager": "github", '
        b'"repository_fullname": "acme/billing", "pipelines": {"build": {}}, '
        b'"pollers": [{"pipeline": "build"}, {"pipeline": "build"}]}',
    ],
)
def test_malformed_descriptor_is_a_wrong_request(
    connection, catalog, monkeypatch, payload
) -> None:
    @contextmanager
    def _forbidden(_connection):
        raise AssertionError("transaction opened")
        yield

    monkeypatch.setattr(repository, "transaction_scope", _forbidden)

    outcome = import_application(connection, "ACME", payload, "json")

    assert outcome.status is ImportStatus.FAILED
    assert outcome.error_kind == ImportErrorKind.WRONG_REQUEST
    assert outcome.status_code == 400
    assert outcome.messages == []


def test_successful_import_is_audited(connection, catalog) -> None:
    outcome = import_application(
        connection, "ACME", BILLING_WITH_HOOK, "yaml", username="alice"
    )

    logs = repository.list_audit_logs(connection)
    assert len(logs) == 1
    assert logs[0].action == "IMPORT"
    assert logs[0].username == "alice"
    assert logs[0].target_id == outcome.result.application_id
    assert logs[0].target_label == "ACME/billing"
    assert "hooks=1" in logs[0].changes


def test_messages_follow_the_requested_locale(connection, catalog) -> None:
    payload = _yaml("name: billing\npipelines:\n  compile: {}\n")

    outcome = import_application(connection, "ACME", payload, "yaml", locale="fr-FR,fr;q=0.9")

    assert outcome.messages == ["Le pipeline compile n'existe pas"]


def test_sanity_warnings_are_reported(connection, catalog) -> None:
    payload = _yaml(
        "name: billing\nrepositories_manager: github\nrepository_fullname: acme/billing\n"
    )

    outcome = import_application(connection, "ACME", payload, "yaml")

    assert outcome.status is ImportStatus.SUCCESS
    assert [warning.code for warning in outcome.warnings] == [
        "no_pipeline",
        "no_repository_trigger",
    ]


def test_sanity_check_failure_keeps_the_import(connection, catalog) -> None:
    def _broken_check(*args):
        raise RuntimeError("boom")

    outcome = import_application(
        connection, "ACME", BILLING_WITH_HOOK, "yaml", sanity_check=_broken_check
    )

    assert outcome.status is ImportStatus.SUCCESS
    assert isinstance(outcome.error, ImportAdvisoryError)
    assert outcome.status_code == 500
    assert repository.application_exists(connection, catalog.project.id, "billing")


@pytest.mark.parametrize("fmt", ["json", "yaml"])
def test_same_descriptor_in_every_text_format(connection, catalog, fmt) -> None:
    payloads = {
        "json": b'{"name": "billing", "pipelines": [{"name": "build"}]}',
        "yaml": b"name: billing\npipelines:\n  - name: build\n",
    }

    outcome = import_application(connection, "ACME", payloads[fmt], fmt)

    assert outcome.status is ImportStatus.SUCCESS
    assert outcome.messages == ["Pipeline build attached to application billing"]
