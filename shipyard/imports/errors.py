from __future__ import annotations

from enum import Enum


class ImportErrorKind(str, Enum):
    WRONG_REQUEST = "wrong_request"
    PROJECT_NOT_FOUND = "project_not_found"
    ALREADY_EXISTS = "already_exists"
    PIPELINE_NOT_FOUND = "pipeline_not_found"
    APPLICATION_NOT_FOUND = "application_not_found"
    ENVIRONMENT_NOT_FOUND = "environment_not_found"
    GROUP_NOT_FOUND = "group_not_found"
    PERSISTENCE_FAILURE = "persistence_failure"
    ADVISORY_FAILURE = "advisory_failure"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def is_unexpected(self) -> bool:
        return self in _UNEXPECTED_KINDS


_STATUS_CODES = {
    ImportErrorKind.WRONG_REQUEST: 400,
    ImportErrorKind.PROJECT_NOT_FOUND: 404,
    ImportErrorKind.ALREADY_EXISTS: 409,
    ImportErrorKind.PIPELINE_NOT_FOUND: 404,
    ImportErrorKind.APPLICATION_NOT_FOUND: 404,
    ImportErrorKind.ENVIRONMENT_NOT_FOUND: 404,
    ImportErrorKind.GROUP_NOT_FOUND: 404,
    ImportErrorKind.PERSISTENCE_FAILURE: 500,
    ImportErrorKind.ADVISORY_FAILURE: 500,
}

_UNEXPECTED_KINDS = {
    ImportErrorKind.WRONG_REQUEST,
    ImportErrorKind.PERSISTENCE_FAILURE,
    ImportErrorKind.ADVISORY_FAILURE,
}


class ShipyardImportError(Exception):
    """Base class for every failure an application import can end with."""

    kind = ImportErrorKind.PERSISTENCE_FAILURE

    def __init__(self, message: str, kind: ImportErrorKind | None = None) -> None:
        super().__init__(message)
        if kind is not None:
            self.kind = kind

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class ImportParseError(ShipyardImportError):
    """Raised when the payload cannot be decoded into a descriptor."""

    kind = ImportErrorKind.WRONG_REQUEST

    def __init__(self, message: str, location: str = "application") -> None:
        super().__init__(message)
        self.location = location


class ProjectNotFoundError(ShipyardImportError):
    kind = ImportErrorKind.PROJECT_NOT_FOUND

    def __init__(self, project_key: str) -> None:
        super().__init__(f"Project {project_key} not found.")
        self.project_key = project_key


class ApplicationExistsError(ShipyardImportError):
    kind = ImportErrorKind.ALREADY_EXISTS

    def __init__(self, name: str) -> None:
        super().__init__(f"Application {name} already exists.")
        self.name = name


class ImportRejectedError(ShipyardImportError):
    """Raised once validation is complete and at least one reference is missing."""

    def __init__(self, kind: ImportErrorKind, missing: int) -> None:
        super().__init__(f"Import rejected: {missing} missing reference(s).", kind)
        self.missing = missing


class ImportDependencyError(ShipyardImportError):
    """Raised during apply when a reference cannot be resolved."""

    def __init__(self, kind: ImportErrorKind, reference: str, message: str) -> None:
        super().__init__(message, kind)
        self.reference = reference


class ImportPersistenceError(ShipyardImportError):
    kind = ImportErrorKind.PERSISTENCE_FAILURE

    def __init__(self, step: str) -> None:
        super().__init__(f"Unable to {step}.")
        self.step = step


class ImportAdvisoryError(ShipyardImportError):
    kind = ImportErrorKind.ADVISORY_FAILURE

    def __init__(self, application_name: str) -> None:
        super().__init__(f"Cannot check warnings for application {application_name}.")
        self.application_name = application_name
