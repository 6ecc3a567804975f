from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from shipyard.imports.errors import ImportErrorKind, ShipyardImportError
from shipyard.imports.messages import Message
from shipyard.models import NotificationType, Permission


@dataclass(frozen=True)
class EnvironmentRef:
    """Either the project-less default environment or a named one."""

    name: Optional[str] = None

    @property
    def is_default(self) -> bool:
        return self.name is None

    @classmethod
    def named(cls, name: str) -> "EnvironmentRef":
        return cls(name=name)


DEFAULT_ENVIRONMENT = EnvironmentRef()


@dataclass
class TriggerDescriptor:
    dest_pipeline: str
    dest_application: str
    src_environment: EnvironmentRef = DEFAULT_ENVIRONMENT
    dest_environment: EnvironmentRef = DEFAULT_ENVIRONMENT
    manual: bool = False


@dataclass
class PipelineUsage:
    name: str
    triggers: list[TriggerDescriptor] = field(default_factory=list)
    pipeline_id: Optional[int] = None


@dataclass
class HookDescriptor:
    pipeline_name: str
    pipeline_id: Optional[int] = None


@dataclass
class PollerDescriptor:
    pipeline_name: str
    enabled: bool = True
    interval: int = 60
    pipeline_id: Optional[int] = None


@dataclass
class NotificationDescriptor:
    pipeline_name: str
    notification_type: NotificationType
    environment: EnvironmentRef = DEFAULT_ENVIRONMENT
    settings: dict[str, object] = field(default_factory=dict)


@dataclass
class GroupPermission:
    group_name: str
    permission: Permission


@dataclass(frozen=True)
class RepositoryBinding:
    repositories_manager: str
    repository_fullname: str


@dataclass
class ApplicationDescriptor:
    name: str
    description: Optional[str] = None
    pipelines: list[PipelineUsage] = field(default_factory=list)
    hooks: list[HookDescriptor] = field(default_factory=list)
    pollers: list[PollerDescriptor] = field(default_factory=list)
    notifications: list[NotificationDescriptor] = field(default_factory=list)
    permissions: list[GroupPermission] = field(default_factory=list)
    repository: Optional[RepositoryBinding] = None

    def attached_pipelines(self) -> dict[str, int]:
        return {
            usage.name: usage.pipeline_id
            for usage in self.pipelines
            if usage.pipeline_id is not None
        }


@dataclass
class ImportValidationResult:
    missing: list[Message] = field(default_factory=list)
    error: Optional[ImportErrorKind] = None

    @property
    def is_valid(self) -> bool:
        return not self.missing


@dataclass
class ImportApplyResult:
    application_id: Optional[int] = None
    hook_ids: list[int] = field(default_factory=list)
    poller_ids: list[int] = field(default_factory=list)
    notification_ids: list[int] = field(default_factory=list)


@dataclass
class SanityWarning:
    code: str
    message: str


class ImportStatus(str, Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass
class ImportOutcome:
    status: ImportStatus
    messages: list[str] = field(default_factory=list)
    error: Optional[ShipyardImportError] = None
    warnings: list[SanityWarning] = field(default_factory=list)
    result: Optional[ImportApplyResult] = None

    @property
    def error_kind(self) -> Optional[ImportErrorKind]:
        return self.error.kind if self.error is not None else None

    @property
    def status_code(self) -> int:
        if self.error is None:
            return 200
        return self.error.status_code
