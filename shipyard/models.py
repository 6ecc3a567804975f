from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

DEFAULT_ENVIRONMENT_ID = 1
DEFAULT_ENVIRONMENT_NAME = "NoEnv"


class PipelineType(str, Enum):
    BUILD = "build"
    DEPLOYMENT = "deployment"
    TESTING = "testing"


class NotificationType(str, Enum):
    EMAIL = "email"
    JABBER = "jabber"

    @classmethod
    def normalize(cls, value: "NotificationType | str") -> "NotificationType":
        if isinstance(value, cls):
            return value
        return cls(value.strip().lower())


class Permission(int, Enum):
    READ = 4
    READ_EXECUTE = 5
    READ_WRITE_EXECUTE = 7


@dataclass
class Environment:
    id: int
    name: str
    project_id: Optional[int]


@dataclass
class Project:
    id: int
    key: str
    name: str
    last_modified: str
    environments: list[Environment] = field(default_factory=list)


@dataclass
class Pipeline:
    id: int
    project_id: int
    name: str
    pipeline_type: PipelineType


@dataclass
class Application:
    id: int
    project_id: int
    name: str
    description: Optional[str]
    repositories_manager: Optional[str]
    repository_fullname: Optional[str]


@dataclass
class Trigger:
    id: int
    src_application_id: int
    src_pipeline_id: int
    src_environment_id: int
    dest_application_id: int
    dest_pipeline_id: int
    dest_environment_id: int
    manual: bool


@dataclass
class Group:
    id: int
    name: str


@dataclass
class Hook:
    id: int
    uid: str
    application_id: int
    pipeline_id: int
    repositories_manager: str
    repository_fullname: str
    enabled: bool


@dataclass
class RepositoryPoller:
    id: int
    application_id: int
    pipeline_id: int
    enabled: bool
    interval: int


@dataclass
class NotificationSetting:
    id: int
    application_id: int
    pipeline_id: int
    environment_id: int
    notification_type: NotificationType
    settings: dict[str, object]


@dataclass
class AuditLog:
    id: int
    username: Optional[str]
    target_type: str
    target_id: int
    target_label: str
    action: str
    changes: Optional[str]
    created_at: str
