from __future__ import annotations

import json
from enum import Enum
from typing import Optional

import hcl
import yaml

from shipyard.imports.errors import ImportParseError
from shipyard.imports.models import (
    DEFAULT_ENVIRONMENT,
    ApplicationDescriptor,
    EnvironmentRef,
    GroupPermission,
    HookDescriptor,
    NotificationDescriptor,
    PipelineUsage,
    PollerDescriptor,
    RepositoryBinding,
    TriggerDescriptor,
)
from shipyard.models import DEFAULT_ENVIRONMENT_NAME, NotificationType, Permission


class DescriptorFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    HCL = "hcl"

    @classmethod
    def parse(cls, value: "DescriptorFormat | str | None") -> "DescriptorFormat":
        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        if normalized == "yml":
            return cls.YAML
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ImportParseError(
                f"Unsupported format {value!r}. Use json, yaml or hcl.",
                location="format",
            ) from exc


def decode_descriptor(
    payload: bytes, fmt: "DescriptorFormat | str | None"
) -> ApplicationDescriptor:
    descriptor_format = DescriptorFormat.parse(fmt)
    try:
        text = payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ImportParseError("Payload is not valid UTF-8.") from exc

    try:
        if descriptor_format is DescriptorFormat.JSON:
            document = json.loads(text)
        elif descriptor_format is DescriptorFormat.YAML:
            document = yaml.safe_load(text)
        else:
            document = hcl.loads(text)
    except (ValueError, RecursionError, yaml.YAMLError) as exc:
        raise ImportParseError(
            f"Invalid {descriptor_format.value} payload."
        ) from exc

    if not isinstance(document, dict):
        raise ImportParseError("Expected an object at the top level.")
    return _parse_application(document)


def _parse_application(document: dict) -> ApplicationDescriptor:
    name = _normalize_optional_str(document.get("name"), "name")
    if not name:
        raise ImportParseError("Application name is required.", location="name")

    descriptor = ApplicationDescriptor(
        name=name,
        description=_normalize_optional_str(document.get("description"), "description"),
    )
    descriptor.repository = _parse_repository(document)
    descriptor.pipelines = _parse_pipelines(document.get("pipelines"), name)
    descriptor.hooks = [
        HookDescriptor(pipeline_name=_require_str(entry, "pipeline", location))
        for location, entry in _entries(document.get("hooks"), "hooks")
    ]
    descriptor.pollers = _parse_pollers(document.get("pollers"))
    descriptor.notifications = [
        _parse_notification(entry, location)
        for location, entry in _entries(document.get("notifications"), "notifications")
    ]
    descriptor.permissions = _parse_permissions(document.get("permissions"))
    return descriptor


def _parse_repository(document: dict) -> Optional[RepositoryBinding]:
    manager = _normalize_optional_str(
        document.get("repositories_manager"), "repositories_manager"
    )
    fullname = _normalize_optional_str(
        document.get("repository_fullname"), "repository_fullname"
    )
    if manager is None and fullname is None:
        return None
    if manager is None or fullname is None:
        raise ImportParseError(
            "repositories_manager and repository_fullname must be set together.",
            location="repositories_manager",
        )
    return RepositoryBinding(repositories_manager=manager, repository_fullname=fullname)


def _parse_pipelines(section: object, application_name: str) -> list[PipelineUsage]:
    usages: list[PipelineUsage] = []
    seen: set[str] = set()
    for location, name, entry in _named_entries(section, "pipelines"):
        if name in seen:
            raise ImportParseError(
                f"Pipeline {name} is listed more than once.", location=f"{location}.name"
            )
        seen.add(name)
        usage = PipelineUsage(name=name)
        for trigger_location, trigger in _entries(
            entry.get("triggers"), f"{location}.triggers"
        ):
            usage.triggers.append(
                TriggerDescriptor(
                    dest_pipeline=_require_str(
                        trigger, "dest_pipeline", trigger_location
                    ),
                    dest_application=_normalize_optional_str(
                        trigger.get("dest_application"),
                        f"{trigger_location}.dest_application",
                    )
                    or application_name,
                    src_environment=_environment(
                        trigger.get("src_environment"),
                        f"{trigger_location}.src_environment",
                    ),
                    dest_environment=_environment(
                        trigger.get("dest_environment"),
                        f"{trigger_location}.dest_environment",
                    ),
                    manual=bool(trigger.get("manual", False)),
                )
            )
        usages.append(usage)
    return usages


def _parse_pollers(section: object) -> list[PollerDescriptor]:
    pollers: list[PollerDescriptor] = []
    seen: set[str] = set()
    for location, entry in _entries(section, "pollers"):
        poller = _parse_poller(entry, location)
        if poller.pipeline_name in seen:
            raise ImportParseError(
                f"Pipeline {poller.pipeline_name} already has a poller.",
                location=f"{location}.pipeline",
            )
        seen.add(poller.pipeline_name)
        pollers.append(poller)
    return pollers


def _parse_poller(entry: dict, location: str) -> PollerDescriptor:
    interval = entry.get("interval", 60)
    if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
        raise ImportParseError(
            "Poller interval must be a positive integer.", location=f"{location}.interval"
        )
    return PollerDescriptor(
        pipeline_name=_require_str(entry, "pipeline", location),
        enabled=bool(entry.get("enabled", True)),
        interval=interval,
    )


def _parse_notification(entry: dict, location: str) -> NotificationDescriptor:
    raw_type = (
        _normalize_optional_str(entry.get("type"), f"{location}.type")
        or NotificationType.EMAIL.value
    )
    try:
        notification_type = NotificationType.normalize(raw_type)
    except ValueError as exc:
        raise ImportParseError(
            "Invalid notification type. Use email or jabber.", location=f"{location}.type"
        ) from exc
    settings = entry.get("settings") or {}
    if not isinstance(settings, dict):
        raise ImportParseError("Expected an object.", location=f"{location}.settings")
    return NotificationDescriptor(
        pipeline_name=_require_str(entry, "pipeline", location),
        notification_type=notification_type,
        environment=_environment(entry.get("environment"), f"{location}.environment"),
        settings=dict(settings),
    )


def _parse_permissions(section: object) -> list[GroupPermission]:
    if section is None:
        return []
    if not isinstance(section, dict):
        raise ImportParseError("Expected an object.", location="permissions")
    permissions: list[GroupPermission] = []
    for group_name, level in section.items():
        try:
            permission = Permission(int(level))
        except (TypeError, ValueError) as exc:
            raise ImportParseError(
                "Invalid permission. Use 4, 5 or 7.", location=f"permissions.{group_name}"
            ) from exc
        permissions.append(GroupPermission(group_name=str(group_name), permission=permission))
    return permissions


def _entries(section: object, base_path: str) -> list[tuple[str, dict]]:
    if section is None:
        return []
    # A single HCL block decodes to an object instead of a list.
    if isinstance(section, dict):
        section = [section]
    if not isinstance(section, list):
        raise ImportParseError("Expected a list.", location=base_path)
    entries: list[tuple[str, dict]] = []
    for index, entry in enumerate(section):
        if not isinstance(entry, dict):
            raise ImportParseError(
                "Expected object entries.", location=f"{base_path}[{index}]"
            )
        entries.append((f"{base_path}[{index}]", entry))
    return entries


def _named_entries(section: object, base_path: str) -> list[tuple[str, str, dict]]:
    """Accept either ``{name: {...}}`` or ``[{"name": ..., ...}]``."""
    if section is None:
        return []
    if isinstance(section, dict):
        named: list[tuple[str, str, dict]] = []
        for name, entry in section.items():
            if entry is None:
                entry = {}
            if not isinstance(entry, dict):
                raise ImportParseError(
                    "Expected an object.", location=f"{base_path}.{name}"
                )
            named.append((f"{base_path}.{name}", str(name), entry))
        return named
    return [
        (location, _require_str(entry, "name", location), entry)
        for location, entry in _entries(section, base_path)
    ]


def _environment(value: object, location: str) -> EnvironmentRef:
    name = _normalize_optional_str(value, location)
    if name is None or name == DEFAULT_ENVIRONMENT_NAME:
        return DEFAULT_ENVIRONMENT
    return EnvironmentRef.named(name)


def _require_str(entry: dict, key: str, location: str) -> str:
    value = _normalize_optional_str(entry.get(key), f"{location}.{key}")
    if value is None:
        raise ImportParseError(f"{key} is required.", location=f"{location}.{key}")
    return value


def _normalize_optional_str(value: object, location: str) -> Optional[str]:
    if value is None:
        return None
    # bool is an int subclass.
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ImportParseError("Expected a string.", location=location)
    text = str(value).strip()
    return text or None
