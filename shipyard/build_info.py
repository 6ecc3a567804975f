from __future__ import annotations

import os
from importlib import metadata

from shipyard.environment import is_docker_runtime

_DISTRIBUTION = "shipyard"


def _get_env_value(name: str, default: str) -> str:
    value = os.getenv(name)
    if not value:
        return default
    return value


def _installed_version() -> str | None:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return None


def get_build_info() -> dict[str, str]:
    version = os.getenv("SHIPYARD_VERSION") or _installed_version() or "dev"
    commit = _get_env_value("SHIPYARD_COMMIT", "unknown")

    docker_tag = os.getenv("SHIPYARD_DOCKER_TAG")
    if docker_tag and is_docker_runtime():
        version = docker_tag

    return {
        "status": "ok",
        "version": version,
        "commit": commit,
        "build_time": _get_env_value("SHIPYARD_BUILD_TIME", "unknown"),
    }
