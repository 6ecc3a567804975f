from __future__ import annotations

import os
from pathlib import Path

_FALSE_VALUES = {"0", "false", "no", "off"}


def is_docker_runtime() -> bool:
    override = os.getenv("SHIPYARD_DOCKER_RUNTIME")
    if override is not None:
        return override.strip().lower() not in _FALSE_VALUES
    return Path("/.dockerenv").exists()
