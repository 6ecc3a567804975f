from __future__ import annotations

import logging
import os

from shipyard import db
from shipyard.dependencies import get_db_path


def init_database() -> None:
    connection = db.connect(get_db_path())
    try:
        db.run_migrations(connection=connection)
    finally:
        connection.close()


def configure_logging() -> None:
    log_level = os.getenv("SHIPYARD_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(levelname)s [%(name)s] %(message)s",
        force=True,
    )
