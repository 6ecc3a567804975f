from __future__ import annotations

import sqlite3

from sqlalchemy.orm import Session

from shipyard import repository
from shipyard.imports.models import SanityWarning
from shipyard.models import Project


def check_application_sanity(
    connection_or_session: sqlite3.Connection | Session,
    project: Project,
    application_name: str,
) -> list[SanityWarning]:
    application = repository.get_application_by_name(
        connection_or_session, project.id, application_name
    )
    if application is None:
        return []

    warnings: list[SanityWarning] = []
    if not repository.list_application_pipelines(connection_or_session, application.id):
        warnings.append(
            SanityWarning(
                code="no_pipeline",
                message=f"Application {application.name} has no pipeline attached.",
            )
        )
    if application.repositories_manager:
        hooks = repository.list_hooks(connection_or_session, application.id)
        pollers = repository.list_pollers(connection_or_session, application.id)
        if not hooks and not pollers:
            warnings.append(
                SanityWarning(
                    code="no_repository_trigger",
                    message=(
                        f"Application {application.name} is linked to "
                        f"{application.repository_fullname} but has no hook or poller."
                    ),
                )
            )
    return warnings
