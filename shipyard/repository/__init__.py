from ._db import session_scope, transaction_scope
from .applications import (
    add_application_group,
    application_exists,
    attach_pipeline,
    create_application,
    create_trigger,
    get_application_by_name,
    list_application_groups,
    list_application_pipelines,
    list_applications,
    list_triggers,
)
from .audit import create_audit_log, list_audit_logs
from .environments import (
    create_environment,
    environment_exists,
    get_environment_by_name,
    list_environments,
)
from .groups import create_group, load_group
from .hooks import create_hook, create_poller, list_hooks, list_pollers
from .notifications import list_notification_settings, upsert_notification_setting
from .pipelines import (
    create_pipeline,
    get_pipeline_by_name,
    list_pipelines,
    pipeline_exists,
)
from .projects import create_project, list_projects, load_project, touch_project

__all__ = [name for name in globals() if not name.startswith("_")]
