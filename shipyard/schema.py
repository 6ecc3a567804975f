from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import text

Base = declarative_base()


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    last_modified = Column(
        Text, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )


class Environment(Base):
    __tablename__ = "environments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    name = Column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_environments_project_name"),
    )


class Pipeline(Base):
    __tablename__ = "pipelines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False, server_default=text("'build'"))

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_pipelines_project_name"),
        CheckConstraint(
            "type IN ('build', 'deployment', 'testing')", name="ck_pipelines_type"
        ),
    )


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    name = Column(Text, nullable=False)
    description = Column(Text)
    repositories_manager = Column(Text)
    repository_fullname = Column(Text)
    last_modified = Column(
        Text, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    __table_args__ = (
        UniqueConstraint("project_id", "name", name="uq_applications_project_name"),
    )


class ApplicationPipeline(Base):
    __tablename__ = "application_pipelines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    pipeline_id = Column(
        Integer, ForeignKey("pipelines.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint(
            "application_id", "pipeline_id", name="uq_application_pipelines_pair"
        ),
    )


class PipelineTrigger(Base):
    __tablename__ = "pipeline_triggers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    src_application_id = Column(Integer, ForeignKey("applications.id"), nullable=False)
    src_pipeline_id = Column(Integer, ForeignKey("pipelines.id"), nullable=False)
    src_environment_id = Column(Integer, ForeignKey("environments.id"), nullable=False)
    dest_application_id = Column(
        Integer, ForeignKey("applications.id"), nullable=False
    )
    dest_pipeline_id = Column(Integer, ForeignKey("pipelines.id"), nullable=False)
    dest_environment_id = Column(
        Integer, ForeignKey("environments.id"), nullable=False
    )
    manual = Column(Integer, nullable=False, server_default=text("0"))


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)


class ApplicationGroup(Base):
    __tablename__ = "application_groups"

    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), primary_key=True
    )
    group_id = Column(
        Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True
    )
    role = Column(Integer, nullable=False)


class Hook(Base):
    __tablename__ = "hooks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(Text, nullable=False, unique=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    pipeline_id = Column(Integer, ForeignKey("pipelines.id"), nullable=False)
    repositories_manager = Column(Text, nullable=False)
    repository_fullname = Column(Text, nullable=False)
    enabled = Column(Integer, nullable=False, server_default=text("1"))


class RepositoryPoller(Base):
    __tablename__ = "repository_pollers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    pipeline_id = Column(Integer, ForeignKey("pipelines.id"), nullable=False)
    enabled = Column(Integer, nullable=False, server_default=text("1"))
    interval = Column(Integer, nullable=False, server_default=text("60"))

    __table_args__ = (
        UniqueConstraint(
            "application_id", "pipeline_id", name="uq_repository_pollers_pair"
        ),
    )


class NotificationSetting(Base):
    __tablename__ = "notification_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )
    pipeline_id = Column(Integer, ForeignKey("pipelines.id"), nullable=False)
    environment_id = Column(Integer, ForeignKey("environments.id"), nullable=False)
    type = Column(Text, nullable=False)
    settings = Column(Text, nullable=False, server_default=text("'{}'"))

    __table_args__ = (
        UniqueConstraint(
            "application_id",
            "pipeline_id",
            "environment_id",
            "type",
            name="uq_notification_settings_target",
        ),
        CheckConstraint(
            "type IN ('email', 'jabber')", name="ck_notification_settings_type"
        ),
    )


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=True)
    target_type = Column(Text, nullable=False)
    target_id = Column(Integer, nullable=False)
    target_label = Column(Text, nullable=False)
    action = Column(Text, nullable=False)
    changes = Column(Text)
    created_at = Column(Text, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
