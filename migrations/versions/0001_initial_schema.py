"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-09-01 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name, sa.Text(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")
    )


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("key", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        _timestamp("last_modified"),
        sa.UniqueConstraint("key"),
    )
    environments = op.create_table(
        "environments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.UniqueConstraint("project_id", "name", name="uq_environments_project_name"),
    )
    op.create_table(
        "pipelines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "type", sa.Text(), nullable=False, server_default=sa.text("'build'")
        ),
        sa.CheckConstraint(
            "type IN ('build', 'deployment', 'testing')", name="ck_pipelines_type"
        ),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.UniqueConstraint("project_id", "name", name="uq_pipelines_project_name"),
    )
    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("repositories_manager", sa.Text(), nullable=True),
        sa.Column("repository_fullname", sa.Text(), nullable=True),
        _timestamp("last_modified"),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.UniqueConstraint(
            "project_id", "name", name="uq_applications_project_name"
        ),
    )
    op.create_table(
        "application_pipelines",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("pipeline_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["application_id"], ["applications.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["pipeline_id"], ["pipelines.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "application_id", "pipeline_id", name="uq_application_pipelines_pair"
        ),
    )
    op.create_table(
        "pipeline_triggers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("src_application_id", sa.Integer(), nullable=False),
        sa.Column("src_pipeline_id", sa.Integer(), nullable=False),
        sa.Column("src_environment_id", sa.Integer(), nullable=False),
        sa.Column("dest_application_id", sa.Integer(), nullable=False),
        sa.Column("dest_pipeline_id", sa.Integer(), nullable=False),
        sa.Column("dest_environment_id", sa.Integer(), nullable=False),
        sa.Column(
            "manual", sa.Integer(), nullable=False, server_default=sa.text("0")
        ),
        sa.ForeignKeyConstraint(["src_application_id"], ["applications.id"]),
        sa.ForeignKeyConstraint(["src_pipeline_id"], ["pipelines.id"]),
        sa.ForeignKeyConstraint(["src_environment_id"], ["environments.id"]),
        sa.ForeignKeyConstraint(["dest_application_id"], ["applications.id"]),
        sa.ForeignKeyConstraint(["dest_pipeline_id"], ["pipelines.id"]),
        sa.ForeignKeyConstraint(["dest_environment_id"], ["environments.id"]),
    )
    op.create_table(
        "groups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "application_groups",
        sa.Column("application_id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.Integer(), primary_key=True),
        sa.Column("role", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["application_id"], ["applications.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["group_id"], ["groups.id"], ondelete="CASCADE"),
    )
    op.create_table(
        "hooks",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("uid", sa.Text(), nullable=False),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("pipeline_id", sa.Integer(), nullable=False),
        sa.Column("repositories_manager", sa.Text(), nullable=False),
        sa.Column("repository_fullname", sa.Text(), nullable=False),
        sa.Column(
            "enabled", sa.Integer(), nullable=False, server_default=sa.text("1")
        ),
        sa.ForeignKeyConstraint(
            ["application_id"], ["applications.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["pipeline_id"], ["pipelines.id"]),
        sa.UniqueConstraint("uid"),
    )
    op.create_table(
        "repository_pollers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("pipeline_id", sa.Integer(), nullable=False),
        sa.Column(
            "enabled", sa.Integer(), nullable=False, server_default=sa.text("1")
        ),
        sa.Column(
            "interval", sa.Integer(), nullable=False, server_default=sa.text("60")
        ),
        sa.ForeignKeyConstraint(
            ["application_id"], ["applications.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["pipeline_id"], ["pipelines.id"]),
        sa.UniqueConstraint(
            "application_id", "pipeline_id", name="uq_repository_pollers_pair"
        ),
    )
    op.create_table(
        "notification_settings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("pipeline_id", sa.Integer(), nullable=False),
        sa.Column("environment_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column(
            "settings", sa.Text(), nullable=False, server_default=sa.text("'{}'")
        ),
        sa.CheckConstraint(
            "type IN ('email', 'jabber')", name="ck_notification_settings_type"
        ),
        sa.ForeignKeyConstraint(
            ["application_id"], ["applications.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["pipeline_id"], ["pipelines.id"]),
        sa.ForeignKeyConstraint(["environment_id"], ["environments.id"]),
        sa.UniqueConstraint(
            "application_id",
            "pipeline_id",
            "environment_id",
            "type",
            name="uq_notification_settings_target",
        ),
    )
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.Text(), nullable=True),
        sa.Column("target_type", sa.Text(), nullable=False),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("target_label", sa.Text(), nullable=False),
        sa.Column("action", sa.Text(), nullable=False),
        sa.Column("changes", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )

    # Global "no environment" row shared by every project.
    op.bulk_insert(environments, [{"id": 1, "project_id": None, "name": "NoEnv"}])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("notification_settings")
    op.drop_table("repository_pollers")
    op.drop_table("hooks")
    op.drop_table("application_groups")
    op.drop_table("groups")
    op.drop_table("pipeline_triggers")
    op.drop_table("application_pipelines")
    op.drop_table("applications")
    op.drop_table("pipelines")
    op.drop_table("environments")
    op.drop_table("projects")
