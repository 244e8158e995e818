"""Initial dashboard schema

Revision ID: 0001_dashboard_initial
Revises: 
Create Date: 2026-10-18

Compatible with both SQLite and PostgreSQL:
- CURRENT_TIMESTAMP instead of now()
- ENUMs stored as VARCHAR (native_enum=False in models)
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_dashboard_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    """Create projects, deployments, settings, users, invitations and waitlist tables."""

    op.create_table(
        "projects",
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("image_url", sa.String(length=500), server_default="", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_projects_name"), "projects", ["name"], unique=False)

    op.create_table(
        "deployments",
        sa.Column("project_id", sa.Integer(), nullable=False),
        sa.Column("mode", sa.String(length=10), nullable=False),
        sa.Column("maintenance_mode", sa.Boolean(), nullable=False),
        sa.Column("backend_host", sa.String(length=255), nullable=False),
        sa.Column("frontend_host", sa.String(length=255), nullable=False),
        sa.Column("publishable_key", sa.String(length=512), nullable=False),
        sa.Column("mail_from_host", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_deployments_project_id"), "deployments", ["project_id"], unique=False)
    op.create_index(op.f("ix_deployments_backend_host"), "deployments", ["backend_host"], unique=True)

    op.create_table(
        "deployment_auth_settings",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("email_address", sa.JSON(), nullable=False),
        sa.Column("phone_number", sa.JSON(), nullable=False),
        sa.Column("username", sa.JSON(), nullable=False),
        sa.Column("password", sa.JSON(), nullable=False),
        sa.Column("first_factor", sa.String(length=17), nullable=False),
        sa.Column("alternate_first_factors", sa.JSON(), nullable=False),
        sa.Column("second_factor_policy", sa.String(length=8), nullable=False),
        sa.Column("multi_session_support", sa.Boolean(), nullable=False),
        sa.Column("session_token_lifetime", sa.Integer(), nullable=False),
        sa.Column("session_validity_period", sa.Integer(), nullable=False),
        sa.Column("session_inactive_timeout", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("deployment_id"),
    )

    op.create_table(
        "deployment_display_settings",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("app_name", sa.String(length=100), nullable=False),
        sa.Column("primary_color", sa.String(length=20), nullable=False),
        sa.Column("tos_page_url", sa.String(length=500), nullable=True),
        sa.Column("privacy_policy_url", sa.String(length=500), nullable=True),
        sa.Column("sign_in_page_url", sa.String(length=500), nullable=True),
        sa.Column("sign_up_page_url", sa.String(length=500), nullable=True),
        sa.Column("after_sign_out_one_page_url", sa.String(length=500), nullable=True),
        sa.Column("after_sign_out_all_page_url", sa.String(length=500), nullable=True),
        sa.Column("user_profile_url", sa.String(length=500), nullable=True),
        sa.Column("logo_image_url", sa.String(length=500), nullable=True),
        sa.Column("favicon_image_url", sa.String(length=500), nullable=True),
        sa.Column("default_user_profile_image_url", sa.String(length=500), nullable=True),
        sa.Column("default_organization_profile_image_url", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("deployment_id"),
    )

    op.create_table(
        "deployment_restrictions",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("allowlist_enabled", sa.Boolean(), nullable=False),
        sa.Column("blocklist_enabled", sa.Boolean(), nullable=False),
        sa.Column("block_subaddresses", sa.Boolean(), nullable=False),
        sa.Column("block_disposable_emails", sa.Boolean(), nullable=False),
        sa.Column("block_voip_numbers", sa.Boolean(), nullable=False),
        sa.Column("country_restrictions", sa.JSON(), nullable=False),
        sa.Column("banned_keywords", sa.JSON(), nullable=False),
        sa.Column("allowlisted_resources", sa.JSON(), nullable=False),
        sa.Column("blocklisted_resources", sa.JSON(), nullable=False),
        sa.Column("sign_up_mode", sa.String(length=10), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("deployment_id"),
    )

    op.create_table(
        "deployment_users",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("email_address", sa.String(length=320), nullable=False),
        sa.Column("phone_number", sa.String(length=50), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("disabled", sa.Boolean(), nullable=False),
        sa.Column("public_metadata", sa.JSON(), nullable=False),
        sa.Column("private_metadata", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_deployment_users_deployment_id"), "deployment_users", ["deployment_id"], unique=False)
    op.create_index(op.f("ix_deployment_users_username"), "deployment_users", ["username"], unique=False)
    op.create_index(op.f("ix_deployment_users_email_address"), "deployment_users", ["email_address"], unique=False)

    op.create_table(
        "deployment_social_connections",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("provider", sa.String(length=15), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("user_defined_scopes", sa.JSON(), nullable=False),
        sa.Column("credentials", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("deployment_id", "provider", name="uq_social_connection_provider"),
    )
    op.create_index(op.f("ix_deployment_social_connections_deployment_id"), "deployment_social_connections", ["deployment_id"], unique=False)

    op.create_table(
        "deployment_invitations",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email_address", sa.String(length=320), nullable=False),
        sa.Column("expiry", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_deployment_invitations_deployment_id"), "deployment_invitations", ["deployment_id"], unique=False)
    op.create_index(op.f("ix_deployment_invitations_email_address"), "deployment_invitations", ["email_address"], unique=False)

    op.create_table(
        "deployment_waitlist_users",
        sa.Column("deployment_id", sa.Integer(), nullable=False),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email_address", sa.String(length=320), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deployment_id"], ["deployments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_deployment_waitlist_users_deployment_id"), "deployment_waitlist_users", ["deployment_id"], unique=False)
    op.create_index(op.f("ix_deployment_waitlist_users_email_address"), "deployment_waitlist_users", ["email_address"], unique=False)


def downgrade() -> None:
    """Drop all dashboard tables."""
    op.drop_index(op.f("ix_deployment_waitlist_users_email_address"), table_name="deployment_waitlist_users")
    op.drop_index(op.f("ix_deployment_waitlist_users_deployment_id"), table_name="deployment_waitlist_users")
    op.drop_table("deployment_waitlist_users")
    op.drop_index(op.f("ix_deployment_invitations_email_address"), table_name="deployment_invitations")
    op.drop_index(op.f("ix_deployment_invitations_deployment_id"), table_name="deployment_invitations")
    op.drop_table("deployment_invitations")
    op.drop_index(op.f("ix_deployment_social_connections_deployment_id"), table_name="deployment_social_connections")
    op.drop_table("deployment_social_connections")
    op.drop_index(op.f("ix_deployment_users_email_address"), table_name="deployment_users")
    op.drop_index(op.f("ix_deployment_users_username"), table_name="deployment_users")
    op.drop_index(op.f("ix_deployment_users_deployment_id"), table_name="deployment_users")
    op.drop_table("deployment_users")
    op.drop_table("deployment_restrictions")
    op.drop_table("deployment_display_settings")
    op.drop_table("deployment_auth_settings")
    op.drop_index(op.f("ix_deployments_backend_host"), table_name="deployments")
    op.drop_index(op.f("ix_deployments_project_id"), table_name="deployments")
    op.drop_table("deployments")
    op.drop_index(op.f("ix_projects_name"), table_name="projects")
    op.drop_table("projects")
