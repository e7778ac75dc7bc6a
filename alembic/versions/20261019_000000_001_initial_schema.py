"""Initial schema - accounts, profiles, tickets, feature requests, code changes.

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENUMS = {
    "developer_tag": ("astro", "bungee"),
    "game_mode": ("pve", "pvp"),
    "expansion": ("tbc", "era", "hc"),
    "ticket_priority": ("low", "medium", "high", "critical"),
    "ticket_status": ("open", "in-progress", "resolved"),
    "resolve_reason": ("no_response", "not_reproducible", "user_side", "fixed"),
    "feature_category": ("class", "esp", "fishingbot", "other"),
    "feature_status": ("open", "accepted", "rejected"),
    "change_type": ("fix", "feature", "delete", "create", "update"),
}


def _enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create all database tables."""
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # Accounts
    op.create_table(
        "accounts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("developer_type", _enum("developer_tag"), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_accounts_id", "accounts", ["id"])
    op.create_index("ix_accounts_username", "accounts", ["username"])
    op.create_index("ix_accounts_email", "accounts", ["email"])

    # Profiles (no cascade from accounts)
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("account_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("developer_type", _enum("developer_tag"), nullable=False),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_id"),
    )
    op.create_index("ix_profiles_id", "profiles", ["id"])
    op.create_index("ix_profiles_account_id", "profiles", ["account_id"])

    # Bug tickets
    op.create_table(
        "bug_tickets",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("developer", _enum("developer_tag"), nullable=False),
        sa.Column("wow_class", sa.String(50), nullable=False),
        sa.Column("rotation", sa.String(100), nullable=False),
        sa.Column("pvpve_mode", _enum("game_mode"), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False),
        sa.Column("expansion", _enum("expansion"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("current_behavior", sa.Text(), nullable=False),
        sa.Column("expected_behavior", sa.Text(), nullable=False),
        sa.Column("logs", sa.Text(), nullable=True),
        sa.Column("video_url", sa.String(500), nullable=True),
        sa.Column("screenshot_urls", sa.JSON(), nullable=False),
        sa.Column("discord_username", sa.String(100), nullable=False),
        sa.Column("sylvanas_username", sa.String(100), nullable=False),
        sa.Column("reporter_name", sa.String(100), nullable=False),
        sa.Column("reporter_account_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("priority", _enum("ticket_priority"), nullable=False),
        sa.Column("status", _enum("ticket_status"), nullable=False),
        sa.Column("is_archived", sa.Boolean(), nullable=False),
        sa.Column("resolve_reason", _enum("resolve_reason"), nullable=True),
        sa.Column("discord_message_id", sa.String(32), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["reporter_account_id"], ["accounts.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bug_tickets_id", "bug_tickets", ["id"])
    op.create_index("ix_bug_tickets_developer", "bug_tickets", ["developer"])
    op.create_index("ix_bug_tickets_status", "bug_tickets", ["status"])
    op.create_index("ix_bug_tickets_is_archived", "bug_tickets", ["is_archived"])

    # Feature requests
    op.create_table(
        "feature_requests",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("developer", _enum("developer_tag"), nullable=False),
        sa.Column("category", _enum("feature_category"), nullable=False),
        sa.Column("wow_class", sa.String(50), nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("status", _enum("feature_status"), nullable=False),
        sa.Column("discord_username", sa.String(100), nullable=False),
        sa.Column("sylvanas_username", sa.String(100), nullable=False),
        sa.Column("discord_message_id", sa.String(32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_feature_requests_id", "feature_requests", ["id"])
    op.create_index("ix_feature_requests_developer", "feature_requests", ["developer"])
    op.create_index("ix_feature_requests_status", "feature_requests", ["status"])

    # Code changes
    op.create_table(
        "code_changes",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("developer_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("file_path", sa.String(500), nullable=False),
        sa.Column("change_description", sa.Text(), nullable=False),
        sa.Column("change_type", _enum("change_type"), nullable=False),
        sa.Column("related_ticket_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("github_url", sa.String(500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["developer_id"], ["profiles.id"]),
        sa.ForeignKeyConstraint(["related_ticket_id"], ["bug_tickets.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_code_changes_id", "code_changes", ["id"])
    op.create_index("ix_code_changes_developer_id", "code_changes", ["developer_id"])
    op.create_index("ix_code_changes_created_at", "code_changes", ["created_at"])


def downgrade() -> None:
    """Drop all database tables."""
    # Drop tables in reverse order (respect foreign keys)
    op.drop_table("code_changes")
    op.drop_table("feature_requests")
    op.drop_table("bug_tickets")
    op.drop_table("profiles")
    op.drop_table("accounts")

    # Drop enums
    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
