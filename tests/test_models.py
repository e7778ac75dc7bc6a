"""Tests for database models."""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.models import (
    Account,
    BugTicket,
    ChangeType,
    CodeChange,
    DeveloperTag,
    FeatureRequest,
    FeatureStatus,
    Profile,
    TicketStatus,
)


class TestEnums:
    """Tests for enum values stored in the database."""

    def test_developer_tags(self):
        assert [tag.value for tag in DeveloperTag] == ["astro", "bungee"]

    def test_ticket_status_values(self):
        assert TicketStatus.IN_PROGRESS.value == "in-progress"

    def test_change_type_values(self):
        assert {c.value for c in ChangeType} == {"fix", "feature", "delete", "create", "update"}


class TestModelProperties:
    """Tests for model helper properties."""

    def test_ticket_is_resolved(self):
        assert BugTicket(status=TicketStatus.RESOLVED).is_resolved is True
        assert BugTicket(status=TicketStatus.OPEN).is_resolved is False

    def test_feature_is_decided(self):
        assert FeatureRequest(status=FeatureStatus.OPEN).is_decided is False
        assert FeatureRequest(status=FeatureStatus.REJECTED).is_decided is True


class TestPersistence:
    """Round trips through the database."""

    @pytest.mark.asyncio
    async def test_enum_and_uuid_columns(self, db_session: AsyncSession, astro: Account):
        result = await db_session.execute(select(Account).where(Account.username == "astro"))
        account = result.scalar_one()

        assert isinstance(account.id, uuid.UUID)
        assert account.developer_type is DeveloperTag.ASTRO
        assert account.created_at is not None

    @pytest.mark.asyncio
    async def test_code_change_loads_developer(self, db_session: AsyncSession, astro: Account):
        profile = (
            await db_session.execute(select(Profile).where(Profile.account_id == astro.id))
        ).scalar_one()
        db_session.add(
            CodeChange(
                developer_id=profile.id,
                file_path="core.lua",
                change_description="Tidy helpers",
                change_type=ChangeType.UPDATE,
            )
        )
        await db_session.commit()
        db_session.expunge_all()

        change = (await db_session.execute(select(CodeChange))).scalar_one()

        assert change.developer.username == "astro"
        assert change.developer.developer_type is DeveloperTag.ASTRO
