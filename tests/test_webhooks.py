"""Tests for the GitHub and Discord webhook endpoints."""

import json
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.main import app
from tracker.models import Account, ChangeType, CodeChange, FeatureRequest, FeatureStatus, Profile
from tracker.services.code_change import CodeChangeService


def push_body(*commits: dict) -> bytes:
    return json.dumps({"ref": "refs/heads/main", "commits": list(commits)}).encode()


def commit(message: str, author: str, username: str | None = None, **files) -> dict:
    return {
        "id": uuid.uuid4().hex,
        "message": message,
        "url": "https://github.com/example/addon/commit/abc123",
        "author": {"name": author, "email": "dev@example.com", "username": username},
        "added": files.get("added", []),
        "modified": files.get("modified", []),
        "removed": files.get("removed", []),
    }


class TestGitHubWebhook:
    """Tests for push ingestion."""

    @pytest.mark.asyncio
    async def test_ping_needs_no_signature(self, client: AsyncClient):
        response = await client.post(
            "/api/webhooks/github",
            content=b"{}",
            headers={"X-GitHub-Event": "ping"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Pong!"

    @pytest.mark.asyncio
    async def test_missing_signature(self, client: AsyncClient):
        response = await client.post(
            "/api/webhooks/github",
            content=push_body(),
            headers={"X-GitHub-Event": "push"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_SIGNATURE"

    @pytest.mark.asyncio
    async def test_bad_signature(
        self, client: AsyncClient, db_session: AsyncSession, sign_push, astro: Account
    ):
        """A forged delivery is rejected before any commit is recorded."""
        headers = sign_push(push_body())

        response = await client.post(
            "/api/webhooks/github",
            content=push_body(commit("Fix crash", "Astro")),
            headers=headers,
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_SIGNATURE"
        assert (await db_session.execute(select(CodeChange))).scalars().all() == []

    @pytest.mark.asyncio
    async def test_other_events_are_ignored(self, client: AsyncClient, sign_push):
        body = b'{"action": "opened"}'

        response = await client.post("/api/webhooks/github", content=body, headers=sign_push(body, "issues"))

        assert response.status_code == 200
        assert response.json()["message"] == "Ignored event type"

    @pytest.mark.asyncio
    async def test_push_creates_changes(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        sign_push,
        astro: Account,
        bungee: Account,
    ):
        """Attributable commits become entries; merges and strangers are skipped."""
        body = push_body(
            commit("Fix Frostbolt priority", "Astro Dev", modified=["rotations/mage/frost.lua"]),
            commit("Add interrupt whitelist", "Raggy", added=["a.lua"], modified=["b.lua", "a.lua"]),
            commit("Merge branch 'main' into dev", "Astro Dev"),
            commit("Update docs", "Somebody Else", "stranger"),
        )

        response = await client.post("/api/webhooks/github", content=body, headers=sign_push(body))

        assert response.status_code == 200
        assert response.json() == {"message": "Processed push event", "changes_created": 2}

        result = await db_session.execute(select(CodeChange))
        changes = {c.file_path: c for c in result.scalars().all()}
        assert set(changes) == {"rotations/mage/frost.lua", "Multiple files (2)"}

        profiles = {
            p.id: p.username for p in (await db_session.execute(select(Profile))).scalars().all()
        }
        frost = changes["rotations/mage/frost.lua"]
        assert frost.change_type == ChangeType.FIX
        assert profiles[frost.developer_id] == "astro"
        assert frost.github_url == "https://github.com/example/addon/commit/abc123"

        whitelist = changes["Multiple files (2)"]
        assert whitelist.change_type == ChangeType.FEATURE
        assert profiles[whitelist.developer_id] == "bungee"

    @pytest.mark.asyncio
    async def test_push_matches_login(self, client: AsyncClient, sign_push, astro: Account):
        body = push_body(commit("Tweak timings", "Anonymous", "astro-gh"))

        response = await client.post("/api/webhooks/github", content=body, headers=sign_push(body))

        assert response.json()["changes_created"] == 1

    @pytest.mark.asyncio
    async def test_failure_keeps_earlier_rows(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        sign_push,
        astro: Account,
        monkeypatch,
    ):
        """Rows committed before a failing insert survive the 500."""
        record = CodeChangeService.record
        calls = []

        async def flaky_record(self, *args, **kwargs):
            calls.append(kwargs["file_path"])
            if len(calls) == 2:
                raise RuntimeError("insert failed")
            return await record(self, *args, **kwargs)

        monkeypatch.setattr(CodeChangeService, "record", flaky_record)
        body = push_body(
            commit("Fix Frostbolt priority", "Astro", modified=["frost.lua"]),
            commit("Tweak Blizzard", "Astro", modified=["blizzard.lua"]),
            commit("Tweak Cone of Cold", "Astro", modified=["cone.lua"]),
        )

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as raw:
            response = await raw.post("/api/webhooks/github", content=body, headers=sign_push(body))

        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
        changes = (await db_session.execute(select(CodeChange))).scalars().all()
        assert [c.file_path for c in changes] == ["frost.lua"]

    @pytest.mark.asyncio
    async def test_push_without_profiles(self, client: AsyncClient, sign_push):
        body = push_body(commit("Fix crash", "Astro"))

        response = await client.post("/api/webhooks/github", content=body, headers=sign_push(body))

        assert response.status_code == 200
        assert response.json()["changes_created"] == 0

    @pytest.mark.asyncio
    async def test_push_invalid_payload(self, client: AsyncClient, sign_push):
        body = b'{"commits": "nope"}'

        response = await client.post("/api/webhooks/github", content=body, headers=sign_push(body))

        assert response.status_code == 400


class TestDiscordWebhook:
    """Tests for Discord interactions."""

    @pytest.mark.asyncio
    async def test_missing_signature_headers(self, client: AsyncClient):
        response = await client.post("/api/webhooks/discord", content=b'{"type": 1}')

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_signature(self, client: AsyncClient, sign_interaction):
        headers = sign_interaction(b'{"type": 2}')

        response = await client.post("/api/webhooks/discord", content=b'{"type": 1}', headers=headers)

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid request signature"

    @pytest.mark.asyncio
    async def test_ping(self, client: AsyncClient, sign_interaction):
        body = b'{"type": 1}'

        response = await client.post("/api/webhooks/discord", content=body, headers=sign_interaction(body))

        assert response.status_code == 200
        assert response.json() == {"type": 1}

    @pytest.mark.asyncio
    async def test_accept_button(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        discord,
        sign_interaction,
        feature_payload,
    ):
        """Clicking Accept updates the request and answers ephemerally."""
        created = await client.post("/api/features", json=feature_payload())
        feature_id = created.json()["feature"]["id"]
        body = json.dumps(
            {
                "type": 3,
                "data": {"custom_id": f"feature_accept_{feature_id}"},
                "member": {"user": {"id": "4242"}},
            }
        ).encode()

        response = await client.post("/api/webhooks/discord", content=body, headers=sign_interaction(body))

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == 4
        assert data["data"]["flags"] == 64
        assert "accepted" in data["data"]["content"]
        assert "<@4242>" in data["data"]["content"]

        feature = await db_session.get(FeatureRequest, uuid.UUID(feature_id))
        assert feature.status == FeatureStatus.ACCEPTED
        assert json.loads(discord.calls("PATCH")[0].content)["components"] == []

    @pytest.mark.asyncio
    async def test_button_for_unknown_feature(self, client: AsyncClient, sign_interaction):
        body = json.dumps(
            {"type": 3, "data": {"custom_id": f"feature_reject_{uuid.uuid4()}"}}
        ).encode()

        response = await client.post("/api/webhooks/discord", content=body, headers=sign_interaction(body))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_interaction(self, client: AsyncClient, sign_interaction):
        body = json.dumps({"type": 2, "data": {"custom_id": "slash"}}).encode()

        response = await client.post("/api/webhooks/discord", content=body, headers=sign_interaction(body))

        assert response.status_code == 400
        assert response.json()["code"] == "UNKNOWN_INTERACTION"
