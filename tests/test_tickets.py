"""Tests for bug ticket endpoints."""

import json
import uuid

import pytest
from httpx import AsyncClient

from tracker.models import Account

ASTRO_WEBHOOK = "https://discord.test/api/webhooks/astro"
ASTRO_ARCHIVE = "https://discord.test/api/webhooks/astro-archive"


async def create_ticket(client: AsyncClient, payload: dict, headers: dict | None = None) -> dict:
    response = await client.post("/api/bugs/tickets", json=payload, headers=headers or {})
    assert response.status_code == 201, response.text
    return response.json()["ticket"]


class TestCreateTicket:
    """Tests for filing bug reports."""

    @pytest.mark.asyncio
    async def test_create_ticket(self, client: AsyncClient, discord, ticket_payload):
        """Test filing a report anonymously."""
        response = await client.post("/api/bugs/tickets", json=ticket_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Bug report successfully created!"
        ticket = data["ticket"]
        assert ticket["status"] == "open"
        assert ticket["isArchived"] is False
        assert ticket["resolveReason"] is None
        assert ticket["reporter_account_id"] is None
        assert ticket["screenshot_urls"] == []
        assert "createdAt" in ticket

        # Mirrored to the developer's channel and the message id stored
        posts = discord.calls("POST")
        assert len(posts) == 1
        assert str(posts[0].url).startswith(ASTRO_WEBHOOK)
        assert posts[0].url.params["wait"] == "true"
        assert ticket["discord_message_id"] == "1001"

        embed = json.loads(posts[0].content)["embeds"][0]
        assert embed["title"].endswith("New Bug Report: Frostbolt not cast after Icy Veins")

    @pytest.mark.asyncio
    async def test_description_defaults_to_current_behavior(self, client: AsyncClient, ticket_payload):
        """A missing or blank description falls back to the current behavior."""
        payload = ticket_payload(description="   ")
        ticket = await create_ticket(client, payload)

        assert ticket["description"] == payload["current_behavior"]

    @pytest.mark.asyncio
    async def test_blank_video_url_is_stored_as_null(self, client: AsyncClient, ticket_payload):
        ticket = await create_ticket(client, ticket_payload(video_url=""))

        assert ticket["video_url"] is None

    @pytest.mark.asyncio
    async def test_create_ticket_authenticated(
        self, client: AsyncClient, astro: Account, auth_headers: dict, ticket_payload
    ):
        """A valid token links the report to the reporter's account."""
        ticket = await create_ticket(client, ticket_payload(), headers=auth_headers)

        assert ticket["reporter_account_id"] == str(astro.id)

    @pytest.mark.asyncio
    async def test_create_ticket_invalid_token_is_anonymous(self, client: AsyncClient, ticket_payload):
        """An invalid token on a public route is ignored."""
        ticket = await create_ticket(
            client,
            ticket_payload(),
            headers={"Authorization": "Bearer not.a.token"},
        )

        assert ticket["reporter_account_id"] is None

    @pytest.mark.asyncio
    async def test_behavior_too_short(self, client: AsyncClient, ticket_payload):
        """Behaviour descriptions need at least 50 characters."""
        response = await client.post(
            "/api/bugs/tickets",
            json=ticket_payload(current_behavior="It breaks."),
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Current behavior must be at least 50 characters"
        assert data["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_missing_fields(self, client: AsyncClient, ticket_payload):
        payload = ticket_payload()
        del payload["logs"]
        del payload["title"]

        response = await client.post("/api/bugs/tickets", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    @pytest.mark.asyncio
    async def test_unknown_developer(self, client: AsyncClient, ticket_payload):
        response = await client.post("/api/bugs/tickets", json=ticket_payload(developer="thrall"))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_markup_is_stripped(self, client: AsyncClient, ticket_payload):
        """Test that script tags never reach storage."""
        ticket = await create_ticket(
            client,
            ticket_payload(title="<script>alert(1)</script>Broken rotation"),
        )

        assert "<script>" not in ticket["title"]
        assert "Broken rotation" in ticket["title"]

    @pytest.mark.asyncio
    async def test_discord_failure_does_not_fail_request(self, client: AsyncClient, discord, ticket_payload):
        """The report is stored even when Discord is unavailable."""
        discord.fail = True

        ticket = await create_ticket(client, ticket_payload())

        assert ticket["discord_message_id"] is None
        response = await client.get(f"/api/bugs/tickets/{ticket['id']}")
        assert response.status_code == 200


class TestReadTickets:
    """Tests for listing and reading tickets."""

    @pytest.mark.asyncio
    async def test_list_tickets(self, client: AsyncClient, ticket_payload):
        await create_ticket(client, ticket_payload())
        await create_ticket(client, ticket_payload(developer="bungee", wow_class="rogue"))

        response = await client.get("/api/bugs/tickets")

        assert response.status_code == 200
        assert len(response.json()) == 2

    @pytest.mark.asyncio
    async def test_list_tickets_filtered(self, client: AsyncClient, ticket_payload):
        await create_ticket(client, ticket_payload())
        await create_ticket(client, ticket_payload(developer="bungee", wow_class="rogue"))

        response = await client.get("/api/bugs/tickets", params={"developer": "bungee"})

        tickets = response.json()
        assert len(tickets) == 1
        assert tickets[0]["developer"] == "bungee"

    @pytest.mark.asyncio
    async def test_get_ticket(self, client: AsyncClient, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.get(f"/api/bugs/tickets/{ticket['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == ticket["id"]

    @pytest.mark.asyncio
    async def test_get_ticket_not_found(self, client: AsyncClient):
        response = await client.get(f"/api/bugs/tickets/{uuid.uuid4()}")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "Ticket not found"
        assert data["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_ticket_invalid_id(self, client: AsyncClient):
        response = await client.get("/api/bugs/tickets/not-a-uuid")

        assert response.status_code == 400


class TestTicketStatus:
    """Tests for the status workflow."""

    @pytest.mark.asyncio
    async def test_change_status_requires_auth(self, client: AsyncClient, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.patch(
            f"/api/bugs/tickets/{ticket['id']}",
            json={"status": "in-progress"},
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_mark_in_progress_edits_message(
        self, client: AsyncClient, discord, auth_headers: dict, ticket_payload
    ):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.patch(
            f"/api/bugs/tickets/{ticket['id']}",
            json={"status": "in-progress"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["ticket"]["status"] == "in-progress"
        patches = discord.calls("PATCH")
        assert len(patches) == 1
        assert str(patches[0].url) == f"{ASTRO_WEBHOOK}/messages/1001"

    @pytest.mark.asyncio
    async def test_resolve_archives_ticket(
        self, client: AsyncClient, discord, auth_headers: dict, ticket_payload
    ):
        """Resolving archives, posts a summary and removes the live message."""
        ticket = await create_ticket(client, ticket_payload())

        response = await client.patch(
            f"/api/bugs/tickets/{ticket['id']}",
            json={"status": "resolved", "resolveReason": "fixed"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        resolved = response.json()["ticket"]
        assert resolved["status"] == "resolved"
        assert resolved["isArchived"] is True
        assert resolved["resolveReason"] == "fixed"

        posts = discord.calls("POST")
        assert str(posts[-1].url) == ASTRO_ARCHIVE
        assert json.loads(posts[-1].content)["embeds"][0]["fields"][1]["value"] == "Fixed"
        deletes = discord.calls("DELETE")
        assert [str(r.url) for r in deletes] == [f"{ASTRO_WEBHOOK}/messages/1001"]

    @pytest.mark.asyncio
    async def test_resolving_twice_is_a_no_op(
        self, client: AsyncClient, discord, auth_headers: dict, ticket_payload
    ):
        ticket = await create_ticket(client, ticket_payload())
        url = f"/api/bugs/tickets/{ticket['id']}"
        await client.patch(url, json={"status": "resolved"}, headers=auth_headers)
        calls_after_first = len(discord.requests)

        response = await client.patch(url, json={"status": "resolved"}, headers=auth_headers)

        assert response.status_code == 200
        assert len(discord.requests) == calls_after_first

    @pytest.mark.asyncio
    async def test_reopen_clears_archive(self, client: AsyncClient, auth_headers: dict, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())
        url = f"/api/bugs/tickets/{ticket['id']}"
        await client.patch(url, json={"status": "resolved", "resolveReason": "user_side"}, headers=auth_headers)

        response = await client.patch(url, json={"status": "open"}, headers=auth_headers)

        reopened = response.json()["ticket"]
        assert reopened["isArchived"] is False
        assert reopened["resolveReason"] is None

    @pytest.mark.asyncio
    async def test_reopen_reposts_live_message(
        self, client: AsyncClient, discord, auth_headers: dict, ticket_payload
    ):
        """A resolved ticket has no live message, so reopening posts a fresh one."""
        ticket = await create_ticket(client, ticket_payload())
        url = f"/api/bugs/tickets/{ticket['id']}"
        resolved = await client.patch(url, json={"status": "resolved"}, headers=auth_headers)
        assert resolved.json()["ticket"]["discord_message_id"] is None

        response = await client.patch(url, json={"status": "open"}, headers=auth_headers)

        assert response.json()["ticket"]["discord_message_id"] == "1003"
        assert discord.calls("PATCH") == []
        posts = discord.calls("POST")
        assert [str(r.url).split("?")[0] for r in posts] == [ASTRO_WEBHOOK, ASTRO_ARCHIVE, ASTRO_WEBHOOK]

        await client.patch(url, json={"status": "in-progress"}, headers=auth_headers)

        assert [str(r.url) for r in discord.calls("PATCH")] == [f"{ASTRO_WEBHOOK}/messages/1003"]

    @pytest.mark.asyncio
    async def test_invalid_status(self, client: AsyncClient, auth_headers: dict, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.patch(
            f"/api/bugs/tickets/{ticket['id']}",
            json={"status": "closed"},
            headers=auth_headers,
        )

        assert response.status_code == 400


class TestUpdateAndDelete:
    """Tests for editing, archiving and deleting tickets."""

    @pytest.mark.asyncio
    async def test_update_ticket(self, client: AsyncClient, discord, auth_headers: dict, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.put(
            f"/api/bugs/tickets/{ticket['id']}",
            json={"title": "Frostbolt delayed after Icy Veins", "priority": "critical"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        updated = response.json()["ticket"]
        assert updated["title"] == "Frostbolt delayed after Icy Veins"
        assert updated["priority"] == "critical"
        assert updated["rotation"] == "Frost"
        assert len(discord.calls("PATCH")) == 1

    @pytest.mark.asyncio
    async def test_update_requires_auth(self, client: AsyncClient, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.put(f"/api/bugs/tickets/{ticket['id']}", json={"title": "x"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_soft_delete_archives(self, client: AsyncClient, auth_headers: dict, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.delete(f"/api/bugs/tickets/{ticket['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Ticket archived"
        fetched = (await client.get(f"/api/bugs/tickets/{ticket['id']}")).json()
        assert fetched["isArchived"] is True
        assert fetched["status"] == "resolved"

    @pytest.mark.asyncio
    async def test_soft_delete_twice_is_a_no_op(
        self, client: AsyncClient, discord, auth_headers: dict, ticket_payload
    ):
        ticket = await create_ticket(client, ticket_payload())
        url = f"/api/bugs/tickets/{ticket['id']}"
        await client.delete(url, headers=auth_headers)
        calls_after_first = len(discord.requests)

        response = await client.delete(url, headers=auth_headers)

        assert response.status_code == 200
        fetched = (await client.get(url)).json()
        assert fetched["status"] == "resolved"
        assert fetched["isArchived"] is True
        assert len(discord.requests) == calls_after_first
        archive_posts = [r for r in discord.calls("POST") if str(r.url) == ASTRO_ARCHIVE]
        assert len(archive_posts) == 1

    @pytest.mark.asyncio
    async def test_hard_delete(self, client: AsyncClient, discord, auth_headers: dict, ticket_payload):
        ticket = await create_ticket(client, ticket_payload())

        response = await client.delete(
            f"/api/bugs/tickets/{ticket['id']}",
            params={"hard": "true"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Ticket deleted"
        assert (await client.get(f"/api/bugs/tickets/{ticket['id']}")).status_code == 404
        assert [str(r.url) for r in discord.calls("DELETE")] == [f"{ASTRO_WEBHOOK}/messages/1001"]

    @pytest.mark.asyncio
    async def test_delete_unknown_ticket(self, client: AsyncClient, auth_headers: dict):
        response = await client.delete(f"/api/bugs/tickets/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404


class TestStats:
    """Tests for ticket statistics."""

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, auth_headers: dict, ticket_payload):
        first = await create_ticket(client, ticket_payload())
        await create_ticket(client, ticket_payload(developer="bungee", wow_class="Rogue"))
        await create_ticket(client, ticket_payload(wow_class="MAGE"))
        await client.patch(
            f"/api/bugs/tickets/{first['id']}",
            json={"status": "resolved", "resolveReason": "not_reproducible"},
            headers=auth_headers,
        )

        response = await client.get("/api/bugs/stats")

        assert response.status_code == 200
        stats = response.json()
        assert stats["total"] == 3
        assert stats["archived"] == 1
        assert stats["active"] == 2
        assert stats["by_status"] == {"open": 2, "resolved": 1}
        assert stats["by_developer"] == {"astro": 2, "bungee": 1}
        assert stats["by_class"] == {"mage": 2, "rogue": 1}
        assert stats["by_resolve_reason"] == {"not_reproducible": 1}

    @pytest.mark.asyncio
    async def test_stats_empty(self, client: AsyncClient):
        stats = (await client.get("/api/bugs/stats")).json()

        assert stats["total"] == 0
        assert stats["by_status"] == {}
