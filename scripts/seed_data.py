#!/usr/bin/env python
"""
Seed data script for development and testing.

Usage:
    python scripts/seed_data.py

This script creates:
- The two developer accounts with their profiles
- Sample bug tickets in every status
- Sample feature requests
- A few code change log entries

Nothing is posted to Discord.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from tracker.core.security import hash_password
from tracker.database import get_session_maker, init_db
from tracker.models.account import Account, DeveloperTag, Profile
from tracker.models.code_change import ChangeType, CodeChange
from tracker.models.feature import FeatureCategory, FeatureRequest, FeatureStatus
from tracker.models.ticket import (
    BugTicket,
    Expansion,
    GameMode,
    ResolveReason,
    TicketPriority,
    TicketStatus,
)


# Seed data
DEVELOPERS = [
    {
        "username": "astro",
        "email": "astro@example.com",
        "password": "AstroPass123!",
    },
    {
        "username": "bungee",
        "email": "bungee@example.com",
        "password": "BungeePass123!",
    },
]

TICKETS = [
    {
        "developer": DeveloperTag.ASTRO,
        "wow_class": "mage",
        "rotation": "Frost",
        "pvpve_mode": GameMode.PVE,
        "expansion": Expansion.TBC,
        "title": "Frostbolt not cast after Icy Veins",
        "current_behavior": "After Icy Veins the rotation idles for several seconds instead of casting Frostbolt.",
        "expected_behavior": "Frostbolt should be cast immediately once Icy Veins is active and the target is in range.",
        "priority": TicketPriority.HIGH,
        "status": TicketStatus.OPEN,
    },
    {
        "developer": DeveloperTag.BUNGEE,
        "wow_class": "rogue",
        "rotation": "Combat",
        "pvpve_mode": GameMode.PVP,
        "expansion": Expansion.ERA,
        "title": "Kick fires on non-interruptible casts",
        "current_behavior": "Kick is used on casts that cannot be interrupted, putting it on cooldown for nothing.",
        "expected_behavior": "Kick should only be used when the enemy cast is interruptible and worth stopping.",
        "priority": TicketPriority.MEDIUM,
        "status": TicketStatus.IN_PROGRESS,
    },
    {
        "developer": DeveloperTag.ASTRO,
        "wow_class": "warrior",
        "rotation": "Arms",
        "pvpve_mode": GameMode.PVE,
        "expansion": Expansion.HC,
        "title": "Rend kept up on dying targets",
        "current_behavior": "Rend is reapplied on targets below ten percent health which wastes rage at the end of pulls.",
        "expected_behavior": "Rend should be skipped when the target is about to die so rage is spent on Execute.",
        "priority": TicketPriority.LOW,
        "status": TicketStatus.RESOLVED,
        "resolve_reason": ResolveReason.FIXED,
    },
]

FEATURES = [
    {
        "developer": DeveloperTag.BUNGEE,
        "category": FeatureCategory.FISHINGBOT,
        "title": "Pause fishing when a player is nearby",
        "description": "Stop casting the line while another player stands within twenty yards.",
        "status": FeatureStatus.OPEN,
    },
    {
        "developer": DeveloperTag.ASTRO,
        "category": FeatureCategory.CLASS,
        "wow_class": "hunter",
        "title": "Aspect swapping for travel",
        "description": "Switch to Aspect of the Cheetah when out of combat for more than five seconds.",
        "status": FeatureStatus.ACCEPTED,
    },
]

CODE_CHANGES = [
    ("astro", "rotations/mage/frost.lua", "Fix Frostbolt priority after Icy Veins", ChangeType.FIX),
    ("bungee", "rotations/rogue/combat.lua", "Add interrupt whitelist", ChangeType.FEATURE),
    ("astro", "Multiple files (3)", "Update shared cooldown helpers", ChangeType.UPDATE),
]


async def seed_database():
    """Seed the database with sample data."""
    print("Initializing database...")
    await init_db()

    async with get_session_maker()() as session:
        # Check if data already exists
        result = await session.execute(select(Account).limit(1))
        if result.scalar_one_or_none():
            print("Database already seeded. Skipping...")
            return

        print("Creating developer accounts...")
        profiles = {}
        for developer_data in DEVELOPERS:
            account = Account(
                username=developer_data["username"],
                email=developer_data["email"],
                password_hash=hash_password(developer_data["password"]),
                developer_type=DeveloperTag(developer_data["username"]),
            )
            session.add(account)
            await session.flush()

            profile = Profile(
                account_id=account.id,
                username=account.username,
                developer_type=account.developer_type,
            )
            session.add(profile)
            profiles[account.username] = profile

        await session.flush()

        print("Creating bug tickets...")
        for ticket_data in TICKETS:
            session.add(
                BugTicket(
                    **ticket_data,
                    level=80,
                    description=ticket_data["current_behavior"],
                    logs="No errors in the Lua console.",
                    screenshot_urls=[],
                    discord_username="tester#0001",
                    sylvanas_username="tester",
                    reporter_name="Tester",
                    is_archived=ticket_data["status"] == TicketStatus.RESOLVED,
                )
            )

        print("Creating feature requests...")
        for feature_data in FEATURES:
            session.add(
                FeatureRequest(
                    **feature_data,
                    discord_username="tester#0001",
                    sylvanas_username="tester",
                )
            )

        print("Creating code changes...")
        for username, file_path, description, change_type in CODE_CHANGES:
            session.add(
                CodeChange(
                    developer_id=profiles[username].id,
                    file_path=file_path,
                    change_description=description,
                    change_type=change_type,
                )
            )

        await session.commit()

        print("\n" + "=" * 50)
        print("Database seeded successfully!")
        print("=" * 50)
        print("\nCreated:")
        print(f"  - {len(DEVELOPERS)} developers")
        print(f"  - {len(TICKETS)} bug tickets")
        print(f"  - {len(FEATURES)} feature requests")
        print(f"  - {len(CODE_CHANGES)} code changes")
        print("\nDefault credentials:")
        print("  astro  / AstroPass123!")
        print("  bungee / BungeePass123!")


if __name__ == "__main__":
    asyncio.run(seed_database())
