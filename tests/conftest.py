"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator, Callable

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

# Signing key standing in for the Discord application
DISCORD_PRIVATE_KEY = Ed25519PrivateKey.generate()

TEST_ENV = {
    "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
    "JWT_SECRET": "test-jwt-secret-with-enough-entropy",
    "REGISTRATION_SECRET": "test-registration-secret",
    "ALLOWED_DEVELOPERS": "astro,bungee",
    "GITHUB_WEBHOOK_SECRET": "test-github-secret",
    "DISCORD_PUBLIC_KEY": DISCORD_PRIVATE_KEY.public_key()
    .public_bytes(Encoding.Raw, PublicFormat.Raw)
    .hex(),
    "DISCORD_WEBHOOK_ASTRO": "https://discord.test/api/webhooks/astro",
    "DISCORD_WEBHOOK_BUNGEE": "https://discord.test/api/webhooks/bungee",
    "DISCORD_ARCHIVE_WEBHOOK_ASTRO": "https://discord.test/api/webhooks/astro-archive",
    "DISCORD_ARCHIVE_WEBHOOK_BUNGEE": "https://discord.test/api/webhooks/bungee-archive",
    "GROQ_API_KEY": "test-groq-key",
    "GROQ_BASE_URL": "https://groq.test/openai/v1",
    "LOG_LEVEL": "WARNING",
}

# Settings are read once at import time, so the environment goes first
os.environ.update(TEST_ENV)

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tracker.api.deps import get_guide_service, get_notifier  # noqa: E402
from tracker.config import Settings, get_settings  # noqa: E402
from tracker.core.security import create_token, hash_password  # noqa: E402
from tracker.core.webhooks import github_signature  # noqa: E402
from tracker.database import Base, get_db  # noqa: E402
from tracker.main import app  # noqa: E402
from tracker.models import Account, DeveloperTag, Profile  # noqa: E402
from tracker.services.auth import claims_for  # noqa: E402
from tracker.services.discord import DiscordNotifier  # noqa: E402
from tracker.services.guide import GuideService  # noqa: E402

# Test database URL (in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

DEVELOPER_PASSWORD = "DevPass123!"


class DiscordRecorder:
    """Fake Discord webhook endpoint recording every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.fail = False
        self._next_id = 1000

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            return httpx.Response(500, json={"message": "Discord is down"})
        if request.method == "POST":
            self._next_id += 1
            return httpx.Response(200, json={"id": str(self._next_id)})
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json={})

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


class GroqRecorder:
    """Fake chat completion endpoint."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.answer = "  Enable **Stance Dance** to use Overpower.  "
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "boom"})
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": self.answer}}]},
        )


@pytest.fixture
def settings() -> Settings:
    """Settings built from the test environment."""
    return get_settings()


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def discord() -> DiscordRecorder:
    """Fake Discord API."""
    return DiscordRecorder()


@pytest.fixture
def groq() -> GroqRecorder:
    """Fake Groq API."""
    return GroqRecorder()


@pytest_asyncio.fixture
async def notifier(discord: DiscordRecorder, settings: Settings) -> AsyncGenerator[DiscordNotifier, None]:
    """Discord notifier talking to the fake Discord API."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(discord.handler)) as http:
        yield DiscordNotifier(http, settings)


@pytest_asyncio.fixture
async def guide_service(groq: GroqRecorder, settings: Settings) -> AsyncGenerator[GuideService, None]:
    """Guide service talking to the fake Groq API."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(groq.handler)) as http:
        yield GuideService(http, settings)


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    notifier: DiscordNotifier,
    guide_service: GuideService,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_guide_service] = lambda: guide_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_developer(session: AsyncSession, tag: DeveloperTag) -> Account:
    account = Account(
        username=tag.value,
        email=f"{tag.value}@example.com",
        password_hash=hash_password(DEVELOPER_PASSWORD),
        developer_type=tag,
    )
    session.add(account)
    await session.flush()

    session.add(
        Profile(
            account_id=account.id,
            username=account.username,
            developer_type=account.developer_type,
        )
    )
    await session.commit()
    await session.refresh(account)
    return account


# Fixture factories for creating test data
@pytest_asyncio.fixture
async def astro(db_session: AsyncSession) -> Account:
    """Create the astro developer account and profile."""
    return await _create_developer(db_session, DeveloperTag.ASTRO)


@pytest_asyncio.fixture
async def bungee(db_session: AsyncSession) -> Account:
    """Create the bungee developer account and profile."""
    return await _create_developer(db_session, DeveloperTag.BUNGEE)


@pytest.fixture
def astro_token(astro: Account) -> str:
    """Create a token for the astro developer."""
    return create_token(claims_for(astro))


@pytest.fixture
def auth_headers(astro_token: str) -> dict[str, str]:
    """Authorization header for the astro developer."""
    return {"Authorization": f"Bearer {astro_token}"}


@pytest.fixture
def ticket_payload() -> Callable[..., dict]:
    """Factory for a valid bug report body."""

    def make(**overrides) -> dict:
        payload = {
            "developer": "astro",
            "wow_class": "mage",
            "rotation": "Frost",
            "pvpve_mode": "pve",
            "level": 70,
            "expansion": "tbc",
            "title": "Frostbolt not cast after Icy Veins",
            "current_behavior": "After Icy Veins the rotation idles for several seconds before casting.",
            "expected_behavior": "Frostbolt should be cast immediately once Icy Veins is active on the player.",
            "logs": "No Lua errors.",
            "discord_username": "tester#0001",
            "sylvanas_username": "tester",
            "reporter_name": "Tester",
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def feature_payload() -> Callable[..., dict]:
    """Factory for a valid feature request body."""

    def make(**overrides) -> dict:
        payload = {
            "developer": "bungee",
            "category": "fishingbot",
            "title": "Pause fishing when a player is nearby",
            "description": "Stop casting the line while another player stands close.",
            "discord_username": "angler#0001",
            "sylvanas_username": "angler",
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def sign_interaction() -> Callable[..., dict[str, str]]:
    """Headers of a Discord interaction signed with the test key."""

    def sign(body: bytes, timestamp: str = "1700000000") -> dict[str, str]:
        signature = DISCORD_PRIVATE_KEY.sign(timestamp.encode("utf-8") + body).hex()
        return {
            "Content-Type": "application/json",
            "X-Signature-Ed25519": signature,
            "X-Signature-Timestamp": timestamp,
        }

    return sign


@pytest.fixture
def sign_push(settings: Settings) -> Callable[..., dict[str, str]]:
    """Headers of a GitHub delivery signed with the configured secret."""

    def sign(body: bytes, event: str = "push") -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-GitHub-Event": event,
            "X-Hub-Signature-256": github_signature(body, settings.github_webhook_secret),
        }

    return sign
