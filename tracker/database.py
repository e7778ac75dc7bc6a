"""Database engine, session factory and declarative base."""

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tracker.config import settings


class Base(DeclarativeBase):
    """Declarative base for all models."""


# Created on first use and reused for the lifetime of the process
engine: Optional[AsyncEngine] = None
session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def get_engine() -> AsyncEngine:
    """Get the shared engine, creating it on first call."""
    global engine, session_maker

    if engine is None:
        options = {"echo": settings.database_echo, "pool_pre_ping": True}
        if not settings.database_url.startswith("sqlite"):
            options["pool_size"] = settings.database_pool_size
            options["max_overflow"] = settings.database_max_overflow

        engine = create_async_engine(settings.database_url, **options)
        session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return engine


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Get the shared session factory."""
    get_engine()
    return session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency; commits on success, rolls back on error."""
    async with get_session_maker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables that do not exist yet (development convenience)."""
    # Import models so they register on the metadata
    import tracker.models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the engine and its connection pool."""
    global engine, session_maker

    if engine is not None:
        await engine.dispose()

    engine = None
    session_maker = None
