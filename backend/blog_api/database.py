"""
Blog API - Database Engine and Session Factory
================================================

What:  Async SQLAlchemy engine, session factory and declarative Base.
How:   create_engine_from_settings() builds the engine from a Settings object;
       build_session_factory() wraps it in an async_sessionmaker. The SQL post
       repository opens one session per operation from that factory.

Connection Pooling:
    pool_size / max_overflow / pool_pre_ping come from settings.
    SQLite (aiosqlite) runs without these options; its default pool does not
    accept them.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from blog_api.config import Settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the async engine described by settings.database_url."""
    options = {"echo": settings.log_level == "DEBUG"}

    if not settings.uses_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    return create_async_engine(settings.database_url, **options)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps attributes readable after commit,
    # outside the session that loaded them.
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create every table registered on Base.metadata if it does not exist.

    Runs once during startup. There is no migration step: existing tables are
    left untouched.
    """
    # Import registers the Post model on Base.metadata
    from blog_api.models import post  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections. Called from the lifespan on shutdown."""
    await engine.dispose()
