"""Async PostgreSQL access shared by every bk_* package.

One engine per process. Repositories never open sessions themselves: routers
obtain one per request through ``get_db_session`` and pass it down explicitly.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the ORM mirrors used by Alembic and auth lookups."""


def build_engine() -> AsyncEngine:
    # statement_timeout bounds any single ledger query; asyncpg applies it per connection
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        pool_pre_ping=True,
        connect_args={
            "server_settings": {"statement_timeout": str(settings.DB_STATEMENT_TIMEOUT_MS)}
        },
    )


engine: AsyncEngine = build_engine()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def check_database(bind: AsyncEngine | None = None) -> None:
    """Fail fast at startup when PostgreSQL is unreachable."""
    async with (bind or engine).connect() as conn:
        await conn.execute(text("SELECT 1"))


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Services commit; anything left open is rolled back on close."""
    async with async_session_factory() as session:
        yield session
