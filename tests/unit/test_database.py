"""Tests for the shared engine configuration and the startup check."""

from unittest.mock import AsyncMock, MagicMock

from config.settings import settings
from src.bk_common.database import check_database, engine


def test_pool_sized_from_settings() -> None:
    assert engine.pool.size() == settings.DB_POOL_SIZE


async def test_check_database_runs_probe_query() -> None:
    conn = AsyncMock()
    bind = MagicMock()
    bind.connect.return_value.__aenter__.return_value = conn
    await check_database(bind)
    conn.execute.assert_awaited_once()
    assert str(conn.execute.await_args.args[0]) == "SELECT 1"
