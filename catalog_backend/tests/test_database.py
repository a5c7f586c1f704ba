"""
Engine construction and application lifespan tests.
"""
import pytest
from sqlalchemy import func, select

from catalog_backend import main
from catalog_backend.config import Settings
from catalog_backend.database import _get_async_url, create_engine_from_settings
from catalog_backend.models.user import User


def test_async_url_rewrite():
    assert _get_async_url("sqlite:///./kccr.db") == "sqlite+aiosqlite:///./kccr.db"
    assert _get_async_url("postgresql://u:p@db/kccr") == "postgresql+asyncpg://u:p@db/kccr"
    assert _get_async_url("postgresql+asyncpg://u:p@db/kccr") == "postgresql+asyncpg://u:p@db/kccr"


@pytest.mark.asyncio
async def test_sqlite_lower_handles_accents():
    engine = create_engine_from_settings(Settings(DATABASE_URL="sqlite:///:memory:"))
    try:
        async with engine.connect() as conn:
            lowered = (await conn.execute(select(func.lower("ÁCIDO CÍTRICO Ñandú")))).scalar_one()
            missing = (await conn.execute(select(func.lower(None)))).scalar_one()
    finally:
        await engine.dispose()

    assert lowered == "ácido cítrico ñandú"
    assert missing is None


@pytest.mark.asyncio
async def test_lifespan_opens_store_and_seeds_admin(monkeypatch):
    monkeypatch.setattr(main.settings, "DATABASE_URL", "sqlite:///:memory:")

    async with main.lifespan(main.app):
        assert main.app.state.engine.dialect.name == "sqlite"
        async with main.app.state.session_factory() as session:
            emails = (await session.execute(select(User.email))).scalars().all()

    assert emails == [main.settings.DEFAULT_ADMIN_EMAIL]
