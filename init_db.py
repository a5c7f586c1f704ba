"""Initialize database tables and the default admin account"""
import asyncio
from catalog_backend.config import get_settings
from catalog_backend.database import create_engine_from_settings, create_session_factory, create_tables
from catalog_backend.models import *  # noqa: F401,F403 - Import all models to register them
from catalog_backend.services.admin_seed import ensure_admin_user


async def init():
    settings = get_settings()
    engine = create_engine_from_settings(settings)

    await create_tables(engine)
    print("Database tables created successfully.")

    async with create_session_factory(engine)() as session:
        admin = await ensure_admin_user(session, settings)
    print(f"Admin account: {admin.email}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
