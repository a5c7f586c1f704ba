"""
Delete every product from the catalog.

Usage:
    python scripts/clear_products.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from catalog_backend.config import get_settings
from catalog_backend.database import create_engine_from_settings, create_session_factory
from catalog_backend.models import Product


async def clear_products() -> int:
    engine = create_engine_from_settings(get_settings())
    async with create_session_factory(engine)() as session:
        result = await session.execute(delete(Product))
        await session.commit()
    await engine.dispose()
    return result.rowcount


if __name__ == "__main__":
    deleted = asyncio.run(clear_products())
    print(f"Products deleted: {deleted}")
