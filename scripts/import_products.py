"""
Import products from a workbook on disk.

Uses the same importer as the admin upload endpoint. When the workbook has a
sheet named after IMPORT_PREFERRED_SHEET (default "Final_02-26") that sheet is
read, otherwise the first one.

Usage:
    python scripts/import_products.py data/BaseProductos_v2.0.xlsx [sheet]
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalog_backend.config import get_settings
from catalog_backend.database import create_engine_from_settings, create_session_factory, create_tables
from catalog_backend.models import Product  # noqa: F401 - registers the table
from catalog_backend.services.product_import import (
    ImportAbortedError,
    ImportValidationError,
    Presence,
    ProductImporter,
    RowNormalizer,
)
from catalog_backend.services.spreadsheet import SpreadsheetError, parse_spreadsheet
from catalog_backend.utils.logger import get_logger

logger = get_logger("import_products")


async def import_file(engine, path: Path, sheet_name: str) -> int:
    rows = parse_spreadsheet(path.read_bytes(), path.name, sheet_name=sheet_name)
    logger.info(f"Importing {len(rows)} rows from {path.name}")

    await create_tables(engine)

    async with create_session_factory(engine)() as session:
        # A blank cell under one alias falls through to the next alias
        importer = ProductImporter(session, normalizer=RowNormalizer(presence=Presence.NON_EMPTY))
        result = await importer.import_rows(rows)

    logger.info(
        f"Import completed: rows={result.total_rows} valid={result.total_valid} "
        f"inserted={result.total_inserted}"
    )
    return result.total_inserted


async def main(argv: list[str]) -> int:
    if len(argv) < 2:
        print(__doc__)
        return 2

    path = Path(argv[1])
    if not path.exists():
        logger.error(f"File not found: {path}")
        return 1

    settings = get_settings()
    sheet_name = argv[2] if len(argv) > 2 else settings.IMPORT_PREFERRED_SHEET

    engine = create_engine_from_settings(settings)
    try:
        await import_file(engine, path, sheet_name)
    except SpreadsheetError as e:
        logger.error(f"Cannot read {path.name}: {e}")
        return 1
    except ImportValidationError as e:
        logger.error(f"{e} Headers found: {', '.join(e.headers)}")
        return 1
    except ImportAbortedError as e:
        logger.error(f"{e} ({e.result.total_inserted} rows were inserted before the failure)")
        return 1
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv)))
