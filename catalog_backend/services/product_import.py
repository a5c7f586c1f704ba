"""
Product import from spreadsheet rows.

Spreadsheets arrive with inconsistent header spellings ("Fabricante/Marca",
"fabricante_marca", "Marca", ...). Each canonical product column has an
ordered alias list; rows are normalized into canonical dicts, rows without
brand and name are rejected, and the rest are bulk-inserted in batches.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.config import get_settings
from catalog_backend.models.product import (
    Product,
    PRODUCT_FIELDS,
    REQUIRED_PRODUCT_FIELDS,
    sanitize_product_payload,
)
from catalog_backend.utils.db_compat import insert_skip_duplicates
from catalog_backend.utils.logger import get_logger

logger = get_logger(__name__)


# Ordered header aliases per canonical column; first match wins.
PRODUCT_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "cat_general": (
        "Cat.General", "Cat General", "cat_general", "catGeneral",
        "Categoria General", "Categoría General",
    ),
    "categoria1": ("Categoria 1", "Categoría 1", "categoria_1", "categoria1"),
    "fabricante_marca": (
        "Fabricante/Marca", "Fabricante", "Marca", "fabricante_marca", "fabricanteMarca",
    ),
    "nombre": ("Nombre", "nombre"),
    "certifica": ("Certifica", "certifica"),
    "sello": ("Sello", "sello"),
    "atributo1": ("Atributo 1", "atributo_1", "atributo1"),
    "atributo2": ("Atributo 2", "atributo_2", "atributo2"),
    "atributo3": ("Atributo 3", "atributo_3", "atributo3"),
    "tienda": ("Tienda", "tienda", "Comercio"),
    "foto_producto": (
        "Fotografia Producto", "Fotografía Producto", "foto_producto", "fotoProducto",
        "Foto Producto", "Imagen",
    ),
    "foto_sello1": (
        "Fotografia Sello 1", "Fotografía Sello 1", "foto_sello_1", "fotoSello1",
        "LogoSello1", "Logo Sello 1",
    ),
    "foto_sello2": (
        "Fotografia Sello 2", "Fotografía Sello 2", "foto_sello_2", "fotoSello2",
        "LogoSello2", "Logo Sello 2",
    ),
}


class Presence(str, enum.Enum):
    """When does a header match count as having a value?"""
    DEFINED = "defined"      # any present key, even with an empty cell
    NON_EMPTY = "non_empty"  # present and not None / ""


def _has_value(row: Mapping[str, Any], key: str, presence: Presence) -> bool:
    if key not in row:
        return False
    if presence is Presence.NON_EMPTY:
        return row[key] is not None and row[key] != ""
    return True


def resolve_header(
    row: Mapping[str, Any],
    aliases: Sequence[str],
    presence: Presence = Presence.DEFINED,
) -> Any:
    """Return the raw value of the first alias found in row, or None.

    Aliases are tried in order against the exact keys first, then again
    case-insensitively.
    """
    for alias in aliases:
        if _has_value(row, alias, presence):
            return row[alias]

    lowered = {str(k).lower(): v for k, v in row.items()}
    for alias in aliases:
        key = alias.lower()
        if _has_value(lowered, key, presence):
            return lowered[key]

    return None


def coerce_cell(value: Any) -> Optional[str]:
    """Trimmed string, or None for missing/blank cells."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


class RowNormalizer:
    """Turns raw spreadsheet rows into canonical product dicts."""

    def __init__(
        self,
        aliases: Mapping[str, Sequence[str]] = PRODUCT_HEADER_ALIASES,
        presence: Presence = Presence.DEFINED,
    ):
        self.aliases = aliases
        self.presence = presence

    def normalize(self, row: Mapping[str, Any]) -> Optional[dict]:
        """Canonical record for row, or None when brand or name is missing.

        Absent optional fields are stored as NULL, never as a placeholder
        string.
        """
        record = {
            name: coerce_cell(resolve_header(row, self.aliases.get(name, (name,)), self.presence))
            for name in PRODUCT_FIELDS
        }
        record = sanitize_product_payload(record)

        if not all(record.get(name) for name in REQUIRED_PRODUCT_FIELDS):
            return None
        return record


def normalize_row(row: Mapping[str, Any], presence: Presence = Presence.DEFINED) -> Optional[dict]:
    return RowNormalizer(presence=presence).normalize(row)


def chunked(items: Sequence, size: int) -> Iterable[Sequence]:
    if size <= 0:
        raise ValueError("Batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start:start + size]


@dataclass
class ImportResult:
    total_rows: int = 0
    total_valid: int = 0
    total_inserted: int = 0
    batches_completed: int = 0
    headers: list[str] = field(default_factory=list)

    @property
    def total_rejected(self) -> int:
        return self.total_rows - self.total_valid

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "total_valid": self.total_valid,
            "total_rejected": self.total_rejected,
            "total_inserted": self.total_inserted,
            "headers": self.headers,
        }


class ImportValidationError(ValueError):
    """No row in the file had both a brand and a name."""

    def __init__(self, message: str, headers: list[str], sample_row: Optional[dict]):
        super().__init__(message)
        self.headers = headers
        self.sample_row = sample_row


class ImportAbortedError(RuntimeError):
    """A batch insert failed; later batches were not attempted.

    ``result`` holds the counts for the batches committed before the failure.
    """

    def __init__(self, message: str, result: ImportResult):
        super().__init__(message)
        self.result = result


class ProductImporter:
    """Bulk-inserts normalized product rows through the given session.

    Each batch is one multi-row INSERT that skips rows conflicting with a
    unique constraint. The products table ships without one, so re-importing
    the same file inserts the rows again.
    """

    def __init__(
        self,
        session: AsyncSession,
        batch_size: Optional[int] = None,
        normalizer: Optional[RowNormalizer] = None,
    ):
        self.session = session
        self.batch_size = get_settings().IMPORT_BATCH_SIZE if batch_size is None else batch_size
        self.normalizer = normalizer or RowNormalizer()

    def _dialect_name(self) -> str:
        return self.session.bind.dialect.name

    async def _insert_batch(self, batch: Sequence[dict]) -> int:
        stmt = insert_skip_duplicates(Product.__table__, self._dialect_name()).values(list(batch))
        result = await self.session.execute(stmt)
        await self.session.commit()
        # Some drivers report -1 when the count is unknown
        return max(result.rowcount or 0, 0)

    async def import_rows(self, rows: Sequence[Mapping[str, Any]]) -> ImportResult:
        result = ImportResult(
            total_rows=len(rows),
            headers=[str(h) for h in rows[0].keys()] if rows else [],
        )

        records = []
        for row in rows:
            record = self.normalizer.normalize(row)
            if record is not None:
                records.append(record)
        result.total_valid = len(records)

        if not records:
            raise ImportValidationError(
                "No valid rows found. Make sure the file has 'Fabricante/Marca' and "
                "'Nombre' columns (or equivalents) and that they contain data.",
                headers=result.headers,
                sample_row=dict(rows[0]) if rows else None,
            )

        if result.total_rejected:
            logger.info(f"Skipping {result.total_rejected} rows without brand or name")

        for batch_number, batch in enumerate(chunked(records, self.batch_size), start=1):
            try:
                inserted = await self._insert_batch(batch)
            except Exception as e:
                await self.session.rollback()
                logger.error(
                    f"Product import aborted at batch {batch_number} "
                    f"({result.total_inserted} rows inserted before failure): {e}"
                )
                raise ImportAbortedError(f"Batch {batch_number} failed: {e}", result) from e

            result.total_inserted += inserted
            result.batches_completed += 1
            logger.debug(f"Batch {batch_number}: inserted {inserted}/{len(batch)} rows")

        logger.info(
            f"Product import finished: rows={result.total_rows} valid={result.total_valid} "
            f"inserted={result.total_inserted} batches={result.batches_completed}"
        )
        return result
