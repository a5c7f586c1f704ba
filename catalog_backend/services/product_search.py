"""
Product search filter built from storefront query parameters.

Parameter names are the storefront's (camelCase, Spanish). Older front-end
builds still send ``categoria``, ``marca``, ``gf`` and ``pesaj``; the first
two are mapped onto current columns, the last two no longer exist in the
catalog and are ignored.
"""
import logging
from typing import Mapping, Optional

from sqlalchemy import and_, or_, true
from sqlalchemy.sql import ColumnElement

from catalog_backend.models.product import Product, PRODUCT_TEXT_FIELDS
from catalog_backend.utils.db_compat import contains_insensitive

logger = logging.getLogger(__name__)

# query parameter -> column, each a substring match ANDed with the rest
FIELD_FILTERS: dict[str, str] = {
    "catGeneral": "cat_general",
    "categoria1": "categoria1",
    "fabricanteMarca": "fabricante_marca",
    "nombre": "nombre",
    "certifica": "certifica",
    "sello": "sello",
    "tienda": "tienda",
}

ATTRIBUTE_FIELDS = ("atributo1", "atributo2", "atributo3")
LEGACY_CATEGORY_FIELDS = ("cat_general", "categoria1")
DROPPED_FILTERS = ("gf", "pesaj")

SEARCH_PARAMS = tuple(FIELD_FILTERS) + ("atributo", "q", "categoria", "marca") + DROPPED_FILTERS


def _param(params: Mapping[str, str], name: str) -> Optional[str]:
    value = params.get(name)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _any_contains(columns, value: str) -> ColumnElement:
    return or_(*(contains_insensitive(getattr(Product, col), value) for col in columns))


def build_product_filter(params: Mapping[str, str]) -> ColumnElement:
    """Combine the active search parameters into one WHERE clause.

    With no active parameter the clause matches every product.
    """
    clauses: list[ColumnElement] = []

    categoria = _param(params, "categoria")
    if categoria:
        clauses.append(_any_contains(LEGACY_CATEGORY_FIELDS, categoria))

    for name, column in FIELD_FILTERS.items():
        value = _param(params, name)
        if name == "fabricanteMarca" and not value:
            value = _param(params, "marca")
        if value:
            clauses.append(contains_insensitive(getattr(Product, column), value))

    atributo = _param(params, "atributo")
    if atributo:
        clauses.append(_any_contains(ATTRIBUTE_FIELDS, atributo))

    q = _param(params, "q")
    if q:
        clauses.append(_any_contains(PRODUCT_TEXT_FIELDS, q))

    dropped = [name for name in DROPPED_FILTERS if _param(params, name)]
    if dropped:
        logger.warning(f"Ignoring legacy filters no longer in the catalog: {', '.join(dropped)}")

    if not clauses:
        return true()
    return and_(*clauses)
