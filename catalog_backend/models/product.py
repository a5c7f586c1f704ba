"""
Product model
"""
from sqlalchemy import Column, Integer, String
from catalog_backend.database import Base

# Canonical product columns. Anything outside this set (e.g. the dropped
# "existe" flag from older spreadsheets and front-ends) is stripped before
# a payload reaches the table.
PRODUCT_FIELDS: tuple[str, ...] = (
    "cat_general",
    "categoria1",
    "fabricante_marca",
    "nombre",
    "certifica",
    "sello",
    "atributo1",
    "atributo2",
    "atributo3",
    "tienda",
    "foto_producto",
    "foto_sello1",
    "foto_sello2",
)

# Columns covered by the free-text "q" search
PRODUCT_TEXT_FIELDS: tuple[str, ...] = PRODUCT_FIELDS[:10]

REQUIRED_PRODUCT_FIELDS: tuple[str, ...] = ("fabricante_marca", "nombre")


def sanitize_product_payload(payload: dict | None) -> dict:
    """Keep only canonical product columns"""
    if not payload:
        return {}
    return {key: value for key, value in payload.items() if key in PRODUCT_FIELDS}


class Product(Base):
    __tablename__ = "productos"

    id = Column(Integer, primary_key=True, index=True)
    cat_general = Column(String, nullable=True)
    categoria1 = Column(String, nullable=True)
    fabricante_marca = Column(String, nullable=False, index=True)
    nombre = Column(String, nullable=False, index=True)
    certifica = Column(String, nullable=True)
    sello = Column(String, nullable=True)
    atributo1 = Column(String, nullable=True)
    atributo2 = Column(String, nullable=True)
    atributo3 = Column(String, nullable=True)
    tienda = Column(String, nullable=True)

    # Image references (URLs or file names), never binary data
    foto_producto = Column(String, nullable=True)
    foto_sello1 = Column(String, nullable=True)
    foto_sello2 = Column(String, nullable=True)
