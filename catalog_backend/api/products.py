"""
Product catalog API endpoints.

Public routes (``router``) back the storefront; ``admin_router`` holds the
write operations and the spreadsheet import. JSON field names are camelCase
to match the storefront.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.config import get_settings
from catalog_backend.database import get_db
from catalog_backend.models.user import User
from catalog_backend.models.product import (
    Product,
    PRODUCT_FIELDS,
    REQUIRED_PRODUCT_FIELDS,
    sanitize_product_payload,
)
from catalog_backend.api.auth import get_current_admin
from catalog_backend.services.product_import import (
    ImportAbortedError,
    ImportValidationError,
    ProductImporter,
    coerce_cell,
)
from catalog_backend.services.product_search import build_product_filter
from catalog_backend.services.spreadsheet import (
    SpreadsheetError,
    XLSX_MEDIA_TYPE,
    parse_spreadsheet,
    write_xlsx,
)

settings = get_settings()
logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()

CATALOG_ORDER = (Product.fabricante_marca, Product.nombre)


# --- Pydantic Schemas ---

class ProductResponse(BaseModel):
    id: int
    cat_general: Optional[str]
    categoria1: Optional[str]
    fabricante_marca: Optional[str]
    nombre: Optional[str]
    certifica: Optional[str]
    sello: Optional[str]
    atributo1: Optional[str]
    atributo2: Optional[str]
    atributo3: Optional[str]
    tienda: Optional[str]
    foto_producto: Optional[str]
    foto_sello1: Optional[str]
    foto_sello2: Optional[str]

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class ProductCreate(BaseModel):
    cat_general: Optional[str] = None
    categoria1: Optional[str] = None
    fabricante_marca: str
    nombre: str
    certifica: Optional[str] = None
    sello: Optional[str] = None
    atributo1: Optional[str] = None
    atributo2: Optional[str] = None
    atributo3: Optional[str] = None
    tienda: Optional[str] = None
    foto_producto: Optional[str] = None
    foto_sello1: Optional[str] = None
    foto_sello2: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProductUpdate(BaseModel):
    cat_general: Optional[str] = None
    categoria1: Optional[str] = None
    fabricante_marca: Optional[str] = None
    nombre: Optional[str] = None
    certifica: Optional[str] = None
    sello: Optional[str] = None
    atributo1: Optional[str] = None
    atributo2: Optional[str] = None
    atributo3: Optional[str] = None
    tienda: Optional[str] = None
    foto_producto: Optional[str] = None
    foto_sello1: Optional[str] = None
    foto_sello2: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProductPage(BaseModel):
    items: List[ProductResponse]
    total: int
    page: int
    page_size: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# --- Helpers ---

def _clean_payload(data: BaseModel, partial: bool) -> dict:
    payload = sanitize_product_payload(data.model_dump(exclude_unset=partial))
    payload = {key: coerce_cell(value) for key, value in payload.items()}
    for name in REQUIRED_PRODUCT_FIELDS:
        if name in payload and not payload[name]:
            raise HTTPException(status_code=400, detail=f"{to_camel(name)} cannot be empty")
    return payload


async def _get_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    result = await db.execute(select(Product).where(Product.id == product_id))
    return result.scalar_one_or_none()


# --- Public endpoints ---

@router.get("/", response_model=List[ProductResponse])
async def list_products(db: AsyncSession = Depends(get_db)):
    """All products, ordered by brand and name"""
    result = await db.execute(select(Product).order_by(*CATALOG_ORDER))
    return result.scalars().all()


@router.get("/export/excel")
async def export_products_excel(db: AsyncSession = Depends(get_db)):
    """Download the whole catalog as an .xlsx file"""
    result = await db.execute(select(Product).order_by(*CATALOG_ORDER))
    rows = [
        ProductResponse.model_validate(p).model_dump(by_alias=True)
        for p in result.scalars().all()
    ]
    columns = ["id"] + [to_camel(name) for name in PRODUCT_FIELDS]
    content = write_xlsx(rows, columns, sheet_title="Productos")

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="productos.xlsx"'},
    )


@router.get("/paged", response_model=ProductPage)
async def list_products_paged(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, alias="pageSize", ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """One page of the catalog plus the total count"""
    total = (await db.execute(select(func.count(Product.id)))).scalar() or 0
    result = await db.execute(
        select(Product)
        .order_by(*CATALOG_ORDER)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return ProductPage(
        items=[ProductResponse.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/search", response_model=List[ProductResponse])
async def search_products(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Search the catalog. Query parameters: catGeneral, categoria1,
    fabricanteMarca, nombre, certifica, sello, tienda, atributo, q, plus the
    legacy categoria and marca. All matches are case-insensitive substrings.
    """
    where = build_product_filter(request.query_params)
    result = await db.execute(select(Product).where(where).order_by(*CATALOG_ORDER))
    return result.scalars().all()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, db: AsyncSession = Depends(get_db)):
    """Get a single product"""
    if not product_id.isdigit() or int(product_id) <= 0:
        raise HTTPException(status_code=404, detail="Product not found")

    product = await _get_product(db, int(product_id))
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# --- Admin endpoints ---

@admin_router.get("/", response_model=List[ProductResponse])
async def admin_list_products(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    result = await db.execute(select(Product).order_by(*CATALOG_ORDER))
    return result.scalars().all()


@admin_router.post("/", response_model=ProductResponse, status_code=201)
async def create_product(
    data: ProductCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Create a product"""
    product = Product(**_clean_payload(data, partial=False))
    db.add(product)
    await db.commit()
    await db.refresh(product)
    return product


@admin_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Update the fields present in the body"""
    product = await _get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    for key, value in _clean_payload(data, partial=True).items():
        setattr(product, key, value)

    await db.commit()
    await db.refresh(product)
    return product


@admin_router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Delete a product"""
    product = await _get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    await db.delete(product)
    await db.commit()
    return {"message": "Product deleted"}


@admin_router.post("/import-excel")
async def import_products_excel(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """
    Bulk-import products from an .xlsx (first sheet) or .csv upload.
    Header names are matched against known spellings; rows without
    brand and name are skipped.
    """
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="File not received (field 'file')")

    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size: {settings.MAX_UPLOAD_SIZE_MB}MB")

    try:
        rows = parse_spreadsheet(content, file.filename)
    except SpreadsheetError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not rows:
        raise HTTPException(status_code=400, detail="The spreadsheet has no rows")

    logger.info(f"User {current_user.id} importing '{file.filename}' ({len(rows)} rows)")

    importer = ProductImporter(db)
    try:
        result = await importer.import_rows(rows)
    except ImportValidationError as exc:
        return JSONResponse(status_code=400, content=jsonable_encoder({
            "message": str(exc),
            "headers": exc.headers,
            "sample_row": exc.sample_row,
        }))
    except ImportAbortedError as exc:
        return JSONResponse(status_code=500, content={
            "message": "Error importing products from Excel",
            "detail": str(exc),
            "inserted_before_failure": exc.result.total_inserted,
            "batches_completed": exc.result.batches_completed,
        })

    return {"message": "Import completed", **result.to_dict()}
