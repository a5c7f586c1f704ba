"""
News API endpoints
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.database import get_db
from catalog_backend.models.user import User
from catalog_backend.models.news import News, NewsDestination
from catalog_backend.api.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()
admin_router = APIRouter()


class NewsResponse(BaseModel):
    id: int
    titulo: str
    contenido: Optional[str]
    image_url: Optional[str]
    file_url: Optional[str]
    destino: NewsDestination
    autor_id: Optional[int]
    creado_en: Optional[datetime]
    actualizado_en: Optional[datetime]

    class Config:
        from_attributes = True


class NewsCreate(BaseModel):
    titulo: Optional[str] = None
    contenido: Optional[str] = None
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    destino: Optional[NewsDestination] = None


class NewsUpdate(BaseModel):
    titulo: Optional[str] = None
    contenido: Optional[str] = None
    image_url: Optional[str] = None
    file_url: Optional[str] = None
    destino: Optional[NewsDestination] = None


async def _get_news(db: AsyncSession, news_id: int) -> Optional[News]:
    result = await db.execute(select(News).where(News.id == news_id))
    return result.scalar_one_or_none()


@router.get("/", response_model=List[NewsResponse])
async def list_news(
    destino: Optional[NewsDestination] = None,
    db: AsyncSession = Depends(get_db),
):
    """List news, newest first. destino: NOVEDADES | ANUNCIANTES"""
    query = select(News).order_by(News.creado_en.desc(), News.id.desc())
    if destino:
        query = query.where(News.destino == destino)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{news_id}", response_model=NewsResponse)
async def get_news(news_id: int, db: AsyncSession = Depends(get_db)):
    news = await _get_news(db, news_id)
    if not news:
        raise HTTPException(status_code=404, detail="News item not found")
    return news


@admin_router.post("/", response_model=NewsResponse, status_code=201)
async def create_news(
    data: NewsCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Publish a news item; the caller is recorded as author"""
    if not data.titulo:
        raise HTTPException(status_code=400, detail="titulo is required")

    news = News(
        titulo=data.titulo,
        contenido=data.contenido or None,
        image_url=data.image_url or None,
        file_url=data.file_url or None,
        destino=data.destino or NewsDestination.NOVEDADES,
        autor_id=current_user.id,
    )
    db.add(news)
    await db.commit()
    await db.refresh(news)
    return news


@admin_router.put("/{news_id}", response_model=NewsResponse)
async def update_news(
    news_id: int,
    data: NewsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Update a news item; destino is kept unless a new one is sent"""
    news = await _get_news(db, news_id)
    if not news:
        raise HTTPException(status_code=404, detail="News item not found")

    updates = data.model_dump(exclude_unset=True)
    if "titulo" in updates and not updates["titulo"]:
        raise HTTPException(status_code=400, detail="titulo cannot be empty")
    if not updates.get("destino"):
        updates.pop("destino", None)

    for key, value in updates.items():
        setattr(news, key, value)
    news.actualizado_en = datetime.utcnow()

    await db.commit()
    await db.refresh(news)
    return news


@admin_router.delete("/{news_id}")
async def delete_news(
    news_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    news = await _get_news(db, news_id)
    if not news:
        raise HTTPException(status_code=404, detail="News item not found")

    await db.delete(news)
    await db.commit()
    return {"message": "News item deleted"}
