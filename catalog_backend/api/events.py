"""
Events API endpoints - public calendar plus admin management
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.database import get_db
from catalog_backend.models.user import User
from catalog_backend.models.event import Event
from catalog_backend.api.auth import get_current_admin

logger = logging.getLogger(__name__)

router = APIRouter()


class EventResponse(BaseModel):
    id: int
    titulo: str
    descripcion: Optional[str]
    ubicacion: Optional[str]
    inicio: datetime
    fin: Optional[datetime]
    todo_el_dia: bool
    creado_por_id: Optional[int]

    class Config:
        from_attributes = True


class EventCreate(BaseModel):
    titulo: Optional[str] = None
    descripcion: Optional[str] = None
    ubicacion: Optional[str] = None
    inicio: Optional[datetime] = None
    fin: Optional[datetime] = None
    todo_el_dia: bool = False


class EventUpdate(BaseModel):
    titulo: Optional[str] = None
    descripcion: Optional[str] = None
    ubicacion: Optional[str] = None
    inicio: Optional[datetime] = None
    fin: Optional[datetime] = None
    todo_el_dia: Optional[bool] = None


async def _get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    result = await db.execute(select(Event).where(Event.id == event_id))
    return result.scalar_one_or_none()


@router.get("/", response_model=List[EventResponse])
async def list_events(
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    db: AsyncSession = Depends(get_db),
):
    """List events by start time. Optional ?from=2026-01-01&to=2026-12-31"""
    query = select(Event).order_by(Event.inicio.asc())
    if date_from:
        query = query.where(Event.inicio >= date_from)
    if date_to:
        query = query.where(Event.inicio <= date_to)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, db: AsyncSession = Depends(get_db)):
    event = await _get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("/admin", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Create an event"""
    if not data.titulo or not data.inicio:
        raise HTTPException(status_code=400, detail="titulo and inicio are required")

    event = Event(
        titulo=data.titulo,
        descripcion=data.descripcion,
        ubicacion=data.ubicacion,
        inicio=data.inicio,
        fin=data.fin,
        todo_el_dia=data.todo_el_dia,
        creado_por_id=current_user.id,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


@router.put("/admin/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    data: EventUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Update the fields present in the body; send fin=null to clear it"""
    event = await _get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    updates = data.model_dump(exclude_unset=True)
    for required in ("titulo", "inicio", "todo_el_dia"):
        if required in updates and updates[required] is None:
            updates.pop(required)
    if "titulo" in updates and not updates["titulo"]:
        raise HTTPException(status_code=400, detail="titulo cannot be empty")

    for key, value in updates.items():
        setattr(event, key, value)

    await db.commit()
    await db.refresh(event)
    return event


@router.delete("/admin/{event_id}")
async def delete_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    event = await _get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    await db.delete(event)
    await db.commit()
    return {"ok": True}
