"""
Admin user management API endpoints
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.database import get_db
from catalog_backend.models.user import User, Role, ADMIN_ROLE
from catalog_backend.api.auth import (
    UserResponse,
    get_current_admin,
    get_password_hash,
    get_user_by_email,
    user_to_response,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class AdminCreate(BaseModel):
    nombre: str
    email: str
    password: str


class AdminUpdate(BaseModel):
    nombre: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


async def _get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


@router.get("/", response_model=List[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """List all users"""
    result = await db.execute(select(User).order_by(User.id))
    return [user_to_response(u) for u in result.scalars().all()]


@router.post("/", response_model=UserResponse, status_code=201)
async def create_admin(
    data: AdminCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Create a new administrator account"""
    if not data.nombre or not data.email or not data.password:
        raise HTTPException(status_code=400, detail="nombre, email and password are required")

    if await get_user_by_email(db, data.email):
        raise HTTPException(status_code=409, detail="A user with that email already exists")

    result = await db.execute(select(Role).where(Role.nombre == ADMIN_ROLE))
    admin_role = result.scalar_one_or_none()
    if not admin_role:
        raise HTTPException(status_code=500, detail="The 'admin' role does not exist")

    user = User(
        nombre=data.nombre,
        email=data.email,
        password_hash=get_password_hash(data.password),
        rol=admin_role,
    )
    db.add(user)
    await db.commit()

    logger.info(f"Admin {current_user.email} created admin {user.email}")
    return user_to_response(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_admin(
    user_id: int,
    data: AdminUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Update name, email or password of an account"""
    if user_id <= 0:
        raise HTTPException(status_code=400, detail="Invalid id")

    user = await _get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if data.email:
        existing = await get_user_by_email(db, data.email)
        if existing and existing.id != user_id:
            raise HTTPException(status_code=409, detail="A user with that email already exists")
        user.email = data.email

    if data.nombre is not None:
        user.nombre = data.nombre
    if data.password:
        user.password_hash = get_password_hash(data.password)

    await db.commit()
    return user_to_response(user)


@router.delete("/{user_id}")
async def delete_admin(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_admin)
):
    """Delete an account (never your own)"""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    user = await _get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    await db.delete(user)
    await db.commit()
    return {"message": "User deleted"}
