"""
Authentication API endpoints and dependencies (admin-only login)
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pwdlib import PasswordHash
from pwdlib.hashers.bcrypt import BcryptHasher
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.config import get_settings
from catalog_backend.database import get_db
from catalog_backend.models.user import User

settings = get_settings()
logger = logging.getLogger(__name__)

router = APIRouter()

password_hash = PasswordHash((BcryptHasher(),))
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


class UserResponse(BaseModel):
    id: int
    nombre: str
    email: str
    rol: Optional[str]


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    token: str
    user: UserResponse


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return password_hash.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def user_to_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, nombre=user.nombre, email=user.email, rol=user.rol_nombre)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user"""
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token rejected: {e}")
        raise credentials_error

    email = payload.get("sub")
    if not email:
        raise credentials_error

    user = await get_user_by_email(db, email)
    if user is None:
        raise credentials_error
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access only")
    return current_user


async def _read_credentials(request: Request) -> tuple[str, str]:
    """Accept the OAuth2 form (username/password) or a JSON body (email/password)"""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        email = body.get("email") or body.get("username")
        password = body.get("password")
    else:
        form = await request.form()
        email = form.get("username") or form.get("email")
        password = form.get("password")

    if not email or not password:
        raise HTTPException(status_code=400, detail="email and password are required")
    return str(email), str(password)


@router.post("/login", response_model=Token)
async def login(request: Request, db: AsyncSession = Depends(get_db)):
    """Log in an administrator and return a bearer token"""
    email, password = await _read_credentials(request)

    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {email}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Only administrators can log in")

    access_token = create_access_token(
        data={"sub": user.email, "id": user.id, "rol_id": user.rol_id, "rol": user.rol_nombre}
    )
    return Token(access_token=access_token, token=access_token, user=user_to_response(user))


@router.post("/register")
async def register():
    """Public sign-up is closed; administrators create accounts"""
    raise HTTPException(
        status_code=403,
        detail="Public registration is disabled. Only an administrator can create accounts.",
    )


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    return user_to_response(current_user)
