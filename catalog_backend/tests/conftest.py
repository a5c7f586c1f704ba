"""
Test fixtures - in-memory SQLite database + authenticated HTTP client
"""
import io

import openpyxl
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from catalog_backend.database import Base, get_db, register_sqlite_functions
from catalog_backend.main import app
from catalog_backend.api.auth import get_password_hash, create_access_token
from catalog_backend.models.user import User, Role


def make_xlsx(headers: list, rows: list[list], sheet_title: str = "Hoja1") -> bytes:
    """Build an .xlsx file in memory"""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(headers)
    for row in rows:
        ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def xlsx_bytes():
    return make_xlsx


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    register_sqlite_functions(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: admin role, one admin and one non-admin user"""
    admin_role = Role(nombre="admin", descripcion="Administrador del sistema")
    admin = User(
        nombre="Test Admin",
        email="admin@test.com",
        password_hash=get_password_hash("testpass123"),
        rol=admin_role,
    )
    viewer = User(
        nombre="Viewer",
        email="viewer@test.com",
        password_hash=get_password_hash("viewerpass"),
    )

    db_session.add_all([admin_role, admin, viewer])
    await db_session.commit()

    return {"role": admin_role, "admin": admin, "viewer": viewer}


@pytest_asyncio.fixture()
async def client(db_session, seed_data):
    """Admin-authenticated httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    token = create_access_token(data={"sub": seed_data["admin"].email})

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauth_client(db_session):
    """Unauthenticated httpx AsyncClient"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
