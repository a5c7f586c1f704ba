"""
Admin seed tests - the admin role and default account are created once.
"""
import pytest
from sqlalchemy import func, select

from catalog_backend.api.auth import verify_password
from catalog_backend.config import get_settings
from catalog_backend.models.user import User, Role, ADMIN_ROLE
from catalog_backend.services.admin_seed import ensure_admin_user


async def count_rows(db_session, model) -> int:
    return (await db_session.execute(select(func.count()).select_from(model))).scalar_one()


class TestEnsureAdminUser:

    @pytest.mark.asyncio
    async def test_creates_role_and_admin_on_empty_database(self, db_session):
        settings = get_settings()
        admin = await ensure_admin_user(db_session, settings)

        assert admin.email == settings.DEFAULT_ADMIN_EMAIL
        assert admin.nombre == settings.DEFAULT_ADMIN_NAME
        assert admin.is_admin
        assert verify_password(settings.DEFAULT_ADMIN_PASSWORD, admin.password_hash)

        role = (await db_session.execute(select(Role).where(Role.nombre == ADMIN_ROLE))).scalar_one()
        assert admin.rol_id == role.id
        assert await count_rows(db_session, User) == 1

    @pytest.mark.asyncio
    async def test_second_run_is_a_no_op(self, db_session):
        settings = get_settings()
        first = await ensure_admin_user(db_session, settings)
        second = await ensure_admin_user(db_session, settings)

        assert second.id == first.id
        assert await count_rows(db_session, User) == 1
        assert await count_rows(db_session, Role) == 1

    @pytest.mark.asyncio
    async def test_existing_admin_is_kept(self, db_session, seed_data):
        admin = await ensure_admin_user(db_session, get_settings())

        assert admin.id == seed_data["admin"].id
        assert admin.email == "admin@test.com"
        assert await count_rows(db_session, User) == 2
        assert await count_rows(db_session, Role) == 1
