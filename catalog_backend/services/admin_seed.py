"""
One-time creation of the admin role and default admin account.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_backend.config import Settings
from catalog_backend.api.auth import get_password_hash
from catalog_backend.models.user import User, Role, ADMIN_ROLE
from catalog_backend.utils.logger import get_logger

logger = get_logger(__name__)


async def ensure_admin_user(session: AsyncSession, config: Settings) -> User:
    """Create the 'admin' role and a default admin if they are missing.

    Safe to run on every startup: an existing admin is returned untouched.
    """
    result = await session.execute(select(Role).where(Role.nombre == ADMIN_ROLE))
    admin_role = result.scalar_one_or_none()
    if not admin_role:
        admin_role = Role(nombre=ADMIN_ROLE, descripcion="Administrador del sistema")
        session.add(admin_role)
        await session.flush()
        logger.info(f"Created role 'admin' (id={admin_role.id})")

    result = await session.execute(select(User).where(User.rol_id == admin_role.id).limit(1))
    existing = result.scalar_one_or_none()
    if existing:
        logger.info(f"Admin user already present: {existing.email}")
        await session.commit()
        return existing

    admin = User(
        nombre=config.DEFAULT_ADMIN_NAME,
        email=config.DEFAULT_ADMIN_EMAIL,
        password_hash=get_password_hash(config.DEFAULT_ADMIN_PASSWORD),
        rol=admin_role,
    )
    session.add(admin)
    await session.commit()
    logger.info(f"Created default admin user: {config.DEFAULT_ADMIN_EMAIL}")
    return admin
