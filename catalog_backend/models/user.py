"""
User and role models
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from catalog_backend.database import Base

ADMIN_ROLE = "admin"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String, unique=True, nullable=False)
    descripcion = Column(String, nullable=True)


class User(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    rol_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    creado_en = Column(DateTime, default=datetime.utcnow)

    rol = relationship("Role", lazy="selectin")

    @property
    def rol_nombre(self) -> str | None:
        return self.rol.nombre if self.rol else None

    @property
    def is_admin(self) -> bool:
        return self.rol_nombre == ADMIN_ROLE
