"""
Event model - calendar entries published on the storefront
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from catalog_backend.database import Base


class Event(Base):
    __tablename__ = "eventos"

    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String, nullable=False)
    descripcion = Column(Text, nullable=True)
    ubicacion = Column(String, nullable=True)
    inicio = Column(DateTime(timezone=True), nullable=False, index=True)
    fin = Column(DateTime(timezone=True), nullable=True)
    todo_el_dia = Column(Boolean, default=False)
    creado_por_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)
