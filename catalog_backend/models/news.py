"""
News model - items shown on the storefront's news and advertisers pages
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum
from datetime import datetime
from catalog_backend.database import Base
import enum


class NewsDestination(str, enum.Enum):
    NOVEDADES = "NOVEDADES"
    ANUNCIANTES = "ANUNCIANTES"


class News(Base):
    __tablename__ = "noticias"

    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String, nullable=False)
    contenido = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    file_url = Column(String, nullable=True)
    destino = Column(
        Enum(NewsDestination, native_enum=False),
        nullable=False,
        default=NewsDestination.NOVEDADES,
    )
    autor_id = Column(Integer, ForeignKey("usuarios.id"), nullable=True)

    creado_en = Column(DateTime, default=datetime.utcnow, index=True)
    actualizado_en = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
