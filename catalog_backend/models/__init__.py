from catalog_backend.models.user import User, Role
from catalog_backend.models.product import Product
from catalog_backend.models.news import News, NewsDestination
from catalog_backend.models.event import Event

__all__ = [
    "User",
    "Role",
    "Product",
    "News",
    "NewsDestination",
    "Event",
]
