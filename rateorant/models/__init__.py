# rateorant/models/__init__.py
from .base import BaseSchema, EntityId, id_key, parse_items
from .enums import UserRole
from .user import Identity
from .restaurant import Category, Restaurant, RatingAggregate
from .review import Review, ReviewCreate, Favorite
from .notification import Notification

__all__ = [
    "BaseSchema",
    "EntityId",
    "id_key",
    "parse_items",
    "UserRole",
    "Identity",
    "Category",
    "Restaurant",
    "RatingAggregate",
    "Review",
    "ReviewCreate",
    "Favorite",
    "Notification",
]
