# rateorant/models/enums.py
from enum import Enum


class UserRole(str, Enum):
    """User roles"""
    USER = "user"
    RESTAURANT_OWNER = "restaurant_owner"
