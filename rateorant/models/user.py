# rateorant/models/user.py
from typing import Any, Optional
from pydantic import ConfigDict
from .base import BaseSchema, EntityId, id_key
from .enums import UserRole


class Identity(BaseSchema):
    """Signed-in principal decoded from the bearer credential"""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: EntityId
    username: Optional[str] = None
    email: Optional[str] = None
    role: str = UserRole.USER.value

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.RESTAURANT_OWNER

    def same_id(self, other: Any) -> bool:
        return id_key(self.id) == id_key(other)
