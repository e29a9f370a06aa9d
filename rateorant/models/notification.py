# rateorant/models/notification.py
from datetime import datetime
from typing import Optional
from .base import BaseSchema, EntityId


class Notification(BaseSchema):
    id: EntityId
    message: str = ""
    restaurant_id: Optional[EntityId] = None
    read: bool = False
    created_at: Optional[datetime] = None
