# rateorant/models/review.py
from datetime import datetime
from typing import Optional
from pydantic import Field
from .base import BaseSchema, EntityId


class Review(BaseSchema):
    id: EntityId
    restaurant_id: Optional[EntityId] = None
    user_id: Optional[EntityId] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: Optional[datetime] = None


class ReviewCreate(BaseSchema):
    rating: int = Field(5, ge=1, le=5)
    comment: str = ""


class Favorite(BaseSchema):
    restaurant_id: EntityId
    user_id: Optional[EntityId] = None
