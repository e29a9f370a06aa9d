# rateorant/models/restaurant.py
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from pydantic import Field
from .base import BaseSchema, EntityId


def round_half_up(value: float, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


class Category(BaseSchema):
    id: EntityId
    category: str


class Restaurant(BaseSchema):
    id: EntityId
    name: str
    description: Optional[str] = ""
    location: Optional[str] = ""
    image_url: Optional[str] = None
    owner_id: Optional[EntityId] = None
    categories: List[Category] = Field(default_factory=list)


class RatingAggregate(BaseSchema):
    """Sum and count of a restaurant's review ratings"""
    total: int = 0
    count: int = 0

    @classmethod
    def from_ratings(cls, ratings: List[int]) -> "RatingAggregate":
        return cls(total=sum(ratings), count=len(ratings))

    @property
    def average(self) -> float:
        """Mean rating rounded half-up to one decimal, 0 when there are no reviews"""
        if self.count == 0:
            return 0.0
        return float(round_half_up(self.total / self.count, 1))

    @property
    def stars(self) -> str:
        return "⭐" * int(round_half_up(self.average))

    @property
    def label(self) -> str:
        noun = "review" if self.count == 1 else "reviews"
        return f"{self.count} {noun}"
