# rateorant/controllers/detail.py
import logging
from typing import Dict, List, Optional

from ..models import EntityId, RatingAggregate, Restaurant, Review, id_key, parse_items
from ..services import favorites as favorite_service
from ..services import restaurants as restaurant_service
from ..services import reviews as review_service
from ..services import users as user_service
from ..session import Session
from ..utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)


class RestaurantDetailController:
    def __init__(self, client: HTTPClient, session: Session, restaurant_id: EntityId):
        self.client = client
        self.session = session
        self.restaurant_id = restaurant_id
        self.restaurant: Optional[Restaurant] = None
        self.reviews: List[Review] = []
        self.reviewers: Dict[str, str] = {}
        self.is_favorite: Optional[bool] = None
        self.error = ""

    async def load(self) -> Optional[Restaurant]:
        try:
            data = await restaurant_service.get_restaurant(self.client, self.restaurant_id)
            self.restaurant = Restaurant.model_validate(data) if data else None
            reviews = await review_service.get_reviews(self.client, self.restaurant_id)
            self.reviews = parse_items(Review, reviews)
        except (APIError, ValueError) as e:
            logger.error(f"Failed to load restaurant {self.restaurant_id}: {e}")
            self.error = "Failed to load restaurant details"
        return self.restaurant

    async def load_reviewers(self) -> Dict[str, str]:
        """Usernames for every reviewer, through the cached user lookup"""
        for user_id in {id_key(r.user_id) for r in self.reviews if r.user_id is not None}:
            if user_id not in self.reviewers:
                user = await user_service.get_user(self.client, user_id)
                self.reviewers[user_id] = user.get("username") or f"User {user_id}"
        return self.reviewers

    async def load_favorite(self) -> Optional[bool]:
        """Favorite status for signed-in diners; stays None when unknown."""
        if self.is_owner or not self.session.token:
            return None
        try:
            data = await favorite_service.check_favorite(self.client, self.restaurant_id, self.session.token)
        except APIError as e:
            logger.warning(f"Could not check favorite for restaurant {self.restaurant_id}: {e}")
            return None
        if isinstance(data, dict):
            self.is_favorite = bool(data.get("is_favorite"))
        return self.is_favorite

    @property
    def is_owner(self) -> bool:
        identity = self.session.identity
        return bool(self.restaurant and identity and identity.same_id(self.restaurant.owner_id))

    @property
    def rating(self) -> RatingAggregate:
        return RatingAggregate.from_ratings([r.rating for r in self.reviews])

    def can_delete(self, review: Review) -> bool:
        identity = self.session.identity
        return not self.is_owner and identity is not None and identity.same_id(review.user_id)

    def add_review(self, review: Review) -> None:
        self.reviews = [*self.reviews, review]

    def remove_review(self, review_id: EntityId) -> None:
        key = id_key(review_id)
        self.reviews = [r for r in self.reviews if id_key(r.id) != key]

    def find_review(self, review_id: EntityId) -> Optional[Review]:
        key = id_key(review_id)
        return next((r for r in self.reviews if id_key(r.id) == key), None)
