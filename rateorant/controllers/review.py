# rateorant/controllers/review.py
import logging
from typing import Optional

from pydantic import ValidationError

from ..models import EntityId, Review, ReviewCreate
from ..services import reviews as review_service
from ..session import Session
from ..utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)

DEFAULT_RATING = 5


class ReviewFormController:
    """Rating and optional comment for one restaurant"""

    def __init__(self, client: HTTPClient, session: Session, restaurant_id: EntityId):
        self.client = client
        self.session = session
        self.restaurant_id = restaurant_id
        self.rating = DEFAULT_RATING
        self.comment = ""
        self.error = ""
        self.success = ""

    def set_rating(self, rating) -> None:
        rating = int(rating)
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")
        self.rating = rating

    def set_comment(self, comment: Optional[str]) -> None:
        self.comment = (comment or "").strip()

    def reset(self) -> None:
        self.rating = DEFAULT_RATING
        self.comment = ""

    async def submit(self) -> Optional[Review]:
        self.error = ""
        self.success = ""

        if not self.session.is_authenticated:
            self.error = "You must be logged in to leave a review"
            return None

        payload = ReviewCreate(rating=self.rating, comment=self.comment).model_dump()
        try:
            data = await review_service.create_review(
                self.client, self.restaurant_id, payload, self.session.token
            )
        except APIError as e:
            logger.error(f"Error creating review for restaurant {self.restaurant_id}: {e}")
            self.error = e.user_message("Failed to add review")
            return None

        logger.info(f"✅ Review created for restaurant {self.restaurant_id}")
        self.success = "Review added successfully!"
        self.reset()

        try:
            return Review.model_validate({
                "restaurant_id": self.restaurant_id,
                "user_id": self.session.identity.id,
                **payload,
                **data,
            })
        except ValidationError as e:
            logger.warning(f"Created review came back in an unexpected shape: {e.errors()[:1]}")
            return None


async def delete_own_review(client: HTTPClient, session: Session, restaurant_id: EntityId, review: Review) -> str:
    """Delete a review written by the session's identity; returns an error message or ''."""
    identity = session.identity
    if identity is None or not identity.same_id(review.user_id):
        return "You can only delete your own reviews"
    try:
        await review_service.delete_review(client, restaurant_id, review.id, session.token)
    except APIError as e:
        logger.error(f"Error deleting review {review.id}: {e}")
        return e.user_message("Failed to delete review")
    return ""
