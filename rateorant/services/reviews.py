# rateorant/services/reviews.py
from typing import Any, Dict, List

from ..models import EntityId
from ..utils.http_client import HTTPClient, normalize_list


async def get_reviews(client: HTTPClient, restaurant_id: EntityId) -> List[Dict[str, Any]]:
    data = await client.get(f"/restaurants/{restaurant_id}/reviews")
    return normalize_list(data, "reviews") or []


async def create_review(
    client: HTTPClient,
    restaurant_id: EntityId,
    review: Dict[str, Any],
    token: str
) -> Dict[str, Any]:
    data = await client.post(f"/restaurants/{restaurant_id}/reviews", token=token, json=review)
    return data if isinstance(data, dict) else {}


async def delete_review(client: HTTPClient, restaurant_id: EntityId, review_id: EntityId, token: str) -> Any:
    return await client.delete(f"/restaurants/{restaurant_id}/reviews/{review_id}", token=token)
