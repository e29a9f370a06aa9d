# rateorant/services/restaurants.py
import logging
from typing import Any, Dict, List

from ..models import EntityId
from ..utils.http_client import HTTPClient, normalize_list

logger = logging.getLogger(__name__)


async def get_all_restaurants(client: HTTPClient) -> List[Dict[str, Any]]:
    data = await client.get("/restaurants")
    restaurants = normalize_list(data, "restaurants", "data")
    if restaurants is None:
        logger.warning(f"Unexpected restaurants payload: {type(data).__name__}")
        return []
    return restaurants


async def get_restaurant(client: HTTPClient, restaurant_id: EntityId) -> Dict[str, Any]:
    data = await client.get(f"/restaurants/{restaurant_id}")
    return data if isinstance(data, dict) else {}


async def create_restaurant(client: HTTPClient, payload: Dict[str, Any], token: str) -> Dict[str, Any]:
    logger.info(f"Creating restaurant {payload.get('name')!r}")
    data = await client.post("/restaurants", token=token, json=payload)
    return data if isinstance(data, dict) else {}


async def update_restaurant(
    client: HTTPClient,
    restaurant_id: EntityId,
    payload: Dict[str, Any],
    token: str
) -> Dict[str, Any]:
    logger.info(f"Updating restaurant {restaurant_id}")
    data = await client.put(f"/restaurants/{restaurant_id}", token=token, json=payload)
    return data if isinstance(data, dict) else {}


async def delete_restaurant(client: HTTPClient, restaurant_id: EntityId, token: str) -> Any:
    logger.info(f"Deleting restaurant {restaurant_id}")
    return await client.delete(f"/restaurants/{restaurant_id}", token=token)
