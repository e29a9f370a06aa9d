# rateorant/services/favorites.py
from typing import Any, Dict, List

from ..models import EntityId
from ..utils.http_client import HTTPClient, normalize_list


async def get_favorites(client: HTTPClient, token: str) -> List[Dict[str, Any]]:
    data = await client.get("/favorites", token=token)
    return normalize_list(data, "favorites") or []


async def check_favorite(client: HTTPClient, restaurant_id: EntityId, token: str) -> Any:
    return await client.get(f"/restaurants/{restaurant_id}/favorite", token=token)


async def add_favorite(client: HTTPClient, restaurant_id: EntityId, token: str) -> Any:
    return await client.post(f"/restaurants/{restaurant_id}/favorite", token=token, json={})


async def remove_favorite(client: HTTPClient, restaurant_id: EntityId, token: str) -> Any:
    return await client.delete(f"/restaurants/{restaurant_id}/favorite", token=token)
