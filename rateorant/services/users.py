# rateorant/services/users.py
import logging
from typing import Any, Dict, Optional

from ..config import config
from ..models import EntityId
from ..utils.cache import TTLCache
from ..utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)

# user_id -> profile
user_cache = TTLCache(ttl=config.USER_CACHE_TTL)


async def get_user(client: HTTPClient, user_id: EntityId, cache: Optional[TTLCache] = None) -> Dict[str, Any]:
    """Public profile of a user; a placeholder name when the lookup fails."""
    cache = user_cache if cache is None else cache
    cache_key = f"user_{user_id}"

    cached = cache.get(cache_key)
    if cached:
        return cached

    try:
        user = await client.get(f"/users/{user_id}")
    except APIError as e:
        logger.error(f"Error fetching user {user_id}: {e}")
        return {"id": user_id, "username": f"User {user_id}"}

    if not isinstance(user, dict):
        return {"id": user_id, "username": f"User {user_id}"}

    cache.set(cache_key, user)
    return user
