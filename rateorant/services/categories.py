# rateorant/services/categories.py
"""
Categories and category-scoped restaurant listing.

The backend does not fix the shape of the category filter route, so
``get_restaurants_by_category`` walks an ordered list of candidate
endpoints and keeps the first response that parses to a list.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import config
from ..models import EntityId
from ..utils.http_client import APIError, HTTPClient, normalize_list

logger = logging.getLogger(__name__)


async def get_all_categories(client: HTTPClient) -> List[Dict[str, Any]]:
    data = await client.get("/categories")
    categories = normalize_list(data, "categories", "data")
    if categories is None:
        logger.warning(f"Unexpected categories payload: {type(data).__name__}")
        return []
    return categories


@dataclass
class CategoryEndpoint:
    """One candidate shape of the category filter route"""
    path: str
    param: Optional[str] = None
    prefix: str = ""

    def build(self, category_id: EntityId) -> Dict[str, Any]:
        path = self.prefix + self.path.format(category_id=category_id)
        params = {self.param: str(category_id)} if self.param else None
        return {"endpoint": path, "params": params}

    def describe(self, category_id: EntityId) -> str:
        target = self.build(category_id)
        if target["params"]:
            return f"{target['endpoint']}?{self.param}={category_id}"
        return target["endpoint"]


BASE_CANDIDATES = [
    CategoryEndpoint("/categories/{category_id}/restaurants"),
    CategoryEndpoint("/restaurants", param="category_id"),
    CategoryEndpoint("/restaurants", param="category"),
]


def category_candidates(alt_prefix: Optional[str] = None) -> List[CategoryEndpoint]:
    """Base candidates followed by the same set under the alternate prefix."""
    prefix = config.API_ALT_PREFIX if alt_prefix is None else alt_prefix
    candidates = list(BASE_CANDIDATES)
    if prefix:
        candidates += [
            CategoryEndpoint(c.path, param=c.param, prefix=prefix.rstrip("/"))
            for c in BASE_CANDIDATES
        ]
    return candidates


@dataclass
class FallbackResult:
    restaurants: List[Dict[str, Any]] = field(default_factory=list)
    endpoint: Optional[str] = None
    attempts: List[str] = field(default_factory=list)


async def find_restaurants_by_category(
    client: HTTPClient,
    category_id: EntityId,
    candidates: Optional[List[CategoryEndpoint]] = None
) -> FallbackResult:
    result = FallbackResult()

    for candidate in candidates if candidates is not None else category_candidates():
        description = candidate.describe(category_id)
        result.attempts.append(description)
        target = candidate.build(category_id)

        try:
            data = await client.get(target["endpoint"], params=target["params"])
        except APIError as e:
            logger.info(f"Category endpoint {description} failed: {e}")
            continue

        restaurants = normalize_list(data, "restaurants", "data")
        if restaurants is None:
            logger.info(f"Category endpoint {description} returned a non-list payload")
            continue

        logger.debug(f"Category {category_id} resolved via {description}: {len(restaurants)} restaurants")
        result.restaurants = restaurants
        result.endpoint = description
        return result

    logger.warning(f"No endpoint served restaurants for category {category_id}; tried {len(result.attempts)}")
    return result


async def get_restaurants_by_category(client: HTTPClient, category_id: EntityId) -> List[Dict[str, Any]]:
    result = await find_restaurants_by_category(client, category_id)
    return result.restaurants
