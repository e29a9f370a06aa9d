# rateorant/controllers/dashboard.py
"""
Restaurant listing for the signed-in identity.

Owners see only their own restaurants; users see everything and can narrow
the list by favorites, search text and a minimum average rating. Category
filtering happens on the backend and triggers a reload. Rating aggregates
are folded from each restaurant's reviews after the list itself is loaded.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Set, Union

from ..config import config
from ..models import (
    Category,
    EntityId,
    Favorite,
    RatingAggregate,
    Restaurant,
    Review,
    id_key,
    parse_items,
)
from ..session import Session
from ..services import categories as category_service
from ..services import favorites as favorites_service
from ..services import restaurants as restaurant_service
from ..services import reviews as review_service
from ..utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)

ALL = "all"
RATING_FLOORS = (1, 2, 3, 4)


class DashboardController:
    def __init__(self, client: HTTPClient, session: Session, role: str = "user"):
        self.client = client
        self.session = session
        self.role = role

        self.restaurants: List[Restaurant] = []
        self.categories: List[Category] = []
        self.favorites: Set[str] = set()
        self.ratings: Dict[str, RatingAggregate] = {}

        self.selected_category: str = ALL
        self.selected_rating_floor: Union[str, int] = ALL
        self.search_query: str = ""
        self.show_favorites_only: bool = False
        self.page: int = 0

        self.error: str = ""
        self.loading: bool = False
        self.stale: bool = True

        self._generation = 0
        self._ratings_generation = 0

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"

    # --- Loading ---

    async def load_categories(self) -> List[Category]:
        try:
            data = await category_service.get_all_categories(self.client)
        except APIError as e:
            logger.error(f"Failed to load categories: {e}")
            return self.categories
        self.categories = parse_items(Category, data)
        return self.categories

    async def load_restaurants(self, category: Optional[str] = None) -> List[Restaurant]:
        """Fetch the list for a category, scoped to the owner when needed.

        The selection only moves to ``category`` once its list has arrived.
        """
        self._generation += 1
        generation = self._generation
        if category is None:
            category = self.selected_category
        self.loading = True

        try:
            if category == ALL:
                data = await restaurant_service.get_all_restaurants(self.client)
            else:
                data = await category_service.get_restaurants_by_category(self.client, category)
        except APIError as e:
            logger.error(f"Error loading dashboard data: {e}")
            if generation == self._generation:
                self.error = e.message or "Failed to load data"
                self.loading = False
            return self.restaurants

        if generation != self._generation:
            logger.debug(f"Discarding stale restaurant list for category {category}")
            return self.restaurants

        restaurants = parse_items(Restaurant, data)
        if self.is_owner:
            restaurants = self.scope_to_owner(restaurants)

        if category != self.selected_category:
            self.selected_category = category
            self.ratings = {}
        self.restaurants = restaurants
        self.loading = False
        self.stale = False
        self.page = 0
        return self.restaurants

    def scope_to_owner(self, restaurants: List[Restaurant]) -> List[Restaurant]:
        identity = self.session.identity
        if identity is None:
            return []
        owned = [r for r in restaurants if identity.same_id(r.owner_id)]
        logger.debug(f"Owner {identity.id} owns {len(owned)} of {len(restaurants)} restaurants")
        return owned

    async def load_favorites(self) -> Set[str]:
        if self.is_owner or not self.session.is_authenticated:
            return self.favorites
        try:
            data = await favorites_service.get_favorites(self.client, self.session.token)
        except APIError as e:
            logger.error(f"Error loading favorites: {e}")
            self.error = e.message or "Failed to load favorites"
            return self.favorites
        self.favorites = {id_key(fav.restaurant_id) for fav in parse_items(Favorite, data)}
        return self.favorites

    async def _fetch_aggregate(self, restaurant_id: EntityId) -> RatingAggregate:
        data = await review_service.get_reviews(self.client, restaurant_id)
        reviews = parse_items(Review, data)
        return RatingAggregate.from_ratings([r.rating for r in reviews])

    async def load_ratings(self) -> Dict[str, RatingAggregate]:
        """Fan out one reviews request per restaurant and merge into the keyed map."""
        self._ratings_generation += 1
        generation = self._ratings_generation
        restaurants = list(self.restaurants)
        if not restaurants:
            return self.ratings

        results = await asyncio.gather(
            *(self._fetch_aggregate(r.id) for r in restaurants),
            return_exceptions=True
        )

        if generation != self._ratings_generation:
            logger.debug("Discarding stale rating aggregates")
            return self.ratings

        ratings: Dict[str, RatingAggregate] = {}
        for restaurant, result in zip(restaurants, results):
            if isinstance(result, APIError):
                logger.warning(f"Error fetching ratings for restaurant {restaurant.id}: {result}")
                continue
            if isinstance(result, BaseException):
                raise result
            ratings[id_key(restaurant.id)] = result

        self.ratings = ratings
        return self.ratings

    async def refresh(self) -> List[Restaurant]:
        """Mount or reload: categories once, then the list and favorites.

        Aggregates are dropped; callers draw the list and then ``load_ratings``.
        """
        if not self.categories:
            await self.load_categories()
        self._ratings_generation += 1
        self.ratings = {}
        await self.load_restaurants()
        await self.load_favorites()
        return self.restaurants

    def invalidate(self) -> None:
        """Mark the list stale after a mutation made elsewhere."""
        self.stale = True

    # --- Filters ---

    async def select_category(self, category: EntityId) -> List[Restaurant]:
        category = ALL if category in (None, "", ALL) else id_key(category)
        if category != self.selected_category:
            await self.load_restaurants(category)
        return self.restaurants

    async def apply_search_param(self, query: Optional[str]) -> None:
        """A search arriving from outside the dashboard resets the category filter."""
        self.search_query = (query or "").strip()
        self.page = 0
        if self.selected_category != ALL:
            await self.select_category(ALL)

    def set_search(self, query: Optional[str]) -> None:
        self.search_query = (query or "").strip()
        self.page = 0

    def set_rating_floor(self, floor: Union[str, int, None]) -> None:
        if floor in (None, "", ALL):
            self.selected_rating_floor = ALL
        else:
            value = int(floor)
            if value not in RATING_FLOORS:
                raise ValueError(f"Rating floor must be one of {RATING_FLOORS}")
            self.selected_rating_floor = value
        self.page = 0

    def toggle_favorites_only(self) -> bool:
        if not self.is_owner:
            self.show_favorites_only = not self.show_favorites_only
            self.page = 0
        return self.show_favorites_only

    def rating_for(self, restaurant_id: EntityId) -> RatingAggregate:
        return self.ratings.get(id_key(restaurant_id)) or RatingAggregate()

    def is_favorite(self, restaurant_id: EntityId) -> bool:
        return id_key(restaurant_id) in self.favorites

    def admits(self, restaurant: Restaurant) -> bool:
        if self.show_favorites_only and not self.is_favorite(restaurant.id):
            return False

        query = self.search_query.lower()
        if query:
            name = (restaurant.name or "").lower()
            location = (restaurant.location or "").lower()
            if query not in name and query not in location:
                return False

        if self.selected_rating_floor != ALL:
            if self.rating_for(restaurant.id).average < float(self.selected_rating_floor):
                return False

        return True

    def visible_restaurants(self) -> List[Restaurant]:
        return [r for r in self.restaurants if self.admits(r)]

    def page_of(self, page: Optional[int] = None, page_size: Optional[int] = None):
        """Slice of visible restaurants plus the page count"""
        page_size = page_size or config.DASHBOARD_PAGE_SIZE
        visible = self.visible_restaurants()
        total_pages = max(1, -(-len(visible) // page_size))
        page = self.page if page is None else page
        self.page = min(max(page, 0), total_pages - 1)
        start = self.page * page_size
        return visible[start:start + page_size], total_pages

    # --- Mutations ---

    async def add_favorite(self, restaurant_id: EntityId) -> bool:
        self.favorites.add(id_key(restaurant_id))
        try:
            await favorites_service.add_favorite(self.client, restaurant_id, self.session.token)
        except APIError as e:
            logger.error(f"Error adding to favorites: {e}")
            self.error = e.message or "Failed to add to favorites"
            return False
        return True

    async def remove_favorite(self, restaurant_id: EntityId) -> bool:
        self.favorites.discard(id_key(restaurant_id))
        try:
            await favorites_service.remove_favorite(self.client, restaurant_id, self.session.token)
        except APIError as e:
            logger.error(f"Error removing from favorites: {e}")
            self.error = e.message or "Failed to remove from favorites"
            return False
        return True

    async def delete_restaurant(self, restaurant_id: EntityId) -> bool:
        """Delete after confirmation; the card disappears only once the backend agrees."""
        try:
            await restaurant_service.delete_restaurant(self.client, restaurant_id, self.session.token)
        except APIError as e:
            logger.error(f"Error deleting restaurant {restaurant_id}: {e}")
            self.error = e.user_message("Failed to delete restaurant")
            return False

        key = id_key(restaurant_id)
        self.restaurants = [r for r in self.restaurants if id_key(r.id) != key]
        self.ratings.pop(key, None)
        return True

    def clear_error(self) -> None:
        self.error = ""
