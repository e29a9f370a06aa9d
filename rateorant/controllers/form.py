# rateorant/controllers/form.py
import logging
from typing import Any, Callable, Dict, List, Optional

from ..models import Category, EntityId, Restaurant, id_key, parse_items
from ..services import categories as category_service
from ..services import restaurants as restaurant_service
from ..session import Session
from ..utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)

FORM_FIELDS = ("name", "description", "location", "image_url")


class RestaurantFormController:
    """Create a restaurant, or edit one the signed-in owner owns"""

    def __init__(
        self,
        client: HTTPClient,
        session: Session,
        restaurant_id: Optional[EntityId] = None,
        on_saved: Optional[Callable[[], None]] = None
    ):
        self.client = client
        self.session = session
        self.restaurant_id = restaurant_id
        self.on_saved = on_saved
        self.form: Dict[str, str] = {field: "" for field in FORM_FIELDS}
        self.categories: List[Category] = []
        self.selected_categories: List[EntityId] = []
        self.error = ""
        self.submitting = False
        self.allowed = True

    @property
    def is_edit(self) -> bool:
        return self.restaurant_id is not None

    async def load(self) -> None:
        try:
            self.categories = parse_items(Category, await category_service.get_all_categories(self.client))
        except APIError as e:
            logger.error(f"Failed to load categories: {e}")

        if self.is_edit:
            await self.load_restaurant()

    async def load_restaurant(self) -> None:
        try:
            data = await restaurant_service.get_restaurant(self.client, self.restaurant_id)
            restaurant = Restaurant.model_validate(data)
        except (APIError, ValueError) as e:
            logger.error(f"Failed to load restaurant {self.restaurant_id}: {e}")
            self.error = "Failed to load restaurant data"
            return

        identity = self.session.identity
        if identity is None or not identity.same_id(restaurant.owner_id):
            self.allowed = False
            self.error = "You do not have permission to edit this restaurant"
            return

        self.form = {
            "name": restaurant.name,
            "description": restaurant.description or "",
            "location": restaurant.location or "",
            "image_url": restaurant.image_url or "",
        }
        self.selected_categories = [c.id for c in restaurant.categories]

    def set_field(self, name: str, value: Optional[str]) -> None:
        if name not in self.form:
            raise KeyError(name)
        self.form[name] = (value or "").strip()

    def toggle_category(self, category_id: EntityId) -> List[EntityId]:
        key = id_key(category_id)
        if any(id_key(c) == key for c in self.selected_categories):
            self.selected_categories = [c for c in self.selected_categories if id_key(c) != key]
        else:
            self.selected_categories = [*self.selected_categories, category_id]
        return self.selected_categories

    def is_selected(self, category_id: EntityId) -> bool:
        key = id_key(category_id)
        return any(id_key(c) == key for c in self.selected_categories)

    def payload(self) -> Dict[str, Any]:
        return {**self.form, "category_ids": list(self.selected_categories)}

    async def submit(self) -> Optional[Dict[str, Any]]:
        if not self.allowed:
            return None
        if not self.form["name"] or not self.form["location"]:
            self.error = "Name and location are required"
            return None

        self.submitting = True
        self.error = ""
        payload = self.payload()
        token = self.session.token
        try:
            if self.is_edit:
                result = await restaurant_service.update_restaurant(self.client, self.restaurant_id, payload, token)
            else:
                result = await restaurant_service.create_restaurant(self.client, payload, token)
        except APIError as e:
            logger.error(f"Failed to save restaurant: {e}")
            self.error = e.user_message("Failed to save restaurant")
            return None
        finally:
            self.submitting = False

        logger.info(f"Restaurant saved: {result.get('id', self.restaurant_id)}")
        if self.on_saved is not None:
            self.on_saved()
        return result
