# rateorant/registry.py
import logging
from typing import Dict, Optional

from .controllers.dashboard import DashboardController
from .controllers.detail import RestaurantDetailController
from .controllers.form import RestaurantFormController
from .controllers.review import ReviewFormController
from .notifications import NotificationIndicator
from .session import Session
from .utils.http_client import HTTPClient

logger = logging.getLogger(__name__)


class ControllerRegistry:
    """Per-chat controllers that outlive a single update.

    A controller is rebuilt whenever the chat's session object changes, so
    signing in or out never leaks state from the previous identity.
    """

    def __init__(self, client: HTTPClient):
        self.client = client
        self.dashboards: Dict[int, DashboardController] = {}
        self.indicators: Dict[int, NotificationIndicator] = {}
        self.details: Dict[int, RestaurantDetailController] = {}
        self.forms: Dict[int, RestaurantFormController] = {}
        self.reviews: Dict[int, ReviewFormController] = {}

    def dashboard(self, chat_id: int, session: Session) -> DashboardController:
        role = "owner" if session.is_owner else "user"
        controller = self.dashboards.get(chat_id)
        if controller is None or controller.session is not session or controller.role != role:
            controller = DashboardController(self.client, session, role=role)
            self.dashboards[chat_id] = controller
        return controller

    def invalidate_dashboard(self, chat_id: int) -> None:
        controller = self.dashboards.get(chat_id)
        if controller is not None:
            controller.invalidate()

    def indicator(self, chat_id: int, session: Session) -> NotificationIndicator:
        indicator = self.indicators.get(chat_id)
        if indicator is None or indicator.session is not session:
            indicator = NotificationIndicator(self.client, session)
            self.indicators[chat_id] = indicator
        return indicator

    def existing_indicator(self, chat_id: int) -> Optional[NotificationIndicator]:
        return self.indicators.get(chat_id)

    def detail(self, chat_id: int, session: Session, restaurant_id) -> RestaurantDetailController:
        controller = RestaurantDetailController(self.client, session, restaurant_id)
        self.details[chat_id] = controller
        return controller

    def current_detail(self, chat_id: int, session: Session) -> Optional[RestaurantDetailController]:
        controller = self.details.get(chat_id)
        if controller is None or controller.session is not session:
            return None
        return controller

    def form(self, chat_id: int, session: Session, restaurant_id=None) -> RestaurantFormController:
        controller = RestaurantFormController(
            self.client,
            session,
            restaurant_id=restaurant_id,
            on_saved=lambda: self.invalidate_dashboard(chat_id)
        )
        self.forms[chat_id] = controller
        return controller

    def current_form(self, chat_id: int, session: Session) -> Optional[RestaurantFormController]:
        controller = self.forms.get(chat_id)
        if controller is None or controller.session is not session:
            return None
        return controller

    def review_form(self, chat_id: int, session: Session, restaurant_id) -> ReviewFormController:
        controller = ReviewFormController(self.client, session, restaurant_id)
        self.reviews[chat_id] = controller
        return controller

    def current_review_form(self, chat_id: int, session: Session) -> Optional[ReviewFormController]:
        controller = self.reviews.get(chat_id)
        if controller is None or controller.session is not session:
            return None
        return controller

    def drop(self, chat_id: int) -> None:
        """Forget everything held for a chat (sign-in, sign-out)."""
        for controllers in (self.dashboards, self.indicators, self.details, self.forms, self.reviews):
            controllers.pop(chat_id, None)
        logger.debug(f"Dropped controllers for chat {chat_id}")
