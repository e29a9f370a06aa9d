# rateorant/notifications.py
import asyncio
import logging
from typing import Dict, List, Optional

from aiogram import Bot

from .models import Notification, id_key, parse_items
from .services import notifications as notification_service
from .session import Session, SessionStore
from .utils.http_client import APIError, HTTPClient

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS_SHOWN = 10


class NotificationIndicator:
    """Unread badge and dropdown state for a restaurant owner"""

    def __init__(self, client: HTTPClient, session: Session):
        self.client = client
        self.session = session
        self.notifications: List[Notification] = []
        self.unread_count = 0
        self.is_open = False
        self.fetch_failed = False

    async def refresh(self) -> int:
        if not self.session.is_owner:
            return self.unread_count

        if not self.session.token:
            logger.warning("No token for owner session - user may need to sign in again")
            return self.unread_count

        try:
            data = await notification_service.get_notifications(
                self.client, self.session.token, strict=True
            )
            self.fetch_failed = False
        except APIError:
            data = []
            self.fetch_failed = True
        self.notifications = parse_items(Notification, data)
        self.unread_count = notification_service.get_unread_count(self.notifications)
        logger.debug(f"Notifications updated: total={len(self.notifications)} unread={self.unread_count}")
        return self.unread_count

    async def toggle(self) -> bool:
        """Bell click: refetch before opening, just close when already open."""
        if not self.is_open:
            await self.refresh()
        self.is_open = not self.is_open
        return self.is_open

    def mark_as_read(self, notification_id) -> None:
        key = id_key(notification_id)
        self.unread_count = len([
            n for n in self.notifications if not n.read and id_key(n.id) != key
        ])
        self.notifications = [
            n.model_copy(update={"read": True}) if id_key(n.id) == key else n
            for n in self.notifications
        ]

    def click(self, notification_id) -> Optional[str]:
        """Mark read locally, close the dropdown, return the restaurant path to open."""
        key = id_key(notification_id)
        target = next((n for n in self.notifications if id_key(n.id) == key), None)
        self.mark_as_read(notification_id)
        self.is_open = False
        if target is None or target.restaurant_id is None:
            return None
        return f"/restaurant/{target.restaurant_id}"

    def clear_all(self) -> None:
        self.notifications = []
        self.unread_count = 0
        logger.debug("Cleared all notifications locally")

    def pointer_down(self, inside: bool) -> None:
        if self.is_open and not inside:
            self.is_open = False

    @property
    def badge(self) -> str:
        if self.unread_count <= 0:
            return ""
        return "9+" if self.unread_count > 9 else str(self.unread_count)


class NotificationService:
    """Background poller that tells owners about new unread notifications"""

    def __init__(self, bot: Bot, client: HTTPClient, sessions: SessionStore, interval: int = 60):
        self.bot = bot
        self.client = client
        self.sessions = sessions
        self.interval = interval
        self._last_unread: Dict[int, int] = {}
        self._task: Optional[asyncio.Task] = None

    async def poll_once(self) -> Dict[int, int]:
        """Check every owner chat once; returns chats that got new notifications."""
        grown = {}
        for chat_id, session in self.sessions.owner_chats().items():
            indicator = NotificationIndicator(self.client, session)
            unread = await indicator.refresh()
            if indicator.fetch_failed:
                logger.debug(f"Skipping notification baseline for chat {chat_id}: fetch failed")
                continue
            previous = self._last_unread.get(chat_id, 0)
            self._last_unread[chat_id] = unread
            if unread > previous:
                grown[chat_id] = unread - previous
                await self.send_new_reviews(chat_id, unread - previous, unread)
        return grown

    async def send_new_reviews(self, chat_id: int, new: int, unread: int):
        noun = "review" if new == 1 else "reviews"
        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=f"🔔 <b>{new} new {noun}</b> on your restaurants ({unread} unread).\nOpen /notifications to see them.",
                parse_mode="HTML"
            )
            logger.info(f"Notified chat {chat_id} about {new} new reviews")
        except Exception as e:
            logger.error(f"Error sending notification to chat {chat_id}: {e}")

    async def run(self):
        logger.info(f"Notification polling every {self.interval}s")
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Notification poll failed: {e}", exc_info=True)

    def start(self) -> Optional[asyncio.Task]:
        if self.interval <= 0:
            logger.info("Notification polling disabled")
            return None
        self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self):
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
