# rateorant/middlewares/session_middleware.py
from aiogram import BaseMiddleware
from aiogram.types import Message, CallbackQuery
from typing import Callable, Dict, Any, Awaitable
import logging

from ..session import SessionStore

logger = logging.getLogger(__name__)


def chat_id_of(event) -> int:
    if isinstance(event, CallbackQuery):
        if event.message is not None:
            return event.message.chat.id
        return event.from_user.id
    return event.chat.id


class SessionMiddleware(BaseMiddleware):
    """Puts the chat's session and chat id into handler data"""

    async def __call__(
        self,
        handler: Callable[[Any, Dict[str, Any]], Awaitable[Any]],
        event: Message | CallbackQuery,
        data: Dict[str, Any]
    ) -> Any:
        if not isinstance(event, (Message, CallbackQuery)):
            return await handler(event, data)

        sessions: SessionStore = data["sessions"]
        chat_id = chat_id_of(event)
        session = sessions.get(chat_id)

        data["chat_id"] = chat_id
        data["session"] = session
        logger.debug(f"Chat {chat_id}: {session!r}")

        return await handler(event, data)
