# rateorant/middlewares/logging.py
import logging
from aiogram import BaseMiddleware
from aiogram.types import Message, CallbackQuery

logger = logging.getLogger(__name__)

# FSM steps that read a password; their text never reaches the log
SECRET_STATES = {"SignInStates:password", "SignUpStates:password", "SignUpStates:password_conf"}


class LoggingMiddleware(BaseMiddleware):
    async def __call__(self, handler, event, data):
        user = getattr(event, "from_user", None)
        who = f"{user.id}@{user.username or 'anon'}" if user else "unknown"

        if isinstance(event, Message):
            state = data.get("raw_state")
            text = "[hidden]" if state in SECRET_STATES else (event.text or "[media]")
            logger.info(f"[{who}] {text}")
        elif isinstance(event, CallbackQuery):
            logger.info(f"[{who}] Callback: {event.data}")

        return await handler(event, data)
