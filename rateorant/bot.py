# rateorant/bot.py
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage

from .config import config
from .handlers import routers
from .middlewares.logging import LoggingMiddleware
from .middlewares.session_middleware import SessionMiddleware
from .registry import ControllerRegistry
from .session import SessionStore
from .utils.http_client import HTTPClient


def create_bot(token: str = None) -> Bot:
    return Bot(
        token=token or config.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )


def create_dispatcher(client: HTTPClient, sessions: SessionStore) -> Dispatcher:
    dp = Dispatcher(storage=MemoryStorage())

    # available to every handler and middleware by name
    dp["client"] = client
    dp["sessions"] = sessions
    dp["registry"] = ControllerRegistry(client)

    for observer in (dp.message, dp.callback_query):
        observer.outer_middleware(LoggingMiddleware())
        observer.middleware(SessionMiddleware())

    dp.include_routers(*routers)
    return dp
