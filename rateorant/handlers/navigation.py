# rateorant/handlers/navigation.py
"""
Path-based navigation for the bot.

Every screen is a view registered under the name the router resolves a
path to. ``navigate`` runs the role gate, follows redirects and renders
the resulting view, either by editing the message the user tapped or by
sending a new one.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

from aiogram import F
from aiogram.exceptions import TelegramBadRequest
from aiogram.fsm.context import FSMContext
from aiogram.types import InlineKeyboardMarkup, Message

from ..registry import ControllerRegistry
from ..routing import RouteDecision, resolve
from ..session import Session, SessionStore

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5

BOT_COMMANDS = ("start", "help", "search", "cancel", "signin", "signout", "notifications")

# free-text form steps still let the bot's own commands through
NOT_A_COMMAND = ~F.text.regexp(rf"^/({'|'.join(BOT_COMMANDS)})(@\w+)?(\s|$)")


@dataclass
class ViewContext:
    message: Message
    chat_id: int
    session: Session
    sessions: SessionStore
    registry: ControllerRegistry
    state: FSMContext
    edit: bool = False

    async def show(self, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> Message:
        """Edit the current message when allowed, otherwise send a new one."""
        if self.edit:
            try:
                result = await self.message.edit_text(text, reply_markup=reply_markup)
                return result if isinstance(result, Message) else self.message
            except TelegramBadRequest as e:
                if "message is not modified" in str(e):
                    return self.message
                logger.debug(f"Could not edit message in chat {self.chat_id}: {e}")
        return await self.message.answer(text, reply_markup=reply_markup)


View = Callable[[ViewContext, RouteDecision], Awaitable[None]]
VIEWS: Dict[str, View] = {}


def view(name: str):
    def decorator(func: View) -> View:
        VIEWS[name] = func
        return func
    return decorator


def decide(session: Session, path: str, max_hops: int = MAX_REDIRECTS) -> RouteDecision:
    decision = resolve(session.identity, path)
    hops = 0
    while decision.is_redirect:
        hops += 1
        if hops > max_hops:
            raise RuntimeError(f"Too many redirects starting from {path}")
        logger.debug(f"↪️ {decision.path} -> {decision.redirect}")
        decision = resolve(session.identity, decision.redirect)
    return decision


async def navigate(
    message: Message,
    path: str,
    *,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry,
    state: FSMContext,
    edit: bool = False
) -> RouteDecision:
    # any navigation counts as a click outside the notification dropdown
    indicator = registry.existing_indicator(chat_id)
    if indicator is not None:
        indicator.pointer_down(False)

    decision = decide(session, path)
    await state.clear()

    render = VIEWS.get(decision.view) or VIEWS["not_found"]
    logger.info(f"🧭 Chat {chat_id}: {path} -> {decision.view}")
    ctx = ViewContext(
        message=message,
        chat_id=chat_id,
        session=session,
        sessions=sessions,
        registry=registry,
        state=state,
        edit=edit
    )
    await render(ctx, decision)
    return decision
