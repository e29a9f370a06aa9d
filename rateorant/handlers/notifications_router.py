# rateorant/handlers/notifications_router.py
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from ..formatting import notifications_text
from ..keyboards.inline import get_notifications_keyboard
from ..registry import ControllerRegistry
from ..routing import LANDING_PATH
from ..session import Session, SessionStore
from .navigation import navigate
import logging

router = Router()
logger = logging.getLogger(__name__)

OWNERS_ONLY = "🔔 Notifications are available to restaurant owners."


@router.message(Command("notifications", ignore_mention=True))
async def cmd_notifications(
    message: Message,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    if not session.is_owner:
        await message.answer(OWNERS_ONLY)
        return

    indicator = registry.indicator(chat_id, session)
    if indicator.is_open:
        await indicator.refresh()
    else:
        await indicator.toggle()
    await message.answer(notifications_text(indicator), reply_markup=get_notifications_keyboard(indicator))


@router.callback_query(F.data.startswith("notif:"))
async def notifications_callback(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    if not session.is_owner:
        await callback.answer(OWNERS_ONLY, show_alert=True)
        return

    indicator = registry.indicator(chat_id, session)
    parts = callback.data.split(":", 2)
    action = parts[1]

    async def go(path: str):
        await navigate(
            callback.message, path,
            chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
            edit=True
        )

    if action == "toggle":
        if await indicator.toggle():
            await callback.message.edit_text(
                notifications_text(indicator),
                reply_markup=get_notifications_keyboard(indicator)
            )
        else:
            await go(LANDING_PATH)

    elif action == "go":
        path = indicator.click(parts[2])
        await go(path or LANDING_PATH)

    elif action == "clear":
        indicator.clear_all()
        await callback.message.edit_text(
            notifications_text(indicator),
            reply_markup=get_notifications_keyboard(indicator)
        )

    elif action == "close":
        indicator.is_open = False
        await go(LANDING_PATH)

    else:
        logger.warning(f"Unknown notification action: {callback.data}")

    await callback.answer()
