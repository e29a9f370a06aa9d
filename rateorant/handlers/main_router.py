# rateorant/handlers/main_router.py
from urllib.parse import urlencode

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext

from ..formatting import esc, help_text, landing_text
from ..keyboards.inline import get_back_keyboard, get_landing_keyboard
from ..registry import ControllerRegistry
from ..routing import LANDING_PATH, RouteDecision
from ..session import Session, SessionStore
from .navigation import ViewContext, navigate, view
import logging

router = Router()
logger = logging.getLogger(__name__)


@view("landing")
async def show_landing(ctx: ViewContext, decision: RouteDecision):
    await ctx.show(landing_text(), reply_markup=get_landing_keyboard())


@view("not_found")
async def show_not_found(ctx: ViewContext, decision: RouteDecision):
    await ctx.show(
        f"🤷 <b>Nothing lives at</b> <code>{esc(decision.path)}</code>.",
        reply_markup=get_back_keyboard(LANDING_PATH, "🏠 Home")
    )


# --- /start ---
@router.message(Command("start", ignore_mention=True))
async def cmd_start(
    message: Message,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    await navigate(
        message, LANDING_PATH,
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state
    )


# --- /help ---
@router.message(Command("help", ignore_mention=True))
async def cmd_help(message: Message):
    await message.answer(help_text())


# --- /search <text> ---
@router.message(Command("search", ignore_mention=True))
async def cmd_search(
    message: Message,
    command: CommandObject,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    query = (command.args or "").strip()
    if not query:
        await message.answer("🔍 Usage: <code>/search pizza</code>")
        return

    await navigate(
        message, f"{LANDING_PATH}?{urlencode({'search': query})}",
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state
    )


@router.message(Command("cancel", ignore_mention=True))
async def cmd_cancel(message: Message, state: FSMContext):
    await state.clear()
    await message.answer(
        "⏹ Action cancelled.\n"
        "Use /start to get back to your restaurants."
    )


@router.callback_query(F.data == "cancel")
async def cancel_callback(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    await navigate(
        callback.message, LANDING_PATH,
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
        edit=True
    )
    await callback.answer("⏹ Cancelled")


@router.callback_query(F.data.startswith("nav:"))
async def navigate_callback(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    path = callback.data[len("nav:"):]
    await navigate(
        callback.message, path,
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
        edit=True
    )
    await callback.answer()


@router.callback_query(F.data == "current_page")
async def current_page(callback: CallbackQuery):
    await callback.answer()
