# rateorant/handlers/dashboard_router.py
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext
from aiogram.exceptions import TelegramBadRequest

from ..controllers.dashboard import ALL, DashboardController
from ..formatting import dashboard_text, esc
from ..keyboards.inline import (
    get_cancel_keyboard,
    get_categories_keyboard,
    get_confirm_delete_keyboard,
    get_dashboard_keyboard,
    get_rating_floor_keyboard,
)
from ..models import id_key
from ..registry import ControllerRegistry
from ..routing import LANDING_PATH, RouteDecision
from ..session import Session, SessionStore
from ..states.forms import SearchStates
from .navigation import NOT_A_COMMAND, ViewContext, navigate, view
import logging

router = Router()
logger = logging.getLogger(__name__)


def render_dashboard(controller: DashboardController, badge: str = ""):
    cards, total_pages = controller.page_of()
    text = dashboard_text(controller, cards, controller.page, total_pages)
    keyboard = get_dashboard_keyboard(controller, cards, controller.page, total_pages, badge)
    return text, keyboard


async def owner_badge(ctx: ViewContext) -> str:
    if not ctx.session.is_owner:
        return ""
    indicator = ctx.registry.indicator(ctx.chat_id, ctx.session)
    await indicator.refresh()
    return indicator.badge


@view("dashboard_user")
@view("dashboard_owner")
async def show_dashboard(ctx: ViewContext, decision: RouteDecision):
    controller = ctx.registry.dashboard(ctx.chat_id, ctx.session)
    reloaded = False

    if controller.stale:
        await controller.refresh()
        reloaded = True

    search = decision.query.get("search")
    if search is not None:
        await controller.apply_search_param(search)
        reloaded = True

    badge = await owner_badge(ctx)
    text, keyboard = render_dashboard(controller, badge)
    shown = await ctx.show(text, reply_markup=keyboard)

    if reloaded or not controller.ratings:
        await fill_ratings(shown, controller, badge)


async def edit_dashboard(message: Message, controller: DashboardController, badge: str = ""):
    text, keyboard = render_dashboard(controller, badge)
    try:
        await message.edit_text(text, reply_markup=keyboard)
    except TelegramBadRequest as e:
        if "message is not modified" not in str(e):
            logger.warning(f"Could not redraw dashboard: {e}")


async def fill_ratings(message: Message, controller: DashboardController, badge: str = ""):
    """The list is already on screen; load the ratings and redraw it."""
    if not controller.restaurants:
        return
    await controller.load_ratings()
    await edit_dashboard(message, controller, badge)


async def redraw(callback: CallbackQuery, controller: DashboardController, registry: ControllerRegistry, chat_id: int):
    badge = ""
    if controller.is_owner:
        indicator = registry.existing_indicator(chat_id)
        badge = indicator.badge if indicator else ""
    await edit_dashboard(callback.message, controller, badge)
    if not controller.ratings:
        await fill_ratings(callback.message, controller, badge)


async def current_dashboard(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    """Dashboard for the chat, or None after sending an anonymous chat home"""
    if not session.is_authenticated:
        await navigate(
            callback.message, LANDING_PATH,
            chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
            edit=True
        )
        await callback.answer("🔑 Please sign in first")
        return None

    controller = registry.dashboard(chat_id, session)
    if controller.stale:
        await controller.refresh()
    return controller


@router.callback_query(F.data.startswith("dash:"))
async def dashboard_callback(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    controller = await current_dashboard(callback, state, chat_id, session, sessions, registry)
    if controller is None:
        return

    parts = callback.data.split(":")
    action = parts[1]
    arg = parts[2] if len(parts) > 2 else None
    notice = None

    if action == "show":
        await redraw(callback, controller, registry, chat_id)

    elif action == "refresh":
        controller.invalidate()
        await navigate(
            callback.message, LANDING_PATH,
            chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
            edit=True
        )
        notice = "🔄 Refreshed"

    elif action == "page":
        controller.page = int(arg)
        await redraw(callback, controller, registry, chat_id)

    elif action == "cats":
        await callback.message.edit_text(
            "🏷️ <b>Filter by category</b>",
            reply_markup=get_categories_keyboard(controller)
        )

    elif action == "cat":
        await controller.select_category(arg)
        await redraw(callback, controller, registry, chat_id)

    elif action == "floors":
        await callback.message.edit_text(
            "⭐ <b>Minimum average rating</b>",
            reply_markup=get_rating_floor_keyboard(controller)
        )

    elif action == "floor":
        controller.set_rating_floor(arg)
        await redraw(callback, controller, registry, chat_id)

    elif action == "favonly":
        controller.toggle_favorites_only()
        await redraw(callback, controller, registry, chat_id)

    elif action == "search":
        await state.set_state(SearchStates.query)
        await callback.message.edit_text(
            "🔍 <b>Search restaurants</b>\n\nSend a name or a location:",
            reply_markup=get_cancel_keyboard()
        )

    elif action == "clear":
        controller.set_search("")
        controller.set_rating_floor(ALL)
        controller.show_favorites_only = False
        if controller.selected_category != ALL:
            await controller.select_category(ALL)
        await redraw(callback, controller, registry, chat_id)
        notice = "🧹 Filters cleared"

    elif action == "del":
        restaurant = next((r for r in controller.restaurants if id_key(r.id) == arg), None)
        if not controller.is_owner or restaurant is None:
            notice = "❌ Restaurant not found"
        else:
            await callback.message.edit_text(
                f"🗑️ <b>Delete {esc(restaurant.name)}?</b>\n\n"
                "Are you sure you want to delete this restaurant? This cannot be undone.",
                reply_markup=get_confirm_delete_keyboard(restaurant.id)
            )

    elif action == "del_ok":
        if not controller.is_owner:
            notice = "❌ Only restaurant owners can delete restaurants"
        else:
            controller.clear_error()
            deleted = await controller.delete_restaurant(arg)
            notice = "🗑️ Restaurant deleted" if deleted else "❌ Failed to delete restaurant"
            await redraw(callback, controller, registry, chat_id)

    else:
        logger.warning(f"Unknown dashboard action: {callback.data}")

    await callback.answer(notice)


@router.message(SearchStates.query, F.text, NOT_A_COMMAND)
async def process_search_query(
    message: Message,
    state: FSMContext,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    await state.clear()
    controller = registry.dashboard(chat_id, session)
    if controller.stale:
        await controller.refresh()
    controller.set_search(message.text)

    text, keyboard = render_dashboard(controller)
    shown = await message.answer(text, reply_markup=keyboard)
    if not controller.ratings:
        await fill_ratings(shown, controller)


@router.callback_query(F.data.startswith("fav:"))
async def favorite_callback(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    controller = await current_dashboard(callback, state, chat_id, session, sessions, registry)
    if controller is None:
        return
    if controller.is_owner:
        await callback.answer("❌ Favorites are for diners")
        return

    _, action, restaurant_id = callback.data.split(":", 2)
    controller.clear_error()
    if action == "add":
        ok = await controller.add_favorite(restaurant_id)
        notice = "❤️ Added to favorites" if ok else "⚠️ Could not save favorite"
    else:
        ok = await controller.remove_favorite(restaurant_id)
        notice = "🤍 Removed from favorites" if ok else "⚠️ Could not remove favorite"

    await redraw(callback, controller, registry, chat_id)
    await callback.answer(notice)
