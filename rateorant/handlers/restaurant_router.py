# rateorant/handlers/restaurant_router.py
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from ..controllers.review import delete_own_review
from ..formatting import esc, restaurant_detail_text
from ..keyboards.inline import (
    get_back_keyboard,
    get_rating_keyboard,
    get_restaurant_keyboard,
    get_skip_keyboard,
)
from ..registry import ControllerRegistry
from ..routing import RouteDecision
from ..session import Session, SessionStore
from ..states.forms import ReviewStates
from .navigation import NOT_A_COMMAND, ViewContext, navigate, view
import logging

router = Router()
logger = logging.getLogger(__name__)


@view("restaurant_detail")
async def show_restaurant(ctx: ViewContext, decision: RouteDecision):
    detail = ctx.registry.detail(ctx.chat_id, ctx.session, decision.params["restaurant_id"])
    await detail.load()

    if detail.error or detail.restaurant is None:
        await ctx.show(
            f"❌ {esc(detail.error or 'Restaurant not found')}",
            reply_markup=get_back_keyboard()
        )
        return

    await detail.load_reviewers()
    await detail.load_favorite()
    await ctx.show(restaurant_detail_text(detail), reply_markup=get_restaurant_keyboard(detail))


async def open_restaurant(
    message: Message,
    restaurant_id,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry,
    edit: bool
):
    await navigate(
        message, f"/restaurant/{restaurant_id}",
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
        edit=edit
    )


# --- Reviews ---

@router.callback_query(F.data.startswith("review:start:"))
async def start_review(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    restaurant_id = callback.data.split(":")[2]
    if not session.is_authenticated:
        await callback.answer("❌ You must be logged in to leave a review", show_alert=True)
        return

    registry.review_form(chat_id, session, restaurant_id)
    detail = registry.current_detail(chat_id, session)
    name = detail.restaurant.name if detail and detail.restaurant else "this restaurant"

    await state.set_state(ReviewStates.rating)
    await state.update_data(restaurant_id=restaurant_id)
    await callback.message.edit_text(
        f"⭐ <b>Rate {esc(name)} from 1 to 5:</b>",
        reply_markup=get_rating_keyboard()
    )
    await callback.answer()


@router.callback_query(ReviewStates.rating, F.data.startswith("rate:"))
async def process_rating(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    form = registry.current_review_form(chat_id, session)
    if form is None:
        await state.clear()
        await callback.answer("⌛ This review has expired", show_alert=True)
        return

    form.set_rating(callback.data.split(":")[1])
    await state.set_state(ReviewStates.comment)
    await callback.message.edit_text(
        f"{'⭐' * form.rating} <b>{form.rating}/5</b>\n\n"
        "✍️ Share your experience (optional):",
        reply_markup=get_skip_keyboard("review:skip")
    )
    await callback.answer()


async def submit_review(
    message: Message,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    form = registry.current_review_form(chat_id, session)
    if form is None:
        await state.clear()
        await message.answer("⌛ This review has expired. Open the restaurant again to leave one.")
        return

    review = await form.submit()
    if form.error:
        await state.clear()
        await message.answer(
            f"❌ {esc(form.error)}",
            reply_markup=get_back_keyboard(f"/restaurant/{form.restaurant_id}", "🔙 Back to restaurant")
        )
        return

    logger.info(f"⭐ Chat {chat_id} reviewed restaurant {form.restaurant_id}: {review.rating if review else '?'}")
    registry.invalidate_dashboard(chat_id)
    await message.answer(f"✅ {form.success}")
    await open_restaurant(message, form.restaurant_id, state, chat_id, session, sessions, registry, edit=False)


@router.message(ReviewStates.comment, F.text, NOT_A_COMMAND)
async def process_comment(
    message: Message,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    form = registry.current_review_form(chat_id, session)
    if form is not None:
        form.set_comment(message.text)
    await submit_review(message, state, chat_id, session, sessions, registry)


@router.callback_query(ReviewStates.comment, F.data == "review:skip")
async def skip_comment(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    form = registry.current_review_form(chat_id, session)
    if form is not None:
        form.set_comment("")
    await callback.answer()
    await submit_review(callback.message, state, chat_id, session, sessions, registry)


@router.callback_query(F.data.startswith("review:del:"))
async def delete_review(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    _, _, restaurant_id, review_id = callback.data.split(":", 3)
    detail = registry.current_detail(chat_id, session)
    review = detail.find_review(review_id) if detail else None
    if review is None:
        await callback.answer("❌ Review not found", show_alert=True)
        return

    error = await delete_own_review(registry.client, session, restaurant_id, review)
    if error:
        await callback.answer(f"❌ {error}", show_alert=True)
        return

    detail.remove_review(review_id)
    registry.invalidate_dashboard(chat_id)
    await callback.answer("🗑️ Review deleted")
    await callback.message.edit_text(
        restaurant_detail_text(detail),
        reply_markup=get_restaurant_keyboard(detail)
    )
