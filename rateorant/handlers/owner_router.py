# rateorant/handlers/owner_router.py
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.filters import StateFilter
from aiogram.fsm.context import FSMContext

from ..controllers.form import RestaurantFormController
from ..formatting import esc, form_summary_text
from ..keyboards.inline import (
    get_back_keyboard,
    get_cancel_keyboard,
    get_form_categories_keyboard,
    get_optional_keyboard,
)
from ..registry import ControllerRegistry
from ..routing import LANDING_PATH, RouteDecision
from ..session import Session, SessionStore
from ..states.forms import RestaurantFormStates
from .navigation import NOT_A_COMMAND, ViewContext, navigate, view
import logging

router = Router()
logger = logging.getLogger(__name__)

# (field, state, prompt, required)
FORM_STEPS = [
    ("name", RestaurantFormStates.name, "🏷️ <b>Restaurant name</b>", True),
    ("location", RestaurantFormStates.location, "📍 <b>Location</b>", True),
    ("description", RestaurantFormStates.description, "📝 <b>Description</b> (optional)", False),
    ("image_url", RestaurantFormStates.image_url, "🖼️ <b>Image URL</b> (optional)", False),
]


async def ask_step(message: Message, form: RestaurantFormController, step: int, state: FSMContext, edit: bool = False):
    field, field_state, prompt, required = FORM_STEPS[step]
    current = form.form[field]
    await state.set_state(field_state)
    await state.update_data(step=step)

    text = prompt
    if current:
        text += f"\n\nCurrent: <i>{esc(current)}</i>"
    text += "\n\nSend the new value:" if current else "\n\nSend a value:"

    if required and not current:
        keyboard = get_cancel_keyboard()
    else:
        keyboard = get_optional_keyboard(current)

    if edit:
        await message.edit_text(text, reply_markup=keyboard)
    else:
        await message.answer(text, reply_markup=keyboard)


async def show_categories_step(message: Message, form: RestaurantFormController, state: FSMContext, edit: bool = False):
    await state.set_state(RestaurantFormStates.categories)
    text = form_summary_text(form)
    keyboard = get_form_categories_keyboard(form)
    if edit:
        await message.edit_text(text, reply_markup=keyboard)
    else:
        await message.answer(text, reply_markup=keyboard)


async def advance(message: Message, form: RestaurantFormController, step: int, state: FSMContext, edit: bool = False):
    if step + 1 < len(FORM_STEPS):
        await ask_step(message, form, step + 1, state, edit=edit)
    else:
        await show_categories_step(message, form, state, edit=edit)


@view("restaurant_form")
async def show_restaurant_form(ctx: ViewContext, decision: RouteDecision):
    form = ctx.registry.form(ctx.chat_id, ctx.session, decision.params.get("restaurant_id"))
    await form.load()

    if not form.allowed or form.error:
        await ctx.show(f"❌ {esc(form.error)}", reply_markup=get_back_keyboard())
        return

    title = "✏️ <b>Edit Restaurant</b>" if form.is_edit else "➕ <b>Add New Restaurant</b>"
    await ctx.show(f"{title}\n\nAnswer a few questions. /cancel stops at any time.")
    await ask_step(ctx.message, form, 0, ctx.state)


async def current_form(message: Message, state: FSMContext, chat_id: int, session: Session, registry: ControllerRegistry):
    form = registry.current_form(chat_id, session)
    if form is None:
        await state.clear()
        await message.answer(
            "⌛ This form has expired.",
            reply_markup=get_back_keyboard(LANDING_PATH, "🔙 Back to Restaurants")
        )
    return form


@router.message(StateFilter(*[step[1] for step in FORM_STEPS]), F.text, NOT_A_COMMAND)
async def process_form_field(
    message: Message,
    state: FSMContext,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    form = await current_form(message, state, chat_id, session, registry)
    if form is None:
        return

    step = (await state.get_data()).get("step", 0)
    field, _, prompt, required = FORM_STEPS[step]
    value = message.text.strip()
    if required and not value:
        await message.answer(f"❌ {prompt} is required. Send a value:")
        return

    form.set_field(field, value)
    await advance(message, form, step, state)


@router.callback_query(StateFilter(*[step[1] for step in FORM_STEPS]), F.data == "form:keep")
async def keep_form_field(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    form = await current_form(callback.message, state, chat_id, session, registry)
    if form is None:
        await callback.answer()
        return

    step = (await state.get_data()).get("step", 0)
    await advance(callback.message, form, step, state, edit=True)
    await callback.answer()


@router.callback_query(RestaurantFormStates.categories, F.data.startswith("form:cat:"))
async def toggle_form_category(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    registry: ControllerRegistry
):
    form = await current_form(callback.message, state, chat_id, session, registry)
    if form is None:
        await callback.answer()
        return

    category_id = callback.data.split(":", 2)[2]
    category = next((c for c in form.categories if str(c.id) == category_id), None)
    form.toggle_category(category.id if category else category_id)
    await show_categories_step(callback.message, form, state, edit=True)
    await callback.answer()


@router.callback_query(RestaurantFormStates.categories, F.data == "form:save")
async def save_form(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    form = await current_form(callback.message, state, chat_id, session, registry)
    if form is None:
        await callback.answer()
        return
    if form.submitting:
        await callback.answer("⏳ Saving...")
        return

    result = await form.submit()
    if result is None:
        await show_categories_step(callback.message, form, state, edit=True)
        await callback.answer("❌ Not saved")
        return

    await callback.answer("✅ Restaurant updated" if form.is_edit else "✅ Restaurant added")
    await navigate(
        callback.message, LANDING_PATH,
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state,
        edit=True
    )
