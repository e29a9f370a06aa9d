# rateorant/handlers/auth_router.py
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.exceptions import TelegramBadRequest

from ..formatting import esc
from ..keyboards.inline import get_back_keyboard, get_cancel_keyboard
from ..models import UserRole
from ..registry import ControllerRegistry
from ..routing import LANDING_PATH, SIGN_IN_PATH, RouteDecision
from ..services import auth as auth_service
from ..session import Session, SessionStore
from ..states.forms import SignInStates, SignUpStates
from ..utils.http_client import APIError, HTTPClient
from .navigation import NOT_A_COMMAND, ViewContext, navigate, view
import logging

router = Router()
logger = logging.getLogger(__name__)


@view("sign_in")
async def show_sign_in(ctx: ViewContext, decision: RouteDecision):
    await ctx.state.set_state(SignInStates.username)
    await ctx.show(
        "🔑 <b>Sign In</b>\n\nEnter your username:",
        reply_markup=get_cancel_keyboard()
    )


@view("sign_up")
async def show_sign_up(ctx: ViewContext, decision: RouteDecision):
    role = decision.params.get("role", UserRole.USER.value)
    await ctx.state.set_state(SignUpStates.username)
    await ctx.state.update_data(role=role)

    title = "🏪 <b>Restaurant Owner Sign Up</b>" if role == UserRole.RESTAURANT_OWNER.value else "🙋 <b>Sign Up</b>"
    await ctx.show(
        f"{title}\n\nChoose a username:",
        reply_markup=get_cancel_keyboard()
    )


async def forget_secret(message: Message):
    """Remove a message that carries a password from the chat history"""
    try:
        await message.delete()
    except TelegramBadRequest as e:
        logger.debug(f"Could not delete password message: {e}")


async def finish_sign_in(
    message: Message,
    token: str,
    state: FSMContext,
    chat_id: int,
    sessions: SessionStore,
    registry: ControllerRegistry,
    retry_path: str
):
    try:
        session = sessions.sign_in(chat_id, token)
    except ValueError as e:
        logger.error(f"❌ Chat {chat_id} got an unusable credential: {e}")
        await state.clear()
        await message.answer(
            "❌ Invalid response from server",
            reply_markup=get_back_keyboard(retry_path, "🔄 Try again")
        )
        return

    registry.drop(chat_id)
    await message.answer(f"✅ Signed in as <b>{esc(session.identity.username)}</b>")
    await navigate(
        message, LANDING_PATH,
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state
    )


# --- Sign in ---

@router.message(Command("signin", ignore_mention=True))
async def cmd_signin(
    message: Message,
    state: FSMContext,
    chat_id: int,
    session: Session,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    await navigate(
        message, SIGN_IN_PATH,
        chat_id=chat_id, session=session, sessions=sessions, registry=registry, state=state
    )


@router.message(SignInStates.username, F.text, NOT_A_COMMAND)
async def process_sign_in_username(message: Message, state: FSMContext):
    username = message.text.strip()
    if not username:
        await message.answer("❌ Username cannot be empty. Enter your username:")
        return

    await state.update_data(username=username)
    await state.set_state(SignInStates.password)
    await message.answer("🔒 Enter your password:", reply_markup=get_cancel_keyboard())


@router.message(SignInStates.password, F.text, NOT_A_COMMAND)
async def process_sign_in_password(
    message: Message,
    state: FSMContext,
    chat_id: int,
    client: HTTPClient,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    password = message.text
    await forget_secret(message)

    data = await state.get_data()
    username = data.get("username")
    if not username or not password:
        await state.clear()
        await message.answer(
            "❌ Please fill in all fields",
            reply_markup=get_back_keyboard(SIGN_IN_PATH, "🔄 Try again")
        )
        return

    try:
        token = await auth_service.sign_in(client, username, password)
    except APIError as e:
        logger.warning(f"⚠️ Sign in failed for {username}: {e}")
        await state.clear()
        await message.answer(
            f"❌ {esc(e.user_message('Sign in failed'))}",
            reply_markup=get_back_keyboard(SIGN_IN_PATH, "🔄 Try again")
        )
        return

    await finish_sign_in(message, token, state, chat_id, sessions, registry, SIGN_IN_PATH)


# --- Sign up ---

@router.message(SignUpStates.username, F.text, NOT_A_COMMAND)
async def process_sign_up_username(message: Message, state: FSMContext):
    username = message.text.strip()
    if not username:
        await message.answer("❌ Username cannot be empty. Choose a username:")
        return

    await state.update_data(username=username)
    await state.set_state(SignUpStates.email)
    await message.answer("📧 Enter your email:", reply_markup=get_cancel_keyboard())


@router.message(SignUpStates.email, F.text, NOT_A_COMMAND)
async def process_sign_up_email(message: Message, state: FSMContext):
    email = message.text.strip()
    if "@" not in email:
        await message.answer("❌ That does not look like an email address. Try again:")
        return

    await state.update_data(email=email)
    await state.set_state(SignUpStates.password)
    await message.answer("🔒 Choose a password:", reply_markup=get_cancel_keyboard())


@router.message(SignUpStates.password, F.text, NOT_A_COMMAND)
async def process_sign_up_password(message: Message, state: FSMContext):
    password = message.text
    await forget_secret(message)
    if not password:
        await message.answer("❌ Password cannot be empty. Choose a password:")
        return

    await state.update_data(password=password)
    await state.set_state(SignUpStates.password_conf)
    await message.answer("🔒 Repeat the password:", reply_markup=get_cancel_keyboard())


@router.message(SignUpStates.password_conf, F.text, NOT_A_COMMAND)
async def process_sign_up_confirmation(
    message: Message,
    state: FSMContext,
    chat_id: int,
    client: HTTPClient,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    password_conf = message.text
    await forget_secret(message)

    data = await state.get_data()
    role = data.get("role", UserRole.USER.value)
    retry_path = "/owner-sign-up" if role == UserRole.RESTAURANT_OWNER.value else "/sign-up"

    username, email, password = data.get("username"), data.get("email"), data.get("password")
    if not all([username, email, password, password_conf]):
        await state.clear()
        await message.answer(
            "❌ Please fill in all fields",
            reply_markup=get_back_keyboard(retry_path, "🔄 Try again")
        )
        return

    if password != password_conf:
        await state.set_state(SignUpStates.password)
        await message.answer(
            "❌ Passwords do not match\n\n🔒 Choose a password:",
            reply_markup=get_cancel_keyboard()
        )
        return

    try:
        token = await auth_service.sign_up(client, username, email, password, role)
    except APIError as e:
        logger.warning(f"⚠️ Sign up failed for {username}: {e}")
        await state.clear()
        await message.answer(
            f"❌ {esc(e.user_message('Sign up failed'))}",
            reply_markup=get_back_keyboard(retry_path, "🔄 Try again")
        )
        return

    logger.info(f"🎉 New {role} account: {username}")
    await finish_sign_in(message, token, state, chat_id, sessions, registry, retry_path)


# --- Sign out ---

async def sign_out(
    message: Message,
    state: FSMContext,
    chat_id: int,
    sessions: SessionStore,
    registry: ControllerRegistry,
    edit: bool
):
    sessions.sign_out(chat_id)
    registry.drop(chat_id)
    await navigate(
        message, LANDING_PATH,
        chat_id=chat_id, session=sessions.get(chat_id), sessions=sessions, registry=registry, state=state,
        edit=edit
    )


@router.message(Command("signout", ignore_mention=True))
async def cmd_signout(
    message: Message,
    state: FSMContext,
    chat_id: int,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    await message.answer("👋 Signed out.")
    await sign_out(message, state, chat_id, sessions, registry, edit=False)


@router.callback_query(F.data == "auth:signout")
async def signout_callback(
    callback: CallbackQuery,
    state: FSMContext,
    chat_id: int,
    sessions: SessionStore,
    registry: ControllerRegistry
):
    await sign_out(callback.message, state, chat_id, sessions, registry, edit=True)
    await callback.answer("👋 Signed out")
