# rateorant/handlers/fallback_router.py
from aiogram import Router, F
from aiogram.types import Message, CallbackQuery, ErrorEvent
import logging

router = Router()
logger = logging.getLogger(__name__)


@router.message(F.text.startswith("/"))
async def unknown_command(message: Message):
    await message.answer(
        "❓ <b>Unknown command.</b>\n\n"
        "Use /help to see the available commands."
    )


@router.callback_query()
async def stale_button(callback: CallbackQuery):
    await callback.answer("⌛ This button has expired. Use /start to reload.", show_alert=True)


@router.errors()
async def on_error(event: ErrorEvent):
    logger.error(f"❌ Unhandled error: {event.exception}", exc_info=event.exception)

    update = event.update
    if update.callback_query is not None:
        await update.callback_query.answer("❌ Something went wrong. Please try again.", show_alert=True)
    elif update.message is not None:
        await update.message.answer("❌ Something went wrong. Please try again or use /start.")
    return True
