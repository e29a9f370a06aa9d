# rateorant/__main__.py
import asyncio
import logging
import sys

from .bot import create_bot, create_dispatcher
from .config import config
from .notifications import NotificationService
from .session import SessionStore
from .utils.http_client import http_client

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def check_api_connection(max_retries: int = 5, retry_delay: int = 5) -> bool:
    """Make sure the backend answers before the bot starts taking updates"""
    logger.info(f"🔌 Checking API at {config.API_BASE_URL}...")

    for attempt in range(max_retries):
        if await http_client.check_api_health():
            logger.info("✅ API is reachable!")
            return True
        logger.warning(f"⚠️ API is not reachable. Attempt {attempt + 1}/{max_retries}")

        if attempt < max_retries - 1:
            logger.info(f"⏳ Waiting {retry_delay} seconds before retrying...")
            await asyncio.sleep(retry_delay)

    logger.error("❌ Could not reach the API after all attempts")
    return False


async def main():
    logger.info("🚀 Bot is starting...")

    if not config.BOT_TOKEN:
        logger.error("❌ BOT_TOKEN is not set")
        sys.exit(1)

    if not await check_api_connection():
        logger.error("❌ The bot cannot start without the API")
        await http_client.close()
        sys.exit(1)

    sessions = SessionStore(config.SESSION_STORE_PATH)
    sessions.load()

    bot = create_bot()
    dp = create_dispatcher(http_client, sessions)
    notifier = NotificationService(bot, http_client, sessions, config.NOTIFICATION_POLL_INTERVAL)

    try:
        notifier.start()
        await dp.start_polling(bot)
    finally:
        await notifier.stop()
        await bot.session.close()
        await http_client.close()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
