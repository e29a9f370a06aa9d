# rateorant/config.py
from typing import Optional
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# a .env in the working directory wins over the one next to the package
load_dotenv()


class Settings(BaseSettings):
    # Telegram Bot
    BOT_TOKEN: str = ""

    # Backend API
    API_BASE_URL: str = "http://localhost:8000"
    API_ALT_PREFIX: str = "/api"
    REQUEST_TIMEOUT: int = 30

    # Owner notifications (0 disables background polling)
    NOTIFICATION_POLL_INTERVAL: int = 60

    # Sessions
    SESSION_STORE_PATH: Optional[str] = None
    USER_CACHE_TTL: int = 600

    DASHBOARD_PAGE_SIZE: int = 8
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=os.path.join(os.path.dirname(__file__), "..", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


config = Settings()
