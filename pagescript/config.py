import logging
import os
import tempfile

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from pagescript.errors import UsageError

logger = logging.getLogger(__name__)

load_dotenv()

USER_DATA_DIR_NAME = "pagescript_user_data"
SUPPORTED_BROWSERS = ["chromium", "firefox", "webkit"]
DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    browser: str = "chromium"
    user_data_dir: str = os.path.join(tempfile.gettempdir(), USER_DATA_DIR_NAME)
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS
    log_level: str = "WARNING"


def load_settings() -> Settings:
    browser = os.getenv("PAGESCRIPT_BROWSER", "chromium").strip().lower()
    if browser not in SUPPORTED_BROWSERS:
        raise UsageError(
            f"Unsupported PAGESCRIPT_BROWSER '{browser}', expected one of: {', '.join(SUPPORTED_BROWSERS)}"
        )

    user_data_dir = os.getenv("PAGESCRIPT_USER_DATA_DIR") or os.path.join(
        tempfile.gettempdir(), USER_DATA_DIR_NAME
    )

    raw_timeout = os.getenv("PAGESCRIPT_NAVIGATION_TIMEOUT_MS", str(DEFAULT_NAVIGATION_TIMEOUT_MS))
    try:
        navigation_timeout_ms = int(raw_timeout)
    except ValueError:
        raise UsageError(f"PAGESCRIPT_NAVIGATION_TIMEOUT_MS must be an integer, got: {raw_timeout}")
    if navigation_timeout_ms < 0:
        raise UsageError(f"PAGESCRIPT_NAVIGATION_TIMEOUT_MS must not be negative, got: {navigation_timeout_ms}")

    log_level = os.getenv("PAGESCRIPT_LOG_LEVEL", "WARNING").strip().upper()
    if log_level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown PAGESCRIPT_LOG_LEVEL '{log_level}', falling back to WARNING")
        log_level = "WARNING"

    settings = Settings(
        browser=browser,
        user_data_dir=user_data_dir,
        navigation_timeout_ms=navigation_timeout_ms,
        log_level=log_level,
    )
    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
