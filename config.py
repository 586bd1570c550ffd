"""Minimal configuration for the common kit helpers."""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in FALSE_VALUES


def _env_positive_int(name: str, default: int) -> int:
    try:
        value = int(os.environ.get(name, default))
    except ValueError:
        return default
    return value if value >= 1 else default


class Config:
    """Configuration class with attribute access."""

    def __init__(self):
        self.log_level = os.environ.get("COMMON_KIT_LOG_LEVEL", "DEBUG")
        self.log_file = os.environ.get("COMMON_KIT_LOG_FILE", "common_kit.log")
        self.max_log_size = 10 * 1024 * 1024  # 10MB

        self.default_encoding = os.environ.get("COMMON_KIT_ENCODING", "utf-8")

        # Console reader defaults
        self.quit_word = os.environ.get("COMMON_KIT_QUIT_WORD", "q") or "q"
        self.console_debug = _env_flag("COMMON_KIT_CONSOLE_DEBUG", True)
        self.max_read_failures = _env_positive_int("COMMON_KIT_MAX_READ_FAILURES", 3)

        # Database request defaults
        self.db_url = os.environ.get("COMMON_KIT_DB_URL", "")
        self.db_user = os.environ.get("COMMON_KIT_DB_USER", "")
        self.db_password = os.environ.get("COMMON_KIT_DB_PASSWORD", "")


# Global config instance
config = Config()
