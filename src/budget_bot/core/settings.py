import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from budget_bot.domain.auth import parse_authorized_users
from budget_bot.domain.categories import CategorySet
from budget_bot.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"

_CONFIG_FILE_PATH: str | None = None
_CONFIG_FILE_VALUES: dict[str, str] = {}

_CONFIG_KEYS = (
    "LOG_LEVEL",
    "LOG_DIR",
    "BOT_TOKEN",
    "WEBHOOK_SECRET",
    "AUTHORIZED_USERS",
    "APPS_SCRIPT_URL",
    "SHARED_SECRET",
    "EXPENSE_CATEGORIES",
    "CURRENCY_SYMBOL",
    "SHEETS_TIMEOUT",
    "TELEGRAM_API_URL",
    "HOST",
    "PORT",
)

DEFAULT_TELEGRAM_API_URL = "https://api.telegram.org"
DEFAULT_SHEETS_TIMEOUT_SECONDS = 30.0
DEFAULT_CURRENCY_SYMBOL = "$"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    resolved = find_dotenv(usecwd=True)
    return resolved or None


def _resolve_config_path() -> str:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        return os.path.join(config_dir, CONFIG_FILENAME)
    cwd = os.getcwd()
    candidate = os.path.join(cwd, "config", CONFIG_FILENAME)
    if os.path.exists(candidate):
        return candidate
    return os.path.join(cwd, CONFIG_FILENAME)


def _unquote_value(raw_value: str) -> str:
    if len(raw_value) >= 2 and raw_value[0] == raw_value[-1] and raw_value[0] in "\"'":
        return raw_value[1:-1]
    return raw_value


def read_config_file(path: str | None) -> dict[str, str]:
    """Read flat ``KEY: value`` lines; comments and blank values are skipped."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            key = key.strip()
            value = _unquote_value(raw_value.strip())
            if key and value:
                values[key] = value
    return values


def load_environment() -> None:
    global _CONFIG_FILE_PATH
    global _CONFIG_FILE_VALUES

    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _CONFIG_FILE_PATH = _resolve_config_path()
    _CONFIG_FILE_VALUES = read_config_file(_CONFIG_FILE_PATH)

    for key in _CONFIG_KEYS:
        if key not in os.environ and key in _CONFIG_FILE_VALUES:
            os.environ[key] = _CONFIG_FILE_VALUES[key]


def get_config_path() -> str | None:
    return _CONFIG_FILE_PATH


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_float(name: str, default: float, min_value: float | None = None) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


@dataclass(frozen=True)
class BotSettings:
    bot_token: str | None = None
    webhook_secret: str | None = None
    authorized_users: frozenset[int] = frozenset()
    apps_script_url: str | None = None
    shared_secret: str | None = None
    categories: CategorySet = CategorySet()
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    sheets_timeout: float = DEFAULT_SHEETS_TIMEOUT_SECONDS
    telegram_api_url: str = DEFAULT_TELEGRAM_API_URL

    @classmethod
    def from_env(cls) -> "BotSettings":
        return cls(
            bot_token=os.getenv("BOT_TOKEN") or None,
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            authorized_users=parse_authorized_users(os.getenv("AUTHORIZED_USERS")),
            apps_script_url=os.getenv("APPS_SCRIPT_URL") or None,
            shared_secret=os.getenv("SHARED_SECRET") or None,
            categories=CategorySet.from_string(os.getenv("EXPENSE_CATEGORIES")),
            currency_symbol=os.getenv("CURRENCY_SYMBOL") or DEFAULT_CURRENCY_SYMBOL,
            sheets_timeout=get_env_float(
                "SHEETS_TIMEOUT",
                DEFAULT_SHEETS_TIMEOUT_SECONDS,
                min_value=0.1,
            ),
            telegram_api_url=(os.getenv("TELEGRAM_API_URL") or DEFAULT_TELEGRAM_API_URL).rstrip("/"),
        )

    @property
    def secrets(self) -> tuple[str, ...]:
        return tuple(
            value
            for value in (self.bot_token, self.webhook_secret, self.shared_secret)
            if value
        )

    def warn_missing(self) -> None:
        if not self.bot_token:
            logger.warning("BOT_TOKEN not set. Replies to Telegram will fail.")
        if not self.apps_script_url:
            logger.warning("APPS_SCRIPT_URL not set. Expenses cannot be submitted.")
        if not self.webhook_secret:
            logger.warning("WEBHOOK_SECRET not set. Webhook requests are not verified.")
        if not self.authorized_users:
            logger.warning("AUTHORIZED_USERS is empty. Every sender will be ignored.")


_SENSITIVE_ENV_KEYS = (
    "KEY",
    "TOKEN",
    "SECRET",
    "PASSWORD",
    "AUTH",
)

_ENV_KEYS_TO_LOG = (
    "LOG_LEVEL",
    "BOT_TOKEN",
    "WEBHOOK_SECRET",
    "AUTHORIZED_USERS",
    "APPS_SCRIPT_URL",
    "SHARED_SECRET",
    "EXPENSE_CATEGORIES",
    "CURRENCY_SYMBOL",
    "SHEETS_TIMEOUT",
    "TELEGRAM_API_URL",
)


def _should_mask_env_value(name: str) -> bool:
    upper_name = name.upper()
    # AUTHORIZED_USERS contains "AUTH" but is not a credential.
    if upper_name == "AUTHORIZED_USERS":
        return False
    return any(marker in upper_name for marker in _SENSITIVE_ENV_KEYS)


def _mask_env_value(name: str, value: str) -> str:
    sanitized = value.replace("\r", "\\r").replace("\n", "\\n")
    if not _should_mask_env_value(name):
        return sanitized
    if len(sanitized) <= 4:
        return "****"
    return f"{sanitized[:2]}...{sanitized[-2:]}"


def log_environment() -> None:
    logger.info("[ENV] Logging configured environment variables (masked where needed).")
    config_path = get_config_path()
    if config_path and os.path.exists(config_path):
        logger.info("[ENV] Config file: %s", config_path)
    for key in _ENV_KEYS_TO_LOG:
        raw_value = os.getenv(key)
        value = "<unset>" if raw_value is None else _mask_env_value(key, raw_value)
        logger.info("[ENV] %s=%s", key, value)


load_environment()

HOST = os.getenv("HOST", DEFAULT_HOST)
PORT = get_env_int("PORT", DEFAULT_PORT, min_value=1)
