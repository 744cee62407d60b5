import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Loads .env from the project root
load_dotenv()


def _get_bool(name: str, default: str = "") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _get_optional_float(name: str) -> float | None:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return None
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid {name}: {raw_value}") from exc
    return value if value > 0 else None


def _get_timezone(name: str) -> str | None:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return None
    try:
        ZoneInfo(raw_value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RuntimeError(f"Invalid {name}: {raw_value}") from exc
    return raw_value


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./orders.db")
ENV = os.getenv("ENV", "dev")
ENV_NORMALIZED = ENV.lower()
IS_DEV = ENV_NORMALIZED in {"dev", "development", "local"}
IS_PROD = ENV_NORMALIZED in {"prod", "production"}

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
STATIC_DIR = os.getenv("STATIC_DIR", "public")

# Order intake
DUPLICATE_WINDOW_SECONDS = int(os.getenv("DUPLICATE_WINDOW_SECONDS", "120"))
ORDER_TIMEOUT_SECONDS = _get_optional_float("ORDER_TIMEOUT_SECONDS")
DISPLAY_TIMEZONE = _get_timezone("DISPLAY_TIMEZONE")

# WhatsApp
OWNER_NUMBER = os.getenv("OWNER_NUMBER", "").strip()
WHATSAPP_PROVIDER = os.getenv("WHATSAPP_PROVIDER", "mock").strip().lower()
WHATSAPP_ADDRESS_SUFFIX = os.getenv("WHATSAPP_ADDRESS_SUFFIX", "c.us").strip().lstrip("@")
WHATSAPP_FAIL_ON_SEND = _get_bool("WHATSAPP_FAIL_ON_SEND")
WHATSAPP_ALLOW_MOCK = IS_DEV or ENV_NORMALIZED == "test" or _get_bool("WHATSAPP_ALLOW_MOCK")
WHATSAPP_READY_TIMEOUT_SECONDS = float(os.getenv("WHATSAPP_READY_TIMEOUT_SECONDS", "5"))

META_WA_ACCESS_TOKEN = os.getenv("META_WA_ACCESS_TOKEN", "")
META_WA_PHONE_NUMBER_ID = os.getenv("META_WA_PHONE_NUMBER_ID", "")
META_API_VERSION = os.getenv("META_API_VERSION", "v19.0")
META_API_TIMEOUT_SECONDS = float(os.getenv("META_API_TIMEOUT_SECONDS", "10"))
