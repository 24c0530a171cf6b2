import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")


def require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _get_list(name: str, fallback: str = "") -> List[str]:
    raw_value = os.getenv(name, fallback)
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


def _get_bool(name: str, fallback: bool = False) -> bool:
    raw_value = os.getenv(name)
    if raw_value is None or raw_value.strip() == "":
        return fallback
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_pairs(name: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for item in _get_list(name):
        key, sep, value = item.partition("=")
        if sep and key.strip():
            pairs[key.strip()] = value.strip()
    return pairs


@dataclass(frozen=True)
class Settings:
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory").lower()
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    store_name: str = os.getenv("STORE_NAME", "Packaging Store")
    store_public_url: str = os.getenv("STORE_PUBLIC_URL", "http://localhost:5173")
    order_id_prefix: str = os.getenv("ORDER_ID_PREFIX", "PKM")
    shipping_timeout_seconds: float = float(os.getenv("SHIPPING_TIMEOUT_SECONDS", "10"))
    allow_placeholder_tracking: bool = _get_bool("ALLOW_PLACEHOLDER_TRACKING")
    carrier_api_keys: Dict[str, str] = field(
        default_factory=lambda: _get_pairs("CARRIER_API_KEYS")
    )
    allowed_origins: List[str] = field(
        default_factory=lambda: _get_list("ALLOWED_ORIGINS", "*")
    )


settings = Settings()
