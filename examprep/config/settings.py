"""Environment-driven service settings."""
from dataclasses import dataclass, field
from typing import List
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_URL = "https://api.perplexity.ai/chat/completions"
DEFAULT_CHAT_MODEL = "sonar-pro"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8000",
    "http://127.0.0.1:8000",
]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _list_env(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    perplexity_api_key: str = ""
    perplexity_api_url: str = DEFAULT_API_URL
    default_chat_model: str = DEFAULT_CHAT_MODEL
    generation_timeout_seconds: int = 60
    response_cache_capacity: int = 1000
    response_cache_ttl_ms: int = 300_000
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def get_settings() -> Settings:
    """Build Settings from the current environment.

    Raises ValueError when a numeric variable cannot be parsed.
    """
    return Settings(
        perplexity_api_key=os.getenv("PERPLEXITY_API_KEY", ""),
        perplexity_api_url=os.getenv("PERPLEXITY_API_URL", DEFAULT_API_URL),
        default_chat_model=os.getenv("DEFAULT_CHAT_MODEL", DEFAULT_CHAT_MODEL),
        generation_timeout_seconds=_int_env("GENERATION_TIMEOUT_SECONDS", 60),
        response_cache_capacity=_int_env("RESPONSE_CACHE_CAPACITY", 1000),
        response_cache_ttl_ms=_int_env("RESPONSE_CACHE_TTL_MS", 300_000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_list_env("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
    )
