from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from exceptions.exceptions import ConfigurationError


load_dotenv()

API_KEY_ENV = "OPENAI_API_KEY"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(name, f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """
    Central configuration for the thumbnail chat service.

    Values are loaded once from environment variables (with sensible defaults)
    and then passed explicitly to the router and the image service.
    """

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    image_model: str = "gpt-image-1"
    image_size: str = "1536x1024"
    image_quality: str = "high"
    # Last 6 turns, i.e. 3 user/bot exchanges.
    context_window: int = 6
    max_context_exchanges: int = 3

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=(os.getenv(API_KEY_ENV) or "").strip() or None,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            image_model=os.getenv("OPENAI_IMAGE_MODEL", "gpt-image-1"),
            image_size=os.getenv("OPENAI_IMAGE_SIZE", "1536x1024"),
            image_quality=os.getenv("OPENAI_IMAGE_QUALITY", "high"),
            context_window=_int_env("THUMBNAIL_CONTEXT_WINDOW", 6),
            max_context_exchanges=_int_env("THUMBNAIL_CONTEXT_EXCHANGES", 3),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def credential_error(self) -> Optional[ConfigurationError]:
        """Return the configuration error for a missing credential, if any."""
        if self.has_api_key:
            return None
        return ConfigurationError(API_KEY_ENV)


def load_settings() -> Settings:
    """Read settings from the process environment (and .env, if present)."""
    return Settings.from_env()
