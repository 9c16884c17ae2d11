"""Environment-driven settings for the itinerary backend."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"


class ConfigurationError(RuntimeError):
    """A required server-side setting is missing."""


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_api_base: Optional[str] = None
    gemini_timeout: float = 30.0
    planner_timeout: float = 60.0
    leads_webhook_url: Optional[str] = None
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("JGTRAVEL_ALLOWED_ORIGINS") or "*"
        origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            gemini_api_base=os.getenv("GEMINI_API_BASE") or None,
            gemini_timeout=_float_env("GEMINI_TIMEOUT_SECONDS", 30.0),
            planner_timeout=_float_env("PLANNER_TIMEOUT_SECONDS", 60.0),
            leads_webhook_url=os.getenv("LEADS_WEBHOOK_URL") or None,
            allowed_origins=origins or ["*"],
        )

    def ensure(self, name: str) -> str:
        """Return the requested setting and fail fast if it is missing."""

        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Missing configuration value: {name}")
        return value


def get_settings() -> Settings:
    """FastAPI dependency; re-reads the environment on every request."""
    return Settings.from_env()
