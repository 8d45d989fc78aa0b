"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MODERATION_URL = "https://api.openai.com/v1/moderations"
DEFAULT_USER_AGENT = "familynight/cli"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass
class Settings:
    """Pipeline settings.

    Every field has a working default so the pipeline runs offline; only
    generation and remote moderation need API keys.
    """

    anthropic_api_key: str = ""
    model: str = DEFAULT_MODEL
    enable_api_moderation: bool = False
    moderation_api_key: str = ""
    moderation_url: str = DEFAULT_MODERATION_URL
    data_dir: Path = Path.home() / ".familynight"
    rules_file: str = ""
    rate_limit: int = 10
    rate_window_seconds: int = 60
    log_level: str = "WARNING"
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``FAMILYNIGHT_*`` and vendor key variables."""
        data_dir = os.environ.get("FAMILYNIGHT_DATA_DIR")
        return cls(
            anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
            model=os.environ.get("FAMILYNIGHT_MODEL", DEFAULT_MODEL),
            enable_api_moderation=_env_flag("FAMILYNIGHT_ENABLE_API_MODERATION"),
            moderation_api_key=os.environ.get("OPENAI_API_KEY", ""),
            moderation_url=os.environ.get("FAMILYNIGHT_MODERATION_URL", DEFAULT_MODERATION_URL),
            data_dir=Path(data_dir) if data_dir else Path.home() / ".familynight",
            rules_file=os.environ.get("FAMILYNIGHT_RULES_FILE", ""),
            rate_limit=_env_int("FAMILYNIGHT_RATE_LIMIT", 10),
            rate_window_seconds=_env_int("FAMILYNIGHT_RATE_WINDOW", 60),
            log_level=os.environ.get("FAMILYNIGHT_LOG_LEVEL", "WARNING").upper(),
            user_agent=os.environ.get("FAMILYNIGHT_USER_AGENT", DEFAULT_USER_AGENT),
        )

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"


def get_settings() -> Settings:
    """Return settings for the current process environment."""
    return Settings.from_env()
