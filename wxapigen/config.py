"""Generator settings read from the environment."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WXAPIGEN_", case_sensitive=False)

    # Used when --base-url is not given; falls back to servers[0].url when unset.
    base_url: Optional[str] = Field(default=None)
    log_level: str = Field(default="WARNING")
    http_timeout: float = Field(default=30)

    @field_validator("log_level")
    @classmethod
    def _log_level_ok(cls, v: str) -> str:
        v = (v or "").upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {v} (expected one of {', '.join(LOG_LEVELS)})")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read settings once; invalid environment values raise ConfigError."""
    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"WXAPIGEN_{'_'.join(str(part) for part in error['loc']).upper()}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigError(f"Invalid settings: {problems}") from exc
