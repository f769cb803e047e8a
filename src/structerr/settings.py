"""
structerr.settings

Environment-driven logging configuration (Pydantic Settings).

Responsibilities:
- Provide typed settings for the log sink (level, output stream, service name).
- Offer a cached settings instance for process start-up.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Read from `STRUCTERR_*` environment variables, e.g. `STRUCTERR_LOG_LEVEL=DEBUG`.
    Defaults give INFO-and-above JSON lines on stderr.
    """

    model_config = SettingsConfigDict(env_prefix="STRUCTERR_", case_sensitive=False)

    log_level: LogLevel = "INFO"
    log_output: Literal["stderr", "stdout"] = "stderr"
    # Empty means no "service" field is added to log events.
    service_name: str = ""

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on every call.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Settings are consumed only by `observability.logging.configure_logging_from_settings`;
# the attribute/error core never reads configuration.
