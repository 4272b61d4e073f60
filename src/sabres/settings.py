"""
sabres.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the storage layer.
- Offer a cached settings instance for the composition root.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration, defaults safe for local dev.
    A single settings object is handed to `sabres.app.create_database`.
    """

    model_config = SettingsConfigDict(env_prefix="SABRES_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "sabres"
    log_level: str = "INFO"

    # Persistence
    database_url: str = "sqlite:///./sabres.db"
    # Logs every rendered statement at debug level.
    sql_echo: bool = False

    # Background execution (find/get/count *_in_background).
    background_workers: int = Field(default=1, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Nothing else in the package reads the environment; settings flow in explicitly.
