"""
todo_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT signing secret).
- Refuse to start in prod with the built-in development secret.
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-secret-change-me-0123456789abcdef"


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `TODO_`).

    The signing secret is read once at startup and passed explicitly to every component
    that needs it; nothing mutates settings after the app is built.
    """

    model_config = SettingsConfigDict(env_prefix="TODO_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "todo-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "todo-api"
    jwt_audience: str = "todo-api-clients"
    jwt_secret: str = Field(default=DEV_JWT_SECRET, repr=False)
    token_ttl_minutes: int = Field(default=180, ge=1)
    password_hash_rounds: int = Field(default=14, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./todo.db"

    @model_validator(mode="after")
    def _reject_dev_secret_in_prod(self) -> Settings:
        if self.env == "prod" and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("TODO_JWT_SECRET must be set to a high-entropy value in prod")
        return self

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self.token_ttl_minutes)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; only the process entrypoint should call this.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly with a throwaway database and a low hash cost.
