from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _resolve_env_file() -> str | None:
    # Allow explicit path override
    env_file = os.getenv("RELEVANCE_ENV_FILE", ".env")
    env_file = (env_file or "").strip()
    if not env_file:
        return None
    return env_file if os.path.exists(env_file) else None


class Settings(BaseSettings):
    # Read .env automatically if present, otherwise rely on environment variables.
    model_config = SettingsConfigDict(
        env_prefix="RELEVANCE_",
        extra="ignore",
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
    )

    # Shared secret for the HTTP surface. Empty disables the check.
    api_key: str = "devkey"

    # Remote post-history search (used by the debounced posts search box).
    remote_base_url: str = "http://localhost:3000"
    remote_timeout_s: float = 15.0


settings = Settings()
