"""Runtime settings, read from ``EXAM_APP_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from exam_app.constants.exam_constants import DEFAULT_ADMIN_PASSWORD
from exam_app.constants.network_constants import DEFAULT_CORS_ORIGINS, DEFAULT_HOST, DEFAULT_PORT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="EXAM_APP_", env_file=".env", extra="ignore")

    admin_password: SecretStr = Field(default=SecretStr(DEFAULT_ADMIN_PASSWORD))
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"
    exam_file: Path | None = None
