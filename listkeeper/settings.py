"""Centralised settings for listkeeper, loaded from env / .env."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ListkeeperSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LISTKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- general ---
    app_name: str = "listkeeper"
    log_level: str = "INFO"

    # --- HTTP (health endpoint) ---
    host: str = "0.0.0.0"
    port: int = 8080

    # --- classifier (LiteLLM) ---
    model: str = "deepseek/deepseek-chat"
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("LISTKEEPER_API_KEY", "DEEPSEEK_API_KEY"),
    )
    api_base: str | None = None
    classifier_timeout: float = 10.0
    max_tokens: int = 500
    temperature: float = 0.3

    # --- groups ---
    require_activation: bool = True
    authorized_groups: list[str] = Field(default_factory=list)
    # seconds a message may wait for its group before a warning is logged
    lock_warn_after: float = 30.0

    # --- replies ---
    currency: str = ""
    expense_insights: bool = True
    digest_every: int = 3

    # --- worker tuning ---
    max_concurrent_workers: int = 4

    # --- Telegram ---
    telegram_token: str = ""
    telegram_proxy: str | None = None


@lru_cache
def get_settings() -> ListkeeperSettings:
    return ListkeeperSettings()
