"""Centralized application configuration via environment variables."""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class RotationMode(StrEnum):
    """How the router picks the starting credential of a request."""

    COUNTER = "counter"
    TIME_BUCKET = "time_bucket"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All LLM API keys use SecretStr to prevent accidental logging.
    Every key is optional: a deployment without keys still starts,
    and completion calls fail with a configuration error instead.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App ---
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "DEBUG"

    # --- LLM provider ---
    # Any OpenAI-compatible chat-completions endpoint (Groq, HF router, ...).
    llm_provider: str = "groq"
    llm_base_url: str = "https://api.groq.com/openai/v1"

    # --- LLM API Keys ---
    # Rotated per request; the second key is optional.
    llm_api_key: SecretStr | None = None
    llm_api_key_2: SecretStr | None = None
    llm_extra_api_keys: SecretStr = SecretStr("")  # comma-separated

    # --- LLM Models ---
    llm_primary_model: str = "meta-llama/llama-4-maverick-17b-128e-instruct"
    llm_fallback_models: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    # Known-good model, always appended to the fallback list.
    llm_default_model: str = "llama-3.3-70b-versatile"

    # --- Router behaviour ---
    llm_request_timeout: float = Field(default=30.0, gt=0)
    llm_rotation: RotationMode = RotationMode.COUNTER
    llm_rotation_window_seconds: float = Field(default=30.0, gt=0)
    llm_retry_policy: Literal["blanket", "strict"] = "blanket"

    # --- Model Registry ---
    model_registry_path: Path = Path("config/models.yaml")

    @property
    def api_key_entries(self) -> list[str | None]:
        """Raw credential entries in rotation order, unconfigured ones as None."""
        entries: list[str | None] = [
            key.get_secret_value() if key is not None else None
            for key in (self.llm_api_key, self.llm_api_key_2)
        ]
        extra = self.llm_extra_api_keys.get_secret_value()
        entries.extend(part.strip() for part in extra.split(","))
        return entries

    # --- Convenience properties ---
    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton.

    Usage::

        from analogix.config import get_settings
        settings = get_settings()
    """
    return Settings()
