"""Settings for the sample runner, read from the environment."""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from genai_tokens.api import RetryConfig
from genai_tokens.api._client import API_KEY_ENV_VARS

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_CACHE_MODEL = "models/gemini-1.5-flash-001"
DEFAULT_POLL_INTERVAL = 10.0


class Settings(BaseSettings):
    """Everything the samples need besides the network.

    Fields come from ``GENAI_TOKENS_*`` variables; the key comes from
    ``GEMINI_API_KEY`` or ``API_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="GENAI_TOKENS_",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    api_key: str = Field(default="", validation_alias=AliasChoices(*API_KEY_ENV_VARS))
    model: str = Field(default=DEFAULT_MODEL, min_length=1)
    cache_model: str = Field(default=DEFAULT_CACHE_MODEL, min_length=1)
    media_dir: Path = Path("media")
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, ge=0)
    max_retries: int = Field(default=0, ge=0)

    @property
    def retry(self) -> RetryConfig | None:
        return RetryConfig(max_retries=self.max_retries) if self.max_retries > 0 else None
