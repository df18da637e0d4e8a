"""Provider configuration loading and validation."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import (
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_ATTEMPTS,
    TIMEOUT_HTTP_REQUEST,
)
from ..generation.models import ProviderId


class ProviderCredentials(BaseSettings):
    """Opaque credentials per provider.

    Read from the environment (GEMINI_API_KEY, OPENAI_API_KEY, ...) unless
    passed explicitly. Never part of the generation settings.
    """

    model_config = SettingsConfigDict(extra="ignore")

    gemini_api_key: str = ""
    openai_api_key: str = ""
    stability_api_key: str = ""
    volcengine_access_key: str = ""
    volcengine_secret_key: str = ""
    volcengine_endpoint: str | None = None

    def describe(self) -> dict[str, int]:
        """Credential lengths for logging; never the values."""
        return {
            name: len(value or "")
            for name, value in self.model_dump().items()
            if name != "volcengine_endpoint"
        }


class RetrySettings(BaseModel):
    """Retry policy for a single image request."""

    max_attempts: int = Field(default=RETRY_MAX_ATTEMPTS, ge=1)
    base_delay_seconds: float = Field(default=RETRY_BASE_DELAY_SECONDS, ge=0)


class ProviderEndpoints(BaseModel):
    """Base URLs and model names of the providers."""

    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    volcengine_base_url: str = "https://ark.cn-beijing.volces.com/api/v3"
    volcengine_proxy_base_url: str | None = None
    openai_base_url: str = "https://api.openai.com/v1"
    dalle_model: str = "dall-e-3"
    stability_base_url: str = "https://api.stability.ai/v1"
    stability_engine: str = "stable-diffusion-xl-1024-v1-0"


class GenerationConfig(BaseModel):
    """Full generation configuration."""

    default_provider: ProviderId = ProviderId.GEMINI
    retry: RetrySettings = Field(default_factory=RetrySettings)
    request_timeout_seconds: float | None = TIMEOUT_HTTP_REQUEST
    variation_stagger_seconds: float | None = None  # None: per-provider default
    endpoints: ProviderEndpoints = Field(default_factory=ProviderEndpoints)


def load_generation_config(config_path: Path | None = None) -> GenerationConfig:
    """Load generation configuration from a YAML file."""
    if config_path is None:
        # Default to config/generation.yaml relative to project root
        config_path = Path(__file__).parent.parent.parent.parent / "config" / "generation.yaml"

    if not config_path.exists():
        # Return default config if file doesn't exist
        return GenerationConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return GenerationConfig(**data)
