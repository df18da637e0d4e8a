"""Provider selector - maps a provider id and credentials to an adapter."""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..errors import UnauthenticatedError
from ..generation.models import ProviderId
from ..generation.retry import SleepFunc
from .base import ImageGenerator
from .config import GenerationConfig, ProviderCredentials
from .dalle import DalleGenerator
from .gemini import GeminiGenerator
from .stability import StabilityGenerator
from .volcengine import VolcengineGenerator

_logger = logging.getLogger("ai_calls")

DEFAULT_PROVIDER = ProviderId.GEMINI

# Credential field each provider cannot work without
REQUIRED_CREDENTIAL: dict[ProviderId, str] = {
    ProviderId.GEMINI: "gemini_api_key",
    ProviderId.VOLCENGINE: "volcengine_secret_key",
    ProviderId.DALLE: "openai_api_key",
    ProviderId.STABILITY: "stability_api_key",
}

MISSING_CREDENTIAL_MESSAGES: dict[ProviderId, str] = {
    ProviderId.GEMINI: "Please set the Gemini API key in settings",
    ProviderId.VOLCENGINE: "Please set the Volcengine Ark API key in settings",
    ProviderId.DALLE: "Please set the OpenAI API key in settings",
    ProviderId.STABILITY: "Please set the Stability AI API key in settings",
}


def normalize_provider(
    provider_id: ProviderId | str | None,
    default: ProviderId = DEFAULT_PROVIDER,
) -> ProviderId:
    """Parse a provider id; anything unknown maps to ``default``."""
    if isinstance(provider_id, ProviderId):
        return provider_id
    if provider_id is None or not str(provider_id).strip():
        return default
    try:
        return ProviderId(str(provider_id).strip().lower())
    except ValueError:
        _logger.warning(f"Unknown provider '{provider_id}', using {default.value}")
        return default


def has_credentials(provider: ProviderId, credentials: ProviderCredentials) -> bool:
    value = getattr(credentials, REQUIRED_CREDENTIAL[provider]) or ""
    return bool(value.strip())


def available_providers(credentials: ProviderCredentials) -> list[ProviderId]:
    """Providers whose required credential is present."""
    return [provider for provider in ProviderId if has_credentials(provider, credentials)]


def create_generator(
    provider_id: ProviderId | str | None,
    credentials: ProviderCredentials,
    config: GenerationConfig | None = None,
    client: httpx.AsyncClient | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> ImageGenerator:
    """Build the adapter for a provider.

    Args:
        provider_id: Requested provider; missing or unknown ids fall back to
            the configured default provider.
        credentials: Credential bundle.
        config: Generation configuration.
        client: Optional shared HTTP client.
        sleep: Awaitable sleep used for backoff and staggering.

    Returns:
        Ready to use ImageGenerator.

    Raises:
        UnauthenticatedError: If the provider's credential is missing.
            Raised before any network activity.
    """
    config = config or GenerationConfig()
    provider = normalize_provider(provider_id, config.default_provider)

    if not has_credentials(provider, credentials):
        raise UnauthenticatedError(
            MISSING_CREDENTIAL_MESSAGES[provider],
            provider=provider.value,
        )

    _logger.debug(
        f"Creating {provider.value} generator (credential lengths {credentials.describe()})"
    )

    if provider == ProviderId.VOLCENGINE:
        return VolcengineGenerator(
            secret_key=credentials.volcengine_secret_key,
            endpoint=credentials.volcengine_endpoint,
            config=config,
            client=client,
            sleep=sleep,
        )
    if provider == ProviderId.DALLE:
        return DalleGenerator(credentials.openai_api_key, config=config, client=client, sleep=sleep)
    if provider == ProviderId.STABILITY:
        return StabilityGenerator(
            credentials.stability_api_key, config=config, client=client, sleep=sleep
        )
    return GeminiGenerator(credentials.gemini_api_key, config=config, client=client, sleep=sleep)
