"""Tests for provider selection."""

import httpx
import pytest

from bananaslide.errors import UnauthenticatedError
from bananaslide.generation.models import ProviderId
from bananaslide.providers import (
    DalleGenerator,
    GeminiGenerator,
    StabilityGenerator,
    VolcengineGenerator,
)
from bananaslide.providers.config import GenerationConfig, ProviderCredentials
from bananaslide.providers.factory import (
    available_providers,
    create_generator,
    normalize_provider,
)


def no_credentials():
    return ProviderCredentials(
        gemini_api_key="",
        openai_api_key="",
        stability_api_key="",
        volcengine_access_key="",
        volcengine_secret_key="",
    )


class TestCreateGenerator:
    """Adapter construction."""

    @pytest.mark.parametrize("provider_id, expected", [
        (ProviderId.GEMINI, GeminiGenerator),
        (ProviderId.VOLCENGINE, VolcengineGenerator),
        (ProviderId.DALLE, DalleGenerator),
        (ProviderId.STABILITY, StabilityGenerator),
        ("dalle", DalleGenerator),
        ("  Stability ", StabilityGenerator),
    ])
    def test_selects_adapter(self, credentials, provider_id, expected):
        assert isinstance(create_generator(provider_id, credentials), expected)

    @pytest.mark.parametrize("provider_id", ["midjourney", "", None])
    def test_unknown_provider_falls_back_to_gemini(self, credentials, provider_id):
        assert isinstance(create_generator(provider_id, credentials), GeminiGenerator)

    @pytest.mark.parametrize("provider_id", [None, "", "midjourney"])
    def test_fallback_uses_configured_default(self, credentials, provider_id):
        config = GenerationConfig(default_provider=ProviderId.VOLCENGINE)

        generator = create_generator(provider_id, credentials, config)

        assert isinstance(generator, VolcengineGenerator)

    def test_enum_id_checks_its_own_credential(self):
        credentials = ProviderCredentials(
            gemini_api_key="g",
            openai_api_key="",
            stability_api_key="",
            volcengine_secret_key="",
        )

        with pytest.raises(UnauthenticatedError, match="OpenAI"):
            create_generator(ProviderId.DALLE, credentials)

    def test_volcengine_credentials_passed(self):
        credentials = ProviderCredentials(
            volcengine_access_key="ak",
            volcengine_secret_key="sk",
            volcengine_endpoint="https://ark.example/api/v3",
        )

        generator = create_generator(ProviderId.VOLCENGINE, credentials)

        assert generator.api_key == "sk"
        assert generator.base_url == "https://ark.example/api/v3"

    @pytest.mark.parametrize("provider_id, message", [
        (ProviderId.GEMINI, "Please set the Gemini API key in settings"),
        (ProviderId.VOLCENGINE, "Please set the Volcengine Ark API key in settings"),
        (ProviderId.DALLE, "Please set the OpenAI API key in settings"),
        (ProviderId.STABILITY, "Please set the Stability AI API key in settings"),
    ])
    def test_missing_credential(self, provider_id, message):
        with pytest.raises(UnauthenticatedError, match=message):
            create_generator(provider_id, no_credentials())

    def test_whitespace_credential_is_missing(self):
        credentials = ProviderCredentials(gemini_api_key="   ")
        with pytest.raises(UnauthenticatedError):
            create_generator(ProviderId.GEMINI, credentials)

    @pytest.mark.asyncio
    async def test_missing_credential_makes_no_request(self, mock_http):
        http = mock_http(lambda request: httpx.Response(200))

        with pytest.raises(UnauthenticatedError):
            create_generator(ProviderId.DALLE, no_credentials(), client=http.client())

        assert http.call_count == 0


class TestProviderHelpers:
    """Provider id parsing and availability."""

    def test_normalize(self):
        assert normalize_provider("VOLCENGINE") == ProviderId.VOLCENGINE
        assert normalize_provider("unknown") == ProviderId.GEMINI

    @pytest.mark.parametrize("provider_id", list(ProviderId))
    def test_normalize_keeps_enum_members(self, provider_id):
        assert normalize_provider(provider_id) is provider_id

    def test_normalize_custom_default(self):
        assert normalize_provider(None, ProviderId.STABILITY) == ProviderId.STABILITY
        assert normalize_provider("midjourney", ProviderId.DALLE) == ProviderId.DALLE
        assert normalize_provider(ProviderId.GEMINI, ProviderId.DALLE) == ProviderId.GEMINI

    def test_available_providers(self):
        credentials = ProviderCredentials(
            gemini_api_key="g",
            openai_api_key="",
            stability_api_key="s",
            volcengine_secret_key="",
        )

        assert available_providers(credentials) == [ProviderId.GEMINI, ProviderId.STABILITY]

    def test_describe_hides_values(self, credentials):
        described = credentials.describe()

        assert described["gemini_api_key"] == len("gemini-test-key")
        assert "gemini-test-key" not in str(described)
