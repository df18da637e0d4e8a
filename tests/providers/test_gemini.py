"""Tests for the Gemini adapter.

Tests cover:
- Request shape (endpoint, auth header, parts order, image config)
- Inline image extraction
- Error body parsing and retry of transient statuses
- Transport failures
"""

import httpx
import pytest

from bananaslide.errors import (
    EmptyResultError,
    NetworkUnavailableError,
    RequestFailedError,
    UnauthenticatedError,
)
from bananaslide.generation.models import AspectRatio, ImageSize, ModelType
from bananaslide.providers.config import GenerationConfig
from bananaslide.providers.gemini import GeminiGenerator


def image_response(png_b64, key="inlineData"):
    return httpx.Response(200, json={
        "candidates": [{
            "content": {
                "parts": [
                    {"text": "Here is your slide"},
                    {key: {"mimeType": "image/png", "data": png_b64}},
                ]
            }
        }]
    })


@pytest.fixture
def make_generator(credentials, fast_config, fake_sleep):
    def _make(http):
        return GeminiGenerator(
            credentials.gemini_api_key,
            config=fast_config,
            client=http.client(),
            sleep=fake_sleep,
        )
    return _make


class TestGeminiRequest:
    """Wire format of generateContent calls."""

    @pytest.mark.asyncio
    async def test_request_shape(self, settings, png_b64, mock_http, make_generator):
        http = mock_http(lambda request: image_response(png_b64))
        generator = make_generator(http)

        image = await generator.generate_one(settings, "Agenda")

        assert image == png_b64
        request = http.requests[0]
        assert request.url.path.endswith(f"/models/{ModelType.PRO.value}:generateContent")
        assert request.headers["x-goog-api-key"] == "gemini-test-key"
        assert "authorization" not in request.headers

        body = http.json_body()
        assert body["contents"][0]["role"] == "user"
        assert body["generationConfig"] == {
            "responseModalities": ["IMAGE"],
            "imageConfig": {"aspectRatio": "16:9", "imageSize": "2K"},
        }

    def test_images_precede_text(self, settings, credentials, png_b64):
        generator = GeminiGenerator(credentials.gemini_api_key)
        with_reference = settings.model_copy(update={"reference_image": png_b64})

        parts = generator.build_payload(with_reference, "Agenda", "/9j/content")["contents"][0]["parts"]

        assert parts[0]["inlineData"]["mimeType"] == "image/png"
        assert parts[1]["inlineData"] == {"mimeType": "image/jpeg", "data": "/9j/content"}
        assert "Agenda" in parts[2]["text"]

    def test_flash_model_omits_image_size(self, settings, credentials):
        generator = GeminiGenerator(credentials.gemini_api_key)
        flash = settings.model_copy(update={"model": ModelType.FLASH, "image_size": ImageSize.K4})

        image_config = generator.build_payload(flash, "", None)["generationConfig"]["imageConfig"]

        assert image_config == {"aspectRatio": "16:9"}

    def test_custom_ratio_passed_through(self, settings, credentials):
        generator = GeminiGenerator(credentials.gemini_api_key)
        custom = settings.model_copy(update={
            "aspect_ratio": AspectRatio.CUSTOM,
            "custom_aspect_ratio": "21:9",
        })

        image_config = generator.build_payload(custom, "", None)["generationConfig"]["imageConfig"]

        assert image_config["aspectRatio"] == "21:9"

    def test_missing_key_rejected(self):
        with pytest.raises(UnauthenticatedError):
            GeminiGenerator("  ")


class TestGeminiResponse:
    """Response handling and failures."""

    @pytest.mark.asyncio
    async def test_snake_case_inline_data(self, settings, png_b64, mock_http, make_generator):
        http = mock_http(lambda request: image_response(png_b64, key="inline_data"))

        assert await make_generator(http).generate_one(settings, "") == png_b64

    @pytest.mark.asyncio
    async def test_text_only_response_is_empty_result(self, settings, mock_http, make_generator):
        http = mock_http(lambda request: httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "I cannot draw that"}]}}]
        }))

        with pytest.raises(EmptyResultError, match="No image generated in response."):
            await make_generator(http).generate_one(settings, "")
        assert http.call_count == 1

    @pytest.mark.asyncio
    async def test_no_candidates(self, settings, mock_http, make_generator):
        http = mock_http(lambda request: httpx.Response(200, json={}))

        with pytest.raises(EmptyResultError):
            await make_generator(http).generate_one(settings, "")

    @pytest.mark.asyncio
    async def test_error_message_from_body(self, settings, mock_http, make_generator):
        http = mock_http(lambda request: httpx.Response(400, json={
            "error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}
        }))

        with pytest.raises(RequestFailedError) as exc_info:
            await make_generator(http).generate_one(settings, "")

        assert exc_info.value.message == "API key not valid. Please pass a valid API key."
        assert exc_info.value.status_code == 400
        assert http.call_count == 1

    @pytest.mark.asyncio
    async def test_overloaded_then_success(self, settings, png_b64, mock_http, make_generator):
        responses = iter([
            httpx.Response(503, json={"error": {"message": "The model is overloaded."}}),
            image_response(png_b64),
        ])
        http = mock_http(lambda request: next(responses))

        assert await make_generator(http).generate_one(settings, "") == png_b64
        assert http.call_count == 2

    @pytest.mark.asyncio
    async def test_error_without_json_body(self, settings, mock_http, make_generator):
        http = mock_http(lambda request: httpx.Response(400, text=""))

        with pytest.raises(RequestFailedError, match="API request failed with status 400"):
            await make_generator(http).generate_one(settings, "")

    @pytest.mark.asyncio
    async def test_network_failure_retried_then_raised(self, settings, mock_http, make_generator):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        http = mock_http(handler)

        with pytest.raises(NetworkUnavailableError):
            await make_generator(http).generate_one(settings, "")
        assert http.call_count == 3

    @pytest.mark.asyncio
    async def test_variations(self, settings, png_b64, mock_http, make_generator):
        http = mock_http(lambda request: image_response(png_b64))

        result = await make_generator(http).generate_variations(settings, "Agenda", count=3)

        assert result.images == [png_b64] * 3
        assert http.call_count == 3


class TestGeminiBlockedResponses:
    """Successful bodies without usable content."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"candidates": [{"content": None, "finishReason": "SAFETY"}]},
        {"candidates": [{"finishReason": "PROHIBITED_CONTENT"}]},
        {"candidates": [None]},
        {"candidates": [{"content": {"parts": None}}]},
        {"candidates": [{"content": {"parts": [None, {"text": "blocked"}]}}]},
    ])
    async def test_missing_content_is_empty_result(self, settings, mock_http, make_generator, body):
        http = mock_http(lambda request: httpx.Response(200, json=body))

        with pytest.raises(EmptyResultError, match="No image generated in response."):
            await make_generator(http).generate_one(settings, "")
        assert http.call_count == 1


class TestRequestTimeout:
    """Configured timeout applies to caller supplied clients too."""

    @pytest.mark.asyncio
    async def test_timeout_sent_with_shared_client(self, settings, credentials, png_b64, mock_http):
        http = mock_http(lambda request: image_response(png_b64))
        config = GenerationConfig(request_timeout_seconds=7.0)
        generator = GeminiGenerator(credentials.gemini_api_key, config=config, client=http.client())

        await generator.generate_one(settings, "")

        timeout = http.requests[0].extensions["timeout"]
        assert timeout["read"] == 7.0
        assert timeout["connect"] == 7.0

    @pytest.mark.asyncio
    async def test_read_timeout_is_network_unavailable(self, settings, mock_http, make_generator):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        http = mock_http(handler)

        with pytest.raises(NetworkUnavailableError):
            await make_generator(http).generate_one(settings, "")
        assert http.call_count == 3
