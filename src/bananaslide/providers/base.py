"""Base class shared by the image generation provider adapters.

Every adapter exposes the same two operations:

- ``generate_one`` - one image, retried on transient failures
- ``generate_variations`` - ``count`` staggered concurrent images

Subclasses only describe their wire format in ``_generate_once``; the HTTP
plumbing, error classification, retry and fan-out live here.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..constants import STAGGER_DEFAULT_SECONDS, VARIANT_DEFAULT_COUNT
from ..errors import (
    DownloadFailedError,
    EmptyResultError,
    NetworkUnavailableError,
    RequestFailedError,
    UnauthenticatedError,
)
from ..generation.fanout import VariationResult, generate_variations
from ..generation.models import GenerationSettings
from ..generation.retry import SleepFunc, with_retry
from ..images import encode_image
from .config import GenerationConfig

_logger = logging.getLogger("ai_calls")


class ImageGenerator(ABC):
    """Unified contract of an image generation backend.

    Usage:
        async with GeminiGenerator(api_key) as generator:
            result = await generator.generate_variations(settings, "Q3 revenue", count=2)
            result.images  # base64 strings
    """

    provider_name: str = "provider"
    display_name: str = "Provider"
    stagger_seconds: float = STAGGER_DEFAULT_SECONDS

    def __init__(
        self,
        api_key: str,
        config: GenerationConfig | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the adapter.

        Args:
            api_key: Provider credential. Must not be empty.
            config: Generation configuration (retry, timeout, endpoints).
            client: Optional HTTP client to use instead of a private one.
            sleep: Awaitable sleep used for backoff and staggering.

        Raises:
            UnauthenticatedError: If the credential is missing.
        """
        if not api_key or not api_key.strip():
            raise UnauthenticatedError(
                f"{self.display_name} API key is not set",
                provider=self.provider_name,
            )
        self.api_key = api_key
        self.config = config or GenerationConfig()
        self._http_client = client
        self._owns_client = client is None
        self._sleep = sleep

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.config.request_timeout_seconds)
            self._owns_client = True
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client if this adapter created it."""
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
        self._http_client = None

    async def __aenter__(self) -> "ImageGenerator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @abstractmethod
    async def _generate_once(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> str:
        """Issue a single request and return a base64 image."""

    async def generate_one(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None = None,
    ) -> str:
        """Generate one image, retrying transient failures.

        Args:
            settings: Deck-wide settings.
            slide_content: Text of the slide.
            slide_image: Optional base64 content image for the slide.

        Returns:
            Base64 encoded image.

        Raises:
            ProviderError: Final failure after retries.
        """
        retry = self.config.retry
        return await with_retry(
            lambda: self._generate_once(settings, slide_content, slide_image),
            max_attempts=retry.max_attempts,
            base_delay=retry.base_delay_seconds,
            sleep=self._sleep,
            label=self.provider_name,
        )

    async def generate_variations(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None = None,
        count: int = VARIANT_DEFAULT_COUNT,
    ) -> VariationResult:
        """Generate ``count`` independent variants of one slide.

        Returns:
            VariationResult with at least one image.

        Raises:
            ProviderError: First-launched failure when every variant failed.
        """
        stagger = self.config.variation_stagger_seconds
        if stagger is None:
            stagger = self.stagger_seconds
        return await generate_variations(
            lambda: self.generate_one(settings, slide_content, slide_image),
            count,
            stagger=stagger,
            sleep=self._sleep,
        )

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        """Authorization headers; bearer token unless overridden."""
        return {"Authorization": f"Bearer {self.api_key}"}

    async def _post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST a JSON body and classify the outcome.

        Raises:
            NetworkUnavailableError: Transport failure or timeout.
            RequestFailedError: Non-success HTTP status.
        """
        client = await self._get_http_client()
        request_headers = {"Content-Type": "application/json", **self._auth_headers()}
        if headers:
            request_headers.update(headers)

        _logger.info(
            f"{self.display_name} request: POST {url} (key length {len(self.api_key)})"
        )

        try:
            response = await client.post(
                url,
                json=payload,
                headers=request_headers,
                timeout=self.config.request_timeout_seconds,
            )
        except httpx.TransportError as e:
            _logger.error(f"{self.display_name} transport error: {type(e).__name__}: {e}")
            raise NetworkUnavailableError(
                f"Network request to {self.display_name} failed ({type(e).__name__}). "
                "Check the API key, network access to the provider, or configure a proxy.",
                provider=self.provider_name,
            ) from e

        _logger.info(
            f"{self.display_name} response status: {response.status_code} {response.reason_phrase}"
        )

        if not response.is_success:
            message = self._error_message(response)
            _logger.error(f"{self.display_name} error response: {response.text[:500]}")
            raise RequestFailedError(
                message,
                status_code=response.status_code,
                provider=self.provider_name,
            )

        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract a readable message from an error response body."""
        fallback = f"API request failed with status {response.status_code}"
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError):
            return response.text.strip() or fallback

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
            if data.get("message"):
                return str(data["message"])
        return fallback

    def _json_body(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a success body, treating garbage as an empty result."""
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise EmptyResultError(
                f"{self.display_name} returned an unreadable response",
                status_code=response.status_code,
                provider=self.provider_name,
            ) from e
        _logger.debug(f"{self.display_name} response data: {json.dumps(data)[:200]}...")
        return data if isinstance(data, dict) else {}

    async def _download_image(self, url: str) -> str:
        """Fetch a provider-hosted image and return it as base64.

        Raises:
            DownloadFailedError: Transport failure or non-success status.
            EmptyResultError: Empty body.
        """
        client = await self._get_http_client()
        _logger.info(f"{self.display_name} downloading image: {url[:120]}")

        try:
            response = await client.get(url, timeout=self.config.request_timeout_seconds)
        except httpx.TransportError as e:
            raise DownloadFailedError(
                f"Failed to download generated image: {e}",
                provider=self.provider_name,
            ) from e

        if not response.is_success:
            raise DownloadFailedError(
                f"Failed to download generated image (status {response.status_code})",
                status_code=response.status_code,
                provider=self.provider_name,
            )
        if not response.content:
            raise EmptyResultError(
                "Downloaded image is empty",
                provider=self.provider_name,
            )
        return encode_image(response.content)

    async def _image_from_item(self, item: dict[str, Any]) -> str | None:
        """Image from an OpenAI-style ``data[i]`` entry (inline or URL)."""
        if item.get("b64_json"):
            return item["b64_json"]
        if item.get("url"):
            return await self._download_image(item["url"])
        return None

    def _empty_result(self, message: str = "No valid image data received") -> EmptyResultError:
        return EmptyResultError(message, provider=self.provider_name)
