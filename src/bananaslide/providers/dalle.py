"""OpenAI DALL-E 3 image generation."""

from __future__ import annotations

import logging
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from ..constants import STAGGER_SLOW_SECONDS
from ..errors import NetworkUnavailableError, RequestFailedError
from ..generation.dimensions import dalle_size
from ..generation.models import GenerationSettings
from ..generation.prompts import SECTIONED, compose_prompt
from .base import ImageGenerator

_logger = logging.getLogger("ai_calls")


class DalleGenerator(ImageGenerator):
    """DALL-E 3 through the OpenAI SDK.

    Only three sizes exist, so ratios map onto the nearest bucket. The API
    takes no image inputs; reference and content images are only mentioned
    in the prompt. Results come back as URLs and are downloaded.
    """

    provider_name = "dalle"
    display_name = "OpenAI"
    stagger_seconds = STAGGER_SLOW_SECONDS

    _openai_client: AsyncOpenAI | None = None

    async def _get_openai_client(self) -> AsyncOpenAI:
        """SDK client sharing this adapter's HTTP client; retries stay with us."""
        if self._openai_client is None:
            self._openai_client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.config.endpoints.openai_base_url,
                http_client=await self._get_http_client(),
                timeout=self.config.request_timeout_seconds,
                max_retries=0,
            )
        return self._openai_client

    async def close(self) -> None:
        self._openai_client = None
        await super().close()

    def build_payload(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> dict[str, Any]:
        if settings.reference_image or slide_image:
            _logger.debug("DALL-E ignores image inputs; using prompt notes only")

        return {
            "model": self.config.endpoints.dalle_model,
            "prompt": compose_prompt(settings, slide_content, slide_image, SECTIONED),
            "n": 1,
            "size": dalle_size(settings.aspect_ratio, settings.custom_aspect_ratio),
            "quality": "hd",
        }

    async def _generate_once(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> str:
        client = await self._get_openai_client()
        payload = self.build_payload(settings, slide_content, slide_image)

        _logger.info(
            f"OpenAI request: images.generate model={payload['model']} size={payload['size']} "
            f"(key length {len(self.api_key)})"
        )

        try:
            response = await client.images.generate(**payload)
        except APIStatusError as e:
            _logger.error(f"OpenAI error response: {e.response.text[:500]}")
            raise RequestFailedError(
                self._error_message(e.response),
                status_code=e.status_code,
                provider=self.provider_name,
            ) from e
        except APIConnectionError as e:
            _logger.error(f"OpenAI transport error: {type(e).__name__}: {e}")
            raise NetworkUnavailableError(
                f"Network request to OpenAI failed ({type(e).__name__}). "
                "Check the API key, network access to the provider, or configure a proxy.",
                provider=self.provider_name,
            ) from e

        if not response.data:
            raise self._empty_result("No image generated in response")

        item = response.data[0]
        image = await self._image_from_item({"b64_json": item.b64_json, "url": item.url})
        if not image:
            raise self._empty_result("No image generated in response")
        return image
