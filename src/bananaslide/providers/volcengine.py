"""Volcengine Ark image generation (Doubao Seedream)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from ..generation.dimensions import SEEDREAM_BUDGET, ResolvedSize, resolve_size
from ..generation.models import GenerationSettings, VolcengineModel
from ..generation.prompts import COMPACT, compose_prompt
from ..generation.retry import SleepFunc
from ..images import to_data_url
from .base import ImageGenerator
from .config import GenerationConfig

_logger = logging.getLogger("ai_calls")

MODEL_NAMES: dict[VolcengineModel, str] = {
    VolcengineModel.SEEDREAM_4_0: "doubao-seedream-4-0-251128",
    VolcengineModel.SEEDREAM_4_5: "doubao-seedream-4-5-251128",
}
DEFAULT_MODEL_NAME = MODEL_NAMES[VolcengineModel.SEEDREAM_4_5]


class VolcengineGenerator(ImageGenerator):
    """Seedream through the Ark ``images/generations`` endpoint.

    Sizes are free-form inside a pixel budget. Requests go to the configured
    proxy base URL when one is set, otherwise to the direct Ark endpoint.
    """

    provider_name = "volcengine"
    display_name = "Volcengine"

    def __init__(
        self,
        secret_key: str,
        endpoint: str | None = None,
        config: GenerationConfig | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initialize the Volcengine adapter.

        Args:
            secret_key: Ark API key (sent as bearer token).
            endpoint: Optional direct base URL overriding the configured one.
            config: Generation configuration.
            client: Optional HTTP client.
            sleep: Awaitable sleep used for backoff and staggering.
        """
        super().__init__(secret_key, config=config, client=client, sleep=sleep)
        self.endpoint = endpoint

    @property
    def base_url(self) -> str:
        """Resolved base URL: proxy, then credential endpoint, then direct."""
        endpoints = self.config.endpoints
        if endpoints.volcengine_proxy_base_url:
            return endpoints.volcengine_proxy_base_url.rstrip("/")
        if self.endpoint:
            return self.endpoint.rstrip("/")
        return endpoints.volcengine_base_url.rstrip("/")

    @staticmethod
    def model_name(model: VolcengineModel | str) -> str:
        try:
            return MODEL_NAMES[VolcengineModel(model)]
        except ValueError:
            return DEFAULT_MODEL_NAME

    @staticmethod
    def calculate_size(settings: GenerationSettings) -> ResolvedSize:
        return resolve_size(
            settings.image_size,
            settings.aspect_ratio,
            settings.custom_aspect_ratio,
            budget=SEEDREAM_BUDGET,
        )

    def build_payload(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> dict[str, Any]:
        size = self.calculate_size(settings)
        _logger.info(
            f"Volcengine size: {settings.image_size.value} {settings.ratio_label} "
            f"-> {size} ({size.pixels} px)"
        )

        payload: dict[str, Any] = {
            "model": self.model_name(settings.volcengine_model),
            "prompt": compose_prompt(settings, slide_content, slide_image, COMPACT),
            "size": str(size),
            "n": 1,
            "response_format": "b64_json",
            "sequential_image_generation": "disabled",
            "stream": False,
            "watermark": False,
        }
        if slide_image:
            payload["image"] = to_data_url(slide_image)
        return payload

    async def _generate_once(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> str:
        response = await self._post_json(
            f"{self.base_url}/images/generations",
            self.build_payload(settings, slide_content, slide_image),
        )
        data = self._json_body(response)

        items = data.get("data") or []
        if items and isinstance(items[0], dict):
            image = await self._image_from_item(items[0])
            if image:
                return image

        raise self._empty_result("No valid image data received")
