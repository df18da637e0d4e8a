"""Stability AI SDXL text-to-image generation."""

from __future__ import annotations

from typing import Any

from ..constants import STAGGER_SLOW_SECONDS
from ..generation.dimensions import stability_size
from ..generation.models import GenerationSettings
from ..generation.prompts import SECTIONED, compose_prompt
from ..images import encode_image
from .base import ImageGenerator


class StabilityGenerator(ImageGenerator):
    """SDXL ``text-to-image``; the response body is the PNG itself."""

    provider_name = "stability"
    display_name = "Stability AI"
    stagger_seconds = STAGGER_SLOW_SECONDS

    # Fixed sampler settings
    STEPS = 50
    CFG_SCALE = 7.5
    STYLE_PRESET = "photographic"

    def build_payload(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> dict[str, Any]:
        size = stability_size(settings.aspect_ratio, settings.custom_aspect_ratio)
        return {
            "text_prompts": [
                {
                    "text": compose_prompt(settings, slide_content, slide_image, SECTIONED),
                    "weight": 1,
                }
            ],
            "width": size.width,
            "height": size.height,
            "steps": self.STEPS,
            "cfg_scale": self.CFG_SCALE,
            "samples": 1,
            "style_preset": self.STYLE_PRESET,
        }

    def endpoint(self) -> str:
        endpoints = self.config.endpoints
        base = endpoints.stability_base_url.rstrip("/")
        return f"{base}/generation/{endpoints.stability_engine}/text-to-image"

    async def _generate_once(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> str:
        response = await self._post_json(
            self.endpoint(),
            self.build_payload(settings, slide_content, slide_image),
            headers={"Accept": "image/png"},
        )
        if not response.content:
            raise self._empty_result("No image generated in response")
        return encode_image(response.content)
