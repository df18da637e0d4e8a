"""Gemini image generation (Nano Banana / Gemini 3 Pro Image)."""

from __future__ import annotations

from typing import Any

from ..generation.models import GenerationSettings, ModelType
from ..generation.prompts import SECTIONED_STRICT, compose_prompt
from ..images import detect_mime_type
from .base import ImageGenerator


class GeminiGenerator(ImageGenerator):
    """Gemini ``generateContent`` with image output.

    The aspect ratio is passed through as a "W:H" string; only the PRO model
    accepts an explicit resolution tier.
    """

    provider_name = "gemini"
    display_name = "Gemini"

    def _auth_headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key}

    def build_payload(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> dict[str, Any]:
        """Request body: images first, then the text, for multimodal stability."""
        parts: list[dict[str, Any]] = []

        if settings.reference_image:
            parts.append({
                "inlineData": {
                    "mimeType": detect_mime_type(settings.reference_image),
                    "data": settings.reference_image,
                }
            })
        if slide_image:
            parts.append({
                "inlineData": {
                    "mimeType": detect_mime_type(slide_image),
                    "data": slide_image,
                }
            })

        parts.append({
            "text": compose_prompt(settings, slide_content, slide_image, SECTIONED_STRICT)
        })

        image_config: dict[str, Any] = {"aspectRatio": settings.ratio_label}
        if settings.model == ModelType.PRO:
            image_config["imageSize"] = settings.image_size.value

        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "responseModalities": ["IMAGE"],
                "imageConfig": image_config,
            },
        }

    def endpoint(self, settings: GenerationSettings) -> str:
        base = self.config.endpoints.gemini_base_url.rstrip("/")
        return f"{base}/models/{ModelType(settings.model).value}:generateContent"

    async def _generate_once(
        self,
        settings: GenerationSettings,
        slide_content: str,
        slide_image: str | None,
    ) -> str:
        response = await self._post_json(
            self.endpoint(settings),
            self.build_payload(settings, slide_content, slide_image),
        )
        data = self._json_body(response)

        candidates = data.get("candidates") or []
        first = candidates[0] if candidates and isinstance(candidates[0], dict) else {}
        content = first.get("content") or {}
        for part in content.get("parts") or []:
            if not isinstance(part, dict):
                continue
            inline = part.get("inlineData") or part.get("inline_data")
            if inline and inline.get("data"):
                return inline["data"]

        raise self._empty_result("No image generated in response.")
