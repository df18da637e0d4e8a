"""Data models for slide image generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from ..constants import SlideStatus, VARIANT_DEFAULT_COUNT


class AspectRatio(str, Enum):
    """Named slide aspect ratios (width:height)."""

    SQUARE = "1:1"
    PORTRAIT = "3:4"
    VERTICAL = "9:16"  # phone / vertical video
    LANDSCAPE = "4:3"  # classic PPT
    WIDESCREEN = "16:9"  # modern PPT
    ULTRAWIDE = "18:8"
    ULTRATALL = "8:18"
    CUSTOM = "custom"


class ImageSize(str, Enum):
    """Quality / resolution tier."""

    K1 = "1K"
    K2 = "2K"
    K4 = "4K"


class ModelType(str, Enum):
    """Gemini image model variants."""

    FLASH = "gemini-2.5-flash-image"
    PRO = "gemini-3-pro-image-preview"


class VolcengineModel(str, Enum):
    """Volcengine Seedream model variants."""

    SEEDREAM_4_0 = "seedream-4.0"
    SEEDREAM_4_5 = "seedream-4.5"


class ProviderId(str, Enum):
    """Supported image generation backends."""

    GEMINI = "gemini"
    VOLCENGINE = "volcengine"
    DALLE = "dalle"
    STABILITY = "stability"


class GenerationSettings(BaseModel):
    """Deck-wide settings shaping every image request.

    Slide specific input (the page text and an optional content image) is
    passed alongside these settings on each call.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    style_description: str = ""
    color_scheme: str = ""
    design_requirements: str = ""
    reference_image: str | None = None  # base64

    aspect_ratio: AspectRatio | str = AspectRatio.WIDESCREEN
    custom_aspect_ratio: str | None = None  # "W:H", used with AspectRatio.CUSTOM
    image_size: ImageSize = ImageSize.K2

    model: ModelType = ModelType.PRO
    volcengine_model: VolcengineModel = VolcengineModel.SEEDREAM_4_5
    provider: ProviderId = ProviderId.GEMINI

    @property
    def ratio_label(self) -> str:
        """Ratio string as sent to providers that accept "W:H" directly."""
        if self.aspect_ratio == AspectRatio.CUSTOM:
            return self.custom_aspect_ratio or AspectRatio.SQUARE.value
        if isinstance(self.aspect_ratio, AspectRatio):
            return self.aspect_ratio.value
        return self.aspect_ratio


@dataclass
class SlideJob:
    """A slide waiting for (or holding) generated background variants.

    Owned by the caller; the batch sequencer only touches ``status``,
    ``generated_images`` and ``error_message``.
    """

    id: str
    slide_content: str = ""
    slide_image: str | None = None  # base64
    variant_count: int = VARIANT_DEFAULT_COUNT
    status: SlideStatus = SlideStatus.IDLE
    generated_images: list[str] = field(default_factory=list)
    error_message: str | None = None

    @property
    def needs_generation(self) -> bool:
        """Check if a batch run should pick this slide up."""
        return self.status.is_pending or not self.generated_images

    def apply(self, updates: dict[str, Any]) -> None:
        """Apply a status update produced by the batch sequencer."""
        for key, value in updates.items():
            setattr(self, key, value)
