"""Pixel dimension resolution for image generation requests.

Two sizing models are covered:

- Pixel-budget sizing for providers that accept any ``WxH`` as long as the
  total pixel count stays inside a budget and each side is a multiple of a
  quantization unit (Volcengine Seedream).
- Enumerated sizing for providers that only accept a fixed set of sizes
  (DALL-E, Stability SDXL).

Usage:
    size = resolve_size(ImageSize.K2, AspectRatio.WIDESCREEN)
    str(size)  # "2720x1536"
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from ..constants import (
    DEFAULT_TIER,
    SEEDREAM_MAX_PIXELS,
    SEEDREAM_MIN_PIXELS,
    SEEDREAM_SIZE_UNIT,
    TIER_BASE_SIZES,
)
from .models import AspectRatio, ImageSize

_logger = logging.getLogger("ai_calls")


@dataclass(frozen=True)
class PixelBudget:
    """Constraints of a provider with free-form sizes."""

    min_pixels: int
    max_pixels: int
    unit: int


@dataclass(frozen=True)
class ResolvedSize:
    """Concrete request size in pixels."""

    width: int
    height: int

    @property
    def pixels(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


SEEDREAM_BUDGET = PixelBudget(
    min_pixels=SEEDREAM_MIN_PIXELS,
    max_pixels=SEEDREAM_MAX_PIXELS,
    unit=SEEDREAM_SIZE_UNIT,
)

# Named ratios as (width, height) parts
NAMED_RATIOS: dict[AspectRatio, tuple[int, int]] = {
    AspectRatio.SQUARE: (1, 1),
    AspectRatio.PORTRAIT: (3, 4),
    AspectRatio.VERTICAL: (9, 16),
    AspectRatio.LANDSCAPE: (4, 3),
    AspectRatio.WIDESCREEN: (16, 9),
    AspectRatio.ULTRAWIDE: (18, 8),
    AspectRatio.ULTRATALL: (8, 18),
}

# DALL-E 3 only renders these three sizes
DALLE_SIZES: dict[str, str] = {
    "1:1": "1024x1024",
    "3:4": "1024x1792",
    "4:3": "1792x1024",
    "9:16": "1024x1792",
    "16:9": "1792x1024",
    "18:8": "1792x1024",
    "8:18": "1024x1792",
}
DALLE_DEFAULT_SIZE = "1792x1024"

STABILITY_SIZES: dict[str, ResolvedSize] = {
    "1:1": ResolvedSize(1024, 1024),
    "3:4": ResolvedSize(1024, 1365),
    "9:16": ResolvedSize(1024, 1792),
    "4:3": ResolvedSize(1365, 1024),
    "16:9": ResolvedSize(1920, 1080),
    "18:8": ResolvedSize(2560, 1080),
    "8:18": ResolvedSize(1080, 2560),
}
STABILITY_DEFAULT_SIZE = ResolvedSize(1920, 1080)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _round_to_unit(value: float, unit: int) -> int:
    return max(unit, _round_half_up(value / unit) * unit)


def parse_ratio(text: str | None) -> tuple[int, int] | None:
    """Parse a ``"W:H"`` string into two positive integers.

    Returns:
        ``(w, h)`` or None when the string is not a valid ratio.
    """
    if not text:
        return None
    parts = text.strip().split(":")
    if len(parts) != 2:
        return None
    w_text, h_text = (part.strip() for part in parts)
    if not (w_text.isdigit() and h_text.isdigit()):
        return None
    w, h = int(w_text), int(h_text)
    if w <= 0 or h <= 0:
        return None
    return w, h


def _as_aspect_ratio(aspect_ratio: AspectRatio | str) -> AspectRatio | None:
    try:
        return AspectRatio(aspect_ratio)
    except ValueError:
        return None


def resolve_ratio(
    aspect_ratio: AspectRatio | str,
    custom_ratio: str | None = None,
) -> float:
    """Target width/height ratio.

    A custom ratio is used for ``AspectRatio.CUSTOM`` (or when the aspect
    ratio itself is a raw ``"W:H"`` string). Anything unparseable falls back
    to a square.
    """
    named = _as_aspect_ratio(aspect_ratio)

    if named is None:
        parsed = parse_ratio(str(aspect_ratio))
    elif named == AspectRatio.CUSTOM:
        parsed = parse_ratio(custom_ratio)
    else:
        parsed = NAMED_RATIOS.get(named)

    if parsed is None:
        return 1.0
    w, h = parsed
    return w / h


def ratio_key(aspect_ratio: AspectRatio | str, custom_ratio: str | None = None) -> str:
    """Lookup key ("W:H") for the enumerated size tables."""
    named = _as_aspect_ratio(aspect_ratio)
    if named is None:
        return str(aspect_ratio).strip()
    if named == AspectRatio.CUSTOM:
        return (custom_ratio or "").strip()
    return named.value


def resolve_size(
    image_size: ImageSize | str,
    aspect_ratio: AspectRatio | str,
    custom_ratio: str | None = None,
    budget: PixelBudget = SEEDREAM_BUDGET,
) -> ResolvedSize:
    """Compute a pixel-budget constrained size for a tier and ratio.

    Keeps ``width * height`` close to the tier's nominal pixel count while
    preserving the ratio, then snaps both sides to the budget's unit.

    Args:
        image_size: Quality tier (1K, 2K, 4K). Unknown tiers use 2K.
        aspect_ratio: Named ratio, ``AspectRatio.CUSTOM`` or a "W:H" string.
        custom_ratio: "W:H" string used with ``AspectRatio.CUSTOM``.
        budget: Provider pixel budget.

    Returns:
        ResolvedSize inside ``[budget.min_pixels, budget.max_pixels]``.
    """
    tier = image_size.value if isinstance(image_size, ImageSize) else str(image_size)
    base_w, base_h = TIER_BASE_SIZES.get(tier, TIER_BASE_SIZES[DEFAULT_TIER])
    pixels = min(base_w * base_h, budget.max_pixels)

    ratio = resolve_ratio(aspect_ratio, custom_ratio)

    height = math.sqrt(pixels / ratio)
    width = height * ratio

    current = width * height
    if current > budget.max_pixels:
        scale = math.sqrt(budget.max_pixels / current)
        width *= scale
        height *= scale

    current = width * height
    if current < budget.min_pixels:
        scale = math.sqrt(budget.min_pixels / current)
        width *= scale
        height *= scale

    unit = budget.unit
    w = _round_to_unit(width, unit)
    h = _round_to_unit(height, unit)

    while w * h > budget.max_pixels and w > unit and h > unit:
        if w >= h:
            w -= unit
        else:
            h -= unit

    # Rounding down can undershoot the minimum for extreme ratios
    while w * h < budget.min_pixels:
        if w <= h:
            w += unit
        else:
            h += unit

    size = ResolvedSize(w, h)
    _logger.debug(
        f"Resolved size: tier={tier} ratio={ratio_key(aspect_ratio, custom_ratio)} "
        f"-> {size} ({size.pixels} px)"
    )
    return size


def dalle_size(aspect_ratio: AspectRatio | str, custom_ratio: str | None = None) -> str:
    """Pick the DALL-E size for a ratio, widescreen when there is no entry."""
    return DALLE_SIZES.get(ratio_key(aspect_ratio, custom_ratio), DALLE_DEFAULT_SIZE)


def stability_size(
    aspect_ratio: AspectRatio | str,
    custom_ratio: str | None = None,
) -> ResolvedSize:
    """Pick the Stability request size for a ratio.

    Custom ratios are fitted to a 1920 wide (landscape) or 1080 high
    (portrait, square) frame; named ratios come from the fixed table.
    """
    named = _as_aspect_ratio(aspect_ratio)
    if named is None or named == AspectRatio.CUSTOM:
        raw = custom_ratio if named == AspectRatio.CUSTOM else str(aspect_ratio)
        parsed = parse_ratio(raw)
        if parsed is not None:
            w, h = parsed
            base_w, base_h = STABILITY_DEFAULT_SIZE.width, STABILITY_DEFAULT_SIZE.height
            if w > h:
                return ResolvedSize(base_w, _round_half_up(base_w * h / w))
            return ResolvedSize(_round_half_up(base_h * w / h), base_h)
        return STABILITY_DEFAULT_SIZE

    return STABILITY_SIZES.get(named.value, STABILITY_DEFAULT_SIZE)
