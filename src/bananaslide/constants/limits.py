"""Limit constants for bananaslide.

This module contains all limits and constraints:
- Pixel budgets and size quantization for providers with free-form sizes
- Retry and backoff settings
- Variation fan-out staggering
- HTTP timeouts

MODIFICATION GUIDE:
------------------
- SEEDREAM_* budgets: Check the Volcengine Ark documentation before changing
- RETRY_* settings: The backoff schedule is base * 2**k (2s, 4s, 8s, ...)
- STAGGER_* values: Raising them lowers burst load on the provider
"""

from typing import Final

# =============================================================================
# PIXEL BUDGETS
# =============================================================================
# Volcengine Seedream accepts any WxH inside this budget.

SEEDREAM_MIN_PIXELS: Final[int] = 921_600
"""Minimum total pixel count (1280x720)."""

SEEDREAM_MAX_PIXELS: Final[int] = 16_777_216
"""Maximum total pixel count (4096x4096)."""

SEEDREAM_SIZE_UNIT: Final[int] = 32
"""Every dimension must be a multiple of this."""


# =============================================================================
# RESOLUTION TIERS
# =============================================================================

TIER_BASE_SIZES: Final[dict[str, tuple[int, int]]] = {
    "1K": (1024, 1024),
    "2K": (2048, 2048),
    "4K": (4096, 4096),
}
"""Nominal square size per quality tier; width*height is the pixel budget."""

DEFAULT_TIER: Final[str] = "2K"


# =============================================================================
# RETRY AND TIMEOUT SETTINGS
# =============================================================================

RETRY_MAX_ATTEMPTS: Final[int] = 3
"""Maximum attempts per single image request."""

RETRY_BASE_DELAY_SECONDS: Final[float] = 2.0
"""Delay before the first retry; doubles on each further retry."""

TRANSIENT_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 503})
"""HTTP statuses worth retrying."""

TRANSIENT_MESSAGE_MARKERS: Final[tuple[str, ...]] = (
    "overloaded",
    "unavailable",
    "rate limit",
    "rate_limit",
    "too many requests",
    "internal server error",
)
"""Lowercase substrings marking an error message as transient."""

TIMEOUT_HTTP_REQUEST: Final[float] = 120.0
"""Timeout for a single provider request in seconds."""


# =============================================================================
# VARIATION FAN-OUT
# =============================================================================

STAGGER_DEFAULT_SECONDS: Final[float] = 0.5
"""Delay between launching consecutive variant requests."""

STAGGER_SLOW_SECONDS: Final[float] = 1.0
"""Stagger for providers with tighter rate limits (OpenAI, Stability)."""

VARIANT_DEFAULT_COUNT: Final[int] = 2
"""Variants generated per slide when not specified."""
