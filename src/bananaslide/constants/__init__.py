"""Global constants package for bananaslide.

PACKAGE STRUCTURE:
-----------------
- limits.py   : Pixel budgets, retry/backoff, stagger and timeout settings
- status.py   : Slide status enum and display icons

USAGE EXAMPLES:
--------------
    from bananaslide.constants import SEEDREAM_MAX_PIXELS, SlideStatus
"""

from .limits import (
    # Pixel budgets
    SEEDREAM_MIN_PIXELS,
    SEEDREAM_MAX_PIXELS,
    SEEDREAM_SIZE_UNIT,
    # Tiers
    TIER_BASE_SIZES,
    DEFAULT_TIER,
    # Retry
    RETRY_MAX_ATTEMPTS,
    RETRY_BASE_DELAY_SECONDS,
    TRANSIENT_STATUS_CODES,
    TRANSIENT_MESSAGE_MARKERS,
    TIMEOUT_HTTP_REQUEST,
    # Fan-out
    STAGGER_DEFAULT_SECONDS,
    STAGGER_SLOW_SECONDS,
    VARIANT_DEFAULT_COUNT,
)
from .status import SlideStatus, STATUS_ICONS

__all__ = [
    "SEEDREAM_MIN_PIXELS",
    "SEEDREAM_MAX_PIXELS",
    "SEEDREAM_SIZE_UNIT",
    "TIER_BASE_SIZES",
    "DEFAULT_TIER",
    "RETRY_MAX_ATTEMPTS",
    "RETRY_BASE_DELAY_SECONDS",
    "TRANSIENT_STATUS_CODES",
    "TRANSIENT_MESSAGE_MARKERS",
    "TIMEOUT_HTTP_REQUEST",
    "STAGGER_DEFAULT_SECONDS",
    "STAGGER_SLOW_SECONDS",
    "VARIANT_DEFAULT_COUNT",
    "SlideStatus",
    "STATUS_ICONS",
]
