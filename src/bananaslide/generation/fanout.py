"""Variation fan-out: one logical request, several concurrent image calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from ..constants import STAGGER_DEFAULT_SECONDS
from ..errors import EmptyResultError, ProviderError, RequestFailedError
from .retry import SleepFunc

_logger = logging.getLogger("ai_calls")


@dataclass
class VariationResult:
    """Outcome of a fan-out, both lists in launch order.

    Attributes:
        images: Base64 images of the successful calls.
        failures: Errors of the failed calls.
    """

    images: list[str] = field(default_factory=list)
    failures: list[ProviderError] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        """Failure messages."""
        return [failure.message for failure in self.failures]

    @property
    def success(self) -> bool:
        """Partial success counts as success."""
        return len(self.images) > 0

    def raise_if_empty(self) -> "VariationResult":
        """Raise the first-launched failure when nothing succeeded."""
        if self.success:
            return self
        if self.failures:
            raise self.failures[0]
        raise EmptyResultError("Image generation failed")


def _as_provider_error(error: Exception) -> ProviderError:
    if isinstance(error, ProviderError):
        return error
    return RequestFailedError(str(error) or type(error).__name__)


async def generate_variations(
    generate_one: Callable[[], Awaitable[str]],
    count: int,
    *,
    stagger: float = STAGGER_DEFAULT_SECONDS,
    sleep: SleepFunc = asyncio.sleep,
) -> VariationResult:
    """Launch ``count`` staggered calls and aggregate their outcomes.

    Call ``i`` starts after ``i * stagger`` seconds; calls then run
    concurrently. Results are correlated by launch index, not completion.

    Args:
        generate_one: Coroutine factory producing one base64 image.
        count: Number of variants.
        stagger: Seconds between consecutive launches.
        sleep: Awaitable sleep used for the stagger.

    Returns:
        VariationResult with at least one image.

    Raises:
        ValueError: If count is below 1.
        ProviderError: The first-launched failure when every call failed.
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    async def _launch(index: int) -> str:
        if index and stagger > 0:
            await sleep(index * stagger)
        return await generate_one()

    tasks = [_launch(i) for i in range(count)]
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    result = VariationResult()
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, Exception):
            _logger.warning(f"Variant {index + 1}/{count} failed: {outcome}")
            result.failures.append(_as_provider_error(outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            result.images.append(outcome)

    _logger.info(f"Variations: {len(result.images)}/{count} succeeded")
    return result.raise_if_empty()
