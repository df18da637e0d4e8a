"""Slide generation service - wires the provider selector into the batch run.

Usage:
    service = SlideGenerationService(settings, ProviderCredentials())
    summary = await service.run(jobs)
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..providers.config import GenerationConfig, ProviderCredentials
from ..providers.factory import create_generator
from .batch import BatchSequencer, BatchSummary, UpdateCallback
from .models import GenerationSettings, SlideJob
from .retry import SleepFunc

_logger = logging.getLogger("bananaslide.batch")


class SlideGenerationService:
    """Generates slide variants with the provider named in the settings."""

    def __init__(
        self,
        settings: GenerationSettings,
        credentials: ProviderCredentials,
        config: GenerationConfig | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.settings = settings
        self.credentials = credentials
        self.config = config or GenerationConfig()
        self._client = client
        self._sleep = sleep

    async def generate_for_job(self, job: SlideJob) -> list[str]:
        """Generate the variants of one slide.

        A fresh adapter is selected per slide so credential changes between
        slides take effect.

        Raises:
            ProviderError: When no variant could be generated.
        """
        generator = create_generator(
            self.settings.provider,
            self.credentials,
            self.config,
            client=self._client,
            sleep=self._sleep,
        )
        async with generator:
            result = await generator.generate_variations(
                self.settings,
                job.slide_content,
                job.slide_image,
                job.variant_count,
            )

        if result.failures:
            _logger.info(
                f"Slide {job.id}: {len(result.images)} ok, "
                f"{len(result.failures)} variant(s) failed: {result.errors}"
            )
        return result.images

    async def run(
        self,
        jobs: list[SlideJob],
        on_update: UpdateCallback = None,
        stop_on_unauthenticated: bool = False,
    ) -> BatchSummary:
        """Generate every pending slide in order."""
        sequencer = BatchSequencer(
            self.generate_for_job,
            on_update=on_update,
            stop_on_unauthenticated=stop_on_unauthenticated,
        )
        return await sequencer.run(jobs)
