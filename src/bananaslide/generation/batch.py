"""Batch sequencer - drives generation across a deck of slides.

Slides are processed strictly one at a time so that at most one slide's
variant fan-out is in flight. A failing slide is recorded and the batch
moves on to the next one.

Usage:
    sequencer = BatchSequencer(service.generate_for_job, on_update=save_update)
    summary = await sequencer.run(jobs)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable

from ..constants import SlideStatus
from ..errors import describe_failure, is_credential_problem
from .models import SlideJob

_logger = logging.getLogger("bananaslide.batch")

# Generates the images for one slide
GenerateForJob = Callable[[SlideJob], Awaitable[list[str]]]

# Receives (job_id, field updates) for each status transition
UpdateCallback = Callable[[str, dict[str, Any]], Awaitable[None]] | None


@dataclass
class BatchSummary:
    """What happened to each targeted slide."""

    succeeded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    halted: bool = False

    @property
    def processed(self) -> int:
        return len(self.succeeded) + len(self.failed)


def select_targets(jobs: Iterable[SlideJob]) -> list[SlideJob]:
    """Slides a batch run should generate: idle, errored, or without images."""
    return [job for job in jobs if job.needs_generation]


class BatchSequencer:
    """Sequentially generates a list of slides.

    Each targeted slide goes ``generating`` -> ``success`` | ``error``.
    Updates are sent to ``on_update``; without a callback they are applied
    to the SlideJob objects directly.
    """

    def __init__(
        self,
        generate_for_job: GenerateForJob,
        on_update: UpdateCallback = None,
        stop_on_unauthenticated: bool = False,
    ):
        """Initialize the sequencer.

        Args:
            generate_for_job: Coroutine producing the images for one slide.
            on_update: Optional async status sink.
            stop_on_unauthenticated: Halt the batch once credentials are
                rejected instead of failing every remaining slide the same way.
        """
        self._generate_for_job = generate_for_job
        self._on_update = on_update
        self.stop_on_unauthenticated = stop_on_unauthenticated

    async def _emit(self, job: SlideJob, updates: dict[str, Any]) -> None:
        if self._on_update:
            await self._on_update(job.id, updates)
        else:
            job.apply(updates)

    async def generate_job(self, job: SlideJob) -> Exception | None:
        """Generate one slide and report its transitions.

        Returns:
            The error that failed the slide, or None on success.
        """
        await self._emit(job, {"status": SlideStatus.GENERATING, "error_message": None})

        try:
            images = await self._generate_for_job(job)
        except Exception as e:
            message = describe_failure(e)
            _logger.warning(f"Slide {job.id} failed: {message}")
            await self._emit(job, {"status": SlideStatus.ERROR, "error_message": message})
            return e

        _logger.info(f"Slide {job.id} generated {len(images)} image(s)")
        await self._emit(job, {
            "status": SlideStatus.SUCCESS,
            "generated_images": list(images),
            "error_message": None,
        })
        return None

    async def run(self, jobs: Iterable[SlideJob]) -> BatchSummary:
        """Generate every pending slide, one after another.

        Args:
            jobs: Slides in deck order.

        Returns:
            BatchSummary of the run.
        """
        targets = select_targets(jobs)
        summary = BatchSummary()
        _logger.info(f"Batch started: {len(targets)} slide(s) to generate")

        for index, job in enumerate(targets):
            error = await self.generate_job(job)
            if error is None:
                summary.succeeded.append(job.id)
                continue

            summary.failed.append(job.id)
            if self.stop_on_unauthenticated and is_credential_problem(error):
                summary.halted = True
                summary.skipped = [j.id for j in targets[index + 1:]]
                _logger.warning(
                    f"Batch halted after credential failure; {len(summary.skipped)} skipped"
                )
                break

        _logger.info(
            f"Batch finished: {len(summary.succeeded)} ok, {len(summary.failed)} failed"
        )
        return summary


async def run_batch(
    jobs: Iterable[SlideJob],
    generate_for_job: GenerateForJob,
    on_update: UpdateCallback = None,
) -> BatchSummary:
    """Run a default (continue-on-error) batch."""
    return await BatchSequencer(generate_for_job, on_update).run(jobs)
