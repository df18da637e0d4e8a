"""Generation engine - sizing, prompts, retry, fan-out and batch sequencing."""

from .models import (
    AspectRatio,
    ImageSize,
    ModelType,
    VolcengineModel,
    ProviderId,
    GenerationSettings,
    SlideJob,
)
from .dimensions import (
    PixelBudget,
    ResolvedSize,
    SEEDREAM_BUDGET,
    resolve_size,
    resolve_ratio,
    parse_ratio,
    dalle_size,
    stability_size,
)
from .prompts import PromptTemplate, compose_prompt
from .retry import with_retry, is_transient
from .fanout import VariationResult, generate_variations
from .batch import BatchSequencer, BatchSummary, run_batch, select_targets

__all__ = [
    "AspectRatio",
    "ImageSize",
    "ModelType",
    "VolcengineModel",
    "ProviderId",
    "GenerationSettings",
    "SlideJob",
    "PixelBudget",
    "ResolvedSize",
    "SEEDREAM_BUDGET",
    "resolve_size",
    "resolve_ratio",
    "parse_ratio",
    "dalle_size",
    "stability_size",
    "PromptTemplate",
    "compose_prompt",
    "with_retry",
    "is_transient",
    "VariationResult",
    "generate_variations",
    "BatchSequencer",
    "BatchSummary",
    "run_batch",
    "select_targets",
]
