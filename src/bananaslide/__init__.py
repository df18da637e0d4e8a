"""bananaslide - multi-provider AI slide background generation."""

from .errors import (
    ProviderError,
    ProviderErrorKind,
    UnauthenticatedError,
    RequestFailedError,
    EmptyResultError,
    NetworkUnavailableError,
    DownloadFailedError,
    describe_failure,
)
from .generation import (
    AspectRatio,
    ImageSize,
    ModelType,
    VolcengineModel,
    ProviderId,
    GenerationSettings,
    SlideJob,
    ResolvedSize,
    resolve_size,
    compose_prompt,
    with_retry,
    VariationResult,
    generate_variations,
    BatchSequencer,
    BatchSummary,
    run_batch,
)
from .providers import (
    GenerationConfig,
    ProviderCredentials,
    ImageGenerator,
    create_generator,
    load_generation_config,
)
from .generation.service import SlideGenerationService

__version__ = "0.1.0"

__all__ = [
    "ProviderError",
    "ProviderErrorKind",
    "UnauthenticatedError",
    "RequestFailedError",
    "EmptyResultError",
    "NetworkUnavailableError",
    "DownloadFailedError",
    "describe_failure",
    "AspectRatio",
    "ImageSize",
    "ModelType",
    "VolcengineModel",
    "ProviderId",
    "GenerationSettings",
    "SlideJob",
    "ResolvedSize",
    "resolve_size",
    "compose_prompt",
    "with_retry",
    "VariationResult",
    "generate_variations",
    "BatchSequencer",
    "BatchSummary",
    "run_batch",
    "GenerationConfig",
    "ProviderCredentials",
    "ImageGenerator",
    "create_generator",
    "load_generation_config",
    "SlideGenerationService",
]
