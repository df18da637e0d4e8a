"""Image generation providers (Gemini, Volcengine, DALL-E, Stability)."""

from .config import (
    GenerationConfig,
    ProviderCredentials,
    ProviderEndpoints,
    RetrySettings,
    load_generation_config,
)
from .base import ImageGenerator
from .gemini import GeminiGenerator
from .volcengine import VolcengineGenerator
from .dalle import DalleGenerator
from .stability import StabilityGenerator
from .factory import available_providers, create_generator, normalize_provider

__all__ = [
    "GenerationConfig",
    "ProviderCredentials",
    "ProviderEndpoints",
    "RetrySettings",
    "load_generation_config",
    "ImageGenerator",
    "GeminiGenerator",
    "VolcengineGenerator",
    "DalleGenerator",
    "StabilityGenerator",
    "available_providers",
    "create_generator",
    "normalize_provider",
]
