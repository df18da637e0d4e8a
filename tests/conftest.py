"""Shared test fixtures and configuration.

Provides settings, credentials, image payloads and a mocked HTTP layer for
testing the bananaslide components without network access. Adapters get an
``httpx.AsyncClient`` backed by ``httpx.MockTransport`` and a sleep function
that records delays instead of waiting.
"""

from __future__ import annotations

import base64
import json
from io import BytesIO
from typing import Any, Callable

import httpx
import pytest
from PIL import Image

from bananaslide.generation.models import GenerationSettings
from bananaslide.providers.config import (
    GenerationConfig,
    ProviderCredentials,
    RetrySettings,
)


# =============================================================================
# Image payloads
# =============================================================================

@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (64, 36), color=(20, 40, 120)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_b64(png_bytes: bytes) -> str:
    """The PNG fixture as base64."""
    return base64.b64encode(png_bytes).decode("ascii")


# =============================================================================
# Settings and credentials
# =============================================================================

@pytest.fixture
def settings() -> GenerationSettings:
    """Typical deck settings."""
    return GenerationSettings(
        style_description="Flat illustration",
        color_scheme="Teal and white",
        design_requirements="Large title, generous whitespace",
    )


@pytest.fixture
def credentials() -> ProviderCredentials:
    """Credentials for every provider."""
    return ProviderCredentials(
        gemini_api_key="gemini-test-key",
        openai_api_key="openai-test-key",
        stability_api_key="stability-test-key",
        volcengine_access_key="volc-access",
        volcengine_secret_key="volc-secret-key",
        volcengine_endpoint=None,
    )


@pytest.fixture
def fast_config() -> GenerationConfig:
    """Config with retries enabled but no backoff or stagger waits."""
    return GenerationConfig(
        retry=RetrySettings(max_attempts=3, base_delay_seconds=0),
        variation_stagger_seconds=0,
    )


# =============================================================================
# Async helpers
# =============================================================================

class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep() -> SleepRecorder:
    """Recording no-op sleep."""
    return SleepRecorder()


# =============================================================================
# HTTP mocking
# =============================================================================

class MockHttp:
    """Routes requests to a handler and keeps every request it saw."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handle))

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def json_body(self, index: int = 0) -> dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], MockHttp]:
    """Factory building a MockHttp around a request handler."""
    return MockHttp
