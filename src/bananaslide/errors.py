"""Error types raised by image generation providers."""

from __future__ import annotations

from enum import Enum


class ProviderErrorKind(str, Enum):
    """Classification of a provider failure."""

    UNAUTHENTICATED = "unauthenticated"
    REQUEST_FAILED = "request_failed"
    EMPTY_RESULT = "empty_result"
    NETWORK_UNAVAILABLE = "network_unavailable"
    DOWNLOAD_FAILED = "download_failed"


class ProviderError(Exception):
    """Base error for every failure surfaced by a provider adapter.

    Attributes:
        kind: Failure classification.
        message: Human-readable description (from the provider when possible).
        status_code: HTTP status of the failing response, if any.
        provider: Name of the provider that failed.
    """

    kind: ProviderErrorKind = ProviderErrorKind.REQUEST_FAILED

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        provider: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.provider = provider

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, "
            f"message={self.message!r}, status_code={self.status_code!r})"
        )


class UnauthenticatedError(ProviderError):
    """Required credential is missing or empty. Never retried."""

    kind = ProviderErrorKind.UNAUTHENTICATED


class RequestFailedError(ProviderError):
    """Provider answered with a non-success status."""

    kind = ProviderErrorKind.REQUEST_FAILED


class EmptyResultError(ProviderError):
    """Provider answered successfully but returned no image."""

    kind = ProviderErrorKind.EMPTY_RESULT


class NetworkUnavailableError(ProviderError):
    """Transport-level failure: DNS, refused connection, timeout."""

    kind = ProviderErrorKind.NETWORK_UNAVAILABLE


class DownloadFailedError(ProviderError):
    """Fetching a provider-returned image URL failed."""

    kind = ProviderErrorKind.DOWNLOAD_FAILED


CREDENTIAL_HINT = "Please check the API key configuration"
GENERIC_FAILURE = "Generation failed"

_CREDENTIAL_MARKERS = ("api key", "api_key", "requested entity was not found")


def is_credential_problem(error: BaseException) -> bool:
    """Check whether an error means the user has to fix their credentials."""
    if isinstance(error, UnauthenticatedError):
        return True
    if isinstance(error, ProviderError) and error.status_code in (401, 403):
        return True
    text = str(error).lower()
    return any(marker in text for marker in _CREDENTIAL_MARKERS)


def describe_failure(error: BaseException) -> str:
    """Short user-facing message for a failed slide.

    Distinguishes "fix your credentials" from a plain generation failure so
    the caller can prompt for corrective action instead of a retry.
    """
    if is_credential_problem(error):
        detail = str(error).strip()
        return f"{CREDENTIAL_HINT}: {detail}" if detail else CREDENTIAL_HINT
    return str(error).strip() or GENERIC_FAILURE
