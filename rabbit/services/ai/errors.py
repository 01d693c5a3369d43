"""
AI Provider Errors

Typed failures raised by provider adapters and the router. Adapters never
let raw SDK exceptions escape: every vendor error is classified into an
ErrorKind so the router can decide between "try a sibling provider" and
"fix the input, do not retry".
"""

import contextlib
from enum import Enum

import httpx
import openai

from rabbit.core.exceptions import ConfigurationError


class ErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


# Failures after which another provider may be tried
FALLBACK_ELIGIBLE_KINDS = frozenset({
    ErrorKind.UNAUTHORIZED,
    ErrorKind.RATE_LIMITED,
    ErrorKind.SERVICE_UNAVAILABLE,
})


class ProviderError(Exception):
    """A classified failure from one provider."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        provider: str | None = None,
        status_code: int | None = None,
        retry_after: float | None = None,
    ):
        self.message = message
        self.kind = kind
        self.provider = provider
        self.status_code = status_code
        self.retry_after = retry_after
        super().__init__(message)

    @property
    def is_fallback_eligible(self) -> bool:
        return self.kind in FALLBACK_ELIGIBLE_KINDS

    def __repr__(self) -> str:
        return (
            f"ProviderError(kind={self.kind.value!r}, provider={self.provider!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class UnknownProviderError(ConfigurationError):
    """A provider name has no adapter in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Unknown AI provider: {name}", details={"provider": name})
        self.name = name


class AllProvidersFailedError(Exception):
    """Every candidate provider for an operation failed or was unconfigured."""

    def __init__(
        self,
        operation: str,
        last_error: ProviderError | None,
        attempts: list[tuple[str, ErrorKind]] | None = None,
    ):
        self.operation = operation
        self.last_error = last_error
        self.attempts = attempts or []
        last_message = last_error.message if last_error else "no provider configured"
        super().__init__(f"All providers failed for {operation}. Last error: {last_message}")


def classify_status(status_code: int | None) -> ErrorKind:
    """Map a vendor-reported HTTP status onto an ErrorKind."""
    if status_code is None:
        return ErrorKind.UNKNOWN
    if status_code in (401, 403):
        return ErrorKind.UNAUTHORIZED
    if status_code == 429:
        return ErrorKind.RATE_LIMITED
    if status_code == 408 or status_code >= 500:
        return ErrorKind.SERVICE_UNAVAILABLE
    if 400 <= status_code < 500:
        return ErrorKind.INVALID_INPUT
    return ErrorKind.UNKNOWN


def _retry_after(headers: httpx.Headers | None) -> float | None:
    if not headers:
        return None
    value = headers.get("retry-after")
    if value is None:
        return None
    with contextlib.suppress(ValueError):
        return float(value)
    return None


def from_exception(provider: str, exc: BaseException) -> ProviderError:
    """Convert an SDK or transport exception into a ProviderError."""
    if isinstance(exc, ProviderError):
        if exc.provider is None:
            exc.provider = provider
        return exc

    # openai SDK (also used for every OpenAI-compatible vendor)
    if isinstance(exc, openai.APIStatusError):
        return ProviderError(
            str(exc),
            kind=classify_status(exc.status_code),
            provider=provider,
            status_code=exc.status_code,
            retry_after=_retry_after(exc.response.headers if exc.response is not None else None),
        )
    if isinstance(exc, (openai.APITimeoutError, openai.APIConnectionError)):
        return ProviderError(str(exc), kind=ErrorKind.SERVICE_UNAVAILABLE, provider=provider)

    # Raw HTTP calls
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        return ProviderError(
            f"{provider} returned HTTP {status_code}",
            kind=classify_status(status_code),
            provider=provider,
            status_code=status_code,
            retry_after=_retry_after(exc.response.headers),
        )
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return ProviderError(str(exc) or type(exc).__name__, kind=ErrorKind.SERVICE_UNAVAILABLE, provider=provider)

    return ProviderError(str(exc) or type(exc).__name__, kind=ErrorKind.UNKNOWN, provider=provider)
