"""
Unit tests for provider error classification.
"""

import httpx
import openai
import pytest

from rabbit.services.ai.errors import (
    AllProvidersFailedError,
    ErrorKind,
    ProviderError,
    classify_status,
    from_exception,
)

REQUEST = httpx.Request("POST", "https://api.example.com/v1/chat/completions")


def _response(status_code: int, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(status_code, request=REQUEST, headers=headers)


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "status_code,kind",
        [
            (401, ErrorKind.UNAUTHORIZED),
            (403, ErrorKind.UNAUTHORIZED),
            (429, ErrorKind.RATE_LIMITED),
            (408, ErrorKind.SERVICE_UNAVAILABLE),
            (500, ErrorKind.SERVICE_UNAVAILABLE),
            (503, ErrorKind.SERVICE_UNAVAILABLE),
            (400, ErrorKind.INVALID_INPUT),
            (422, ErrorKind.INVALID_INPUT),
            (None, ErrorKind.UNKNOWN),
            (302, ErrorKind.UNKNOWN),
        ],
    )
    def test_mapping(self, status_code, kind):
        assert classify_status(status_code) is kind


class TestFromException:
    def test_openai_rate_limit(self):
        exc = openai.RateLimitError(
            "Rate limit reached",
            response=_response(429, {"retry-after": "3"}),
            body=None,
        )
        error = from_exception("groq", exc)
        assert error.kind is ErrorKind.RATE_LIMITED
        assert error.provider == "groq"
        assert error.status_code == 429
        assert error.retry_after == 3.0

    def test_openai_auth_error(self):
        exc = openai.AuthenticationError("bad key", response=_response(401), body=None)
        assert from_exception("openai", exc).kind is ErrorKind.UNAUTHORIZED

    def test_openai_server_error(self):
        exc = openai.InternalServerError("overloaded", response=_response(503), body=None)
        assert from_exception("groq", exc).kind is ErrorKind.SERVICE_UNAVAILABLE

    def test_openai_bad_request(self):
        exc = openai.BadRequestError("content policy", response=_response(400), body=None)
        assert from_exception("openai", exc).kind is ErrorKind.INVALID_INPUT

    def test_openai_timeout(self):
        exc = openai.APITimeoutError(request=REQUEST)
        assert from_exception("gemini", exc).kind is ErrorKind.SERVICE_UNAVAILABLE

    def test_httpx_status_error(self):
        response = _response(503)
        exc = httpx.HTTPStatusError("unavailable", request=REQUEST, response=response)
        error = from_exception("huggingface", exc)
        assert error.kind is ErrorKind.SERVICE_UNAVAILABLE
        assert error.status_code == 503

    def test_httpx_connect_error(self):
        exc = httpx.ConnectError("connection refused", request=REQUEST)
        assert from_exception("replicate", exc).kind is ErrorKind.SERVICE_UNAVAILABLE

    def test_unrecognised_exception_is_unknown(self):
        error = from_exception("openai", ValueError("boom"))
        assert error.kind is ErrorKind.UNKNOWN
        assert error.message == "boom"

    def test_provider_error_passes_through(self):
        original = ProviderError("quota", kind=ErrorKind.RATE_LIMITED)
        error = from_exception("groq", original)
        assert error is original
        assert error.provider == "groq"


class TestFallbackEligibility:
    @pytest.mark.parametrize(
        "kind,eligible",
        [
            (ErrorKind.UNAUTHORIZED, True),
            (ErrorKind.RATE_LIMITED, True),
            (ErrorKind.SERVICE_UNAVAILABLE, True),
            (ErrorKind.INVALID_INPUT, False),
            (ErrorKind.UNKNOWN, False),
        ],
    )
    def test_kinds(self, kind, eligible):
        assert ProviderError("x", kind=kind).is_fallback_eligible is eligible

    def test_all_failed_message_embeds_last_error(self):
        last = ProviderError("Service Unavailable", kind=ErrorKind.SERVICE_UNAVAILABLE, provider="gemini")
        error = AllProvidersFailedError("chat", last, [("groq", ErrorKind.SERVICE_UNAVAILABLE)])
        assert "Service Unavailable" in str(error)
        assert error.attempts == [("groq", ErrorKind.SERVICE_UNAVAILABLE)]
