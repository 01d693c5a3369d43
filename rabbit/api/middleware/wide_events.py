"""
Wide Events Middleware for FastAPI.

This middleware implements the canonical log line pattern:
- Initializes a wide event at request start
- Lets handlers and the AI router enrich it (provider, fallback, platforms)
- Finalizes and emits on request completion
- One comprehensive log entry per request

Usage:
    app.add_middleware(WideEventMiddleware)

Then in your handlers:
    from rabbit.core.logging import enrich_event

    @router.post("/api/generate-content")
    async def generate_content(...):
        enrich_event(**{"ai.platforms": request.platforms})
        ...
"""

from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from rabbit.core.logging import (
    emit_wide_event,
    enrich_event,
    finalize_request_event,
    init_request_event,
)


class WideEventMiddleware(BaseHTTPMiddleware):
    """
    Middleware that captures wide events for every request.

    Creates one comprehensive log entry per request containing:
    - Request metadata (method, path, headers)
    - User context (the optional X-User-Id header)
    - Business context (added by handlers via enrich_event)
    - Response metadata (status, duration)
    - Error context (if applicable)
    """

    # Paths to skip (health checks generate too much noise)
    SKIP_PATHS = {"/health", "/api/health", "/favicon.ico"}

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        # Skip noisy endpoints
        if request.url.path in self.SKIP_PATHS:
            return await call_next(request)

        # Initialize wide event
        request_id = request.headers.get("x-request-id")
        init_request_event(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
            user_agent=request.headers.get("user-agent", ""),
        )

        user_id = request.headers.get("x-user-id")
        if user_id:
            add_user_to_wide_event(user_id)

        # Add query params if present
        if request.query_params:
            enrich_event(**{"http.query_params": dict(request.query_params)})

        # Process request
        error: Exception | None = None
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response

        except Exception as e:
            error = e
            status_code = getattr(e, "status_code", 500)
            raise

        finally:
            # Finalize and emit the wide event
            event = finalize_request_event(status_code, error)
            emit_wide_event(event)

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP, respecting proxy headers."""
        # Check forwarded headers (reverse proxy)
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        # Fall back to direct connection
        if request.client:
            return request.client.host

        return "unknown"


def add_user_to_wide_event(user_id: str | None = None) -> None:
    """Add the caller's opaque user id to the wide event."""
    enrich_event(user={"id": user_id})
