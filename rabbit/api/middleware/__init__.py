"""
API Middleware package.

Contains middleware components for request processing:
- Wide Events: Canonical log line pattern for comprehensive request logging
"""

from rabbit.api.middleware.wide_events import WideEventMiddleware, add_user_to_wide_event

__all__ = [
    "WideEventMiddleware",
    "add_user_to_wide_event",
]
