"""
Application exception hierarchy.

Each subclass maps onto one HTTP status in the API exception handlers.
"""

from typing import Any


class RabbitException(Exception):
    """Base class for application errors."""

    status_code = 500
    error_type = "application_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(RabbitException):
    """Request is well-formed JSON but semantically unusable."""

    status_code = 400
    error_type = "validation_error"


class ConfigurationError(RabbitException):
    """The server is misconfigured (e.g. a provider list names an unknown provider)."""

    status_code = 500
    error_type = "configuration_error"
