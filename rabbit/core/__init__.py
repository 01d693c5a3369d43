"""
Core package initialization.
"""

from rabbit.core.config import Settings, get_settings, settings
from rabbit.core.exceptions import (
    ConfigurationError,
    RabbitException,
    ValidationError,
)
from rabbit.core.models import (
    Audience,
    CamelSchema,
    ContentLength,
    ContentStyle,
    ContentType,
    EmotionalTone,
    ImageOption,
    PostStatus,
    StructurePreference,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "settings",
    # Exceptions
    "RabbitException",
    "ValidationError",
    "ConfigurationError",
    # Enums
    "ContentType",
    "Audience",
    "ImageOption",
    "PostStatus",
    "ContentLength",
    "ContentStyle",
    "EmotionalTone",
    "StructurePreference",
    # Models
    "CamelSchema",
]
