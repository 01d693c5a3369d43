"""
Core models and types for Rabbit.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class ContentType(str, Enum):
    THOUGHT = "thought"
    QUOTE = "quote"
    ACHIEVEMENT = "achievement"
    TIP = "tip"
    STORY = "story"
    QUESTION = "question"
    POLL = "poll"
    ANNOUNCEMENT = "announcement"


class Audience(str, Enum):
    ASPIRING_DEVELOPERS = "aspiring-developers"
    TECH_VCS = "tech-vcs"
    STARTUP_FOUNDERS = "startup-founders"
    SOFTWARE_ENGINEERS = "software-engineers"
    PRODUCT_MANAGERS = "product-managers"
    DESIGNERS = "designers"
    GENERAL_TECH = "general-tech"
    STUDENTS = "students"


class ImageOption(str, Enum):
    GENERATE = "generate-dalle"
    UPLOAD = "upload-manual"
    NONE = "no-image"
    STOCK = "stock-photo"


class PostStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    POSTED = "posted"
    FAILED = "failed"


class ContentLength(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class ContentStyle(str, Enum):
    STORY = "story"
    DATA_DRIVEN = "data-driven"
    CALL_TO_ACTION = "call-to-action"


class EmotionalTone(str, Enum):
    EMOTIONAL = "emotional"
    FACTUAL = "factual"


class StructurePreference(str, Enum):
    SHORT_SENTENCES = "short-sentences"
    FLOWING_PARAGRAPHS = "flowing-paragraphs"
    BULLET_POINTS = "bullet-points"


# =============================================================================
# Base Models
# =============================================================================


class CamelSchema(BaseModel):
    """Schema exchanged with the frontend: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
