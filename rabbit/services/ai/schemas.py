"""
AI request/result models.

Immutable value objects exchanged between the API layer, the router and
the provider adapters. Field names are snake_case in Python and camelCase
on the wire.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Literal, TypeVar

import structlog
from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from rabbit.core.models import (
    CamelSchema,
    ContentLength,
    ContentStyle,
    EmotionalTone,
    StructurePreference,
)
from rabbit.services.ai.errors import ErrorKind

logger = structlog.get_logger()

T = TypeVar("T")

# Frontend chat bubbles use {type: "user" | "ai", text}
_FRONTEND_ROLES = {"user": "user", "ai": "assistant", "assistant": "assistant", "system": "system"}


class FrozenCamelSchema(CamelSchema):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


class ContentRequest(FrozenCamelSchema):
    """What to write about, for which platforms, and in what style."""

    platforms: list[str] = Field(min_length=1)
    topic: str = Field(default="", alias="userQuery")

    # Onboarding knobs
    content_type: str | None = None
    audience: str | None = None
    custom_keywords: str | None = Field(default=None, max_length=500)
    include_image: bool = False

    # Style knobs
    tone: str | None = None
    format: str | None = None
    niche: str | None = None
    include_emojis: bool = True
    emoji_pack: str | None = None
    length: ContentLength | None = None
    content_style: ContentStyle | None = None
    emotional_tone: EmotionalTone | None = None
    structure_preference: StructurePreference | None = None

    @field_validator("platforms")
    @classmethod
    def strip_platforms(cls, v: list[str]) -> list[str]:
        platforms = [p.strip() for p in v if p and p.strip()]
        if not platforms:
            raise ValueError("At least one platform is required")
        return platforms

    @property
    def subject(self) -> str:
        """Best available description of what the content is about."""
        return (
            self.topic.strip()
            or (self.custom_keywords or "").strip()
            or (self.content_type or "").strip()
            or "social media"
        )


class ChatMessage(FrozenCamelSchema):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(ContentRequest):
    """A chat turn: conversation history plus the content knobs."""

    messages: list[ChatMessage]
    topic: str = Field(alias="userQuery", min_length=1)

    @field_validator("topic")
    @classmethod
    def topic_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("userQuery must not be blank")
        return v

    @field_validator("messages", mode="before")
    @classmethod
    def normalize_messages(cls, v: Any) -> Any:
        """Accept both {role, content} and the frontend's {type, text}; drop junk."""
        if not isinstance(v, list):
            return v
        normalized = []
        for index, msg in enumerate(v):
            if isinstance(msg, ChatMessage):
                normalized.append(msg)
                continue
            if not isinstance(msg, dict):
                logger.warning("chat_message_skipped", index=index, reason="not_an_object")
                continue
            role = msg.get("role") or _FRONTEND_ROLES.get(msg.get("type", "user"))
            content = msg.get("content") or msg.get("text") or ""
            if role not in ("user", "assistant", "system") or not isinstance(content, str) or not content.strip():
                logger.warning("chat_message_skipped", index=index, reason="invalid_role_or_content")
                continue
            normalized.append({"role": role, "content": content.strip()})
        return normalized


class PlatformContent(FrozenCamelSchema):
    platform: str
    content: str
    hashtags: str = ""
    image_prompt: str | None = None


class GenerationResult(FrozenCamelSchema):
    """Normalized output: one suggestion per requested platform."""

    message: str
    suggested_content: list[PlatformContent] = Field(default_factory=list)

    def as_platform_map(self) -> dict[str, list[dict[str, Any]]]:
        """Render as {platform: [{content, hashtags, imagePrompt}]} for the swipe cards."""
        rendered: dict[str, list[dict[str, Any]]] = {}
        for item in self.suggested_content:
            rendered.setdefault(item.platform.lower(), []).append(
                item.model_dump(by_alias=True, exclude={"platform"}, exclude_none=True)
            )
        return rendered


@dataclass
class RoutedResult(Generic[T]):
    """Router output with metadata about which provider answered."""

    value: T
    provider: str
    fallback_used: bool = False
    attempts: list[tuple[str, ErrorKind]] = field(default_factory=list)
