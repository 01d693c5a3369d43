"""
Content Store

Persistence for generated content and posts. Generation endpoints save
fire-and-forget through the *_quietly helpers: a database outage is logged
and never fails the request. Post endpoints call the store directly because
storing the post is their whole purpose.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any, Protocol

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rabbit.core.models import CamelSchema, PostStatus
from rabbit.db import DatabaseError, GeneratedContentModel, PostModel, get_db_session
from rabbit.services.ai.schemas import PlatformContent

logger = structlog.get_logger()

DEFAULT_HISTORY_LIMIT = 50


class StoredContent(CamelSchema):
    id: int
    platform: str
    content: str
    hashtags: str | None = None
    image_prompt: str | None = None
    image_url: str | None = None
    provider: str | None = None
    created_at: datetime | None = None


class StoredPost(CamelSchema):
    id: int
    content: str
    platforms: list[str]
    status: PostStatus
    scheduled_for: datetime | None = None
    platform_results: dict[str, Any] | None = None
    created_at: datetime | None = None


class ContentStore(Protocol):
    async def save_generated_content(
        self,
        items: Sequence[PlatformContent],
        provider: str | None = None,
        user_id: str | None = None,
        preferences: dict[str, Any] | None = None,
    ) -> list[StoredContent]: ...

    async def save_post(
        self,
        content: str,
        platforms: Sequence[str],
        status: PostStatus,
        scheduled_for: datetime | None = None,
        user_id: str | None = None,
        platform_results: dict[str, Any] | None = None,
    ) -> StoredPost: ...

    async def list_generated_content(
        self, limit: int = DEFAULT_HISTORY_LIMIT, user_id: str | None = None
    ) -> list[StoredContent]: ...

    async def list_posts(
        self, limit: int = DEFAULT_HISTORY_LIMIT, user_id: str | None = None
    ) -> list[StoredPost]: ...


class SQLContentStore:
    """ContentStore backed by SQLAlchemy async sessions."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession] | None = None):
        self.session_maker = session_maker

    async def save_generated_content(
        self,
        items: Sequence[PlatformContent],
        provider: str | None = None,
        user_id: str | None = None,
        preferences: dict[str, Any] | None = None,
    ) -> list[StoredContent]:
        rows = [
            GeneratedContentModel(
                user_id=user_id,
                platform=item.platform,
                content=item.content,
                hashtags=item.hashtags or None,
                image_prompt=item.image_prompt,
                provider=provider,
                additional_data=preferences,
            )
            for item in items
        ]
        try:
            async with get_db_session(self.session_maker) as session:
                session.add_all(rows)
                await session.commit()
                for row in rows:
                    await session.refresh(row)
                return [StoredContent.model_validate(row) for row in rows]
        except OSError as e:
            raise DatabaseError(f"Database unreachable: {e}", original_error=e) from e

    async def save_post(
        self,
        content: str,
        platforms: Sequence[str],
        status: PostStatus,
        scheduled_for: datetime | None = None,
        user_id: str | None = None,
        platform_results: dict[str, Any] | None = None,
    ) -> StoredPost:
        row = PostModel(
            user_id=user_id,
            content=content,
            platforms=list(platforms),
            status=status.value,
            scheduled_for=scheduled_for,
            platform_results=platform_results,
        )
        try:
            async with get_db_session(self.session_maker) as session:
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return StoredPost.model_validate(row)
        except OSError as e:
            raise DatabaseError(f"Database unreachable: {e}", original_error=e) from e

    async def list_generated_content(
        self, limit: int = DEFAULT_HISTORY_LIMIT, user_id: str | None = None
    ) -> list[StoredContent]:
        query = select(GeneratedContentModel).order_by(
            GeneratedContentModel.created_at.desc(), GeneratedContentModel.id.desc()
        )
        if user_id:
            query = query.where(GeneratedContentModel.user_id == user_id)
        try:
            async with get_db_session(self.session_maker) as session:
                result = await session.execute(query.limit(limit))
                return [StoredContent.model_validate(row) for row in result.scalars()]
        except OSError as e:
            raise DatabaseError(f"Database unreachable: {e}", original_error=e) from e

    async def list_posts(
        self, limit: int = DEFAULT_HISTORY_LIMIT, user_id: str | None = None
    ) -> list[StoredPost]:
        query = select(PostModel).order_by(PostModel.created_at.desc(), PostModel.id.desc())
        if user_id:
            query = query.where(PostModel.user_id == user_id)
        try:
            async with get_db_session(self.session_maker) as session:
                result = await session.execute(query.limit(limit))
                return [StoredPost.model_validate(row) for row in result.scalars()]
        except OSError as e:
            raise DatabaseError(f"Database unreachable: {e}", original_error=e) from e


async def save_generated_content_quietly(
    store: ContentStore,
    items: Sequence[PlatformContent],
    provider: str | None = None,
    user_id: str | None = None,
    preferences: dict[str, Any] | None = None,
) -> None:
    """Save generated content; log and continue if persistence fails."""
    try:
        await store.save_generated_content(items, provider=provider, user_id=user_id, preferences=preferences)
    except (DatabaseError, SQLAlchemyError, OSError) as e:
        logger.warning("content_save_failed", error=str(e), items=len(items))
