"""
Post Routes

Posting is simulated: the post is stored and every platform reports
success. Unlike the generation endpoints, a storage failure here fails the
request, since storing the post is the whole point.

Routes:
- POST /api/post-to-platform  - Publish now
- POST /api/schedule-post     - Store for later publication
- GET  /api/post-history      - Stored posts, newest first
"""

from datetime import datetime

import structlog
from fastapi import APIRouter, Query
from pydantic import Field, field_validator

from rabbit.api.deps import StoreDep, UserIdDep
from rabbit.core.logging import enrich_event
from rabbit.core.models import CamelSchema, PostStatus
from rabbit.services.content_store import DEFAULT_HISTORY_LIMIT, StoredPost

logger = structlog.get_logger()

router = APIRouter()


# ============================================================================
# Request Models
# ============================================================================

class PostRequest(CamelSchema):
    content: str = Field(min_length=1)
    platforms: list[str] = Field(min_length=1)
    scheduled_for: datetime | None = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("content must not be blank")
        return v

    @field_validator("platforms", mode="before")
    @classmethod
    def single_platform_as_list(cls, v):
        """Accept a bare platform name as well as a list."""
        if isinstance(v, str):
            return [v]
        return v


class ScheduleRequest(PostRequest):
    scheduled_for: datetime


# ============================================================================
# Endpoints
# ============================================================================

def _post_payload(post: StoredPost) -> dict:
    return post.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/api/post-to-platform")
async def post_to_platform(body: PostRequest, store: StoreDep, user_id: UserIdDep) -> dict:
    platform_results = [{"platform": p, "success": True} for p in body.platforms]
    post = await store.save_post(
        body.content,
        body.platforms,
        PostStatus.POSTED,
        scheduled_for=body.scheduled_for,
        user_id=user_id,
        platform_results={"results": platform_results},
    )
    enrich_event(**{"post.id": post.id, "post.platforms": body.platforms})
    logger.info("post_published", post_id=post.id, platforms=body.platforms)
    return {
        "success": True,
        "message": f"Successfully posted to {', '.join(body.platforms)}",
        "post": _post_payload(post),
        "platformResults": platform_results,
    }


@router.post("/api/schedule-post")
async def schedule_post(body: ScheduleRequest, store: StoreDep, user_id: UserIdDep) -> dict:
    post = await store.save_post(
        body.content,
        body.platforms,
        PostStatus.SCHEDULED,
        scheduled_for=body.scheduled_for,
        user_id=user_id,
    )
    enrich_event(**{"post.id": post.id, "post.platforms": body.platforms})
    target = "multiple platforms" if len(body.platforms) > 1 else body.platforms[0]
    return {
        "success": True,
        "message": f"Successfully scheduled post for {target}",
        "post": _post_payload(post),
    }


@router.get("/api/post-history")
async def post_history(
    store: StoreDep,
    user_id: UserIdDep,
    limit: int = Query(default=DEFAULT_HISTORY_LIMIT, ge=1, le=200),
) -> list[dict]:
    posts = await store.list_posts(limit=limit, user_id=user_id)
    history = []
    for post in posts:
        item = {
            "id": str(post.id),
            "content": post.content,
            "platforms": post.platforms,
            "status": post.status.value,
            "timestamp": post.created_at.isoformat() if post.created_at else None,
        }
        if post.scheduled_for:
            item["scheduled"] = post.scheduled_for.isoformat()
        history.append(item)
    return history
