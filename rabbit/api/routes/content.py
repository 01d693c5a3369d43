"""
Content Generation Routes

Routes:
- POST /api/generate-content  - Onboarding preferences to per-platform cards
- GET  /api/content-history   - Previously generated content, newest first
"""

import structlog
from fastapi import APIRouter, BackgroundTasks, Query
from pydantic import ConfigDict

from rabbit.api.deps import RouterDep, StoreDep, UserIdDep
from rabbit.core.logging import enrich_event
from rabbit.core.models import Audience, ContentType, ImageOption
from rabbit.services.ai.errors import AllProvidersFailedError
from rabbit.services.ai.schemas import ContentRequest
from rabbit.services.content_store import DEFAULT_HISTORY_LIMIT, save_generated_content_quietly

logger = structlog.get_logger()

router = APIRouter()


class OnboardingRequest(ContentRequest):
    """Answers from the onboarding flow."""

    model_config = ConfigDict(use_enum_values=True)

    content_type: ContentType
    audience: Audience
    tone: str
    image_option: ImageOption = ImageOption.NONE


@router.post("/api/generate-content")
async def generate_content(
    body: OnboardingRequest,
    ai_router: RouterDep,
    store: StoreDep,
    user_id: UserIdDep,
    background_tasks: BackgroundTasks,
) -> dict:
    """Generate content for every requested platform.

    Returns {platform: [{content, hashtags, imagePrompt}]}. Storing the
    result happens after the response and never fails the request.
    """
    enrich_event(**{"ai.platforms": body.platforms, "content.type": body.content_type})
    provider = None
    try:
        routed = await ai_router.route_content(body)
        result, provider = routed.value, routed.provider
    except AllProvidersFailedError as e:
        logger.error("content_generation_degraded", error=str(e), attempts=len(e.attempts))
        result = ai_router.degraded_result(body, e)

    background_tasks.add_task(
        save_generated_content_quietly,
        store,
        result.suggested_content,
        provider=provider,
        user_id=user_id,
        preferences=body.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
    return result.as_platform_map()


@router.get("/api/content-history")
async def content_history(
    store: StoreDep,
    user_id: UserIdDep,
    limit: int = Query(default=DEFAULT_HISTORY_LIMIT, ge=1, le=200),
) -> list[dict]:
    history = await store.list_generated_content(limit=limit, user_id=user_id)
    return [item.model_dump(mode="json", by_alias=True) for item in history]
