"""
AI API Routes

Routes:
- POST /api/ai-chat         - Chat turn with per-platform suggestions
- POST /api/generate-image  - Contextual image for a post
- GET  /api/ai-status       - Currently active AI provider
- POST /api/enhance-input   - Rewrite a user's idea along a suggestion
"""

import re

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from rabbit.api.deps import RouterDep
from rabbit.core.exceptions import ValidationError
from rabbit.core.logging import enrich_event
from rabbit.core.models import CamelSchema
from rabbit.services.ai.config import MOCK_PROVIDER
from rabbit.services.ai.errors import AllProvidersFailedError
from rabbit.services.ai.schemas import ChatRequest

logger = structlog.get_logger()

router = APIRouter()

# Minimum length for userQuery to be used as image context
MIN_QUERY_CONTEXT = 3
PROMPT_PREVIEW_CHARS = 100

ENHANCEMENT_PROMPTS = {
    "Emphasize nostalgia and memories": "Rewrite this input to emphasize vivid nostalgic memories and emotional depth",
    "Add specific location details": "Rewrite this input to include rich location and environmental context",
    "Focus on emotional contrast": "Rewrite this input to emphasize emotional contrasts and feelings",
    "Describe taste and texture": "Rewrite this input to include detailed sensory descriptions of taste and texture",
    "Add cultural significance": "Rewrite this input to include cultural context and significance",
    "Focus on visual appeal": "Rewrite this input to emphasize visual details and aesthetic appeal",
    "Share specific moments": "Rewrite this input to focus on specific moments and interactions",
    "Focus on cultural differences": "Rewrite this input to highlight cultural differences and perspectives",
    "Describe sensory details": "Rewrite this input to include vivid sensory descriptions",
    "Add specific details": "Rewrite this input to include specific details about when, where, and why",
    "Include personal emotions": "Rewrite this input to include personal emotions and thoughts",
    "Focus on unique moments": "Rewrite this input to emphasize what made this moment unique",
}
DEFAULT_ENHANCEMENT = "Enhance and expand this input"


# ============================================================================
# Request Models
# ============================================================================

class ImageRequest(CamelSchema):
    """At least one of the three context fields must be non-blank."""
    prompt: str | None = None
    user_query: str | None = None
    ai_response: str | None = None


class EnhanceInputRequest(CamelSchema):
    original_input: str | None = None
    suggestion: str | None = None
    tone: str | None = None
    format: str | None = None
    niche: str | None = None


# ============================================================================
# Helpers
# ============================================================================

def build_image_prompt(body: ImageRequest) -> tuple[str, str] | None:
    """Pick the best image context: user query, then AI response, then prompt.

    Returns:
        (final prompt, context source) or None when nothing usable was sent
    """
    user_query = (body.user_query or "").strip()
    if len(user_query) > MIN_QUERY_CONTEXT:
        return (
            f"A realistic, high-quality social media image showing: {user_query}. "
            "Bright, vibrant colors, professional photography style, suitable for social platforms.",
            "user query",
        )

    ai_response = (body.ai_response or "").strip()
    if ai_response:
        clean = ai_response.replace("**", "")
        clean = re.sub(r"[#@]\w+", "", clean)
        clean = re.sub(r"https?://\S+", "", clean).strip()
        sentences = re.split(r"[.!?]", clean)
        sentence = next((s for s in sentences if len(s.strip()) > 20), None) or sentences[0] or clean[:100]
        return (
            f"A realistic, high-quality social media image depicting: {sentence.strip()}. "
            "Professional, vibrant, engaging composition suitable for social platforms.",
            "AI response",
        )

    prompt = (body.prompt or "").strip()
    if prompt:
        return prompt, "fallback prompt"

    return None


def _preview(prompt: str) -> str:
    if len(prompt) > PROMPT_PREVIEW_CHARS:
        return prompt[:PROMPT_PREVIEW_CHARS] + "..."
    return prompt


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/api/ai-chat")
async def ai_chat(body: ChatRequest, ai_router: RouterDep) -> dict:
    """Answer a chat turn.

    Provider outages never produce a 5xx here: the UI gets a clearly
    labelled placeholder answer instead.
    """
    enrich_event(**{"ai.platforms": body.platforms, "ai.history": len(body.messages)})
    try:
        routed = await ai_router.route_chat(body)
        result = routed.value
    except AllProvidersFailedError as e:
        logger.error("ai_chat_degraded", error=str(e), attempts=len(e.attempts))
        result = ai_router.degraded_result(body, e)

    return result.model_dump(by_alias=True, exclude_none=True)


@router.post("/api/generate-image")
async def generate_image(body: ImageRequest, ai_router: RouterDep):
    """Generate an image from the best available context."""
    built = build_image_prompt(body)
    if built is None:
        raise ValidationError(
            "Please provide either a prompt, user query, or AI response for contextual image generation"
        )
    prompt, context = built
    enrich_event(**{"image.context": context})

    try:
        routed = await ai_router.route_image(prompt)
    except AllProvidersFailedError as e:
        logger.error("image_generation_failed", error=str(e), attempts=len(e.attempts))
        return JSONResponse(status_code=500, content={"success": False, "message": str(e)})

    return {
        "success": True,
        "imageUrl": routed.value,
        "prompt": _preview(prompt),
        "context": context,
    }


@router.get("/api/ai-status")
async def ai_status(ai_router: RouterDep) -> dict:
    """Describe the provider the next request would use (never cached)."""
    provider = ai_router.config.active_provider()
    info = ai_router.config.provider_info(provider)
    return {
        "success": True,
        "provider": provider,
        "name": info.display_name,
        "isFree": info.is_free,
        "status": "fallback" if provider == MOCK_PROVIDER else "active",
    }


@router.post("/api/enhance-input")
async def enhance_input(body: EnhanceInputRequest, ai_router: RouterDep):
    """Rewrite the user's idea along one of the suggestion chips."""
    original = (body.original_input or "").strip()
    suggestion = (body.suggestion or "").strip()
    if not original or not suggestion:
        raise ValidationError("Original input and suggestion are required")

    instruction = ENHANCEMENT_PROMPTS.get(suggestion, DEFAULT_ENHANCEMENT)
    request = ChatRequest(
        messages=[],
        platforms=["general"],
        topic=f'{instruction}: "{original}"',
        tone=body.tone or "Professional",
        format=body.format or "paragraph",
        niche=body.niche or "general",
        include_emojis=False,
        emoji_pack="mixed",
        length="medium",
    )

    try:
        routed = await ai_router.route_chat(request)
    except AllProvidersFailedError as e:
        logger.error("enhance_input_failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Failed to enhance input", "error": str(e)},
        )

    return {
        "success": True,
        "enhancedInput": routed.value.message or original,
        "originalInput": original,
        "suggestion": suggestion,
    }
