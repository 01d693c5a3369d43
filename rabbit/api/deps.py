"""
FastAPI dependencies shared by the route modules.
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from rabbit.services.ai.router import AIRouter
from rabbit.services.content_store import ContentStore


def get_router(request: Request) -> AIRouter:
    """The AIRouter built at application startup."""
    return request.app.state.ai_router


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str | None:
    """Optional opaque user id; only forwarded to persistence."""
    return x_user_id or None


RouterDep = Annotated[AIRouter, Depends(get_router)]
StoreDep = Annotated[ContentStore, Depends(get_content_store)]
UserIdDep = Annotated[str | None, Depends(get_user_id)]
