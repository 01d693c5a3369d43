"""
Pytest configuration and fixtures for Rabbit tests.

No test talks to a real AI vendor or database: credentials are removed
from the environment, the content store is an in-memory fake, and the
router is rebuilt per test with a seeded mock provider.
"""

import random
from collections.abc import AsyncGenerator, Sequence
from datetime import datetime, timezone
from typing import Any

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from rabbit.api.deps import get_content_store, get_router
from rabbit.api.main import create_app
from rabbit.core.config import Settings
from rabbit.core.models import PostStatus
from rabbit.services.ai import AIRouter, RetryPolicy, RouterConfig, build_registry
from rabbit.services.ai.schemas import PlatformContent
from rabbit.services.content_store import StoredContent, StoredPost

CREDENTIAL_VARS = (
    "OPENAI_API_KEY",
    "GEMINI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GROQ_API_KEY",
    "GROQ_API_KEY_2",
    "HUGGING_FACE_TOKEN",
    "REPLICATE_API_TOKEN",
    "USE_MOCK_AI",
)

# Retries without waiting
NO_WAIT_RETRY = RetryPolicy(backoff_base=0.0, backoff_max=0.0, jitter=0.0)


class InMemoryContentStore:
    """ContentStore fake."""

    def __init__(self) -> None:
        self.content: list[StoredContent] = []
        self.posts: list[StoredPost] = []
        self.preferences: list[dict[str, Any] | None] = []

    async def save_generated_content(
        self,
        items: Sequence[PlatformContent],
        provider: str | None = None,
        user_id: str | None = None,
        preferences: dict[str, Any] | None = None,
    ) -> list[StoredContent]:
        saved = []
        for item in items:
            stored = StoredContent(
                id=len(self.content) + 1,
                platform=item.platform,
                content=item.content,
                hashtags=item.hashtags,
                image_prompt=item.image_prompt,
                provider=provider,
                created_at=datetime.now(timezone.utc),
            )
            self.content.append(stored)
            saved.append(stored)
        self.preferences.append(preferences)
        return saved

    async def save_post(
        self,
        content: str,
        platforms: Sequence[str],
        status: PostStatus,
        scheduled_for: datetime | None = None,
        user_id: str | None = None,
        platform_results: dict[str, Any] | None = None,
    ) -> StoredPost:
        post = StoredPost(
            id=len(self.posts) + 1,
            content=content,
            platforms=list(platforms),
            status=status,
            scheduled_for=scheduled_for,
            platform_results=platform_results,
            created_at=datetime.now(timezone.utc),
        )
        self.posts.append(post)
        return post

    async def list_generated_content(self, limit: int = 50, user_id: str | None = None) -> list[StoredContent]:
        return list(reversed(self.content))[:limit]

    async def list_posts(self, limit: int = 50, user_id: str | None = None) -> list[StoredPost]:
        return list(reversed(self.posts))[:limit]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with no provider credentials configured."""
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def environ() -> dict[str, str]:
    """Credential mapping handed to RouterConfig and adapters."""
    return {}


@pytest.fixture
def test_settings() -> Settings:
    return Settings(mock_ai_delay_max=0.0, ai_request_timeout=5.0)


@pytest.fixture
def ai_router(environ: dict[str, str], test_settings: Settings) -> AIRouter:
    """Router over the real registry, reading credentials from `environ`."""
    return AIRouter(
        config=RouterConfig(environ=environ),
        registry=build_registry(test_settings, environ=environ, rng=random.Random(42)),
        retry_policy=NO_WAIT_RETRY,
    )


@pytest.fixture
def content_store() -> InMemoryContentStore:
    return InMemoryContentStore()


@pytest.fixture
def app(ai_router: AIRouter, content_store: InMemoryContentStore) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_router] = lambda: ai_router
    application.dependency_overrides[get_content_store] = lambda: content_store
    return application


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client against the app (lifespan not run)."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
