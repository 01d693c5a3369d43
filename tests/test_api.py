"""
API tests for the chat, content, image and post endpoints.

Every request runs against the real router and the mock provider; no
credentials are configured unless a test adds them to `environ`.
"""

from unittest.mock import AsyncMock, patch

import httpx
import openai
import pytest
from httpx import AsyncClient

from rabbit.core.models import PostStatus
from rabbit.services.ai.errors import AllProvidersFailedError, ErrorKind, ProviderError, from_exception

pytestmark = pytest.mark.asyncio


def _all_failed(kind: ErrorKind, message: str = "Service Unavailable") -> AllProvidersFailedError:
    return AllProvidersFailedError("chat", ProviderError(message, kind=kind, provider="gemini"))


class TestAIChat:
    async def test_mock_chat(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/ai-chat",
            json={"platforms": ["instagram", "x"], "userQuery": "launch day", "messages": []},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"]
        suggestions = data["suggestedContent"]
        assert [s["platform"] for s in suggestions] == ["instagram", "x"]
        for suggestion in suggestions:
            assert suggestion["content"]
            assert suggestion["hashtags"].startswith("#")

    async def test_frontend_message_shape_accepted(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/ai-chat",
            json={
                "platforms": ["linkedin"],
                "userQuery": "hiring news",
                "messages": [{"type": "user", "text": "hi"}, {"type": "ai", "text": "hello!"}, "junk"],
            },
        )
        assert response.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"platforms": [], "userQuery": "x", "messages": []},
            {"platforms": ["x"], "userQuery": "   ", "messages": []},
            {"platforms": ["x"], "userQuery": "launch"},
        ],
    )
    async def test_invalid_body_is_400(self, client: AsyncClient, body: dict) -> None:
        response = await client.post("/api/ai-chat", json=body)
        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_total_failure_degrades(self, client: AsyncClient, ai_router) -> None:
        with patch.object(ai_router, "route_chat", AsyncMock(side_effect=_all_failed(ErrorKind.SERVICE_UNAVAILABLE))):
            response = await client.post(
                "/api/ai-chat",
                json={"platforms": ["x"], "userQuery": "launch day", "messages": []},
            )
        assert response.status_code == 200
        data = response.json()
        assert "Service Unavailable" in data["message"]
        assert data["suggestedContent"][0]["content"].startswith("Unable to generate x content")

    async def test_invalid_input_degrades(self, client: AsyncClient, ai_router) -> None:
        failure = _all_failed(ErrorKind.INVALID_INPUT, "content policy violation")
        with patch.object(ai_router, "route_chat", AsyncMock(side_effect=failure)):
            response = await client.post(
                "/api/ai-chat",
                json={"platforms": ["x"], "userQuery": "launch day", "messages": []},
            )
        assert response.status_code == 200
        data = response.json()
        assert "content policy violation" in data["message"]
        assert data["suggestedContent"][0]["content"].startswith("Unable to generate x content")


class TestVendorClientErrors:
    """A vendor 4xx (retired model, context too long) is a provider failure, not a bad request."""

    @pytest.fixture
    def groq_model_missing(self, ai_router, environ: dict[str, str]):
        environ["GROQ_API_KEY"] = "g"
        error = openai.NotFoundError(
            "The model does not exist",
            response=httpx.Response(404, request=httpx.Request("POST", "https://api.groq.com/openai/v1")),
            body=None,
        )
        groq = ai_router.registry["groq"]
        with patch.object(groq, "_complete_with_key", AsyncMock(side_effect=from_exception("groq", error))):
            yield

    async def test_chat_degrades(self, client: AsyncClient, groq_model_missing) -> None:
        response = await client.post(
            "/api/ai-chat",
            json={"platforms": ["x"], "userQuery": "launch day", "messages": []},
        )
        assert response.status_code == 200
        data = response.json()
        assert "technical difficulties" in data["message"]
        assert [s["platform"] for s in data["suggestedContent"]] == ["x"]

    async def test_content_degrades(self, client: AsyncClient, groq_model_missing) -> None:
        response = await client.post(
            "/api/generate-content",
            json={
                "platforms": ["instagram", "x"],
                "contentType": "tip",
                "audience": "students",
                "tone": "casual",
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"instagram", "x"}
        assert data["x"][0]["content"].startswith("Unable to generate x content")


class TestAIStatus:
    async def test_mock_when_unconfigured(self, client: AsyncClient) -> None:
        data = (await client.get("/api/ai-status")).json()
        assert data["provider"] == "mock"
        assert data["status"] == "fallback"
        assert data["isFree"] is True

    async def test_recomputed_per_request(self, client: AsyncClient, environ: dict[str, str]) -> None:
        environ["GEMINI_API_KEY"] = "added-at-runtime"
        data = (await client.get("/api/ai-status")).json()
        assert data["provider"] == "gemini"
        assert data["status"] == "active"

        environ["GROQ_API_KEY"] = "preferred"
        data = (await client.get("/api/ai-status")).json()
        assert data["provider"] == "groq"

        environ["USE_MOCK_AI"] = "true"
        assert (await client.get("/api/ai-status")).json()["provider"] == "mock"


class TestGenerateImage:
    async def test_no_context_is_400(self, client: AsyncClient, ai_router) -> None:
        with patch.object(ai_router, "route_image", AsyncMock()) as route_image:
            response = await client.post("/api/generate-image", json={"prompt": "  ", "userQuery": ""})
        assert response.status_code == 400
        route_image.assert_not_awaited()

    async def test_user_query_context(self, client: AsyncClient) -> None:
        response = await client.post("/api/generate-image", json={"userQuery": "golden retriever at the beach"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["context"] == "user query"
        assert data["imageUrl"].startswith("https://source.unsplash.com/")
        assert data["prompt"].endswith("...")

    async def test_mock_forced(self, client: AsyncClient, environ: dict[str, str]) -> None:
        environ["USE_MOCK_AI"] = "1"
        response = await client.post("/api/generate-image", json={"aiResponse": "Our new puppy joined the office team today!"})
        data = response.json()
        assert data["context"] == "AI response"
        assert data["imageUrl"].startswith("https://images.unsplash.com/")

    async def test_all_providers_failed_is_500(self, client: AsyncClient, ai_router) -> None:
        failure = AllProvidersFailedError("image", None)
        with patch.object(ai_router, "route_image", AsyncMock(side_effect=failure)):
            response = await client.post("/api/generate-image", json={"prompt": "a cat"})
        assert response.status_code == 500
        assert response.json()["success"] is False


class TestEnhanceInput:
    async def test_enhance(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/enhance-input",
            json={"originalInput": "my trip to Lisbon", "suggestion": "Add specific location details"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["enhancedInput"]
        assert data["originalInput"] == "my trip to Lisbon"

    async def test_missing_fields_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/api/enhance-input", json={"originalInput": "only this"})
        assert response.status_code == 400


class TestGenerateContent:
    BODY = {
        "platforms": ["instagram", "linkedin"],
        "contentType": "tip",
        "audience": "startup-founders",
        "tone": "professional",
        "customKeywords": "remote work",
    }

    async def test_platform_map_and_storage(self, client: AsyncClient, content_store) -> None:
        response = await client.post("/api/generate-content", json=self.BODY)
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"instagram", "linkedin"}
        card = data["instagram"][0]
        assert card["content"]
        assert card["hashtags"]
        assert card["imagePrompt"]

        assert [c.platform for c in content_store.content] == ["instagram", "linkedin"]
        assert content_store.content[0].provider == "mock"
        assert content_store.preferences[0]["contentType"] == "tip"

    async def test_history(self, client: AsyncClient) -> None:
        await client.post("/api/generate-content", json=self.BODY)
        response = await client.get("/api/content-history", params={"limit": 1})
        assert response.status_code == 200
        history = response.json()
        assert len(history) == 1
        assert history[0]["platform"] == "linkedin"

    async def test_unknown_enum_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/api/generate-content", json={**self.BODY, "audience": "everyone"})
        assert response.status_code == 400

    async def test_degraded_result_still_stored(self, client: AsyncClient, ai_router, content_store) -> None:
        with patch.object(
            ai_router, "route_content", AsyncMock(side_effect=_all_failed(ErrorKind.RATE_LIMITED))
        ):
            response = await client.post("/api/generate-content", json=self.BODY)
        assert response.status_code == 200
        assert response.json()["linkedin"][0]["content"].startswith("Unable to generate linkedin content")
        assert content_store.content[0].provider is None


class TestPosts:
    async def test_post_to_platform(self, client: AsyncClient, content_store) -> None:
        response = await client.post("/api/post-to-platform", json={"content": " Hello world ", "platforms": "x"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["platformResults"] == [{"platform": "x", "success": True}]
        assert content_store.posts[0].content == "Hello world"
        assert content_store.posts[0].status is PostStatus.POSTED

    async def test_blank_content_is_400(self, client: AsyncClient) -> None:
        response = await client.post("/api/post-to-platform", json={"content": "   ", "platforms": ["x"]})
        assert response.status_code == 400

    async def test_schedule_requires_time(self, client: AsyncClient) -> None:
        response = await client.post("/api/schedule-post", json={"content": "Later", "platforms": ["x"]})
        assert response.status_code == 400

    async def test_schedule_and_history(self, client: AsyncClient) -> None:
        await client.post("/api/post-to-platform", json={"content": "First", "platforms": ["x"]})
        response = await client.post(
            "/api/schedule-post",
            json={"content": "Second", "platforms": ["x", "linkedin"], "scheduledFor": "2026-11-01T09:00:00Z"},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Successfully scheduled post for multiple platforms"

        history = (await client.get("/api/post-history")).json()
        assert [item["content"] for item in history] == ["Second", "First"]
        assert history[0]["id"] == "2"
        assert history[0]["status"] == "scheduled"
        assert history[0]["scheduled"].startswith("2026-11-01T09:00:00")
        assert "scheduled" not in history[1]
