"""
Unit tests for the template-based mock provider.
"""

import random

import pytest

from rabbit.services.ai.providers.mock import CONTENT_TEMPLATES, DEFAULT_CHAT_OPENER, MockProvider
from rabbit.services.ai.schemas import ChatRequest, ContentRequest

pytestmark = pytest.mark.asyncio


def _provider(seed: int = 7) -> MockProvider:
    return MockProvider(rng=random.Random(seed))


class TestMockContent:
    async def test_one_entry_per_platform(self):
        request = ContentRequest(platforms=["instagram", "x", "linkedin"], topic="teamwork", tone="casual")
        result = await _provider().generate_multi_platform_content(request)

        assert [c.platform for c in result.suggested_content] == ["instagram", "x", "linkedin"]
        for item in result.suggested_content:
            assert item.content in CONTENT_TEMPLATES[item.platform]["casual"]
            assert len(item.hashtags.split()) == 5
            assert item.image_prompt

    async def test_same_seed_same_output(self):
        request = ContentRequest(platforms=["instagram", "x"], topic="teamwork")
        first = await _provider(3).generate_multi_platform_content(request)
        second = await _provider(3).generate_multi_platform_content(request)
        assert first == second

    async def test_unknown_platform_uses_default_templates(self):
        request = ContentRequest(platforms=["Mastodon"], topic="teamwork")
        result = await _provider().generate_multi_platform_content(request)
        assert result.suggested_content[0].platform == "Mastodon"
        assert result.suggested_content[0].content


class TestMockChat:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("any ideas for my bakery?", "brainstorm"),
            ("which hashtag should I use", "hashtags"),
            ("best time to post", "Timing"),
        ],
    )
    async def test_opener_follows_keywords(self, query, expected):
        request = ChatRequest(platforms=["x"], userQuery=query, messages=[])
        result = await _provider().generate_chat_response(request)
        assert expected in result.message
        assert len(result.suggested_content[0].hashtags.split()) == 3

    async def test_default_opener(self):
        request = ChatRequest(platforms=["x"], userQuery="launch day", messages=[])
        result = await _provider().generate_chat_response(request)
        assert result.message == DEFAULT_CHAT_OPENER

    async def test_reply_follows_requested_tone(self):
        request = ChatRequest(platforms=["x"], userQuery="launch day", messages=[], tone="Witty")
        result = await _provider().generate_chat_response(request)
        assert result.suggested_content[0].content in CONTENT_TEMPLATES["x"]["witty"]


class TestMockImage:
    async def test_keyword_match(self):
        url = await _provider().generate_image("A happy puppy in the park")
        assert "photo-1552053831-71594a27632d" in url

    async def test_chase_takes_priority(self):
        url = await _provider().generate_image("dog chasing a new idea")
        assert "photo-1507003211169-0a1dd7228f2d" in url

    async def test_random_placeholder(self):
        url = await _provider().generate_image("abstract shapes")
        assert url.startswith("https://picsum.photos/400/400?random=")

    async def test_health_check(self):
        assert await _provider().health_check() is True
