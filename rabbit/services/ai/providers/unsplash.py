"""
Unsplash Provider

Keyword search URLs on Unsplash's source endpoint. No credential and no
network call: the URL itself resolves to a matching photo.
"""

import re
from urllib.parse import quote

import structlog

from rabbit.services.ai.providers.base import ImageOnlyProvider

logger = structlog.get_logger()

SOURCE_URL = "https://source.unsplash.com/800x600/?{query}"

_PREFIXES = re.compile(
    r"^(A realistic, high-quality social media image|A professional image|High quality, professional social media image)"
)
_FILLER = re.compile(r"\b(showing|depicting|of)\b", re.IGNORECASE)


def search_query(prompt: str) -> str:
    """First three meaningful words of the prompt."""
    query = _PREFIXES.sub("", prompt.strip())
    query = _FILLER.sub("", query)
    query = re.sub(r"[^\w\s]", " ", query).strip()
    keywords = [w for w in query.split() if len(w) > 2][:3]
    return " ".join(keywords) or "professional"


class UnsplashProvider(ImageOnlyProvider):
    PROVIDER_NAME = "unsplash"

    async def generate_image(self, prompt: str) -> str | None:
        query = search_query(prompt)
        logger.info("ai_generate_image_success", provider=self.provider_name, query=query)
        return SOURCE_URL.format(query=quote(query))

    async def health_check(self) -> bool:
        return True
