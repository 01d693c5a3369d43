"""
OpenAI Provider

GPT-4o for text and DALL-E 3 for images.
"""

import re

import httpx
import openai
import structlog

from rabbit.services.ai.errors import from_exception
from rabbit.services.ai.providers.base import OpenAICompatibleProvider

logger = structlog.get_logger()

IMAGE_MODEL = "dall-e-3"

_BOILERPLATE_PREFIXES = re.compile(r"^(A realistic, high-quality social media image|A professional image)")
_FILLER_WORDS = re.compile(r"\b(showing|depicting|image of|photo of|visual of)\b", re.IGNORECASE)


def clean_image_prompt(prompt: str) -> str:
    """Strip markdown, mentions and filler phrases that confuse DALL-E."""
    clean = prompt.strip().replace("**", "")
    clean = re.sub(r"[#@]", "", clean).strip()
    clean = _FILLER_WORDS.sub("", clean)
    clean = _BOILERPLATE_PREFIXES.sub("", clean).strip()
    clean = re.sub(r"\s{2,}", " ", clean)

    if clean.startswith(("showing:", "depicting:")):
        clean = clean[clean.index(":") + 1 :].strip()

    if len(clean) < 15:
        clean = f"{clean}, professional photography style"
    elif len(clean) > 200:
        clean = clean[:200] + "..."
    return clean


class OpenAIProvider(OpenAICompatibleProvider):
    """OpenAI API (paid)."""

    PROVIDER_NAME = "openai"
    BASE_URL = None
    DEFAULT_MODEL = "gpt-4o"
    CREDENTIAL_ENV = "OPENAI_API_KEY"

    async def generate_image(self, prompt: str) -> str | None:
        clean = clean_image_prompt(prompt)
        logger.info("ai_generate_image_start", provider=self.provider_name, model=IMAGE_MODEL, prompt_len=len(clean))

        client = self._get_client(self._get_api_key())
        try:
            response = await client.images.generate(
                model=IMAGE_MODEL,
                prompt=clean,
                n=1,
                size="1024x1024",
                quality="standard",
                style="vivid",
            )
        except (openai.OpenAIError, httpx.HTTPError) as e:
            raise from_exception(self.provider_name, e) from e

        if not response.data or not response.data[0].url:
            logger.warning("ai_generate_image_empty", provider=self.provider_name)
            return None

        logger.info("ai_generate_image_success", provider=self.provider_name)
        return response.data[0].url
