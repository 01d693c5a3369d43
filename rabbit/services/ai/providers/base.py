"""
Base Provider Implementation

Common functionality shared across all text provider adapters.
"""

import asyncio
import os
import random
from collections.abc import Mapping

import httpx
import openai
import structlog
from openai import AsyncOpenAI

from rabbit.services.ai import prompts
from rabbit.services.ai.errors import ErrorKind, ProviderError, from_exception
from rabbit.services.ai.interface import ContentProvider
from rabbit.services.ai.schemas import (
    ChatRequest,
    ContentRequest,
    GenerationResult,
    PlatformContent,
)

logger = structlog.get_logger()


class OpenAICompatibleProvider(ContentProvider):
    """Base class for OpenAI-compatible providers.

    OpenAI, Gemini, Anthropic, Groq and the Hugging Face router all accept
    the OpenAI chat completions format, so subclasses mostly set the
    endpoint, the model and the credential variable.
    """

    PROVIDER_NAME = "openai"
    BASE_URL: str | None = None
    DEFAULT_MODEL = "gpt-4o"
    CREDENTIAL_ENV = "OPENAI_API_KEY"

    # Conversational reply budget
    CHAT_MAX_TOKENS = 800
    TEMPERATURE = 0.8

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        model: str | None = None,
        timeout: float = 60.0,
        rng: random.Random | None = None,
    ):
        self.environ = os.environ if environ is None else environ
        self.model = model or self.DEFAULT_MODEL
        self.timeout = timeout
        self.rng = rng or random.Random()
        self._clients: dict[str, AsyncOpenAI] = {}

    @property
    def provider_name(self) -> str:
        return self.PROVIDER_NAME

    @property
    def model_name(self) -> str:
        return self.model

    def _get_api_key(self) -> str:
        """Read the credential from the live environment."""
        key = (self.environ.get(self.CREDENTIAL_ENV) or "").strip()
        if not key:
            raise ProviderError(
                f"{self.CREDENTIAL_ENV} is not configured",
                kind=ErrorKind.UNAUTHORIZED,
                provider=self.provider_name,
            )
        return key

    def _get_client(self, api_key: str) -> AsyncOpenAI:
        """Get or create a client for this key."""
        client = self._clients.get(api_key)
        if client is None:
            client = AsyncOpenAI(
                base_url=self.BASE_URL,
                api_key=api_key,
                timeout=self.timeout,
                max_retries=0,
                default_headers=self._get_default_headers(),
            )
            self._clients[api_key] = client
        return client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests.

        Override in subclasses for provider-specific headers.
        """
        return {}

    async def _complete_with_key(
        self,
        api_key: str,
        messages: list[dict[str, str]],
        max_tokens: int,
    ) -> str:
        client = self._get_client(api_key)
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=self.TEMPERATURE,
            )
        except (openai.OpenAIError, httpx.HTTPError) as e:
            raise from_exception(self.provider_name, e) from e

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            raise ProviderError(
                "Empty response from model",
                kind=ErrorKind.UNKNOWN,
                provider=self.provider_name,
            )
        return text

    async def _complete(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        """Run one chat completion and return the reply text.

        Raises:
            ProviderError: classified vendor failure
        """
        return await self._complete_with_key(self._get_api_key(), messages, max_tokens)

    async def _generate_platform(self, request: ContentRequest, platform: str) -> PlatformContent:
        system, user, max_tokens = prompts.build_platform_prompt(request, platform)
        reply = await self._complete(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            max_tokens,
        )
        return prompts.finalize_platform_content(request, platform, reply, self.rng)

    async def _generate_all_platforms(self, request: ContentRequest) -> list[PlatformContent]:
        """Fan out one call per platform; failed platforms get placeholder text.

        If every platform fails, the first provider error is re-raised so the
        router can try another provider instead of returning placeholders.
        """
        results = await asyncio.gather(
            *(self._generate_platform(request, p) for p in request.platforms),
            return_exceptions=True,
        )

        suggestions: list[PlatformContent] = []
        errors: list[ProviderError] = []
        for platform, result in zip(request.platforms, results):
            if isinstance(result, PlatformContent):
                suggestions.append(result)
                continue
            if isinstance(result, asyncio.CancelledError):
                raise result
            error = from_exception(self.provider_name, result)
            errors.append(error)
            logger.warning(
                "ai_platform_generation_failed",
                provider=self.provider_name,
                platform=platform,
                kind=error.kind.value,
                error=error.message,
            )
            suggestions.append(prompts.fallback_platform_content(platform))

        if errors and len(errors) == len(request.platforms):
            raise errors[0]
        return suggestions

    async def generate_multi_platform_content(self, request: ContentRequest) -> GenerationResult:
        logger.info(
            "ai_generate_content_start",
            provider=self.provider_name,
            model=self.model_name,
            platforms=len(request.platforms),
        )
        suggestions = await self._generate_all_platforms(request)
        logger.info(
            "ai_generate_content_success",
            provider=self.provider_name,
            model=self.model_name,
        )
        return GenerationResult(
            message=f"Generated content for {len(suggestions)} platform(s)",
            suggested_content=suggestions,
        )

    async def generate_chat_response(self, request: ChatRequest) -> GenerationResult:
        logger.info(
            "ai_chat_start",
            provider=self.provider_name,
            model=self.model_name,
            history=len(request.messages),
            platforms=len(request.platforms),
        )
        messages = prompts.chat_history(request, prompts.build_system_prompt(request))
        message = await self._complete(messages, self.CHAT_MAX_TOKENS)
        suggestions = await self._generate_all_platforms(request)
        logger.info(
            "ai_chat_success",
            provider=self.provider_name,
            model=self.model_name,
        )
        return GenerationResult(message=message.strip(), suggested_content=suggestions)

    async def generate_image(self, prompt: str) -> str | None:
        """Text-only providers cannot serve images."""
        return None

    async def health_check(self) -> bool:
        """Check if provider is reachable."""
        try:
            client = self._get_client(self._get_api_key())
            # Simple models list call to verify connectivity
            await client.models.list()
            return True
        except (ProviderError, openai.OpenAIError, httpx.HTTPError) as e:
            logger.warning(
                "ai_health_check_failed",
                provider=self.provider_name,
                error=str(e),
            )
            return False


class ImageOnlyProvider(ContentProvider):
    """Base class for providers that only serve images."""

    PROVIDER_NAME = "image"

    @property
    def provider_name(self) -> str:
        return self.PROVIDER_NAME

    def _text_unsupported(self) -> ProviderError:
        return ProviderError(
            f"{self.provider_name} is an image-only provider",
            kind=ErrorKind.INVALID_INPUT,
            provider=self.provider_name,
        )

    async def generate_multi_platform_content(self, request: ContentRequest) -> GenerationResult:
        raise self._text_unsupported()

    async def generate_chat_response(self, request: ChatRequest) -> GenerationResult:
        raise self._text_unsupported()
