"""
Groq Provider

Llama models on Groq's free tier. Free-tier keys hit per-minute token
limits quickly, so the adapter rotates through a KeyPool (GROQ_API_KEY,
GROQ_API_KEY_2) before reporting the provider as rate limited.
"""

import structlog

from rabbit.services.ai.config import GROQ_KEY_ENVS
from rabbit.services.ai.errors import ErrorKind, ProviderError
from rabbit.services.ai.key_pool import KeyPool, parse_reset_time
from rabbit.services.ai.providers.base import OpenAICompatibleProvider

logger = structlog.get_logger()

GROQ_MODELS = {
    "balanced": "llama-3.3-70b-versatile",
    "fast": "llama-3.1-8b-instant",
}


class GroqProvider(OpenAICompatibleProvider):
    PROVIDER_NAME = "groq"
    BASE_URL = "https://api.groq.com/openai/v1"
    DEFAULT_MODEL = GROQ_MODELS["balanced"]
    CREDENTIAL_ENV = "GROQ_API_KEY"

    def __init__(self, *args, key_pool: KeyPool | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.key_pool = key_pool

    def _get_api_key(self) -> str:
        """First non-empty Groq key from the live environment."""
        for name in GROQ_KEY_ENVS:
            key = (self.environ.get(name) or "").strip()
            if key:
                return key
        raise ProviderError(
            f"None of {', '.join(GROQ_KEY_ENVS)} is configured",
            kind=ErrorKind.UNAUTHORIZED,
            provider=self.provider_name,
        )

    async def _complete(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        pool = self.key_pool
        if pool is None or len(pool) == 0:
            # No pool: single key straight from the environment
            return await super()._complete(messages, max_tokens)

        last_error: ProviderError | None = None
        for _ in range(len(pool)):
            key = pool.get_current_key()
            if key is None:
                break
            try:
                return await self._complete_with_key(key, messages, max_tokens)
            except ProviderError as e:
                if e.kind != ErrorKind.RATE_LIMITED:
                    raise
                pool.mark_key_exhausted(key, parse_reset_time(e.message))
                last_error = e
                logger.warning("groq_key_exhausted", remaining=pool.status().active)

        raise ProviderError(
            "All Groq API keys are rate limited"
            + (f": {last_error.message}" if last_error else ""),
            kind=ErrorKind.RATE_LIMITED,
            provider=self.provider_name,
            status_code=429,
            retry_after=last_error.retry_after if last_error else None,
        )
