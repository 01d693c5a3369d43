"""
Provider Registry

Read-only mapping of provider name to adapter instance, built once at
startup. Looking up a name that has no adapter is a configuration error
and is never silently papered over.
"""

import os
import random
from collections.abc import Iterator, Mapping

import structlog

from rabbit.core.config import Settings
from rabbit.services.ai.config import GROQ_KEY_ENVS, MOCK_PROVIDER
from rabbit.services.ai.errors import UnknownProviderError
from rabbit.services.ai.interface import ContentProvider
from rabbit.services.ai.key_pool import KeyPool
from rabbit.services.ai.providers import (
    AnthropicProvider,
    GeminiProvider,
    GroqProvider,
    HuggingFaceProvider,
    MockProvider,
    OpenAIProvider,
    ReplicateProvider,
    UnsplashProvider,
)

logger = structlog.get_logger()


class ProviderRegistry(Mapping[str, ContentProvider]):
    """Immutable name -> adapter mapping."""

    def __init__(self, providers: Mapping[str, ContentProvider]):
        self._providers = dict(providers)

    def __getitem__(self, name: str) -> ContentProvider:
        try:
            return self._providers[name]
        except KeyError:
            raise UnknownProviderError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def get(self, name: str) -> ContentProvider:  # type: ignore[override]
        """Look up an adapter; unknown names raise UnknownProviderError."""
        return self[name]


def build_registry(
    settings: Settings,
    key_pools: Mapping[str, KeyPool] | None = None,
    environ: Mapping[str, str] | None = None,
    rng: random.Random | None = None,
) -> ProviderRegistry:
    """Construct every adapter once.

    Args:
        settings: Application settings (timeouts, mock latency)
        key_pools: Pre-built key pools by provider name; Groq's is created
            from GROQ_API_KEY / GROQ_API_KEY_2 when not supplied
        environ: Credential source (defaults to the live process environment)
        rng: Shared random source, seed it for reproducible mock output
    """
    env = os.environ if environ is None else environ
    pools = dict(key_pools or {})
    if "groq" not in pools:
        pools["groq"] = KeyPool.from_env(GROQ_KEY_ENVS, env, pool_name="groq")

    common = {"environ": env, "timeout": settings.ai_request_timeout}
    registry = ProviderRegistry({
        "openai": OpenAIProvider(**common, rng=rng),
        "gemini": GeminiProvider(**common, rng=rng),
        "anthropic": AnthropicProvider(**common, rng=rng),
        "groq": GroqProvider(**common, rng=rng, key_pool=pools["groq"]),
        "huggingface": HuggingFaceProvider(**common, rng=rng),
        "replicate": ReplicateProvider(**common),
        "unsplash": UnsplashProvider(),
        MOCK_PROVIDER: MockProvider(rng=rng, delay_max=settings.mock_ai_delay_max),
    })
    logger.info("provider_registry_built", providers=list(registry))
    return registry
