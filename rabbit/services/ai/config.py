"""
AI Provider Configuration

Provider catalogue and active-provider selection.

Credentials come from the process environment and are looked up on every
call, so a key exported while the server runs is picked up by the next
request. RouterConfig is built once at startup and handed to the router;
nothing here is module-level mutable state.
"""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import structlog

from rabbit.core.config import Settings
from rabbit.services.ai.errors import UnknownProviderError

logger = structlog.get_logger()

MOCK_PROVIDER = "mock"

_TRUTHY = {"1", "true", "yes", "on"}


# Any one of these is enough to enable Groq; all of them feed its KeyPool
GROQ_KEY_ENVS = ("GROQ_API_KEY", "GROQ_API_KEY_2")


@dataclass(frozen=True)
class ProviderInfo:
    """Static description of one provider."""

    name: str
    display_name: str
    is_free: bool
    credential_envs: tuple[str, ...] = ()  # empty: needs no credential

    def enabled(self, environ: Mapping[str, str] | None = None) -> bool:
        """True when any of the provider's credentials is present and non-empty."""
        if not self.credential_envs:
            return True
        env = os.environ if environ is None else environ
        return any((env.get(name) or "").strip() for name in self.credential_envs)


PROVIDER_CATALOGUE: dict[str, ProviderInfo] = {
    "openai": ProviderInfo("openai", "OpenAI GPT-4o", is_free=False, credential_envs=("OPENAI_API_KEY",)),
    "gemini": ProviderInfo("gemini", "Google Gemini 2.5 Flash", is_free=True, credential_envs=("GEMINI_API_KEY",)),
    "anthropic": ProviderInfo(
        "anthropic", "Anthropic Claude", is_free=True, credential_envs=("ANTHROPIC_API_KEY",)
    ),
    "groq": ProviderInfo("groq", "Groq Llama 3.3 70B", is_free=True, credential_envs=GROQ_KEY_ENVS),
    "huggingface": ProviderInfo(
        "huggingface", "Hugging Face Llama 3", is_free=True, credential_envs=("HUGGING_FACE_TOKEN",)
    ),
    "replicate": ProviderInfo("replicate", "Replicate", is_free=False, credential_envs=("REPLICATE_API_TOKEN",)),
    "unsplash": ProviderInfo("unsplash", "Unsplash", is_free=True),
    MOCK_PROVIDER: ProviderInfo(MOCK_PROVIDER, "Mock AI", is_free=True),
}


@dataclass
class RouterConfig:
    """Routing policy: which providers to prefer and where to fall back.

    The preference list and the per-operation fallback lists are kept
    independent on purpose; they are not required to agree.
    """

    preferred_providers: Sequence[str] = ("groq", "gemini", "anthropic", "openai", "huggingface")
    chat_fallback_providers: Sequence[str] = ("gemini", "anthropic", "openai")
    content_fallback_providers: Sequence[str] = ("gemini", "anthropic", "openai", MOCK_PROVIDER)
    image_providers: Sequence[str] = ("openai", "replicate", "unsplash", MOCK_PROVIDER)
    # None: consult USE_MOCK_AI on every call
    use_mock: bool | None = None
    environ: Mapping[str, str] = field(default_factory=lambda: os.environ)
    catalogue: Mapping[str, ProviderInfo] = field(default_factory=lambda: PROVIDER_CATALOGUE)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RouterConfig":
        return cls(
            preferred_providers=tuple(settings.ai_preferred_providers),
            chat_fallback_providers=tuple(settings.ai_chat_fallback_providers),
            content_fallback_providers=tuple(settings.ai_content_fallback_providers),
            image_providers=tuple(settings.ai_image_providers),
        )

    @property
    def mock_forced(self) -> bool:
        if self.use_mock is not None:
            return self.use_mock
        return (self.environ.get("USE_MOCK_AI") or "").strip().lower() in _TRUTHY

    def provider_info(self, name: str) -> ProviderInfo:
        info = self.catalogue.get(name)
        if info is None:
            raise UnknownProviderError(name)
        return info

    def is_configured(self, name: str) -> bool:
        """True when the named provider has its credential (mock always does)."""
        return self.provider_info(name).enabled(self.environ)

    def active_provider(self) -> str:
        """Pick the provider for this call.

        1. USE_MOCK_AI forces mock.
        2. Otherwise the first preferred provider with a credential.
        3. Otherwise mock.
        """
        if self.mock_forced:
            return MOCK_PROVIDER

        for name in self.preferred_providers:
            if self.is_configured(name):
                return name

        return MOCK_PROVIDER

    def active_provider_info(self) -> ProviderInfo:
        return self.provider_info(self.active_provider())
