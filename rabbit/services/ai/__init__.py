"""
AI provider routing.

Adapters for each vendor, the active-provider selector, and the router that
retries and falls back between them.
"""

from rabbit.services.ai.config import MOCK_PROVIDER, PROVIDER_CATALOGUE, ProviderInfo, RouterConfig
from rabbit.services.ai.errors import (
    AllProvidersFailedError,
    ErrorKind,
    ProviderError,
    UnknownProviderError,
)
from rabbit.services.ai.interface import ContentProvider
from rabbit.services.ai.key_pool import KeyPool
from rabbit.services.ai.registry import ProviderRegistry, build_registry
from rabbit.services.ai.retry import RetryPolicy
from rabbit.services.ai.router import AIRouter
from rabbit.services.ai.schemas import (
    ChatRequest,
    ContentRequest,
    GenerationResult,
    PlatformContent,
    RoutedResult,
)

__all__ = [
    "MOCK_PROVIDER",
    "PROVIDER_CATALOGUE",
    "AIRouter",
    "AllProvidersFailedError",
    "ChatRequest",
    "ContentProvider",
    "ContentRequest",
    "ErrorKind",
    "GenerationResult",
    "KeyPool",
    "PlatformContent",
    "ProviderError",
    "ProviderInfo",
    "ProviderRegistry",
    "RetryPolicy",
    "RouterConfig",
    "RoutedResult",
    "UnknownProviderError",
    "build_registry",
]
