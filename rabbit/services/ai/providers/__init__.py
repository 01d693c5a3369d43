"""
Provider Adapters Package

Contains implementations for each supported AI provider.
To add a new provider:
1. Create a new file (e.g., myprovider.py) implementing ContentProvider
2. Add a ProviderInfo entry to PROVIDER_CATALOGUE
3. Construct it in build_registry()
"""

from rabbit.services.ai.providers.anthropic import AnthropicProvider
from rabbit.services.ai.providers.base import ImageOnlyProvider, OpenAICompatibleProvider
from rabbit.services.ai.providers.gemini import GeminiProvider
from rabbit.services.ai.providers.groq import GroqProvider
from rabbit.services.ai.providers.huggingface import HuggingFaceProvider
from rabbit.services.ai.providers.mock import MockProvider
from rabbit.services.ai.providers.openai import OpenAIProvider
from rabbit.services.ai.providers.replicate import ReplicateProvider
from rabbit.services.ai.providers.unsplash import UnsplashProvider

__all__ = [
    "AnthropicProvider",
    "GeminiProvider",
    "GroqProvider",
    "HuggingFaceProvider",
    "ImageOnlyProvider",
    "MockProvider",
    "OpenAICompatibleProvider",
    "OpenAIProvider",
    "ReplicateProvider",
    "UnsplashProvider",
]
