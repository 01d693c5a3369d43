"""
AI Provider Interface

Abstract base class defining the contract that all content providers must implement.
"""

from abc import ABC, abstractmethod

from rabbit.services.ai.schemas import ChatRequest, ContentRequest, GenerationResult


class ContentProvider(ABC):
    """Abstract interface for content providers.

    All provider adapters (OpenAI, Gemini, Anthropic, Groq, Hugging Face,
    Replicate, Unsplash, mock) must implement this interface. Failures are
    raised as ProviderError so the router can classify them.
    """

    @abstractmethod
    async def generate_multi_platform_content(
        self,
        request: ContentRequest,
    ) -> GenerationResult:
        """Generate one suggestion per requested platform.

        A failure for a single platform must not fail the whole call: that
        platform's slot is filled with placeholder content instead.

        Returns:
            Result with exactly one entry per requested platform
        """
        pass

    @abstractmethod
    async def generate_chat_response(
        self,
        request: ChatRequest,
    ) -> GenerationResult:
        """Answer a chat turn and suggest content for each platform.

        Returns:
            Conversational message plus one suggestion per platform
        """
        pass

    @abstractmethod
    async def generate_image(self, prompt: str) -> str | None:
        """Generate an image for the prompt.

        Returns:
            Image URL or data URI, or None if this provider cannot serve it
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is reachable and working.

        Returns:
            True if provider is healthy, False otherwise
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name for logging."""
        pass
