"""
Google Gemini Provider

Uses Gemini's OpenAI-compatible endpoint with an AI Studio API key.
"""

from rabbit.services.ai.providers.base import OpenAICompatibleProvider


class GeminiProvider(OpenAICompatibleProvider):
    PROVIDER_NAME = "gemini"
    BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
    DEFAULT_MODEL = "gemini-2.5-flash"
    CREDENTIAL_ENV = "GEMINI_API_KEY"
