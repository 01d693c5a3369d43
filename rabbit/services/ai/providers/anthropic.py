"""
Anthropic Provider

Claude through Anthropic's OpenAI SDK compatibility layer.
"""

from rabbit.services.ai.providers.base import OpenAICompatibleProvider


class AnthropicProvider(OpenAICompatibleProvider):
    PROVIDER_NAME = "anthropic"
    BASE_URL = "https://api.anthropic.com/v1/"
    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    CREDENTIAL_ENV = "ANTHROPIC_API_KEY"
    TEMPERATURE = 0.7
