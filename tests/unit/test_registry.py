"""
Unit tests for the provider registry.
"""

import pytest

from rabbit.core.config import Settings
from rabbit.services.ai.config import PROVIDER_CATALOGUE
from rabbit.services.ai.errors import UnknownProviderError
from rabbit.services.ai.key_pool import KeyPool
from rabbit.services.ai.providers import GroqProvider, MockProvider
from rabbit.services.ai.registry import build_registry


@pytest.fixture
def settings() -> Settings:
    return Settings(mock_ai_delay_max=0.0)


class TestRegistry:
    def test_every_catalogue_entry_has_an_adapter(self, settings):
        registry = build_registry(settings, environ={})
        assert set(registry) == set(PROVIDER_CATALOGUE)
        for name, adapter in registry.items():
            assert adapter.provider_name == name

    def test_unknown_name_raises(self, settings):
        registry = build_registry(settings, environ={})
        with pytest.raises(UnknownProviderError):
            registry.get("cohere")
        assert "cohere" not in registry
        assert "mock" in registry

    def test_mock_adapter(self, settings):
        assert isinstance(build_registry(settings, environ={})["mock"], MockProvider)

    def test_groq_pool_from_environment(self, settings):
        environ = {"GROQ_API_KEY": "one", "GROQ_API_KEY_2": "two"}
        groq = build_registry(settings, environ=environ)["groq"]
        assert isinstance(groq, GroqProvider)
        assert len(groq.key_pool) == 2

    def test_supplied_pool_is_used(self, settings):
        pool = KeyPool(["only"], name="groq")
        groq = build_registry(settings, key_pools={"groq": pool}, environ={})["groq"]
        assert groq.key_pool is pool
