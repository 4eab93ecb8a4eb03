import pytest

from roocode_generator.providers.google_genai_provider import GoogleGenAIProvider
from roocode_generator.providers.openrouter_provider import OpenRouterProvider
from roocode_generator.providers.provider_registry import make_factory


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def backend_factories():
    """Builds factories for the HTTP providers, all wired to one fake backend."""

    def make(backend):
        return {
            "openrouter": make_factory(
                "openrouter", lambda config: OpenRouterProvider(config, client=backend.client())
            ),
            "google-genai": make_factory(
                "google-genai", lambda config: GoogleGenAIProvider(config, client=backend.client())
            ),
        }

    return make
