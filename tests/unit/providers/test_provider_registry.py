"""
Unit tests for the builtin factory catalog and ProviderRegistry.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from roocode_generator.core.exceptions import ConfigError
from roocode_generator.core.result import Result
from roocode_generator.providers.exceptions import ErrorCode, ProviderError
from roocode_generator.providers.provider_registry import (
    ProviderRegistry,
    builtin_factories,
    make_factory,
)


class FakeProvider:
    name = "fake"
    default_context_size = 4096

    def __init__(self, config):
        self.config = config

    async def get_completion(self, system_prompt, user_prompt):
        return Result.ok("fake")

    async def get_context_window_size(self):
        return self.default_context_size

    async def count_tokens(self, text):
        return len(text)


class TestFactories:
    def test_builtin_catalog(self):
        factories = builtin_factories()
        assert set(factories) >= {"openai", "google-genai", "anthropic", "openrouter"}

    def test_builtin_catalog_is_a_copy(self):
        factories = builtin_factories()
        factories.pop("openai")
        assert "openai" in builtin_factories()

    def test_factory_builds_provider(self, llm_config):
        result = builtin_factories()["openrouter"](llm_config)

        assert result.is_ok()
        assert result.unwrap().name == "openrouter"
        assert result.unwrap().config is llm_config

    def test_construction_failure_becomes_factory_init_error(self, llm_config):
        def broken(config):
            raise RuntimeError("missing SDK credentials")

        result = make_factory("broken", broken)(llm_config)

        assert result.is_err()
        assert result.error.code == ErrorCode.FACTORY_INIT_ERROR
        assert result.error.provider == "broken"
        assert "missing SDK credentials" in result.error.message
        assert isinstance(result.error.cause, RuntimeError)


class TestProviderRegistry:
    async def test_resolves_and_caches(self, static_config_source, llm_config):
        factory = MagicMock(side_effect=lambda config: Result.ok(FakeProvider(config)))
        registry = ProviderRegistry(static_config_source, {"openrouter": factory})

        assert not registry.is_resolved
        first = await registry.get_provider()
        second = await registry.get_provider()

        assert first.unwrap() is second.unwrap()
        assert first.unwrap().config is llm_config
        assert registry.is_resolved
        assert static_config_source.calls == 1
        factory.assert_called_once_with(llm_config)

    async def test_config_error_is_not_cached(self, make_config_source, llm_config):
        source = make_config_source(Result.err(ConfigError("no llm.config.json")))
        registry = ProviderRegistry(source, {"openrouter": make_factory("openrouter", FakeProvider)})

        result = await registry.get_provider()

        assert result.error.code == ErrorCode.CONFIG_ERROR
        assert "no llm.config.json" in result.error.message
        assert not registry.is_resolved

        source.result = Result.ok(llm_config)
        assert (await registry.get_provider()).is_ok()
        assert source.calls == 2

    async def test_unknown_provider_invokes_no_factory(self, static_config_source):
        other = MagicMock()
        registry = ProviderRegistry(static_config_source, {"openai": other})

        result = await registry.get_provider()

        assert result.error.code == ErrorCode.PROVIDER_NOT_FOUND
        assert result.error.message == "Provider factory not found for provider: openrouter"
        other.assert_not_called()
        assert not registry.is_resolved

    async def test_factory_error_is_returned_and_not_cached(self, static_config_source):
        failure = ProviderError("init failed", ErrorCode.FACTORY_INIT_ERROR, "openrouter")
        factory = MagicMock(
            side_effect=[Result.err(failure), Result.ok(FakeProvider(None))]
        )
        registry = ProviderRegistry(static_config_source, {"openrouter": factory})

        first = await registry.get_provider()
        assert first.error is failure
        assert not registry.is_resolved

        second = await registry.get_provider()
        assert second.is_ok()
        assert factory.call_count == 2

    async def test_unexpected_exception_is_wrapped(self):
        source = MagicMock()
        source.load_config = AsyncMock(side_effect=OSError("disk on fire"))
        registry = ProviderRegistry(source, {})

        result = await registry.get_provider()

        assert result.error.code == ErrorCode.UNKNOWN_ERROR
        assert result.error.provider == "registry"
        assert "disk on fire" in result.error.message

    def test_get_provider_factory(self, static_config_source):
        factory = make_factory("fake", FakeProvider)
        registry = ProviderRegistry(static_config_source, {"fake": factory})

        assert registry.get_provider_factory("fake").unwrap() is factory

        missing = registry.get_provider_factory("nope")
        assert missing.error.code == ErrorCode.PROVIDER_NOT_FOUND
        assert missing.error.details == {"available_providers": ["fake"]}
        # lookup is exact
        assert registry.get_provider_factory("FAKE").is_err()

    async def test_aclose_closes_cached_provider(self, static_config_source):
        provider = FakeProvider(None)
        provider.aclose = AsyncMock()
        registry = ProviderRegistry(
            static_config_source, {"openrouter": lambda config: Result.ok(provider)}
        )

        await registry.aclose()
        provider.aclose.assert_not_awaited()

        await registry.get_provider()
        await registry.aclose()
        provider.aclose.assert_awaited_once()

    @pytest.mark.parametrize("name", ["openai", "google-genai", "anthropic", "openrouter"])
    async def test_each_builtin_resolves(self, make_config_source, llm_config, name):
        config = llm_config.with_overrides(provider=name)
        registry = ProviderRegistry(make_config_source(Result.ok(config)), builtin_factories())

        result = await registry.get_provider()

        assert result.unwrap().name == name
        await registry.aclose()
