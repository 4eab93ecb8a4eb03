from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock

# Add project src/ to sys.path for imports like `roocode_generator.*`
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest

from roocode_generator.config.schemas import LLMConfig
from roocode_generator.core.result import Result


def pytest_configure(config):
    """Configure pytest for async tests."""
    config.addinivalue_line("markers", "asyncio: mark test as async")


def pytest_collection_modifyitems(config, items):
    """Mark coroutine tests as asyncio tests."""
    for item in items:
        if hasattr(item, "function") and asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


@pytest.fixture(autouse=True)
def clean_roocode_env(monkeypatch):
    """Keep the developer's ROOCODE_* variables out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("ROOCODE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def no_backoff_sleep(monkeypatch):
    """Make retry backoff instantaneous; the mock records each requested delay."""
    sleep = AsyncMock()
    monkeypatch.setattr("asyncio.sleep", sleep)
    return sleep


@pytest.fixture
def llm_config():
    return LLMConfig(
        provider="openrouter",
        model="anthropic/claude-3-haiku",
        api_key="or-test-key",
        temperature=0.2,
        max_tokens=256,
    )


class StaticConfigSource:
    """Config source returning a fixed result and counting loads."""

    def __init__(self, result: Result):
        self.result = result
        self.calls = 0

    async def load_config(self) -> Result:
        self.calls += 1
        return self.result


@pytest.fixture
def make_config_source():
    return StaticConfigSource


@pytest.fixture
def static_config_source(llm_config):
    return StaticConfigSource(Result.ok(llm_config))
