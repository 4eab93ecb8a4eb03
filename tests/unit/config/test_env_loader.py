"""Unit tests for EnvLoader functionality."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from roocode_generator.config.env_loader import EnvLoader
from roocode_generator.core.exceptions import ConfigError


class TestEnvLoader:
    """Test EnvLoader functionality."""

    def test_default_env_paths_are_in_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        loader = EnvLoader()

        assert loader.env_paths == [tmp_path / ".env", tmp_path / ".env.local"]

    def test_custom_prefix_and_paths(self):
        custom_paths = [Path("/custom/.env")]
        loader = EnvLoader(env_prefix="CUSTOM_", env_paths=custom_paths)

        assert loader.env_prefix == "CUSTOM_"
        assert loader.env_paths == custom_paths

    def test_get_config_from_env_empty(self):
        with patch.dict(os.environ, {}, clear=True):
            assert EnvLoader().get_config_from_env() == {}

    def test_get_config_from_env_nests_and_converts(self):
        test_env = {
            "ROOCODE_LLM__MODEL": "gpt-4o",
            "ROOCODE_LLM__TEMPERATURE": "0.8",
            "ROOCODE_LLM__MAX_TOKENS": "1024",
            "ROOCODE_DEBUG": "true",
            "ROOCODE_LLM__LOCATION": "null",
            "OTHER_VAR": "ignored",
        }

        with patch.dict(os.environ, test_env, clear=True):
            config = EnvLoader().get_config_from_env()

        assert config == {
            "llm": {
                "model": "gpt-4o",
                "temperature": 0.8,
                "max_tokens": 1024,
                "location": None,
            },
            "debug": True,
        }

    def test_llm_overrides_stay_strings(self):
        test_env = {"ROOCODE_LLM__API_KEY": "007", "ROOCODE_LLM__MAX_TOKENS": "512"}

        with patch.dict(os.environ, test_env, clear=True):
            overrides = EnvLoader().get_llm_overrides()

        assert overrides == {"api_key": "007", "max_tokens": "512"}

    def test_conflicting_nesting_is_skipped(self):
        test_env = {"ROOCODE_LLM": "flat", "ROOCODE_LLM__MODEL": "nested"}

        with patch.dict(os.environ, test_env, clear=True):
            config = EnvLoader().get_config_from_env()

        assert config["llm"] in ("flat", {"model": "nested"})

    def test_load_env_files(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("ROOCODE_LLM__PROVIDER=openrouter\n")
        local_file = tmp_path / ".env.local"
        local_file.write_text("ROOCODE_LLM__PROVIDER=anthropic\n")

        with patch.dict(os.environ, {}, clear=True):
            EnvLoader(env_paths=[env_file, local_file]).load_env_files()
            assert os.environ["ROOCODE_LLM__PROVIDER"] == "anthropic"

    def test_missing_env_files_are_ignored(self, tmp_path):
        EnvLoader(env_paths=[tmp_path / "missing.env"]).load_env_files()

    def test_load_failure_raises_config_error(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("X=1\n")

        with (
            patch("roocode_generator.config.env_loader.load_dotenv", side_effect=OSError("denied")),
            pytest.raises(ConfigError, match="Failed to load .env file"),
        ):
            EnvLoader(env_paths=[env_file]).load_env_files()
