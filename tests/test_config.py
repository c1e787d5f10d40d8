"""Tests for config loading."""

import os
import tempfile

import pytest

from savyr.config import SavyrConfig, load_config


@pytest.fixture(autouse=True)
def _clear_api_keys(monkeypatch):
    for name in ("ANTHROPIC_API_KEY", "GEMINI_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    """Loading with no path returns all defaults."""
    config = load_config()
    assert isinstance(config, SavyrConfig)
    assert config.llm.backend == "claude"
    assert config.llm.timeout == 60.0
    assert config.llm.claude.api_key == ""
    assert config.llm.openai.model == "gpt-4o"
    assert config.extraction.max_tokens == 1500
    assert config.extraction.temperature == 0.1
    assert config.planner.max_candidates == 50
    assert config.planner.days[0] == "Monday"
    assert len(config.planner.days) == 7
    assert config.planner.meal_types == ["breakfast", "lunch", "dinner"]


def test_load_config_nonexistent_file():
    """Loading a nonexistent file returns defaults."""
    config = load_config("/nonexistent/path.toml")
    assert config.llm.backend == "claude"


def test_load_config_from_toml():
    """Loading a valid TOML file populates config."""
    toml_content = b"""\
[llm]
backend = "openai"
timeout = 30

[llm.openai]
api_key = "test-key-123"
model = "gpt-4o-mini"

[extraction]
max_tokens = 2000

[planner]
max_candidates = 20
days = ["Saturday", "Sunday"]
meal_types = ["brunch", "dinner"]
temperature = 0.5
"""
    with tempfile.NamedTemporaryFile(suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        config = load_config(f.name)

    os.unlink(f.name)

    assert config.llm.backend == "openai"
    assert config.llm.timeout == 30.0
    assert config.llm.openai.api_key == "test-key-123"
    assert config.llm.openai.model == "gpt-4o-mini"
    assert config.extraction.max_tokens == 2000
    assert config.extraction.temperature == 0.1
    assert config.planner.max_candidates == 20
    assert config.planner.days == ["Saturday", "Sunday"]
    assert config.planner.meal_types == ["brunch", "dinner"]
    assert config.planner.temperature == 0.5


def test_load_config_env_override(monkeypatch):
    """Environment variables fill in empty API keys."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-anthropic-key")
    monkeypatch.setenv("GEMINI_API_KEY", "env-gemini-key")
    monkeypatch.setenv("OPENAI_API_KEY", "env-openai-key")

    config = load_config()
    assert config.llm.claude.api_key == "env-anthropic-key"
    assert config.llm.gemini.api_key == "env-gemini-key"
    assert config.llm.openai.api_key == "env-openai-key"


def test_load_config_file_key_takes_precedence(monkeypatch, tmp_path):
    """Config file API key takes precedence over env var."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    path = tmp_path / "savyr.toml"
    path.write_text('[llm.claude]\napi_key = "file-key"\n')

    config = load_config(path)
    assert config.llm.claude.api_key == "file-key"


def test_load_config_partial_toml(tmp_path):
    """Partial TOML uses defaults for missing sections."""
    path = tmp_path / "savyr.toml"
    path.write_text("[planner]\nmax_candidates = 10\n")

    config = load_config(path)
    assert config.planner.max_candidates == 10
    assert config.planner.meal_types == ["breakfast", "lunch", "dinner"]
    assert config.llm.backend == "claude"
    assert config.extraction.max_tokens == 1500


def test_default_lists_are_independent():
    a = load_config()
    b = load_config()
    a.planner.days.append("Funday")
    assert "Funday" not in b.planner.days
