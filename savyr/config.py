"""TOML configuration loader."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .models import MEAL_TYPES, WEEKDAYS

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class ClaudeConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5-20250929"


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class OpenAIConfig:
    api_key: str = ""
    model: str = "gpt-4o"


@dataclass
class LLMConfig:
    backend: str = "claude"
    timeout: float = 60.0
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)


@dataclass
class ExtractionConfig:
    max_tokens: int = 1500
    temperature: float = 0.1


@dataclass
class PlannerConfig:
    max_candidates: int = 50
    days: list[str] = field(default_factory=lambda: list(WEEKDAYS))
    meal_types: list[str] = field(default_factory=lambda: list(MEAL_TYPES))
    max_tokens: int = 4000
    temperature: float = 0.3


@dataclass
class SavyrConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)


def load_config(path: str | Path | None = None) -> SavyrConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys can be overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    llm = raw.get("llm", {})
    ext = raw.get("extraction", {})
    pln = raw.get("planner", {})

    claude_cfg = llm.get("claude", {})
    gemini_cfg = llm.get("gemini", {})
    openai_cfg = llm.get("openai", {})

    # Resolve API keys: config file → environment variable
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )
    openai_api_key = openai_cfg.get("api_key", "") or os.environ.get(
        "OPENAI_API_KEY", ""
    )

    return SavyrConfig(
        llm=LLMConfig(
            backend=llm.get("backend", "claude"),
            timeout=float(llm.get("timeout", 60.0)),
            claude=ClaudeConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5-20250929"),
            ),
            gemini=GeminiConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
            openai=OpenAIConfig(
                api_key=openai_api_key,
                model=openai_cfg.get("model", "gpt-4o"),
            ),
        ),
        extraction=ExtractionConfig(
            max_tokens=ext.get("max_tokens", 1500),
            temperature=ext.get("temperature", 0.1),
        ),
        planner=PlannerConfig(
            max_candidates=pln.get("max_candidates", 50),
            days=list(pln.get("days", WEEKDAYS)),
            meal_types=list(pln.get("meal_types", MEAL_TYPES)),
            max_tokens=pln.get("max_tokens", 4000),
            temperature=pln.get("temperature", 0.3),
        ),
    )
