"""Completion backend base class and factory."""

from __future__ import annotations

import base64
import mimetypes
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import SavyrConfig


@dataclass
class ImagePayload:
    media_type: str
    data: bytes

    @property
    def b64(self) -> str:
        return base64.standard_b64encode(self.data).decode()


def load_image(path: str) -> ImagePayload:
    """Read an image file for upload. Raises OSError if it is unreadable."""
    data = Path(path).read_bytes()
    media_type = mimetypes.guess_type(path)[0] or "image/jpeg"
    return ImagePayload(media_type=media_type, data=data)


class CompletionBackend(ABC):
    """Abstract base for a text or vision-capable language model service.

    A backend is created once and passed to the pipeline stages that need
    it. Implementations raise TransportError for network/API failures and
    BackendNotConfigured when no API key is available.
    """

    name: str = ""

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        *,
        image_paths: Sequence[str] = (),
        max_tokens: int = 1500,
        temperature: float = 0.1,
    ) -> str:
        """Send one prompt (plus optional images) and return the reply text."""
        ...

    async def aclose(self) -> None:
        """Release the underlying SDK client, if any."""


def create_backend(config: SavyrConfig) -> CompletionBackend:
    """Create a completion backend based on configuration."""
    backend_name = config.llm.backend
    timeout = config.llm.timeout

    match backend_name:
        case "claude":
            from .claude import ClaudeBackend

            return ClaudeBackend(
                api_key=config.llm.claude.api_key,
                model=config.llm.claude.model,
                timeout=timeout,
            )
        case "gemini":
            from .gemini import GeminiBackend

            return GeminiBackend(
                api_key=config.llm.gemini.api_key,
                model=config.llm.gemini.model,
                timeout=timeout,
            )
        case "openai":
            from .gpt import OpenAIBackend

            return OpenAIBackend(
                api_key=config.llm.openai.api_key,
                model=config.llm.openai.model,
                timeout=timeout,
            )
        case _:
            raise ValueError(
                f"Unknown completion backend: {backend_name!r} "
                f"(choose claude, gemini or openai)"
            )


__all__ = [
    "CompletionBackend",
    "ImagePayload",
    "create_backend",
    "load_image",
]
