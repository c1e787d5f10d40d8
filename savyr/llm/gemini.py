"""Gemini API completion backend."""

from __future__ import annotations

from collections.abc import Sequence

from ..errors import BackendNotConfigured, TransportError
from . import CompletionBackend, load_image


class GeminiBackend(CompletionBackend):
    """Text and vision completions through Google Gemini."""

    name = "gemini"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gemini-2.0-flash",
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._client = None

    async def complete(
        self,
        prompt: str,
        *,
        image_paths: Sequence[str] = (),
        max_tokens: int = 1500,
        temperature: float = 0.1,
    ) -> str:
        if not self._api_key:
            raise BackendNotConfigured(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
            from google.api_core import exceptions as google_exceptions
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        if self._client is None:
            genai.configure(api_key=self._api_key)
            self._client = genai.GenerativeModel(self._model)

        parts: list = []
        for path in image_paths:
            image = load_image(path)
            parts.append({"mime_type": image.media_type, "data": image.data})
        parts.append(prompt)

        try:
            response = await self._client.generate_content_async(
                parts,
                generation_config={
                    "max_output_tokens": max_tokens,
                    "temperature": temperature,
                },
                request_options={"timeout": self._timeout},
            )
        except google_exceptions.GoogleAPIError as exc:
            raise TransportError(f"Gemini API error: {exc}") from exc

        try:
            return response.text
        except ValueError as exc:
            # Raised when the candidate was blocked and carries no text
            raise TransportError(f"Gemini returned no text: {exc}") from exc

    async def aclose(self) -> None:
        self._client = None
