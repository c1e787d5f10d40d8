"""Claude API completion backend."""

from __future__ import annotations

from collections.abc import Sequence

from ..errors import BackendNotConfigured, TransportError
from . import CompletionBackend, load_image


class ClaudeBackend(CompletionBackend):
    """Text and vision completions through the Anthropic Messages API."""

    name = "claude"

    def __init__(
        self,
        api_key: str = "",
        model: str = "claude-sonnet-4-5-20250929",
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._client = None

    def _get_client(self):
        if not self._api_key:
            raise BackendNotConfigured(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._api_key, timeout=self._timeout
            )
        return anthropic, self._client

    async def complete(
        self,
        prompt: str,
        *,
        image_paths: Sequence[str] = (),
        max_tokens: int = 1500,
        temperature: float = 0.1,
    ) -> str:
        anthropic, client = self._get_client()

        content: list[dict] = []
        for path in image_paths:
            image = load_image(path)
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": image.media_type,
                        "data": image.b64,
                    },
                }
            )
        content.append({"type": "text", "text": prompt})

        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[{"role": "user", "content": content}],
            )
        except anthropic.APIError as exc:
            raise TransportError(f"Anthropic API error: {exc}") from exc

        return "".join(
            getattr(block, "text", "") or "" for block in response.content
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
