"""OpenAI chat-completions backend."""

from __future__ import annotations

from collections.abc import Sequence

from ..errors import BackendNotConfigured, TransportError
from . import CompletionBackend, load_image


class OpenAIBackend(CompletionBackend):
    """Text and vision completions through the OpenAI Chat Completions API."""

    name = "openai"

    def __init__(
        self,
        api_key: str = "",
        model: str = "gpt-4o",
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._client = None

    def _get_client(self):
        if not self._api_key:
            raise BackendNotConfigured(
                "OpenAI API key is not set. "
                "Check the config file or the OPENAI_API_KEY environment variable."
            )
        try:
            import openai
        except ImportError:
            raise ImportError("openai SDK is required: pip install openai") from None

        if self._client is None:
            self._client = openai.AsyncOpenAI(
                api_key=self._api_key, timeout=self._timeout
            )
        return openai, self._client

    async def complete(
        self,
        prompt: str,
        *,
        image_paths: Sequence[str] = (),
        max_tokens: int = 1500,
        temperature: float = 0.1,
    ) -> str:
        openai, client = self._get_client()

        if image_paths:
            content: list[dict] | str = [{"type": "text", "text": prompt}]
            for path in image_paths:
                image = load_image(path)
                content.append(
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{image.media_type};base64,{image.b64}"
                        },
                    }
                )
        else:
            content = prompt

        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": content}],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.APIError as exc:
            raise TransportError(f"OpenAI API error: {exc}") from exc

        if not response.choices:
            raise TransportError("OpenAI returned no choices")
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
