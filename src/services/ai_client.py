# src/services/ai_client.py

"""Text-in / text-out clients for the external generation service."""

import logging
from typing import Protocol

from openai import AsyncOpenAI, OpenAIError

from src.config.settings import Settings
from src.models.errors import UpstreamError

logger = logging.getLogger("ecoshop.ai")


class GenerationClient(Protocol):
    """Anything that turns a prompt into generated text."""

    async def generate(self, prompt: str) -> str:
        """Return the generated text or raise :class:`UpstreamError`."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class OpenAIGenerationClient:
    """Chat-completions client for OpenAI-compatible endpoints.

    Construct once at process start and pass it to the AI bridge; call
    :meth:`close` on shutdown.  The SDK client is created on first use,
    so a missing API key only fails the calls that need the service.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.model = model or Settings.AI_MODEL
        self.temperature = (
            Settings.AI_TEMPERATURE if temperature is None else temperature
        )
        self.max_tokens = max_tokens or Settings.AI_MAX_TOKENS
        self._api_key = api_key or Settings.AI_API_KEY or None
        self._base_url = base_url or Settings.AI_BASE_URL
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            try:
                # Retries are owned by the AI bridge.
                self._client = AsyncOpenAI(
                    api_key=self._api_key,
                    base_url=self._base_url,
                    max_retries=0,
                )
            except OpenAIError as exc:
                raise UpstreamError(
                    f"Generation client is not configured: {exc}"
                ) from exc
        return self._client

    async def generate(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            logger.warning(
                "Generation request to %s failed: %s", self.model, exc,
            )
            raise UpstreamError(
                f"Generation service error: {exc}"
            ) from exc

        if not response.choices:
            raise UpstreamError("Generation service returned no choices")
        content = response.choices[0].message.content or ""
        if response.usage is not None:
            logger.debug(
                "Generation used %d tokens (model=%s)",
                response.usage.total_tokens,
                self.model,
            )
        return content.strip()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
