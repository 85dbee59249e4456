"""Generation client backed by Groq chat completions."""

import logging
from typing import Any, Protocol

from groq import APIError, AsyncGroq

from .errors import GenerationError

logger = logging.getLogger(__name__)


class LLMClient(Protocol):
    """Anything that can turn a prompt into raw text."""

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Complete a prompt and return the text response."""
        ...


class GroqLLMClient:
    """LLMClient implementation that wraps AsyncGroq.

    Example:
        groq = AsyncGroq(api_key="...")
        llm = GroqLLMClient(groq, model="llama-3.3-70b-versatile")
        text = await llm.complete("hello", system="reply in JSON")
    """

    def __init__(
        self,
        client: AsyncGroq,
        model: str = "llama-3.3-70b-versatile",
    ) -> None:
        self._client = client
        self._model = model

    async def complete(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Complete a prompt and return the text response.

        Raises:
            GenerationError: The API call failed.
        """
        messages: list[dict[str, Any]] = []

        if system:
            messages.append({"role": "system", "content": system})

        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {"model": self._model, "messages": messages}
        if temperature is not None:
            kwargs["temperature"] = temperature
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except APIError as e:
            logger.warning("Groq completion failed: %s", e)
            raise GenerationError(f"Generation call failed: {e}") from e

        if not response.choices:
            raise GenerationError("Generation returned no choices")
        return response.choices[0].message.content or ""

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model
