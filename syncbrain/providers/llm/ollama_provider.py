"""Ollama LLM provider adapter.

Wraps a local Ollama server via its OpenAI-compatible ``/v1`` endpoint,
reusing the ``openai`` client with a different base URL.  Lets SyncBrain
summarize and answer fully offline, at the cost of weaker local models.

Setup: install Ollama (https://ollama.ai), ``ollama pull llama3.1``, and set
OLLAMA_BASE_URL=http://localhost:11434
"""

from __future__ import annotations

import openai
import structlog

from syncbrain.config.settings import Settings
from syncbrain.interfaces.llm_provider import ILLMProvider
from syncbrain.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class OllamaLLMProvider(ILLMProvider):
    """LLM provider backed by a local Ollama server (``llama3.1`` by default)."""

    def __init__(self, settings: Settings, client: openai.AsyncOpenAI | None = None) -> None:
        self._base_url = settings.ollama_base_url.rstrip("/")
        self._client = client or openai.AsyncOpenAI(
            base_url=f"{self._base_url}/v1",
            # The openai SDK requires a non-empty key; Ollama ignores it.
            api_key="ollama",
            timeout=openai.Timeout(settings.llm_timeout_seconds, connect=5.0),
        )
        self._text_model = "llama3.1"

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        """Generate a text completion via Ollama's OpenAI-compatible API."""
        try:
            response = await self._client.chat.completions.create(
                model=self._text_model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"Ollama API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMError(
                message="Ollama returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info("ollama_completion", model=self._text_model)
        return content

    def get_provider_name(self) -> str:
        return "ollama"

    def is_available(self) -> bool:
        """Return ``True`` if the Ollama base URL is configured."""
        return bool(self._base_url)
