"""Embedding generator with a size policy for oversized text.

Embedding endpoints cap their input length.  Cutting a long document at
the cap keeps only its beginning, so oversized text is first condensed by
the LLM and only hard-truncated when summarization is unavailable.

Policy (every threshold comes from :class:`Settings`):
  1. DIRECT     -- ``len(text) <= embedding_max_direct_chars``: embed as-is.
  2. SUMMARIZE  -- otherwise, ask the LLM once for a summary of the first
                   ``summary_input_chars`` characters; if the summary is
                   still over the limit it is cut to the limit.
  3. TRUNCATE   -- if the LLM call fails or returns nothing usable, embed a
                   hard truncation of the original text instead.

Exactly one embedding call is made per :meth:`EmbeddingService.embed`.
"""

from __future__ import annotations

import structlog

from syncbrain.config.settings import Settings
from syncbrain.interfaces.embedding_provider import IEmbeddingProvider
from syncbrain.interfaces.llm_provider import ILLMProvider
from syncbrain.providers.embedding.response import validate_vectors
from syncbrain.utils.errors import LLMError
from syncbrain.utils.logging import get_logger
from syncbrain.utils.text import hard_truncate

logger: structlog.BoundLogger = get_logger(__name__)

_SUMMARY_SYSTEM_PROMPT = (
    "You condense documents for semantic search indexing. Write a dense, "
    "factual summary that keeps every named entity, topic, and key claim. "
    "Do not add commentary or preamble."
)


class EmbeddingService:
    """Turns arbitrary text into one fixed-length vector."""

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        llm_provider: ILLMProvider | None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._embedder = embedding_provider
        self._llm = llm_provider
        self._max_direct_chars = settings.embedding_max_direct_chars
        self._summary_input_chars = settings.summary_input_chars
        self._summary_max_tokens = settings.summary_max_tokens

    async def embed(self, text: str) -> list[float]:
        """Return the embedding of *text*, condensing it first if too long.

        Raises
        ------
        EmbeddingError
            If the embedding provider fails or returns a malformed vector.
        """
        if len(text) <= self._max_direct_chars:
            prepared = text
        else:
            prepared = await self._condense(text)

        vector = await self._embedder.embed_single(prepared)
        return validate_vectors(
            [vector], expected_count=1, provider_name=self._embedder.get_provider_name()
        )[0]

    async def _condense(self, text: str) -> str:
        summary = await self._summarize(text)
        if summary is None:
            logger.warning(
                "embedding_truncated_fallback",
                original_length=len(text),
                limit=self._max_direct_chars,
            )
            return hard_truncate(text, self._max_direct_chars)

        if len(summary) > self._max_direct_chars:
            summary = hard_truncate(summary, self._max_direct_chars)
        logger.info(
            "embedding_summarized",
            original_length=len(text),
            summary_length=len(summary),
        )
        return summary

    async def _summarize(self, text: str) -> str | None:
        """One LLM call; ``None`` means summarization was not usable."""
        if self._llm is None:
            return None
        excerpt = text[: self._summary_input_chars]
        try:
            summary = await self._llm.complete(
                system_prompt=_SUMMARY_SYSTEM_PROMPT,
                user_prompt=f"Summarize the following document:\n\n{excerpt}",
                temperature=0.2,
                max_tokens=self._summary_max_tokens,
            )
        except LLMError as exc:
            logger.warning(
                "embedding_summary_failed",
                error=str(exc),
                provider=exc.provider_name,
            )
            return None
        summary = (summary or "").strip()
        return summary or None
