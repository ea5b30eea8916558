"""Retrieval coordinator: semantic search with a grounded answer.

Data flow
---------
  1. EMBED      -- the query goes through the same EmbeddingService as
                   saved content.  Failures are fatal to the request.
  2. SEARCH     -- top-K nearest neighbours, filtered to the owner inside
                   the index.
  3. HYDRATE    -- matched ids are loaded from the record store, filtered
                   by owner again.  Index metadata can be stale, so a match
                   the record store does not confirm is dropped.
  4. NARROW     -- hydrated records are joined to their scores, sorted
                   descending (stable, so ties keep index order), and cut
                   to the top N.
  5. GROUND     -- each kept record becomes a context block (title, type,
                   link, bounded excerpt).  With nothing kept, the LLM is
                   not called and no answer is returned.
  6. ANSWER     -- the LLM answers from the context, and may fall back on
                   general knowledge where the context is silent.
"""

from __future__ import annotations

import structlog

from syncbrain.config.settings import Settings
from syncbrain.interfaces.llm_provider import ILLMProvider
from syncbrain.interfaces.record_store_provider import IRecordStoreProvider
from syncbrain.interfaces.vector_store_provider import IVectorStoreProvider
from syncbrain.models.content import ContentRecord
from syncbrain.models.search import ScoredRecord, SearchResult, VectorMatch
from syncbrain.services.embedding_service import EmbeddingService
from syncbrain.utils.errors import ValidationError
from syncbrain.utils.logging import get_logger
from syncbrain.utils.text import truncate_with_ellipsis

logger: structlog.BoundLogger = get_logger(__name__)

NO_RESULTS_MESSAGE = "No relevant content found"
RESULTS_MESSAGE = "Search completed"

_ANSWER_SYSTEM_PROMPT = """\
You are the assistant of a personal knowledge base. The user has saved \
notes, web pages, videos, and social posts, and is asking a question \
about them.

Answer using the saved content provided in the context. When the context \
does not directly answer the question, you may add relevant general \
knowledge, but say so and keep it clearly separate from what the saved \
content states. Refer to saved items by their titles. Be concise."""


def build_context(records: list[ScoredRecord], excerpt_chars: int) -> str:
    """Render *records* as numbered context blocks for the LLM."""
    blocks: list[str] = []
    for position, scored in enumerate(records, start=1):
        record = scored.record
        lines = [
            f"[{position}] Title: {record.title}",
            f"Type: {record.source_kind.value}",
        ]
        if record.source_url:
            lines.append(f"Link: {record.source_url}")
        lines.append(f"Content: {truncate_with_ellipsis(record.body, excerpt_chars)}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def rank_records(
    matches: list[VectorMatch],
    records: list[ContentRecord],
    owner: str,
    keep_top_n: int,
) -> list[ScoredRecord]:
    """Join *records* to *matches* by id, drop foreign ones, keep the best N."""
    by_id = {record.id: record for record in records if record.owner == owner}
    joined: list[ScoredRecord] = []
    seen: set[str] = set()
    for match in matches:
        record = by_id.get(match.id)
        if record is None or match.id in seen:
            continue
        seen.add(match.id)
        joined.append(ScoredRecord(record=record, score=match.score))

    # sorted() is stable: equal scores keep the index's order.
    joined = sorted(joined, key=lambda item: item.score, reverse=True)
    return joined[:keep_top_n]


class RetrievalService:
    """Entry point for natural-language search over one owner's content."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: IVectorStoreProvider,
        record_store: IRecordStoreProvider,
        llm_provider: ILLMProvider,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._embeddings = embedding_service
        self._vectors = vector_store
        self._records = record_store
        self._llm = llm_provider
        self._top_k = settings.retrieval_top_k
        self._keep_top_n = settings.retrieval_keep_top_n
        self._excerpt_chars = settings.context_excerpt_chars
        self._answer_max_tokens = settings.answer_max_tokens

    async def search(self, owner: str, query: str) -> SearchResult:
        """Answer *query* from *owner*'s saved content.

        Raises
        ------
        ValidationError
            Empty or whitespace-only query, or missing owner.
        EmbeddingError, StoreError, LLMError
            A dependency failed; nothing is partially returned.
        """
        if not owner or not owner.strip():
            raise ValidationError(message="Owner is required")
        query = (query or "").strip()
        if not query:
            raise ValidationError(message="Search query is required")

        vector = await self._embeddings.embed(query)
        matches = await self._vectors.query(vector, top_k=self._top_k, filters={"owner": owner})

        ranked: list[ScoredRecord] = []
        if matches:
            records = await self._records.find_by_ids(owner, [m.id for m in matches])
            ranked = rank_records(matches, records, owner, self._keep_top_n)

        if not ranked:
            logger.info("search_completed", owner=owner, matches=len(matches), kept=0)
            return SearchResult(message=NO_RESULTS_MESSAGE, answer=None, results=[])

        context = build_context(ranked, self._excerpt_chars)
        answer = await self._llm.complete(
            system_prompt=_ANSWER_SYSTEM_PROMPT,
            user_prompt=f"Saved content:\n\n{context}\n\nQuestion: {query}",
            temperature=0.3,
            max_tokens=self._answer_max_tokens,
        )

        logger.info(
            "search_completed",
            owner=owner,
            matches=len(matches),
            kept=len(ranked),
            top_score=round(ranked[0].score, 4),
            answer_length=len(answer),
        )
        return SearchResult(message=RESULTS_MESSAGE, answer=answer, results=ranked)
