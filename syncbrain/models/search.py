"""Vector-index and retrieval models.

:class:`VectorMetadata` is the denormalized projection stored next to each
embedding so the index can filter by owner without a record-store round
trip.  :class:`VectorMatch` is one nearest-neighbour hit; after hydration
against the record store it becomes a :class:`ScoredRecord`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from syncbrain.models.content import ContentRecord, SourceKind


class VectorMetadata(BaseModel):
    """Metadata attached to an embedding, written together with the vector."""

    model_config = ConfigDict(frozen=True)

    owner: str
    title: str
    source_kind: SourceKind
    created_at: str = Field(description="ISO-8601 creation time of the record.")
    snippet: str = ""
    thumbnail: str | None = None

    @classmethod
    def from_record(cls, record: ContentRecord, snippet_chars: int = 100) -> VectorMetadata:
        return cls(
            owner=record.owner,
            title=record.title,
            source_kind=record.source_kind,
            created_at=record.created_at.isoformat(),
            snippet=record.body[:snippet_chars],
            thumbnail=record.thumbnail,
        )

    def to_index_metadata(self) -> dict[str, str]:
        """Flatten into scalar values; vector indexes reject ``None``."""
        return {
            "owner": self.owner,
            "title": self.title,
            "source_kind": self.source_kind.value,
            "created_at": self.created_at,
            "snippet": self.snippet,
            "thumbnail": self.thumbnail or "",
        }


class VectorMatch(BaseModel):
    """A single nearest-neighbour hit returned by the vector index."""

    model_config = ConfigDict(frozen=True)

    id: str
    score: float = Field(description="Similarity as reported by the index; higher is closer.")
    metadata: dict[str, Any] = Field(default_factory=dict)


class ScoredRecord(BaseModel):
    """A hydrated record joined back to its similarity score."""

    model_config = ConfigDict(frozen=True)

    record: ContentRecord
    score: float


class SearchResult(BaseModel):
    """Outcome of a semantic search.

    ``answer`` is ``None`` when no record survived hydration; in that case
    the generative model was not called and ``results`` is empty.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    answer: str | None = None
    results: list[ScoredRecord] = Field(default_factory=list)


class ReconciliationReport(BaseModel):
    """Counts from one reconciliation pass over an owner's content."""

    model_config = ConfigDict(frozen=True)

    owner: str
    records_checked: int = 0
    reembedded: list[str] = Field(default_factory=list)
    orphans_removed: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
