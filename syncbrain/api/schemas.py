"""Pydantic request/response schemas for the SyncBrain API.

Request schemas end with "Request", response schemas with "Response".
Domain models are never returned directly; each response flattens what
the client needs, so the storage shape can change without breaking it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from syncbrain.models.content import ContentRecord, SourceKind
from syncbrain.models.search import ScoredRecord


class AddContentRequest(BaseModel):
    """Save a note or a link."""

    type: SourceKind
    link: str | None = Field(default=None, description="Required for url-* types.")
    title: str | None = None
    content: str | None = Field(default=None, description="Note body, or an override.")


class ContentResponse(BaseModel):
    id: str
    title: str
    type: SourceKind
    link: str | None = None
    content: str = ""
    thumbnail: str | None = None
    created_at: datetime

    @classmethod
    def from_record(cls, record: ContentRecord) -> ContentResponse:
        return cls(
            id=record.id,
            title=record.title,
            type=record.source_kind,
            link=record.source_url,
            content=record.body,
            thumbnail=record.thumbnail,
            created_at=record.created_at,
        )


class ContentListResponse(BaseModel):
    content: list[ContentResponse] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)


class SearchHitResponse(ContentResponse):
    score: float

    @classmethod
    def from_scored(cls, scored: ScoredRecord) -> SearchHitResponse:
        base = ContentResponse.from_record(scored.record)
        return cls(**base.model_dump(), score=scored.score)


class SearchResponse(BaseModel):
    message: str
    answer: str | None = None
    results: list[SearchHitResponse] = Field(default_factory=list)


class ShareRequest(BaseModel):
    share: bool


class ShareResponse(BaseModel):
    hash: str | None = Field(default=None, description="None when sharing is off.")


class SharedBrainResponse(BaseModel):
    owner: str
    content: list[ContentResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
