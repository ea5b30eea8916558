"""Content models for the SyncBrain knowledge store.

Defines the closed set of source kinds, the normalized output of source
extraction, and the durable :class:`ContentRecord`.  All models use frozen
config: a record is immutable once created (there is no update operation),
so any derived data (the vector and its metadata) can never drift from it
through in-place edits.

Lifecycle:
    1. A :class:`ExtractedContent` is produced by the source extractor.
    2. The ingestion coordinator merges caller values over it and hands a
       :class:`ContentDraft` to the record store.
    3. The record store assigns ``id`` and ``created_at`` and returns the
       :class:`ContentRecord`.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SourceKind(str, Enum):  # noqa: UP042 -- StrEnum requires Python 3.11+
    """Where a piece of saved content came from.

    Each kind is dispatched to exactly one extraction handler in
    :mod:`syncbrain.services.extraction`.
    """

    NOTE = "note"                # Freeform text typed by the user
    URL_GENERIC = "url-generic"  # Any web page, rendered in a browser
    URL_VIDEO = "url-video"      # Hosted video, resolved via metadata API
    URL_SOCIAL = "url-social"    # Short-form social post, rendered in a browser

    @property
    def is_url(self) -> bool:
        return self is not SourceKind.NOTE


class SourceInput(BaseModel):
    """Raw caller input for one save action, before extraction.

    Notes carry ``title``/``body``; URL kinds carry ``url`` and optionally a
    caller-chosen ``title`` that overrides the extracted one.
    """

    model_config = ConfigDict(frozen=True)

    url: str | None = None
    title: str | None = None
    body: str | None = None


class ExtractedContent(BaseModel):
    """Normalized ``{title, body, thumbnail}`` produced by source extraction."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    body: str = ""
    thumbnail: str | None = None


class ContentDraft(BaseModel):
    """Fields for a new record, before the record store assigns identity."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1)
    title: str
    body: str = ""
    source_kind: SourceKind
    source_url: str | None = None
    thumbnail: str | None = None

    @field_validator("body", mode="before")
    @classmethod
    def _body_never_null(cls, value: str | None) -> str:
        return value or ""


class ContentRecord(BaseModel):
    """A durable piece of saved content.

    ``id`` and ``created_at`` are assigned by the record store on creation;
    ``owner`` is never reassigned.  ``body`` defaults to the empty string
    and is never ``None``.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Opaque identifier assigned by the record store.")
    owner: str = Field(description="User who owns this record.")
    title: str
    body: str = ""
    source_kind: SourceKind
    source_url: str | None = None
    thumbnail: str | None = Field(
        default=None,
        description="Absolute thumbnail URL; never a blob: URL.",
    )
    created_at: datetime

    @field_validator("body", mode="before")
    @classmethod
    def _body_never_null(cls, value: str | None) -> str:
        return value or ""
