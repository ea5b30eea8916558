"""Ingestion coordinator: extraction, record creation, and vector indexing.

Architecture overview
---------------------
Saving content writes to two independent stores that cannot share a
transaction:

  1. EXTRACT   -- SourceExtractor produces ``{title, body, thumbnail}``
                  (skipped for notes whose body the caller supplied).
  2. MERGE     -- caller title/body win over extracted values when non-empty.
  3. PERSIST   -- the record store assigns the id and creation time.
  4. COMPOSE   -- the embedding input is title + human-readable timestamp +
                  body, so near-duplicate notes stay apart in vector space.
  5. EMBED     -- EmbeddingService applies the size policy.
  6. INDEX     -- the vector is upserted under the new record's id with a
                  denormalized metadata projection.

If step 3 fails nothing else runs.  If steps 4-6 fail the record stays in
the record store without a vector: it is listed but not searchable.  The
error is re-raised to the caller and logged as ``vector_write_failed``;
the record is not rolled back.  :meth:`IngestionService.reconcile` repairs
such records (and removes vectors whose record is gone) on demand.
"""

from __future__ import annotations

from urllib.parse import urlparse

import structlog

from syncbrain.config.settings import Settings
from syncbrain.interfaces.record_store_provider import IRecordStoreProvider
from syncbrain.interfaces.vector_store_provider import IVectorStoreProvider
from syncbrain.models.content import (
    ContentDraft,
    ContentRecord,
    ExtractedContent,
    SourceInput,
    SourceKind,
)
from syncbrain.models.search import ReconciliationReport, VectorMetadata
from syncbrain.services.embedding_service import EmbeddingService
from syncbrain.services.extraction.handlers.note_handler import DEFAULT_NOTE_TITLE
from syncbrain.services.extraction.handlers.web_page_handler import fallback_title
from syncbrain.services.extraction.source_extractor import SourceExtractor
from syncbrain.utils.errors import (
    EmbeddingError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from syncbrain.utils.logging import get_logger
from syncbrain.utils.text import format_timestamp

logger: structlog.BoundLogger = get_logger(__name__)


def parse_source_kind(value: str | SourceKind) -> SourceKind:
    if isinstance(value, SourceKind):
        return value
    try:
        return SourceKind(value)
    except ValueError as exc:
        allowed = ", ".join(k.value for k in SourceKind)
        raise ValidationError(
            message=f"Unknown content type {value!r}; expected one of: {allowed}"
        ) from exc


def validate_owner(owner: str) -> str:
    if not owner or not owner.strip():
        raise ValidationError(message="Owner is required")
    return owner


def validate_url(url: str | None) -> str:
    if not url or not url.strip():
        raise ValidationError(message="A link is required for this content type")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(message=f"Not a valid http(s) URL: {url!r}")
    return url


def compose_embedding_text(record: ContentRecord) -> str:
    """Deterministic embedding input for *record*."""
    return (
        f"Title: {record.title}\n"
        f"Date: {format_timestamp(record.created_at)}\n"
        f"Content: {record.body}"
    )


class IngestionService:
    """Entry point for saving, listing, deleting, and repairing content."""

    def __init__(
        self,
        extractor: SourceExtractor,
        record_store: IRecordStoreProvider,
        vector_store: IVectorStoreProvider,
        embedding_service: EmbeddingService,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._extractor = extractor
        self._records = record_store
        self._vectors = vector_store
        self._embeddings = embedding_service
        self._snippet_chars = settings.snippet_chars

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ingest(
        self,
        owner: str,
        kind: str | SourceKind,
        source: SourceInput,
    ) -> ContentRecord:
        """Save one piece of content for *owner* and index it for search.

        Raises
        ------
        ValidationError
            Malformed input; nothing is fetched or written.
        ExtractionError
            The source could not be fetched or parsed; nothing is written.
        StoreError, EmbeddingError
            Record creation failed (nothing written), or indexing failed
            after the record was created (record kept, see module docs).
        """
        owner = validate_owner(owner)
        kind = parse_source_kind(kind)
        source_url = validate_url(source.url) if kind.is_url else None
        if source_url is not None:
            source = source.model_copy(update={"url": source_url})

        # 1. Extract
        if kind is SourceKind.NOTE and source.body:
            extracted = ExtractedContent()
        else:
            extracted = await self._extractor.extract(kind, source)

        # 2. Merge
        draft = self._merge(owner, kind, source, extracted)

        # 3. Persist
        record = await self._records.create(draft)

        # 4-6. Embed and index
        try:
            await self._index(record)
        except (EmbeddingError, StoreError) as exc:
            logger.error(
                "vector_write_failed",
                record_id=record.id,
                owner=owner,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            raise

        logger.info(
            "content_ingested",
            record_id=record.id,
            owner=owner,
            source_kind=kind.value,
            body_length=len(record.body),
            has_thumbnail=record.thumbnail is not None,
        )
        return record

    async def list_content(self, owner: str) -> list[ContentRecord]:
        """Return all of *owner*'s records, oldest first."""
        return await self._records.find_by_owner(validate_owner(owner))

    async def delete_content(self, owner: str, record_id: str) -> None:
        """Delete *record_id* from both stores.

        The record is removed first, scoped to *owner*; the vector is only
        touched when that succeeded, so one owner can never delete another
        owner's vector.

        Raises
        ------
        NotFoundError
            *owner* has no record with this id.
        StoreError
            Either store failed.  A failure on the vector side leaves an
            orphan vector that :meth:`reconcile` removes.
        """
        owner = validate_owner(owner)
        if not record_id:
            raise ValidationError(message="Content id is required")

        deleted = await self._records.delete(owner, record_id)
        if not deleted:
            raise NotFoundError(message=f"No content {record_id!r} for this owner")

        await self._vectors.delete(record_id)
        logger.info("content_deleted", record_id=record_id, owner=owner)

    async def reconcile(self, owner: str) -> ReconciliationReport:
        """Bring *owner*'s vectors back in line with their records.

        Re-embeds every record that has no vector and deletes every vector
        whose record no longer exists.  Idempotent: a second run over a
        consistent owner changes nothing.
        """
        owner = validate_owner(owner)
        records = await self._records.find_by_owner(owner)
        vector_ids = await self._vectors.list_ids(owner)
        record_ids = {record.id for record in records}

        reembedded: list[str] = []
        failed: list[str] = []
        for record in records:
            if record.id in vector_ids:
                continue
            try:
                await self._index(record)
            except (EmbeddingError, StoreError) as exc:
                logger.warning(
                    "reconcile_reembed_failed",
                    record_id=record.id,
                    owner=owner,
                    error=str(exc),
                )
                failed.append(record.id)
            else:
                reembedded.append(record.id)

        orphans = sorted(vector_ids - record_ids)
        for orphan_id in orphans:
            await self._vectors.delete(orphan_id)

        report = ReconciliationReport(
            owner=owner,
            records_checked=len(records),
            reembedded=reembedded,
            orphans_removed=orphans,
            failed=failed,
        )
        logger.info(
            "reconcile_completed",
            owner=owner,
            records_checked=report.records_checked,
            reembedded=len(reembedded),
            orphans_removed=len(orphans),
            failed=len(failed),
        )
        return report

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _merge(
        owner: str,
        kind: SourceKind,
        source: SourceInput,
        extracted: ExtractedContent,
    ) -> ContentDraft:
        title = (source.title or "").strip() or extracted.title.strip()
        if not title:
            title = DEFAULT_NOTE_TITLE if kind is SourceKind.NOTE else fallback_title(source.url or "")
        body = source.body if source.body else extracted.body

        return ContentDraft(
            owner=owner,
            title=title,
            body=body,
            source_kind=kind,
            source_url=source.url if kind.is_url else None,
            thumbnail=extracted.thumbnail,
        )

    async def _index(self, record: ContentRecord) -> None:
        vector = await self._embeddings.embed(compose_embedding_text(record))
        metadata = VectorMetadata.from_record(record, snippet_chars=self._snippet_chars)
        await self._vectors.upsert(record.id, vector, metadata)
