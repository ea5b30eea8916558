"""Unit tests for the ingestion coordinator."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from syncbrain.models.content import ExtractedContent, SourceInput, SourceKind
from syncbrain.models.search import VectorMetadata
from syncbrain.services.embedding_service import EmbeddingService
from syncbrain.services.extraction.source_extractor import SourceExtractor
from syncbrain.services.ingestion_service import (
    IngestionService,
    compose_embedding_text,
    parse_source_kind,
    validate_url,
)
from syncbrain.utils.errors import (
    EmbeddingError,
    ExtractionError,
    NotFoundError,
    StoreError,
    ValidationError,
)


@pytest.fixture
def mock_extractor() -> MagicMock:
    extractor = MagicMock(spec=SourceExtractor)
    extractor.extract = AsyncMock(
        return_value=ExtractedContent(
            title="Extracted Title",
            body="Extracted body",
            thumbnail="https://cdn.example.com/t.png",
        )
    )
    return extractor


@pytest.fixture
def mock_embedding_service() -> MagicMock:
    service = MagicMock(spec=EmbeddingService)
    service.embed = AsyncMock(return_value=[0.1, 0.2, 0.3, 0.4])
    return service


@pytest.fixture
def service(
    settings, mock_extractor, mock_record_store, mock_vector_store, mock_embedding_service
) -> IngestionService:
    return IngestionService(
        extractor=mock_extractor,
        record_store=mock_record_store,
        vector_store=mock_vector_store,
        embedding_service=mock_embedding_service,
        settings=settings,
    )


class TestHelpers:
    def test_parse_source_kind(self) -> None:
        assert parse_source_kind("url-video") is SourceKind.URL_VIDEO
        assert parse_source_kind(SourceKind.NOTE) is SourceKind.NOTE
        with pytest.raises(ValidationError):
            parse_source_kind("podcast")

    @pytest.mark.parametrize("url", ["", "   ", "ftp://example.com", "example.com", "https://"])
    def test_validate_url_rejects(self, url: str) -> None:
        with pytest.raises(ValidationError):
            validate_url(url)

    def test_validate_url_strips(self) -> None:
        assert validate_url("  https://example.com/a ") == "https://example.com/a"

    def test_compose_embedding_text(self, make_record) -> None:
        record = make_record(title="Milk", body="buy milk")
        assert compose_embedding_text(record) == (
            "Title: Milk\nDate: March 05, 2025 at 14:30 UTC\nContent: buy milk"
        )


class TestIngest:
    @pytest.mark.asyncio
    async def test_note_with_body_skips_extraction(
        self, service, mock_extractor, mock_record_store, mock_vector_store
    ) -> None:
        record = await service.ingest("alice", "note", SourceInput(title="Todo", body="buy milk"))

        mock_extractor.extract.assert_not_awaited()
        draft = mock_record_store.create.await_args.args[0]
        assert draft.title == "Todo"
        assert draft.body == "buy milk"
        assert draft.source_url is None
        assert record.id == "rec-new"
        mock_vector_store.upsert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_note_without_title_gets_default(self, service, mock_record_store) -> None:
        await service.ingest("alice", SourceKind.NOTE, SourceInput(body="text"))
        assert mock_record_store.create.await_args.args[0].title == "Untitled Note"

    @pytest.mark.asyncio
    async def test_url_uses_extracted_values(
        self, service, mock_extractor, mock_record_store
    ) -> None:
        await service.ingest("alice", "url-generic", SourceInput(url="https://example.com/a"))

        kind, source = mock_extractor.extract.await_args.args
        assert kind is SourceKind.URL_GENERIC
        assert source.url == "https://example.com/a"
        draft = mock_record_store.create.await_args.args[0]
        assert draft.title == "Extracted Title"
        assert draft.body == "Extracted body"
        assert draft.thumbnail == "https://cdn.example.com/t.png"
        assert draft.source_url == "https://example.com/a"

    @pytest.mark.asyncio
    async def test_caller_title_overrides_extracted(self, service, mock_record_store) -> None:
        await service.ingest(
            "alice", "url-generic", SourceInput(url="https://example.com/a", title="Mine")
        )
        assert mock_record_store.create.await_args.args[0].title == "Mine"

    @pytest.mark.asyncio
    async def test_blank_extracted_title_falls_back_to_host(
        self, service, mock_extractor, mock_record_store
    ) -> None:
        mock_extractor.extract.return_value = ExtractedContent(title="", body="b")
        await service.ingest("alice", "url-generic", SourceInput(url="https://www.example.org/a"))
        assert mock_record_store.create.await_args.args[0].title == "example.org"

    @pytest.mark.asyncio
    async def test_index_metadata_and_embedding_input(
        self, service, mock_vector_store, mock_embedding_service
    ) -> None:
        record = await service.ingest("alice", "note", SourceInput(title="T", body="B" * 300))

        embed_input = mock_embedding_service.embed.await_args.args[0]
        assert embed_input == compose_embedding_text(record)

        record_id, vector, metadata = mock_vector_store.upsert.await_args.args
        assert record_id == record.id
        assert vector == [0.1, 0.2, 0.3, 0.4]
        assert isinstance(metadata, VectorMetadata)
        assert metadata.owner == "alice"
        assert metadata.snippet == "B" * 100
        assert metadata.created_at == record.created_at.isoformat()

    @pytest.mark.asyncio
    async def test_vector_failure_keeps_record_and_reraises(
        self, service, mock_record_store, mock_vector_store
    ) -> None:
        mock_vector_store.upsert.side_effect = StoreError(message="index down")

        with pytest.raises(StoreError):
            await service.ingest("alice", "note", SourceInput(body="b"))

        mock_record_store.create.assert_awaited_once()
        mock_record_store.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_embedding_failure_skips_upsert(
        self, service, mock_embedding_service, mock_vector_store
    ) -> None:
        mock_embedding_service.embed.side_effect = EmbeddingError(message="bad vector")
        with pytest.raises(EmbeddingError):
            await service.ingest("alice", "note", SourceInput(body="b"))
        mock_vector_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_extraction_failure_writes_nothing(
        self, service, mock_extractor, mock_record_store, mock_vector_store
    ) -> None:
        mock_extractor.extract.side_effect = ExtractionError(message="404")
        with pytest.raises(ExtractionError):
            await service.ingest("alice", "url-video", SourceInput(url="https://youtu.be/x"))
        mock_record_store.create.assert_not_awaited()
        mock_vector_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_record_failure_skips_indexing(
        self, service, mock_record_store, mock_embedding_service
    ) -> None:
        mock_record_store.create.side_effect = StoreError(message="locked")
        with pytest.raises(StoreError):
            await service.ingest("alice", "note", SourceInput(body="b"))
        mock_embedding_service.embed.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("owner", "kind", "source"),
        [
            ("", "note", SourceInput(body="b")),
            ("alice", "podcast", SourceInput(body="b")),
            ("alice", "url-generic", SourceInput()),
            ("alice", "url-social", SourceInput(url="not a url")),
        ],
    )
    async def test_invalid_input_has_no_side_effects(
        self, service, mock_extractor, mock_record_store, owner, kind, source
    ) -> None:
        with pytest.raises(ValidationError):
            await service.ingest(owner, kind, source)
        mock_extractor.extract.assert_not_awaited()
        mock_record_store.create.assert_not_awaited()


class TestListAndDelete:
    @pytest.mark.asyncio
    async def test_list_delegates_to_owner_scope(self, service, mock_record_store, make_record) -> None:
        mock_record_store.find_by_owner.return_value = [make_record("a"), make_record("b")]
        records = await service.list_content("alice")
        assert [r.id for r in records] == ["a", "b"]
        mock_record_store.find_by_owner.assert_awaited_once_with("alice")

    @pytest.mark.asyncio
    async def test_delete_removes_record_then_vector(
        self, service, mock_record_store, mock_vector_store
    ) -> None:
        calls: list[str] = []
        mock_record_store.delete.side_effect = lambda *a: calls.append("record") or True
        mock_vector_store.delete.side_effect = lambda *a: calls.append("vector")

        await service.delete_content("alice", "rec-1")

        assert calls == ["record", "vector"]
        mock_record_store.delete.assert_awaited_once_with("alice", "rec-1")
        mock_vector_store.delete.assert_awaited_once_with("rec-1")

    @pytest.mark.asyncio
    async def test_delete_foreign_record_not_found(
        self, service, mock_record_store, mock_vector_store
    ) -> None:
        mock_record_store.delete.return_value = False
        with pytest.raises(NotFoundError):
            await service.delete_content("mallory", "rec-1")
        mock_vector_store.delete.assert_not_awaited()


class TestReconcile:
    @pytest.mark.asyncio
    async def test_reembeds_missing_and_removes_orphans(
        self, service, mock_record_store, mock_vector_store, make_record
    ) -> None:
        mock_record_store.find_by_owner.return_value = [make_record("a"), make_record("b")]
        mock_vector_store.list_ids.return_value = {"a", "ghost"}

        report = await service.reconcile("alice")

        assert report.records_checked == 2
        assert report.reembedded == ["b"]
        assert report.orphans_removed == ["ghost"]
        assert report.failed == []
        assert mock_vector_store.upsert.await_args.args[0] == "b"
        mock_vector_store.delete.assert_awaited_once_with("ghost")

    @pytest.mark.asyncio
    async def test_consistent_owner_is_untouched(
        self, service, mock_record_store, mock_vector_store, make_record
    ) -> None:
        mock_record_store.find_by_owner.return_value = [make_record("a")]
        mock_vector_store.list_ids.return_value = {"a"}

        report = await service.reconcile("alice")

        assert report.reembedded == []
        assert report.orphans_removed == []
        mock_vector_store.upsert.assert_not_awaited()
        mock_vector_store.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_reembed_is_reported(
        self, service, mock_record_store, mock_vector_store, mock_embedding_service, make_record
    ) -> None:
        mock_record_store.find_by_owner.return_value = [make_record("a")]
        mock_embedding_service.embed.side_effect = EmbeddingError(message="down")

        report = await service.reconcile("alice")

        assert report.failed == ["a"]
        assert report.reembedded == []
