"""Shared pytest fixtures for the SyncBrain test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
from bs4 import BeautifulSoup

from syncbrain.config.settings import Settings
from syncbrain.interfaces.browser_provider import IBrowserProvider, IBrowserSession
from syncbrain.interfaces.embedding_provider import IEmbeddingProvider
from syncbrain.interfaces.llm_provider import ILLMProvider
from syncbrain.interfaces.record_store_provider import IRecordStoreProvider
from syncbrain.interfaces.vector_store_provider import IVectorStoreProvider
from syncbrain.models.content import ContentRecord, SourceKind
from syncbrain.utils.errors import ExtractionTimeoutError

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any exported variable that Settings would read (API keys etc.)."""
    for field_name in Settings.model_fields:
        monkeypatch.delenv(field_name.upper(), raising=False)
        monkeypatch.delenv(field_name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment and ``.env``."""
    return Settings(
        _env_file=None,
        openai_api_key="sk-test",
        anthropic_api_key="",
        youtube_api_key="yt-test",
        sqlite_db_path=str(tmp_path / "syncbrain.db"),
        chromadb_persist_dir=str(tmp_path / "chromadb"),
        embedding_max_direct_chars=100,
        summary_input_chars=300,
        retrieval_top_k=5,
        retrieval_keep_top_n=2,
        context_excerpt_chars=50,
        browser_navigation_timeout=5,
        max_page_text_chars=500,
    )


# ---------------------------------------------------------------------------
# Domain object factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_record() -> Callable[..., ContentRecord]:
    """Factory for ContentRecord instances with sensible defaults."""

    def _make(record_id: str = "rec-1", owner: str = "alice", **overrides: Any) -> ContentRecord:
        fields: dict[str, Any] = {
            "id": record_id,
            "owner": owner,
            "title": f"Title {record_id}",
            "body": f"Body of {record_id}",
            "source_kind": SourceKind.NOTE,
            "source_url": None,
            "thumbnail": None,
            "created_at": datetime(2025, 3, 5, 14, 30, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return ContentRecord(**fields)

    return _make


# ---------------------------------------------------------------------------
# Provider mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm_provider() -> MagicMock:
    """LLM provider mock whose ``complete`` returns a canned answer."""
    provider = MagicMock(spec=ILLMProvider)
    provider.complete = AsyncMock(return_value="A grounded answer.")
    provider.get_provider_name.return_value = "mock-llm"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def mock_embedding_provider() -> MagicMock:
    """Embedding provider mock returning a fixed 4-dim vector."""
    provider = MagicMock(spec=IEmbeddingProvider)
    provider.embed_single = AsyncMock(return_value=[0.1, 0.2, 0.3, 0.4])
    provider.embed = AsyncMock(return_value=[[0.1, 0.2, 0.3, 0.4]])
    provider.get_dimension.return_value = 4
    provider.get_provider_name.return_value = "mock-embedding"
    provider.is_available.return_value = True
    return provider


@pytest.fixture
def mock_vector_store() -> MagicMock:
    store = MagicMock(spec=IVectorStoreProvider)
    store.upsert = AsyncMock(return_value=None)
    store.query = AsyncMock(return_value=[])
    store.delete = AsyncMock(return_value=None)
    store.list_ids = AsyncMock(return_value=set())
    store.get_provider_name.return_value = "mock-vectors"
    store.is_available.return_value = True
    return store


@pytest.fixture
def mock_record_store(make_record: Callable[..., ContentRecord]) -> MagicMock:
    """Record store mock; ``create`` turns the draft into record ``rec-new``."""
    store = MagicMock(spec=IRecordStoreProvider)

    async def _create(draft: Any) -> ContentRecord:
        return make_record(
            "rec-new",
            owner=draft.owner,
            title=draft.title,
            body=draft.body,
            source_kind=draft.source_kind,
            source_url=draft.source_url,
            thumbnail=draft.thumbnail,
        )

    store.initialize = AsyncMock(return_value=None)
    store.create = AsyncMock(side_effect=_create)
    store.find_by_owner = AsyncMock(return_value=[])
    store.find_by_ids = AsyncMock(return_value=[])
    store.delete = AsyncMock(return_value=True)
    store.get_provider_name.return_value = "mock-records"
    return store


# ---------------------------------------------------------------------------
# Browser fakes
# ---------------------------------------------------------------------------


class FakeBrowserSession(IBrowserSession):
    """Serves fixed HTML; optionally times out on navigation."""

    def __init__(self, html: str, url: str, fail_with: Exception | None = None) -> None:
        self._html = html
        self._url = url
        self._fail_with = fail_with
        self.navigated_to: list[str] = []
        self.wait_for: str | None = None
        self.close_calls = 0

    async def navigate(self, url: str, timeout: float, wait_for: str | None = None) -> None:
        self.navigated_to.append(url)
        self.wait_for = wait_for
        if self._fail_with is not None:
            raise self._fail_with

    async def extract_dom(self, extractor: Callable[[BeautifulSoup], Any]) -> Any:
        return extractor(BeautifulSoup(self._html, "html.parser"))

    @property
    def current_url(self) -> str:
        return self._url

    async def close(self) -> None:
        self.close_calls += 1


class FakeBrowserProvider(IBrowserProvider):
    def __init__(self, session: FakeBrowserSession) -> None:
        self.session = session
        self.launches = 0

    async def launch(self) -> IBrowserSession:
        self.launches += 1
        return self.session

    def get_provider_name(self) -> str:
        return "fake-browser"


@pytest.fixture
def fake_browser() -> Callable[..., FakeBrowserProvider]:
    """Factory: ``fake_browser(html, url=..., fail_with=...)``."""

    def _make(
        html: str = "<html></html>",
        url: str = "https://example.com/article",
        fail_with: Exception | None = None,
    ) -> FakeBrowserProvider:
        return FakeBrowserProvider(FakeBrowserSession(html, url, fail_with))

    return _make


@pytest.fixture
def timeout_error() -> ExtractionTimeoutError:
    return ExtractionTimeoutError(message="timed out", provider_name="fake-browser")
