"""Unit tests for the source extraction handlers and the dispatching extractor."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from syncbrain.interfaces.video_metadata_provider import IVideoMetadataProvider, VideoMetadata
from syncbrain.models.content import ExtractedContent, SourceInput, SourceKind
from syncbrain.services.extraction.handlers.note_handler import NoteHandler
from syncbrain.services.extraction.handlers.social_post_handler import SocialPostHandler
from syncbrain.services.extraction.handlers.video_handler import (
    VideoHandler,
    best_thumbnail,
    parse_video_id,
)
from syncbrain.services.extraction.handlers.web_page_handler import (
    TIMEOUT_PLACEHOLDER_TITLE,
    WebPageHandler,
)
from syncbrain.services.extraction.source_extractor import SourceExtractor
from syncbrain.utils.errors import ExtractionError, ValidationError

ARTICLE_HTML = """
<html>
  <head>
    <title>  Gardening   Basics </title>
    <meta property="og:image" content="/images/cover.jpg">
  </head>
  <body>
    <nav><a href="/">Home</a></nav>
    <h1>Soil</h1>
    <div><div><p>Start with   good soil.</p></div></div>
    <h2>Water</h2>
    <p>Water in the morning.</p>
    <footer><span>ignored footer</span></footer>
  </body>
</html>
"""

TWEET_HTML = """
<html><body>
  <article>
    <a role="link" href="/jane"><span>Jane Doe</span></a>
    <div data-testid="tweetText">Shipping the new release today!</div>
    <img src="https://pbs.twimg.com/media/abc.jpg">
  </article>
</body></html>
"""


def _video_provider(video: VideoMetadata | None = None, error: Exception | None = None) -> MagicMock:
    provider = MagicMock(spec=IVideoMetadataProvider)
    provider.get_video = AsyncMock(return_value=video, side_effect=error)
    provider.get_provider_name.return_value = "youtube"
    return provider


# ======================================================================
# Notes
# ======================================================================


class TestNoteHandler:
    @pytest.mark.asyncio
    async def test_passthrough(self) -> None:
        result = await NoteHandler().extract(SourceInput(title="Todo", body="buy milk"))
        assert result == ExtractedContent(title="Todo", body="buy milk", thumbnail=None)

    @pytest.mark.asyncio
    async def test_default_title(self) -> None:
        result = await NoteHandler().extract(SourceInput(body="text"))
        assert result.title == "Untitled Note"


# ======================================================================
# Web pages
# ======================================================================


class TestWebPageHandler:
    @pytest.mark.asyncio
    async def test_extracts_title_text_and_thumbnail(self, fake_browser) -> None:
        browser = fake_browser(ARTICLE_HTML, url="https://example.com/guide")
        handler = WebPageHandler(browser, navigation_timeout=5, max_text_chars=1000)

        result = await handler.extract(SourceInput(url="https://example.com/guide"))

        assert result.title == "Gardening Basics"
        assert result.body == "Soil\nStart with good soil.\nWater\nWater in the morning."
        assert result.thumbnail == "https://example.com/images/cover.jpg"
        assert browser.session.close_calls == 1

    @pytest.mark.asyncio
    async def test_body_is_capped(self, fake_browser) -> None:
        html = "<html><body>" + "<p>" + "word " * 200 + "</p>" * 5 + "</body></html>"
        handler = WebPageHandler(fake_browser(html), max_text_chars=120)
        result = await handler.extract(SourceInput(url="https://example.com/article"))
        assert len(result.body) <= 120

    @pytest.mark.asyncio
    async def test_missing_title_falls_back_to_hostname(self, fake_browser) -> None:
        handler = WebPageHandler(fake_browser("<html><body><p>x</p></body></html>"))
        result = await handler.extract(SourceInput(url="https://www.example.org/a"))
        assert result.title == "example.org"

    @pytest.mark.asyncio
    async def test_empty_page_yields_empty_body(self, fake_browser) -> None:
        handler = WebPageHandler(fake_browser("<html><head><title>T</title></head></html>"))
        result = await handler.extract(SourceInput(url="https://example.com/a"))
        assert result.body == ""
        assert result.title == "T"

    @pytest.mark.asyncio
    async def test_timeout_degrades_to_placeholder(self, fake_browser, timeout_error) -> None:
        browser = fake_browser(fail_with=timeout_error)
        result = await WebPageHandler(browser).extract(SourceInput(url="https://slow.example.com"))

        assert result.title == TIMEOUT_PLACEHOLDER_TITLE
        assert result.body
        assert result.thumbnail is None
        assert browser.session.close_calls == 1

    @pytest.mark.asyncio
    async def test_navigation_failure_propagates_and_closes(self, fake_browser) -> None:
        browser = fake_browser(fail_with=ExtractionError(message="dns"))
        with pytest.raises(ExtractionError):
            await WebPageHandler(browser).extract(SourceInput(url="https://nowhere.invalid"))
        assert browser.session.close_calls == 1

    @pytest.mark.asyncio
    async def test_url_required(self, fake_browser) -> None:
        with pytest.raises(ValidationError):
            await WebPageHandler(fake_browser()).extract(SourceInput())


# ======================================================================
# Videos
# ======================================================================


class TestVideoIdParsing:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ?t=42",
            "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        ],
    )
    def test_accepts_common_forms(self, url: str) -> None:
        assert parse_video_id(url) == "dQw4w9WgXcQ"

    def test_rejects_url_without_id(self) -> None:
        assert parse_video_id("https://www.youtube.com/feed/trending") is None

    def test_best_thumbnail_prefers_highest_resolution(self) -> None:
        thumbs = {
            "default": "https://i.ytimg.com/d.jpg",
            "high": "https://i.ytimg.com/h.jpg",
            "maxres": "https://i.ytimg.com/m.jpg",
        }
        assert best_thumbnail(thumbs) == "https://i.ytimg.com/m.jpg"
        assert best_thumbnail({"medium": "https://i.ytimg.com/md.jpg"}) == "https://i.ytimg.com/md.jpg"
        assert best_thumbnail({}) is None


class TestVideoHandler:
    @pytest.mark.asyncio
    async def test_composes_body_from_description_and_url(self) -> None:
        url = "https://youtu.be/dQw4w9WgXcQ"
        provider = _video_provider(
            VideoMetadata(
                video_id="dQw4w9WgXcQ",
                title="Great Talk",
                description="A talk about things.",
                thumbnails={"high": "https://i.ytimg.com/h.jpg"},
            )
        )

        result = await VideoHandler(provider).extract(SourceInput(url=url))

        provider.get_video.assert_awaited_once_with("dQw4w9WgXcQ")
        assert result.title == "Great Talk"
        assert result.body == f"A talk about things.\n\n{url}"
        assert result.thumbnail == "https://i.ytimg.com/h.jpg"

    @pytest.mark.asyncio
    async def test_unparseable_url_raises(self) -> None:
        provider = _video_provider()
        with pytest.raises(ExtractionError):
            await VideoHandler(provider).extract(SourceInput(url="https://youtube.com/about"))
        provider.get_video.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_provider_failure_propagates(self) -> None:
        provider = _video_provider(error=ExtractionError(message="quota", provider_name="youtube"))
        with pytest.raises(ExtractionError):
            await VideoHandler(provider).extract(SourceInput(url="https://youtu.be/dQw4w9WgXcQ"))


# ======================================================================
# Social posts
# ======================================================================


class TestSocialPostHandler:
    @pytest.mark.asyncio
    async def test_extracts_author_text_and_media(self, fake_browser) -> None:
        url = "https://x.com/jane/status/1"
        browser = fake_browser(TWEET_HTML, url=url)

        result = await SocialPostHandler(browser).extract(SourceInput(url=url))

        assert result.title == "Post by Jane Doe"
        assert result.body == f"Shipping the new release today!\n\n{url}"
        assert result.thumbnail == "https://pbs.twimg.com/media/abc.jpg"
        assert browser.session.wait_for == "article"
        assert browser.session.close_calls == 1

    @pytest.mark.asyncio
    async def test_missing_nodes_become_defaults(self, fake_browser) -> None:
        url = "https://x.com/someone/status/2"
        result = await SocialPostHandler(fake_browser("<html><body></body></html>", url=url)).extract(
            SourceInput(url=url)
        )
        assert result.title == "Post by Unknown"
        assert result.body == f"No content\n\n{url}"
        assert result.thumbnail is None

    @pytest.mark.asyncio
    async def test_timeout_propagates_and_closes(self, fake_browser, timeout_error) -> None:
        browser = fake_browser(fail_with=timeout_error)
        with pytest.raises(ExtractionError):
            await SocialPostHandler(browser).extract(SourceInput(url="https://x.com/a/status/3"))
        assert browser.session.close_calls == 1


# ======================================================================
# Dispatcher
# ======================================================================


class TestSourceExtractor:
    @pytest.mark.asyncio
    async def test_dispatches_by_kind(self, fake_browser, settings) -> None:
        browser = fake_browser(ARTICLE_HTML)
        extractor = SourceExtractor(browser, _video_provider(), settings=settings)

        note = await extractor.extract(SourceKind.NOTE, SourceInput(body="hello"))
        page = await extractor.extract(
            SourceKind.URL_GENERIC, SourceInput(url="https://example.com/article")
        )

        assert note.body == "hello"
        assert page.title == "Gardening Basics"
        assert browser.launches == 1

    @pytest.mark.asyncio
    async def test_invalid_thumbnail_from_custom_handler_is_dropped(self, fake_browser) -> None:
        handler = MagicMock()
        handler.extract = AsyncMock(
            return_value=ExtractedContent(title="t", body="b", thumbnail="blob:123")
        )
        extractor = SourceExtractor(
            fake_browser(), _video_provider(), handlers={SourceKind.NOTE: handler}
        )
        result = await extractor.extract(SourceKind.NOTE, SourceInput(body="b"))
        assert result.thumbnail is None
