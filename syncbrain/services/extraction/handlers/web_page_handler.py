"""Generic web pages, rendered in a real browser before extraction.

Readable text is the heading and paragraph text nodes (``h1``-``h3``,
``p``) concatenated in document order.  This ignores layout markup, so
the same rule works across very different page structures.

A navigation timeout does not fail the save: the user still gets a
record, with a placeholder explaining why it is empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup

from syncbrain.interfaces.browser_provider import IBrowserProvider
from syncbrain.models.content import ExtractedContent, SourceInput
from syncbrain.services.extraction.handlers.base import SourceHandler
from syncbrain.services.extraction.thumbnails import find_page_thumbnail
from syncbrain.utils.errors import ExtractionTimeoutError
from syncbrain.utils.text import collapse_whitespace, hard_truncate

logger = structlog.get_logger(logger_name=__name__)

TIMEOUT_PLACEHOLDER_TITLE = "Scraping failed — timeout"
TIMEOUT_PLACEHOLDER_BODY = (
    "The page took too long to load. This might be due to a slow connection "
    "or a complex page. Try saving it again later."
)

_TEXT_SELECTOR = "h1, h2, h3, p"


@dataclass
class _PageSnapshot:
    title: str
    body: str
    thumbnail: str | None


def fallback_title(url: str) -> str:
    """Hostname of *url* without ``www.``, or ``"Untitled"``."""
    host = urlparse(url).hostname or ""
    if host.startswith("www."):
        host = host[4:]
    return host or "Untitled"


def timeout_placeholder() -> ExtractedContent:
    return ExtractedContent(
        title=TIMEOUT_PLACEHOLDER_TITLE,
        body=TIMEOUT_PLACEHOLDER_BODY,
        thumbnail=None,
    )


class WebPageHandler(SourceHandler):
    """Renders a page and pulls its title, readable text, and preview image."""

    def __init__(
        self,
        browser: IBrowserProvider,
        navigation_timeout: float = 30.0,
        max_text_chars: int = 15000,
    ) -> None:
        self._browser = browser
        self._navigation_timeout = navigation_timeout
        self._max_text_chars = max_text_chars

    async def extract(self, source: SourceInput) -> ExtractedContent:
        url = self.require_url(source)
        session = await self._browser.launch()
        try:
            await session.navigate(url, timeout=self._navigation_timeout)
            page_url = session.current_url or url
            snapshot = await session.extract_dom(
                lambda soup: self._snapshot(soup, page_url)
            )
        except ExtractionTimeoutError:
            logger.warning("scrape_timeout", url=url, timeout=self._navigation_timeout)
            return timeout_placeholder()
        finally:
            await session.close()

        title = snapshot.title or fallback_title(url)
        logger.info(
            "page_extracted",
            url=url,
            title_length=len(title),
            body_length=len(snapshot.body),
            has_thumbnail=snapshot.thumbnail is not None,
        )
        return ExtractedContent(title=title, body=snapshot.body, thumbnail=snapshot.thumbnail)

    def _snapshot(self, soup: BeautifulSoup, page_url: str) -> _PageSnapshot:
        title = collapse_whitespace(soup.title.get_text()) if soup.title else ""

        parts: list[str] = []
        total = 0
        for node in soup.select(_TEXT_SELECTOR):
            text = collapse_whitespace(node.get_text(" "))
            if not text:
                continue
            parts.append(text)
            total += len(text) + 1
            if total >= self._max_text_chars:
                break
        body = hard_truncate("\n".join(parts), self._max_text_chars)

        return _PageSnapshot(
            title=title,
            body=body,
            thumbnail=find_page_thumbnail(soup, page_url),
        )
