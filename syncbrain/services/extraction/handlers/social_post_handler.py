"""Short-form social posts, rendered in a browser.

Post markup changes often, so each field is located through a chain of
selectors tried in order.  A field whose chain matches nothing becomes a
neutral default instead of an error.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from bs4 import BeautifulSoup

from syncbrain.interfaces.browser_provider import IBrowserProvider
from syncbrain.models.content import ExtractedContent, SourceInput
from syncbrain.services.extraction.handlers.base import SourceHandler
from syncbrain.services.extraction.thumbnails import resolve_thumbnail
from syncbrain.utils.text import collapse_whitespace

logger = structlog.get_logger(logger_name=__name__)

UNKNOWN_AUTHOR = "Unknown"
NO_CONTENT = "No content"

_TEXT_SELECTORS = (
    'article div[data-testid="tweetText"]',
    'article div[lang]',
    'meta[property="og:description"]',
)
_AUTHOR_SELECTORS = (
    'article div[data-testid="User-Name"] a[role="link"] span',
    'article a[role="link"] span',
    'meta[property="og:title"]',
)
_MEDIA_SELECTORS = (
    'article img[src*="media"]',
    'article div[data-testid="tweetPhoto"] img',
)


@dataclass
class _PostSnapshot:
    author: str | None
    text: str | None
    image: str | None


def _first_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str | None:
    for selector in selectors:
        node = soup.select_one(selector)
        if node is None:
            continue
        raw = node.get("content") if node.name == "meta" else node.get_text(" ")
        text = collapse_whitespace(raw or "")
        if text:
            return text
    return None


def _first_attr(soup: BeautifulSoup, selectors: tuple[str, ...], attr: str) -> str | None:
    for selector in selectors:
        node = soup.select_one(selector)
        if node is not None and node.get(attr):
            return node.get(attr)
    return None


def snapshot_post(soup: BeautifulSoup) -> _PostSnapshot:
    return _PostSnapshot(
        author=_first_text(soup, _AUTHOR_SELECTORS),
        text=_first_text(soup, _TEXT_SELECTORS),
        image=_first_attr(soup, _MEDIA_SELECTORS, "src"),
    )


class SocialPostHandler(SourceHandler):
    """Extracts author, post text, and the first in-post image."""

    def __init__(self, browser: IBrowserProvider, navigation_timeout: float = 30.0) -> None:
        self._browser = browser
        self._navigation_timeout = navigation_timeout

    async def extract(self, source: SourceInput) -> ExtractedContent:
        url = self.require_url(source)
        session = await self._browser.launch()
        try:
            await session.navigate(url, timeout=self._navigation_timeout, wait_for="article")
            page_url = session.current_url or url
            snapshot = await session.extract_dom(snapshot_post)
        finally:
            await session.close()

        author = snapshot.author or UNKNOWN_AUTHOR
        text = snapshot.text or NO_CONTENT
        thumbnail = resolve_thumbnail(snapshot.image, page_url)
        logger.info(
            "social_post_extracted",
            url=url,
            author_found=snapshot.author is not None,
            text_found=snapshot.text is not None,
            has_thumbnail=thumbnail is not None,
        )
        return ExtractedContent(
            title=f"Post by {author}",
            body=f"{text}\n\n{url}",
            thumbnail=thumbnail,
        )
