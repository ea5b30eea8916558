"""Thumbnail discovery and validation shared by every extraction handler.

A stored thumbnail must stay resolvable long after the page was scraped,
so ``blob:`` URLs (which only live inside the rendering browser) and
relative or malformed values are rejected.
"""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

# (CSS selector, attribute) pairs checked in order -- first non-empty wins.
_META_IMAGE_SELECTORS: list[tuple[str, str]] = [
    ('meta[property="og:image"]', "content"),
    ('meta[name="twitter:image"]', "content"),
    ('meta[property="og:image:secure_url"]', "content"),
    ('meta[itemprop="image"]', "content"),
    ('link[rel="image_src"]', "href"),
]


def is_valid_thumbnail(url: str | None) -> bool:
    """Return ``True`` if *url* is a well-formed absolute http(s) URL."""
    if not url:
        return False
    if url.strip().lower().startswith("blob:"):
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https"):
        return False
    return bool(parsed.netloc) and " " not in url.strip()


def resolve_thumbnail(candidate: str | None, page_url: str) -> str | None:
    """Make *candidate* absolute against *page_url*, or ``None`` if unusable."""
    if not candidate or not candidate.strip():
        return None
    candidate = candidate.strip()
    if candidate.lower().startswith("blob:"):
        return None
    absolute = urljoin(page_url, candidate)
    return absolute if is_valid_thumbnail(absolute) else None


def find_page_thumbnail(soup: BeautifulSoup, page_url: str) -> str | None:
    """Pick a page's preview image.

    Meta tags are tried in priority order (Open Graph, Twitter card,
    secure OG, schema.org, legacy ``image_src``), then the first inline
    ``<img>``.  Candidates that fail validation are skipped.
    """
    for selector, attribute in _META_IMAGE_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        resolved = resolve_thumbnail(node.get(attribute), page_url)
        if resolved:
            return resolved

    first_img = soup.find("img", src=True)
    if first_img is not None:
        return resolve_thumbnail(first_img.get("src"), page_url)
    return None
