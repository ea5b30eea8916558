"""Abstract base classes for browser-automation providers.

Some pages only populate their text through client-side script, so the
web-page and social-post extractors render them in a real browser.  A
session is a scoped resource: the caller acquires one per extraction and
must release it with :meth:`IBrowserSession.close` on every exit path.
Sessions are never pooled or shared between concurrent extractions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from bs4 import BeautifulSoup

T = TypeVar("T")


class IBrowserSession(ABC):
    """One rendered page in one browser instance."""

    @abstractmethod
    async def navigate(self, url: str, timeout: float, wait_for: str | None = None) -> None:
        """Load *url*, waiting at most *timeout* seconds.

        When *wait_for* is a CSS selector, additionally wait (within the same
        budget) for a matching node to appear.  A selector that never matches
        is not an error; the page is extracted as rendered.

        Raises
        ------
        syncbrain.utils.errors.ExtractionTimeoutError
            If the page does not load within *timeout*.
        syncbrain.utils.errors.ExtractionError
            On any other navigation failure (DNS, TLS, refused connection).
        """

    @abstractmethod
    async def extract_dom(self, extractor: Callable[[BeautifulSoup], T]) -> T:
        """Run *extractor* over the current rendered DOM and return its result."""

    @property
    @abstractmethod
    def current_url(self) -> str:
        """The URL of the loaded page after redirects."""

    @abstractmethod
    async def close(self) -> None:
        """Release the page and browser.  Safe to call more than once."""


# Concrete implementation: PlaywrightBrowserProvider (syncbrain/providers/browser/)
class IBrowserProvider(ABC):
    """Factory for browser sessions."""

    @abstractmethod
    async def launch(self) -> IBrowserSession:
        """Start a new, isolated browser session.

        Raises
        ------
        syncbrain.utils.errors.ExtractionError
            If the browser cannot be started.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"playwright"``."""
