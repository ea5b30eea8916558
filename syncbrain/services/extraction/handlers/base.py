"""Common contract for per-source extraction handlers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from syncbrain.models.content import ExtractedContent, SourceInput
from syncbrain.utils.errors import ValidationError


class SourceHandler(ABC):
    """Turns one kind of raw input into normalized ``{title, body, thumbnail}``.

    Implementations raise :class:`~syncbrain.utils.errors.ExtractionError`
    on network, timeout, or parse failures they cannot degrade from.  A page
    that loads but holds no text yields an empty body, never an error.
    """

    @abstractmethod
    async def extract(self, source: SourceInput) -> ExtractedContent:
        """Extract normalized content from *source*."""

    @staticmethod
    def require_url(source: SourceInput) -> str:
        if not source.url:
            raise ValidationError(message="A URL is required for this content type")
        return source.url
