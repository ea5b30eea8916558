"""Source extractor: dispatches each source kind to its handler.

The set of kinds is closed (:class:`SourceKind`), so dispatch is a plain
lookup built once at construction.  Each handler owns its own failure
policy; only the web-page handler degrades timeouts to a placeholder.
"""

from __future__ import annotations

import structlog

from syncbrain.config.settings import Settings
from syncbrain.interfaces.browser_provider import IBrowserProvider
from syncbrain.interfaces.video_metadata_provider import IVideoMetadataProvider
from syncbrain.models.content import ExtractedContent, SourceInput, SourceKind
from syncbrain.services.extraction.handlers import (
    NoteHandler,
    SocialPostHandler,
    SourceHandler,
    VideoHandler,
    WebPageHandler,
)
from syncbrain.services.extraction.thumbnails import is_valid_thumbnail

logger = structlog.get_logger(logger_name=__name__)


class SourceExtractor:
    """Produces ``{title, body, thumbnail}`` for any supported source."""

    def __init__(
        self,
        browser: IBrowserProvider,
        video_metadata: IVideoMetadataProvider,
        settings: Settings | None = None,
        handlers: dict[SourceKind, SourceHandler] | None = None,
    ) -> None:
        settings = settings or Settings()
        self._handlers: dict[SourceKind, SourceHandler] = handlers or {
            SourceKind.NOTE: NoteHandler(),
            SourceKind.URL_GENERIC: WebPageHandler(
                browser,
                navigation_timeout=settings.browser_navigation_timeout,
                max_text_chars=settings.max_page_text_chars,
            ),
            SourceKind.URL_VIDEO: VideoHandler(video_metadata),
            SourceKind.URL_SOCIAL: SocialPostHandler(
                browser,
                navigation_timeout=settings.browser_navigation_timeout,
            ),
        }

    async def extract(self, kind: SourceKind, source: SourceInput) -> ExtractedContent:
        """Extract normalized content for *source* of the given *kind*.

        Raises
        ------
        syncbrain.utils.errors.ExtractionError
            If the handler cannot fetch or parse the source.
        """
        handler = self._handlers[kind]
        logger.debug("extraction_started", kind=kind.value, url=source.url)
        content = await handler.extract(source)

        # Handlers validate their own thumbnails; this guards custom handlers.
        if content.thumbnail is not None and not is_valid_thumbnail(content.thumbnail):
            logger.warning("thumbnail_rejected", kind=kind.value, thumbnail=content.thumbnail)
            content = content.model_copy(update={"thumbnail": None})
        return content
