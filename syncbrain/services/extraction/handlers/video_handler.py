"""Hosted videos, resolved through the provider's metadata API.

No rendering: the video id is parsed from the URL and the title,
description, and official thumbnails come from the metadata provider.
"""

from __future__ import annotations

import re

import structlog

from syncbrain.interfaces.video_metadata_provider import IVideoMetadataProvider
from syncbrain.models.content import ExtractedContent, SourceInput
from syncbrain.services.extraction.handlers.base import SourceHandler
from syncbrain.services.extraction.thumbnails import is_valid_thumbnail
from syncbrain.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)

# Accepts short links (youtu.be/ID), watch URLs (?v=ID or &v=ID),
# embed/, v/, and shorts/ paths.  Ids are 11 chars of [A-Za-z0-9_-].
_VIDEO_ID_RE = re.compile(
    r"(?:youtu\.be/|[?&]v=|/embed/|/v/|/shorts/)([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"
)

# Highest resolution first.
_THUMBNAIL_PRIORITY = ("maxres", "standard", "high", "medium", "default")


def parse_video_id(url: str) -> str | None:
    match = _VIDEO_ID_RE.search(url)
    return match.group(1) if match else None


def best_thumbnail(thumbnails: dict[str, str]) -> str | None:
    for name in _THUMBNAIL_PRIORITY:
        candidate = thumbnails.get(name)
        if is_valid_thumbnail(candidate):
            return candidate
    return None


class VideoHandler(SourceHandler):
    def __init__(self, metadata_provider: IVideoMetadataProvider) -> None:
        self._metadata = metadata_provider

    async def extract(self, source: SourceInput) -> ExtractedContent:
        url = self.require_url(source)
        video_id = parse_video_id(url)
        if not video_id:
            raise ExtractionError(
                message=f"Could not find a video id in {url}",
                provider_name=self._metadata.get_provider_name(),
            )

        video = await self._metadata.get_video(video_id)
        body = f"{video.description}\n\n{url}" if video.description else url
        logger.info("video_extracted", video_id=video_id, body_length=len(body))
        return ExtractedContent(
            title=video.title or url,
            body=body,
            thumbnail=best_thumbnail(video.thumbnails),
        )
