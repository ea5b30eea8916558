"""Abstract base class for hosted-video metadata providers.

Video pages are not rendered; their title, description, and thumbnails
come from the hosting provider's metadata API, keyed by the video id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class VideoMetadata:
    """Metadata for one hosted video.

    Attributes
    ----------
    video_id:
        The provider's identifier for the video.
    title:
        The video title.
    description:
        The uploader's description text (may be empty).
    thumbnails:
        Official thumbnail URLs keyed by resolution name (``"maxres"``,
        ``"high"``, ``"default"``, ...).
    """

    video_id: str
    title: str
    description: str = ""
    thumbnails: dict[str, str] = field(default_factory=dict)


# Concrete implementation: YouTubeMetadataProvider (syncbrain/providers/video/)
class IVideoMetadataProvider(ABC):
    """Contract for resolving a video id to its metadata."""

    @abstractmethod
    async def get_video(self, video_id: str) -> VideoMetadata:
        """Fetch metadata for *video_id*.

        Raises
        ------
        syncbrain.utils.errors.ExtractionError
            If the request fails or the video does not exist.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"youtube"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials are configured."""
