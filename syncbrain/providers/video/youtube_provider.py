"""YouTube Data API v3 metadata provider.

Resolves a video id to its title, description, and thumbnail set with a
single ``videos?part=snippet`` request.  Requires ``YOUTUBE_API_KEY``.
"""

from __future__ import annotations

import httpx
import structlog

from syncbrain.config.settings import Settings
from syncbrain.interfaces.video_metadata_provider import IVideoMetadataProvider, VideoMetadata
from syncbrain.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_TIMEOUT = 10.0


class YouTubeMetadataProvider(IVideoMetadataProvider):
    """Video metadata backed by the YouTube Data API."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None) -> None:
        self._api_key = settings.youtube_api_key
        self._base_url = settings.youtube_api_base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(_DEFAULT_TIMEOUT))

    async def get_video(self, video_id: str) -> VideoMetadata:
        if not self.is_available():
            raise ExtractionError(
                message="YOUTUBE_API_KEY is not configured",
                provider_name=self.get_provider_name(),
            )
        try:
            response = await self._client.get(
                f"{self._base_url}/videos",
                params={"part": "snippet", "id": video_id, "key": self._api_key},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise ExtractionError(
                message=f"HTTP {exc.response.status_code} fetching video {video_id}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            raise ExtractionError(
                message=f"HTTP error fetching video {video_id}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        except ValueError as exc:
            raise ExtractionError(
                message=f"Malformed response for video {video_id}",
                provider_name=self.get_provider_name(),
            ) from exc

        items = payload.get("items") or []
        if not items:
            raise ExtractionError(
                message=f"Video {video_id} not found",
                provider_name=self.get_provider_name(),
            )

        snippet = items[0].get("snippet") or {}
        thumbnails = {
            name: info["url"]
            for name, info in (snippet.get("thumbnails") or {}).items()
            if isinstance(info, dict) and info.get("url")
        }
        logger.info("youtube_video_fetched", video_id=video_id, thumbnails=len(thumbnails))
        return VideoMetadata(
            video_id=video_id,
            title=snippet.get("title") or "",
            description=snippet.get("description") or "",
            thumbnails=thumbnails,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def get_provider_name(self) -> str:
        return "youtube"

    def is_available(self) -> bool:
        return bool(self._api_key)
