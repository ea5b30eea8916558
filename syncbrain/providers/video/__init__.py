from syncbrain.providers.video.youtube_provider import YouTubeMetadataProvider

__all__ = ["YouTubeMetadataProvider"]
