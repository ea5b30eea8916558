from syncbrain.providers.share.sqlite_share_link_provider import SQLiteShareLinkProvider

__all__ = ["SQLiteShareLinkProvider"]
