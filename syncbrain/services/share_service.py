"""Share links: a public, read-only view of one owner's saved content."""

from __future__ import annotations

import uuid

import structlog

from syncbrain.interfaces.record_store_provider import IRecordStoreProvider
from syncbrain.interfaces.share_link_provider import IShareLinkProvider
from syncbrain.models.share import SharedBrain
from syncbrain.utils.errors import NotFoundError, ValidationError
from syncbrain.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_HASH_LENGTH = 15


def new_share_hash() -> str:
    return uuid.uuid4().hex[:_HASH_LENGTH]


class ShareService:
    def __init__(
        self,
        share_links: IShareLinkProvider,
        record_store: IRecordStoreProvider,
    ) -> None:
        self._links = share_links
        self._records = record_store

    async def toggle_share(self, owner: str, enabled: bool) -> str | None:
        """Turn sharing on or off for *owner*.

        Turning it on returns the owner's hash, reusing the existing link
        if there is one.  Turning it off deletes the link and returns
        ``None``; the old hash stops resolving.
        """
        if not owner or not owner.strip():
            raise ValidationError(message="Owner is required")

        if not enabled:
            removed = await self._links.delete_by_owner(owner)
            logger.info("share_disabled", owner=owner, removed=removed)
            return None

        existing = await self._links.find_by_owner(owner)
        if existing is not None:
            return existing.hash

        link = await self._links.create(owner, new_share_hash())
        logger.info("share_enabled", owner=owner)
        return link.hash

    async def resolve_share(self, link_hash: str) -> SharedBrain:
        """Return the owner behind *link_hash* and all of their records.

        Raises
        ------
        NotFoundError
            No active link has this hash.
        """
        link = await self._links.find_by_hash(link_hash) if link_hash else None
        if link is None:
            raise NotFoundError(message="Share link not found")

        records = await self._records.find_by_owner(link.owner)
        logger.info("share_resolved", owner=link.owner, records=len(records))
        return SharedBrain(owner=link.owner, records=records)
