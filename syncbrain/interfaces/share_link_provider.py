"""Abstract base class for share-link persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod

from syncbrain.models.share import ShareLink


# Concrete implementation: SQLiteShareLinkProvider (syncbrain/providers/share/)
class IShareLinkProvider(ABC):
    """Contract for storing the (at most one) share link of each owner."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backing schema if it doesn't exist."""

    @abstractmethod
    async def find_by_owner(self, owner: str) -> ShareLink | None:
        """Return *owner*'s link, or ``None``."""

    @abstractmethod
    async def find_by_hash(self, link_hash: str) -> ShareLink | None:
        """Return the link with *link_hash*, or ``None``."""

    @abstractmethod
    async def create(self, owner: str, link_hash: str) -> ShareLink:
        """Create a link for *owner*.

        If *owner* already has a link (e.g. a concurrent request won the
        race), the existing link is returned instead of a duplicate.
        """

    @abstractmethod
    async def delete_by_owner(self, owner: str) -> bool:
        """Delete *owner*'s link.  Returns ``True`` if one existed."""
