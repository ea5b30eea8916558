"""Abstract base class for the durable content record store.

The record store is the system of record: a content record exists if and
only if it is here.  There is deliberately no update operation; records
are immutable once created.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from syncbrain.models.content import ContentDraft, ContentRecord


# Concrete implementation: SQLiteRecordStore (syncbrain/providers/record_store/)
class IRecordStoreProvider(ABC):
    """Contract for creating, finding, and deleting content records.

    Every read is scoped by owner so callers cannot accidentally cross
    tenants.  All failures surface as
    :class:`~syncbrain.utils.errors.StoreError`.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create the backing schema if it doesn't exist.

        Called once at startup, before the first request is served.
        """

    @abstractmethod
    async def create(self, draft: ContentDraft) -> ContentRecord:
        """Persist *draft*, assigning ``id`` and ``created_at``."""

    @abstractmethod
    async def find_by_owner(self, owner: str) -> list[ContentRecord]:
        """Return every record owned by *owner*, oldest first."""

    @abstractmethod
    async def find_by_ids(self, owner: str, record_ids: list[str]) -> list[ContentRecord]:
        """Return the records among *record_ids* that belong to *owner*.

        Ids that do not exist or belong to another owner are silently
        omitted.  Result order is unspecified.
        """

    @abstractmethod
    async def delete(self, owner: str, record_id: str) -> bool:
        """Delete *record_id* if owned by *owner*.

        Returns
        -------
        bool
            ``True`` if a record was deleted, ``False`` if none matched.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"sqlite_records"``."""
