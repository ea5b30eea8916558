"""SQLite-backed share-link provider.

Stores at most one share link per owner.  The ``UNIQUE(owner)`` constraint
makes concurrent create requests converge on a single link: the loser's
insert is ignored and it reads back the winner's row.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
import structlog

from syncbrain.interfaces.share_link_provider import IShareLinkProvider
from syncbrain.models.share import ShareLink
from syncbrain.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/syncbrain.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS share_links (
    hash        TEXT PRIMARY KEY,
    owner       TEXT NOT NULL UNIQUE,
    created_at  TEXT NOT NULL
);
"""

_INSERT_SQL = """\
INSERT INTO share_links (hash, owner, created_at)
VALUES (?, ?, ?)
ON CONFLICT(owner) DO NOTHING;
"""

_SELECT_BY_OWNER_SQL = "SELECT hash, owner, created_at FROM share_links WHERE owner = ?;"
_SELECT_BY_HASH_SQL = "SELECT hash, owner, created_at FROM share_links WHERE hash = ?;"


class SQLiteShareLinkProvider(IShareLinkProvider):
    """Share-link persistence, sharing the record store's database file."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.commit()
        except aiosqlite.Error as exc:
            raise self._wrap("initialize", exc) from exc
        logger.info("share_store_initialized", path=str(self._db_path))

    async def find_by_owner(self, owner: str) -> ShareLink | None:
        return await self._fetch_one(_SELECT_BY_OWNER_SQL, (owner,), "find_by_owner")

    async def find_by_hash(self, link_hash: str) -> ShareLink | None:
        return await self._fetch_one(_SELECT_BY_HASH_SQL, (link_hash,), "find_by_hash")

    async def create(self, owner: str, link_hash: str) -> ShareLink:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                await db.execute(
                    _INSERT_SQL,
                    (link_hash, owner, datetime.now(tz=timezone.utc).isoformat()),
                )
                await db.commit()
                cursor = await db.execute(_SELECT_BY_OWNER_SQL, (owner,))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise self._wrap("create", exc) from exc

        if row is None:
            raise StoreError(
                message=f"Share link for {owner!r} vanished after insert",
                provider_name="sqlite_share_links",
            )
        link = self._row_to_link(row)
        logger.info("share_link_created", owner=owner, reused=link.hash != link_hash)
        return link

    async def delete_by_owner(self, owner: str) -> bool:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute("DELETE FROM share_links WHERE owner = ?", (owner,))
                await db.commit()
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as exc:
            raise self._wrap("delete_by_owner", exc) from exc
        logger.info("share_link_deleted", owner=owner, deleted=deleted)
        return deleted

    async def _fetch_one(self, sql: str, params: tuple, operation: str) -> ShareLink | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise self._wrap(operation, exc) from exc
        return self._row_to_link(row) if row else None

    @staticmethod
    def _row_to_link(row: aiosqlite.Row) -> ShareLink:
        return ShareLink(
            hash=row["hash"],
            owner=row["owner"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    @staticmethod
    def _wrap(operation: str, exc: Exception) -> StoreError:
        logger.error("share_store_error", operation=operation, error=str(exc))
        return StoreError(
            message=f"SQLite {operation} failed: {exc}",
            provider_name="sqlite_share_links",
        )
