"""SQLite-backed content record store.

Persists content records to a local SQLite database at
``data/syncbrain.db``.  Uses ``aiosqlite`` for async I/O.  This table is
the system of record: the vector index is derived from it and can be
rebuilt from it at any time.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
import structlog

from syncbrain.interfaces.record_store_provider import IRecordStoreProvider
from syncbrain.models.content import ContentDraft, ContentRecord, SourceKind
from syncbrain.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/syncbrain.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS contents (
    id          TEXT PRIMARY KEY,
    owner       TEXT NOT NULL,
    title       TEXT NOT NULL,
    body        TEXT NOT NULL DEFAULT '',
    source_kind TEXT NOT NULL,
    source_url  TEXT,
    thumbnail   TEXT,
    created_at  TEXT NOT NULL
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_contents_owner ON contents(owner);",
    "CREATE INDEX IF NOT EXISTS idx_contents_owner_created ON contents(owner, created_at);",
]

_COLUMNS = "id, owner, title, body, source_kind, source_url, thumbnail, created_at"

_INSERT_SQL = f"INSERT INTO contents ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?);"


class SQLiteRecordStore(IRecordStoreProvider):
    """Content record persistence on a single SQLite file."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the contents table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                for idx_sql in _CREATE_INDICES_SQL:
                    await db.execute(idx_sql)
                await db.commit()
        except aiosqlite.Error as exc:
            raise self._wrap("initialize", exc) from exc
        logger.info("record_store_initialized", path=str(self._db_path))

    async def create(self, draft: ContentDraft) -> ContentRecord:
        record = ContentRecord(
            id=uuid.uuid4().hex,
            owner=draft.owner,
            title=draft.title,
            body=draft.body,
            source_kind=draft.source_kind,
            source_url=draft.source_url,
            thumbnail=draft.thumbnail,
            created_at=datetime.now(tz=timezone.utc),
        )
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    _INSERT_SQL,
                    (
                        record.id,
                        record.owner,
                        record.title,
                        record.body,
                        record.source_kind.value,
                        record.source_url,
                        record.thumbnail,
                        record.created_at.isoformat(),
                    ),
                )
                await db.commit()
        except aiosqlite.Error as exc:
            raise self._wrap("create", exc) from exc

        logger.info(
            "record_created",
            record_id=record.id,
            owner=record.owner,
            source_kind=record.source_kind.value,
        )
        return record

    async def find_by_owner(self, owner: str) -> list[ContentRecord]:
        """Return all of *owner*'s records, oldest first."""
        return await self._fetch(
            f"SELECT {_COLUMNS} FROM contents WHERE owner = ? ORDER BY created_at ASC, rowid ASC",
            (owner,),
            "find_by_owner",
        )

    async def find_by_ids(self, owner: str, record_ids: list[str]) -> list[ContentRecord]:
        if not record_ids:
            return []
        placeholders = ", ".join("?" for _ in record_ids)
        return await self._fetch(
            f"SELECT {_COLUMNS} FROM contents WHERE owner = ? AND id IN ({placeholders})",
            (owner, *record_ids),
            "find_by_ids",
        )

    async def delete(self, owner: str, record_id: str) -> bool:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    "DELETE FROM contents WHERE id = ? AND owner = ?",
                    (record_id, owner),
                )
                await db.commit()
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as exc:
            raise self._wrap("delete", exc) from exc

        logger.info("record_deleted", record_id=record_id, owner=owner, deleted=deleted)
        return deleted

    def get_provider_name(self) -> str:
        return "sqlite_records"

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _fetch(self, sql: str, params: tuple, operation: str) -> list[ContentRecord]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(sql, params)
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise self._wrap(operation, exc) from exc
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> ContentRecord:
        return ContentRecord(
            id=row["id"],
            owner=row["owner"],
            title=row["title"],
            body=row["body"] or "",
            source_kind=SourceKind(row["source_kind"]),
            source_url=row["source_url"],
            thumbnail=row["thumbnail"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _wrap(self, operation: str, exc: Exception) -> StoreError:
        logger.error("record_store_error", operation=operation, error=str(exc))
        return StoreError(
            message=f"SQLite {operation} failed: {exc}",
            provider_name=self.get_provider_name(),
        )
