from syncbrain.providers.record_store.sqlite_record_store import SQLiteRecordStore

__all__ = ["SQLiteRecordStore"]
