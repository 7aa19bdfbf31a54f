# arithma_tech/core/history_store.py

import contextlib
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any, Callable, Iterator

from .exceptions import StoreError, WriteFailed
from .models import InputMode, OperationKind, OperationRecord

logger = logging.getLogger(__name__)

DEFAULT_DB_NAME = "arithma_tech.db"

_CREATE_TABLE_SQL = (
    "CREATE TABLE IF NOT EXISTS file_history ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT,"
    "name TEXT,"
    "operation TEXT,"
    "data_type TEXT,"
    "file_path TEXT,"
    "text_content TEXT,"
    "timestamp DATETIME DEFAULT CURRENT_TIMESTAMP)"
)

_SELECT_COLUMNS = "id, name, operation, data_type, file_path, text_content, timestamp"

# A subscriber receives the kind of change ('insert' or 'delete') and its payload:
# the stored OperationRecord for an insert, the timestamp string for a delete.
Subscriber = Callable[[str, Any], None]


class HistoryStore:
    """
    The durable, append-only log of every attempted compress/decompress operation.

    Backed by a single SQLite table. A fresh connection is opened for each call so
    no file handle is held between operations, and all writes are serialized by a
    lock so each insert or delete is one atomic transaction.
    """

    def __init__(self, db_path: Path | str):
        """
        Args:
            db_path: Location of the SQLite database file. Created on first use.
        """
        self.db_path = Path(db_path)
        self._lock = threading.Lock()
        self._initialized = False
        self._subscribers: list[Subscriber] = []

    # --- Schema ---

    def initialize(self):
        """
        Ensures the history table exists. Safe to call on every start-up.

        Raises:
            WriteFailed: If the database cannot be opened or the table created.
        """
        with self._lock:
            self._initialize_locked()

    def _initialize_locked(self):
        if self._initialized:
            return
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with contextlib.closing(self._connect()) as conn, conn:
                conn.execute(_CREATE_TABLE_SQL)
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Could not initialize history database at '{self.db_path}': {e}")
            raise WriteFailed("initialize", str(e)) from e
        self._initialized = True
        logger.info(f"History database ready at: {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    # --- Writes ---

    def insert(self, record: OperationRecord) -> OperationRecord:
        """
        Appends a record to the history.

        The database assigns the row identity and, unless the record already
        carries one, the timestamp. Existing rows are never touched.

        Args:
            record: The record to persist.

        Returns:
            The stored record, with `record_id` and `timestamp` filled in.

        Raises:
            WriteFailed: If the database rejects the write.
        """
        with self._lock:
            self._initialize_locked()
            try:
                with contextlib.closing(self._connect()) as conn, conn:
                    if record.timestamp is None:
                        cursor = conn.execute(
                            "INSERT INTO file_history (name, operation, data_type, file_path, text_content) "
                            "VALUES (?, ?, ?, ?, ?)",
                            (record.name, record.operation.value, record.data_type.value,
                             record.file_path, record.text_content),
                        )
                    else:
                        cursor = conn.execute(
                            "INSERT INTO file_history (name, operation, data_type, file_path, text_content, timestamp) "
                            "VALUES (?, ?, ?, ?, ?, ?)",
                            (record.name, record.operation.value, record.data_type.value,
                             record.file_path, record.text_content, record.timestamp),
                        )
                    row = conn.execute(
                        f"SELECT {_SELECT_COLUMNS} FROM file_history WHERE id = ?", (cursor.lastrowid,)
                    ).fetchone()
            except sqlite3.Error as e:
                logger.error(f"Error inserting history row for '{record.name}': {e}")
                raise WriteFailed("insert", str(e)) from e

        stored = self._row_to_record(row)
        logger.debug(f"Logged {stored.operation.value} of '{stored.name}' at {stored.timestamp} (id={stored.record_id}).")
        self._notify("insert", stored)
        return stored

    def delete_by_timestamp(self, timestamp: str) -> int:
        """
        Removes every row whose stored timestamp equals `timestamp`.

        Timestamps have one-second granularity, so two operations started within
        the same second share a timestamp and are removed together. Deleting a
        timestamp that no longer exists is a successful no-op.

        Returns:
            The number of rows removed (possibly zero).

        Raises:
            WriteFailed: If the database rejects the delete.
        """
        with self._lock:
            self._initialize_locked()
            try:
                with contextlib.closing(self._connect()) as conn, conn:
                    cursor = conn.execute("DELETE FROM file_history WHERE timestamp = ?", (timestamp,))
                    removed = cursor.rowcount
            except sqlite3.Error as e:
                logger.error(f"Could not delete history entries at {timestamp}: {e}")
                raise WriteFailed("delete", str(e)) from e

        if removed > 1:
            logger.warning(f"Deleted {removed} history entries sharing timestamp {timestamp}.")
        else:
            logger.info(f"Deleted {removed} history entry at timestamp {timestamp}.")
        self._notify("delete", timestamp)
        return removed

    # --- Reads ---

    def list_all(self) -> "HistoryListing":
        """
        Returns every stored record, newest first (by insertion order).

        The result is a lazy, restartable listing: the query runs each time it is
        iterated, so every pass reflects the current contents of the database.
        Nothing is cached.

        Raises (on iteration):
            StoreError: If the database cannot be read.
        """
        return HistoryListing(self)

    def _fetch_all(self) -> list[OperationRecord]:
        with self._lock:
            try:
                self._initialize_locked()
                with contextlib.closing(self._connect()) as conn:
                    rows = conn.execute(
                        f"SELECT {_SELECT_COLUMNS} FROM file_history ORDER BY id DESC"
                    ).fetchall()
            except sqlite3.Error as e:
                logger.error(f"Could not read history: {e}")
                raise StoreError(f"History read failed: {e}") from e
        return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: tuple) -> OperationRecord:
        record_id, name, operation, data_type, file_path, text_content, timestamp = row
        return OperationRecord(
            name=name or "",
            operation=OperationKind(operation),
            data_type=InputMode(data_type),
            file_path=file_path or "",
            text_content=text_content or "",
            timestamp=str(timestamp) if timestamp is not None else None,
            record_id=record_id,
        )

    # --- Change Notification ---

    def subscribe(self, callback: Subscriber):
        """Registers a callback to be notified after every committed insert or delete."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber):
        """Removes a previously registered callback. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, action: str, payload: Any):
        for callback in list(self._subscribers):
            try:
                callback(action, payload)
            except Exception as e:
                logger.error(f"History subscriber failed during '{action}' notification: {e}", exc_info=True)


class HistoryListing:
    """A snapshot view over a store that re-runs its query on every iteration."""

    def __init__(self, store: HistoryStore):
        self.store = store

    def __iter__(self) -> Iterator[OperationRecord]:
        yield from self.store._fetch_all()
