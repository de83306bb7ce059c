"""SQLite connection wrapper used by the product repository."""

import sqlite3
import threading
from sqlite3 import Connection
from typing import Any, Optional, Sequence, Tuple

WRITE_STATEMENTS = ("INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "ALTER")


class SqliteClient:
    """SQLite database client with connection management.

    The connection is shared by FastAPI's worker threads. Transactions belong
    to the connection, so every statement and its commit or rollback runs
    under one lock.
    """

    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        # Requests run on FastAPI's worker threads, not the thread that opened the connection
        self._connection = sqlite3.connect(self.connection_string, check_same_thread=False)
        self._lock = threading.Lock()

    @property
    def connection(self) -> Connection:
        """Get the database connection."""
        return self._connection

    def execute_query(self, query: str, params: Optional[Sequence[Any]] = None):
        """Execute a query and return all results."""
        with self._lock:
            cursor = self._connection.cursor()
            try:
                if params:
                    cursor.execute(query, params)
                else:
                    cursor.execute(query)

                if query.strip().upper().startswith(WRITE_STATEMENTS):
                    self._connection.commit()

                return cursor.fetchall()
            except sqlite3.Error:
                if self._connection.in_transaction:
                    self._connection.rollback()
                raise
            finally:
                cursor.close()

    def execute_write(self, query: str, params: Optional[Sequence[Any]] = None) -> Tuple[int, Optional[int]]:
        """Execute a write statement and commit it.

        Returns:
            Tuple of (rows affected, last inserted row id).
        """
        with self._lock:
            cursor = self._connection.cursor()
            try:
                cursor.execute(query, params or ())
                self._connection.commit()
                return cursor.rowcount, cursor.lastrowid
            except sqlite3.Error:
                self._connection.rollback()
                raise
            finally:
                cursor.close()

    def close(self):
        """Close the database connection."""
        with self._lock:
            self._connection.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.close()
        return False
