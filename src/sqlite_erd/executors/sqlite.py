"""
SQLite executor implementation
"""
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional

from sqlite_erd.executors.base import MetadataExecutor
from sqlite_erd.models.catalog import Query, ResultSet
from sqlite_erd.utils.retry import with_retry

logger = logging.getLogger(__name__)


class SQLiteExecutor(MetadataExecutor):
    """Answers catalog queries from an SQLite database through the sqlite3 driver"""

    def __init__(self, config: Dict[str, Any], connection: Optional[sqlite3.Connection] = None):
        super().__init__(config)
        self.connection = connection
        self._owns_connection = connection is None

    @classmethod
    def from_connection(cls, connection: sqlite3.Connection) -> "SQLiteExecutor":
        """Wrap an already open connection; the caller keeps ownership"""
        return cls({'path': None}, connection=connection)

    @with_retry(max_attempts=3, delay_seconds=0.5, exceptions=(sqlite3.OperationalError,))
    def connect(self) -> None:
        """Open the database file read-only"""
        if self.connection is not None:
            return

        path = self.config.get('path')
        if not path:
            raise ValueError("SQLite executor requires a 'path'")
        db_file = Path(path)
        if not db_file.exists():
            raise FileNotFoundError(f"Database file not found: {path}")

        if self.config.get('read_only', True):
            uri = f"{db_file.resolve().as_uri()}?mode=ro"
            self.connection = sqlite3.connect(uri, uri=True, timeout=self.config.get('timeout', 5.0))
        else:
            self.connection = sqlite3.connect(str(db_file), timeout=self.config.get('timeout', 5.0))
        self._owns_connection = True
        logger.info(f"Opened SQLite database {path}")

    def disconnect(self) -> None:
        """Close the database if this executor opened it"""
        if self.connection is not None and self._owns_connection:
            self.connection.close()
            self.connection = None
            logger.info("Closed SQLite database")

    def execute(self, query: Query) -> ResultSet:
        """Run the query's SQLite statement"""
        if self.connection is None:
            raise RuntimeError("SQLite executor is not connected")

        statement = query.to_sql()
        logger.debug(f"Executing: {statement}")
        cursor = self.connection.execute(statement)
        try:
            if cursor.description is None:
                return ResultSet()
            columns = [desc[0] for desc in cursor.description]
            return ResultSet(columns=columns, rows=[list(row) for row in cursor.fetchall()])
        finally:
            cursor.close()
