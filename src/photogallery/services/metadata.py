"""
Metadata store adapter for photo records.

Records live in a flat key-value namespace: the key is the photo id and the
value is the record serialized as JSON. The adapter only moves strings in and
out; it does not interpret the JSON.
"""

from abc import ABC, abstractmethod

import duckdb

from ..errors import DatabaseError
from ..logging_config import get_logger
from ..models.database import DatabaseManager, create_database
from ..models.schema import METADATA_TABLE

logger = get_logger(__name__)


class MetadataStore(ABC):
    """Key-value store holding JSON-serialized photo records."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Create or replace the value for a key."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; removing an absent key is not an error."""

    @abstractmethod
    def list_keys(self) -> list[str]:
        """Enumerate all keys."""

    def ping(self) -> None:
        """Raise if the store is unreachable."""
        self.list_keys()


class DuckDBMetadataStore(MetadataStore):
    """Metadata store backed by a single DuckDB table."""

    def __init__(self, db_path: str | None = None, db_manager: DatabaseManager | None = None) -> None:
        """
        Initialize the metadata store.

        Args:
            db_path: DuckDB file path or ``:memory:``
            db_manager: Existing database manager (takes precedence over db_path)

        Raises:
            DatabaseError: If the database cannot be opened
        """
        if db_manager is None:
            if db_path is None:
                raise DatabaseError("Either db_path or db_manager is required")
            try:
                db_manager = create_database(db_path)
            except RuntimeError as e:
                raise DatabaseError(f"Failed to open metadata database: {e}", original_exception=e) from e

        self.db_manager = db_manager
        logger.info("metadata_store_initialized", db_path=db_manager.db_path)

    def get(self, key: str) -> str | None:
        try:
            rows = self.db_manager.execute_query(f"SELECT value FROM {METADATA_TABLE} WHERE key = ?", (key,))
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to read metadata '{key}': {e}", original_exception=e) from e
        return rows[0][0] if rows else None

    def put(self, key: str, value: str) -> None:
        try:
            self.db_manager.execute_query(
                f"INSERT OR REPLACE INTO {METADATA_TABLE} (key, value) VALUES (?, ?)",
                (key, value),
            )
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to write metadata '{key}': {e}", original_exception=e) from e
        logger.debug("metadata_written", key=key)

    def delete(self, key: str) -> None:
        try:
            self.db_manager.execute_query(f"DELETE FROM {METADATA_TABLE} WHERE key = ?", (key,))
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to delete metadata '{key}': {e}", original_exception=e) from e
        logger.debug("metadata_deleted", key=key)

    def list_keys(self) -> list[str]:
        try:
            rows = self.db_manager.execute_query(f"SELECT key FROM {METADATA_TABLE} ORDER BY rowid")
        except duckdb.Error as e:
            raise DatabaseError(f"Failed to list metadata keys: {e}", original_exception=e) from e
        return [row[0] for row in rows]

    def close(self) -> None:
        self.db_manager.close()
