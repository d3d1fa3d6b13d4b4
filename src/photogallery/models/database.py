"""
Database initialization and management for the metadata store.

This module provides functions to initialize DuckDB databases and manage
database connections.
"""

import threading
from pathlib import Path
from typing import Any

import duckdb

from ..logging_config import get_logger
from .schema import METADATA_TABLE, REQUIRED_COLUMNS, get_schema_statements

logger = get_logger(__name__)

IN_MEMORY = ":memory:"


class DatabaseManager:
    """
    Manages a DuckDB connection shared by request handlers.

    DuckDB connections are not safe for concurrent use, so every query runs on
    its own cursor while holding the manager's lock.
    """

    def __init__(self, db_path: str):
        """
        Initialize DatabaseManager.

        Args:
            db_path: Path to the DuckDB database file, or ``:memory:``
        """
        self.db_path = db_path
        self._connection: duckdb.DuckDBPyConnection | None = None
        self._lock = threading.RLock()

    def connect(self) -> duckdb.DuckDBPyConnection:
        """
        Get or create a database connection.

        Returns:
            DuckDB connection object
        """
        with self._lock:
            if self._connection is None:
                self._connection = duckdb.connect(self.db_path)
                logger.info("duckdb_connected", db_path=self.db_path)
            return self._connection

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
                logger.info("duckdb_connection_closed", db_path=self.db_path)

    def initialize_schema(self) -> None:
        """
        Create the metadata table if it does not exist.

        Raises:
            duckdb.Error: If database operations fail
        """
        for statement in get_schema_statements():
            logger.debug("executing_schema_statement", statement=statement.strip())
            self.execute_query(statement)
        logger.info("database_schema_initialized", db_path=self.db_path)

    def verify_schema(self) -> bool:
        """
        Verify that the metadata table exists with the expected columns.

        Returns:
            True if schema is valid, False otherwise
        """
        try:
            columns = self.execute_query(f"PRAGMA table_info('{METADATA_TABLE}')")
        except duckdb.Error as e:
            logger.warning("schema_verification_failed", error=str(e))
            return False

        column_names = {col[1] for col in columns}
        missing_columns = REQUIRED_COLUMNS - column_names
        if missing_columns:
            logger.warning("schema_missing_columns", missing=sorted(missing_columns))
            return False
        return True

    def execute_query(self, query: str, parameters: tuple | None = None) -> list[tuple]:
        """
        Execute a SQL query and return results.

        Args:
            query: SQL query string
            parameters: Optional query parameters

        Returns:
            List of result tuples

        Raises:
            duckdb.Error: If query execution fails
        """
        with self._lock:
            cursor = self.connect().cursor()
            try:
                if parameters:
                    cursor.execute(query, parameters)
                else:
                    cursor.execute(query)
                try:
                    return cursor.fetchall()
                except duckdb.InvalidInputException:
                    # Statements without a result set
                    return []
            except duckdb.Error as e:
                logger.error("query_execution_failed", query=query.strip(), error=str(e))
                raise
            finally:
                cursor.close()

    def __enter__(self) -> "DatabaseManager":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def create_database(db_path: str) -> DatabaseManager:
    """
    Open (creating if needed) a DuckDB database with the metadata schema.

    Args:
        db_path: Path where the database file lives, or ``:memory:``

    Returns:
        Initialized DatabaseManager instance

    Raises:
        RuntimeError: If database creation fails
    """
    try:
        if db_path != IN_MEMORY:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        db_manager = DatabaseManager(db_path)
        db_manager.initialize_schema()

        if not db_manager.verify_schema():
            raise RuntimeError("Schema verification failed after creation")

        return db_manager

    except Exception as e:
        logger.error("database_creation_failed", db_path=db_path, error=str(e))
        raise RuntimeError(f"Database creation failed: {e}") from e
