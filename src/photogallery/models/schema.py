"""
Database schema definitions for the metadata store.

Photo records are kept as JSON documents in a single key-value table.
"""

METADATA_TABLE = "photo_metadata"

METADATA_TABLE_SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {METADATA_TABLE} (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

ALL_SCHEMA_STATEMENTS = [METADATA_TABLE_SCHEMA]

REQUIRED_COLUMNS = {"key", "value"}


def get_schema_statements() -> list[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create tables
    """
    return ALL_SCHEMA_STATEMENTS
