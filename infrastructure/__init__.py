# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# STATUS: Infrastructure - Database connections and catalog metadata
# PURPOSE: MetadataConnection backends and the schema introspector
# CREATED: 09 OCT 2026
# ============================================================================
"""
Infrastructure module for SchemaBridge.

Provides:
- MetadataConnection: protocol every backend implements
- PostgreSQLRepository: psycopg 3 backend (information_schema)
- SQLiteRepository: sqlite3 backend (PRAGMAs)
- SchemaIntrospector: TableDescription from a live table

Usage:
    from infrastructure import PostgreSQLRepository, SchemaIntrospector

    repo = PostgreSQLRepository()
    table = SchemaIntrospector().describe(repo, "listing", "public")
"""

from infrastructure.connection import (
    MetadataConnection,
    TableInfoRow,
    ColumnRow,
    PrimaryKeyRow,
    ForeignKeyRow,
)
from infrastructure.postgresql import PostgreSQLRepository
from infrastructure.sqlite import SQLiteRepository
from infrastructure.introspection import SchemaIntrospector

__all__ = [
    # Connection protocol
    'MetadataConnection',
    'TableInfoRow',
    'ColumnRow',
    'PrimaryKeyRow',
    'ForeignKeyRow',
    # Backends
    'PostgreSQLRepository',
    'SQLiteRepository',
    # Introspection
    'SchemaIntrospector',
]
