# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# STATUS: Foundation - Exceptions raised by every component
# PURPOSE: Fatal, context-carrying errors (no local recovery anywhere)
# CREATED: 05 OCT 2026
# ============================================================================
"""
Error taxonomy.

Every error carries the table, field, SQL type or statement that failed.
None of these are retried or recovered inside SchemaBridge; the caller
owns transaction boundaries and retry policy.
"""

from typing import Optional


class SchemaBridgeError(Exception):
    """Base exception for SchemaBridge operations."""

    def __init__(self, message: str, operation: str = None, entity: str = None):
        self.operation = operation
        self.entity = entity
        super().__init__(message)


class ConnectivityError(SchemaBridgeError):
    """Raised when a metadata or query call fails against the connection."""

    def __init__(self, message: str, table_name: Optional[str] = None):
        self.table_name = table_name
        super().__init__(message, operation="introspection", entity=table_name)


class CatalogMetadataError(SchemaBridgeError):
    """Raised when catalog rows do not form a valid column description."""

    def __init__(self, table_name: str, column_name: str, reason: str):
        self.table_name = table_name
        self.column_name = column_name
        super().__init__(
            f"Invalid catalog metadata for {table_name}.{column_name}: {reason}",
            operation="introspection",
            entity=f"{table_name}.{column_name}",
        )


class UnsupportedTypeError(SchemaBridgeError):
    """Raised when a SQL type name has no code-side counterpart."""

    def __init__(self, sql_type: str, column_name: Optional[str] = None):
        self.sql_type = sql_type
        self.column_name = column_name
        where = f" (column '{column_name}')" if column_name else ""
        super().__init__(
            f"Unsupported SQL type: '{sql_type}'{where}",
            operation="type_mapping",
            entity=sql_type,
        )


class MissingSizeConstraintError(SchemaBridgeError):
    """Raised when a string field has no maximum length to size its column."""

    def __init__(self, field_name: Optional[str]):
        self.field_name = field_name
        super().__init__(
            f"String field '{field_name}' must declare a max_length "
            f"in order to generate a column definition",
            operation="type_mapping",
            entity=field_name,
        )


class DdlExecutionError(SchemaBridgeError):
    """Wraps a driver error raised while executing CREATE/DROP/ALTER."""

    def __init__(self, statement: str, table_name: str, cause: Exception):
        self.statement = statement
        self.table_name = table_name
        self.cause = cause
        super().__init__(
            f"DDL failed for table '{table_name}': {cause} | statement: {statement}",
            operation="ddl",
            entity=table_name,
        )


class ArityMismatchError(SchemaBridgeError):
    """Raised when a result's column count differs from the tuple arity."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Column count {actual} != {expected} for Tuple{expected}",
            operation="tuple_projection",
        )


class TooManyRowsError(SchemaBridgeError):
    """Raised when a single-row select produces more than one row."""

    def __init__(self, expected: int = 1):
        self.expected = expected
        super().__init__(
            f"Expected at most {expected} row but the query returned more",
            operation="select",
        )


class RecordDefinitionError(SchemaBridgeError):
    """Raised when a record declaration cannot be turned into DDL."""

    def __init__(self, record: str, message: str):
        self.record = record
        super().__init__(f"Record '{record}': {message}", operation="ddl", entity=record)


__all__ = [
    "SchemaBridgeError",
    "ConnectivityError",
    "CatalogMetadataError",
    "UnsupportedTypeError",
    "MissingSizeConstraintError",
    "DdlExecutionError",
    "ArityMismatchError",
    "TooManyRowsError",
    "RecordDefinitionError",
]
