# ============================================================================
# CONNECTION ABSTRACTION
# ============================================================================
# STATUS: Infrastructure - Metadata / statement / query surface
# PURPOSE: Protocol implemented by every database backend
# CREATED: 09 OCT 2026
# EXPORTS: MetadataConnection, TableInfoRow, ColumnRow, PrimaryKeyRow,
#          ForeignKeyRow
# ============================================================================
"""
Connection Abstraction

The introspector, the DDL synthesizer and the query runner only talk to
this protocol. Backends (PostgreSQL, SQLite) translate their catalog into
the row types below; type names are normalised to the TypeMapper
vocabulary ("bigint", "varchar", "timestamp", ...) by the backend.

execute_query() yields a DB-API cursor. Rows may be tuples or mappings
(psycopg dict_row); consumers read positions in column order.
"""

from dataclasses import dataclass
from typing import Any, ContextManager, List, Optional, Protocol, Sequence, runtime_checkable


# ============================================================================
# METADATA ROWS
# ============================================================================

@dataclass(frozen=True)
class TableInfoRow:
    """Table-level metadata: the schema it really lives in, and its comment."""
    table_name: str
    schema_name: Optional[str] = None
    comment: Optional[str] = None


@dataclass(frozen=True)
class ColumnRow:
    """One column as listed by the catalog, in table order."""
    name: str
    type_name: str
    nullable: bool = True
    default_value: Optional[str] = None
    size: int = 0
    remarks: Optional[str] = None


@dataclass(frozen=True)
class PrimaryKeyRow:
    column_name: str


@dataclass(frozen=True)
class ForeignKeyRow:
    """Imported key: fk_table.fk_column references pk_table.pk_column."""
    pk_table: str
    pk_column: str
    fk_table: str
    fk_column: str


# ============================================================================
# PROTOCOL
# ============================================================================

@runtime_checkable
class MetadataConnection(Protocol):
    """Everything SchemaBridge needs from a database connection."""

    def get_table_info(self, table_name: str, schema_name: Optional[str] = None) -> Optional[TableInfoRow]:
        ...

    def list_columns(self, table_name: str, schema_name: Optional[str] = None) -> List[ColumnRow]:
        ...

    def list_primary_keys(self, table_name: str, schema_name: Optional[str] = None) -> List[PrimaryKeyRow]:
        ...

    def list_foreign_keys(self, table_name: str, schema_name: Optional[str] = None) -> List[ForeignKeyRow]:
        ...

    def list_tables(self, pattern: Optional[str] = None, schema_name: Optional[str] = None) -> List[str]:
        ...

    def list_schemas(self, pattern: Optional[str] = None) -> List[str]:
        ...

    def execute_statement(self, sql: str) -> None:
        ...

    def execute_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> ContextManager[Any]:
        ...


__all__ = [
    "MetadataConnection",
    "TableInfoRow",
    "ColumnRow",
    "PrimaryKeyRow",
    "ForeignKeyRow",
]
