# ============================================================================
# SCHEMA INTROSPECTOR
# ============================================================================
# STATUS: Infrastructure - Live table metadata to TableDescription
# PURPOSE: Four-pass catalog read (table, columns, primary keys, foreign keys)
# CREATED: 09 OCT 2026
# EXPORTS: SchemaIntrospector
# ============================================================================
"""
Schema Introspector

Builds a TableDescription from a MetadataConnection in four passes:

    1. table info     real schema name and table comment
    2. columns        one ColumnDescriptionBuilder per column, in order
    3. primary keys   mark builders whose name equals the key column
    4. foreign keys   mark builders whose name equals fk_column, pointing
                      at pk_table.pk_column

Key passes match names exactly (case-sensitive, as the catalog reports
them); no rows means nothing is marked. Builders are frozen into
ColumnDescriptions only after all four passes.

Anything a connection call raises is wrapped in ConnectivityError naming
the table. Rows that cannot form a valid ColumnDescription (a foreign key
whose referenced column the catalog could not name) raise
CatalogMetadataError naming the column. There is no retry.
"""

from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError

from core.errors import CatalogMetadataError, ConnectivityError, SchemaBridgeError
from core.logging import ComponentType, get_logger, log_context
from core.models.column import ColumnDescription, ColumnDescriptionBuilder
from core.models.table import TableDescription
from infrastructure.connection import MetadataConnection

logger = get_logger(__name__, ComponentType.INTROSPECTION)

T = TypeVar("T")


class SchemaIntrospector:
    """Read table metadata through a MetadataConnection."""

    def describe(
        self,
        connection: MetadataConnection,
        table_name: str,
        schema_name: Optional[str] = None,
    ) -> TableDescription:
        """
        Describe one table.

        Args:
            connection: Any MetadataConnection implementation
            table_name: Table to describe
            schema_name: Schema to look in (backend default when None)

        Returns:
            TableDescription with columns in database order

        Raises:
            ConnectivityError: The connection failed during any pass
            CatalogMetadataError: The catalog rows describe an invalid column
        """
        with log_context(table_name=table_name, schema_name=schema_name, operation="describe"):
            return self._describe(connection, table_name, schema_name)

    def _describe(
        self,
        connection: MetadataConnection,
        table_name: str,
        schema_name: Optional[str],
    ) -> TableDescription:
        info = self._call(table_name, "table info", connection.get_table_info, table_name, schema_name)
        if info is None:
            logger.warning(f"Table {table_name} not found in catalog")

        builders: List[ColumnDescriptionBuilder] = []
        by_name: Dict[str, ColumnDescriptionBuilder] = {}
        for row in self._call(table_name, "columns", connection.list_columns, table_name, schema_name):
            builder = ColumnDescriptionBuilder(
                name=row.name,
                sql_type=row.type_name,
                nullable=row.nullable,
                size=row.size,
                default_value=row.default_value,
                comment=row.remarks,
            )
            builders.append(builder)
            by_name[row.name] = builder
        logger.debug(f"Column pass: {len(builders)} columns")

        primary_keys = self._call(table_name, "primary keys", connection.list_primary_keys, table_name, schema_name)
        for row in primary_keys:
            builder = by_name.get(row.column_name)
            if builder is not None:
                builder.mark_primary_key()
        logger.debug(f"Primary key pass: {len(primary_keys)} rows")

        foreign_keys = self._call(table_name, "foreign keys", connection.list_foreign_keys, table_name, schema_name)
        for row in foreign_keys:
            builder = by_name.get(row.fk_column)
            if builder is not None:
                builder.mark_foreign_key(row.pk_table, row.pk_column)
        logger.debug(f"Foreign key pass: {len(foreign_keys)} rows")

        table = TableDescription(
            table_name=info.table_name if info else table_name,
            schema_name=info.schema_name if info and info.schema_name else schema_name,
            comment=info.comment if info else None,
            columns=tuple(self._build(table_name, b) for b in builders),
        )
        logger.info(
            f"Described {table.table_name}: {len(table.columns)} columns, "
            f"{len(table.primary_keys)} primary key, {len(table.foreign_keys)} foreign keys"
        )
        return table

    @staticmethod
    def _call(table_name: str, step: str, method: Callable[..., T], *args: Any) -> T:
        """Run one catalog call; driver errors become ConnectivityError."""
        try:
            return method(*args)
        except SchemaBridgeError:
            raise
        except Exception as e:
            logger.error(f"Introspection failed at {step}: {e}")
            raise ConnectivityError(f"Failed to describe table: {e}", table_name=table_name) from e

    @staticmethod
    def _build(table_name: str, builder: ColumnDescriptionBuilder) -> ColumnDescription:
        try:
            return builder.build()
        except ValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors())
            logger.error(f"Column {builder.name} rejected: {reason}")
            raise CatalogMetadataError(table_name, builder.name, reason) from e

    # =========================================================================
    # LISTING
    # =========================================================================

    def list_tables(
        self,
        connection: MetadataConnection,
        pattern: Optional[str] = None,
        schema_name: Optional[str] = None,
    ) -> List[str]:
        """Table names matching a LIKE pattern (all tables when None)."""
        with log_context(schema_name=schema_name, operation="list_tables"):
            try:
                return connection.list_tables(pattern, schema_name)
            except SchemaBridgeError:
                raise
            except Exception as e:
                raise ConnectivityError(f"Failed to list tables: {e}") from e

    def list_schemas(self, connection: MetadataConnection, pattern: Optional[str] = None) -> List[str]:
        """Schema names matching a LIKE pattern (all schemas when None)."""
        with log_context(operation="list_schemas"):
            try:
                return connection.list_schemas(pattern)
            except SchemaBridgeError:
                raise
            except Exception as e:
                raise ConnectivityError(f"Failed to list schemas: {e}") from e

    def table_exists(
        self,
        connection: MetadataConnection,
        table_name: str,
        schema_name: Optional[str] = None,
    ) -> bool:
        with log_context(table_name=table_name, schema_name=schema_name, operation="table_exists"):
            try:
                return connection.get_table_info(table_name, schema_name) is not None
            except SchemaBridgeError:
                raise
            except Exception as e:
                raise ConnectivityError(f"Failed to look up table: {e}", table_name=table_name) from e


__all__ = ["SchemaIntrospector"]
