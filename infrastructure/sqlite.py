# ============================================================================
# SQLITE CONNECTION INFRASTRUCTURE
# ============================================================================
# STATUS: Infrastructure - SQLite connection handling
# PURPOSE: MetadataConnection over the sqlite3 catalog (PRAGMAs)
# CREATED: 09 OCT 2026
# ============================================================================
"""
SQLite Connection Infrastructure

Implements the MetadataConnection protocol for a single sqlite3
connection (file or ":memory:"). Used for local schema round trips and
in tests, where a real cursor and real catalog are wanted without a
server.

Catalog sources:
- tables:       sqlite_master
- columns:      PRAGMA table_info - the declared type "VARCHAR(50)" is
                split into type name "varchar" and size 50
- primary keys: PRAGMA table_info rows with pk > 0, in key order
- foreign keys: PRAGMA foreign_key_list (a missing "to" column means the
                referenced table's primary key)

SQLite has no table or column comments.
"""

import logging
import re
import sqlite3
from contextlib import closing, contextmanager
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from infrastructure.connection import ColumnRow, ForeignKeyRow, PrimaryKeyRow, TableInfoRow

logger = logging.getLogger(__name__)

DECLARED_TYPE = re.compile(r"^\s*([A-Za-z][A-Za-z ]*?)\s*(?:\(\s*(\d+)\s*(?:,\s*\d+\s*)?\))?\s*$")


def split_declared_type(declared: str) -> Tuple[str, int]:
    """
    Split a declared column type into (type name, size).

    "VARCHAR(50)" -> ("varchar", 50), "DECIMAL(10, 2)" -> ("decimal", 10),
    "BIGINT" -> ("bigint", 0). Anything unparseable is returned lowercased
    with size 0.
    """
    match = DECLARED_TYPE.match(declared or "")
    if not match:
        return (declared or "").strip().lower(), 0
    return match.group(1).lower(), int(match.group(2) or 0)


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SQLiteRepository:
    """
    SQLite implementation of MetadataConnection.

    Owns one sqlite3 connection; use as a context manager or call close().

    Usage:
        with SQLiteRepository("app.db") as repo:
            repo.execute_statement("CREATE TABLE t (id INTEGER PRIMARY KEY)")
            repo.list_tables()
    """

    def __init__(self, path: str = ":memory:", connection: Optional[sqlite3.Connection] = None):
        self.path = path
        self._conn = connection or sqlite3.connect(path)
        self._conn.execute("PRAGMA foreign_keys = ON")
        logger.debug(f"SQLite connection opened: {path}")

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SQLiteRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def execute_statement(self, sql: str) -> None:
        """Run one statement and commit."""
        with closing(self._conn.cursor()) as cursor:
            cursor.execute(sql)
        self._conn.commit()

    @contextmanager
    def execute_query(self, sql: str, params: Optional[Sequence[Any]] = None) -> Iterator[sqlite3.Cursor]:
        """Execute a query and yield the cursor; commits when the block exits cleanly."""
        with closing(self._conn.cursor()) as cursor:
            cursor.execute(sql, tuple(params or ()))
            yield cursor
        self._conn.commit()

    def _fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        with closing(self._conn.cursor()) as cursor:
            cursor.execute(sql, tuple(params))
            return cursor.fetchall()

    @staticmethod
    def _prefix(schema_name: Optional[str]) -> str:
        return f"{quote_identifier(schema_name)}." if schema_name else ""

    # =========================================================================
    # METADATA
    # =========================================================================

    def get_table_info(self, table_name: str, schema_name: Optional[str] = None) -> Optional[TableInfoRow]:
        rows = self._fetch_all(
            f"SELECT name FROM {self._prefix(schema_name)}sqlite_master "
            f"WHERE type IN ('table', 'view') AND name = ?",
            (table_name,),
        )
        if not rows:
            return None
        return TableInfoRow(table_name=rows[0][0], schema_name=schema_name or "main", comment=None)

    def list_columns(self, table_name: str, schema_name: Optional[str] = None) -> List[ColumnRow]:
        # cid, name, type, notnull, dflt_value, pk
        rows = self._fetch_all(f"PRAGMA {self._prefix(schema_name)}table_info({quote_identifier(table_name)})")
        columns = []
        for _, name, declared, notnull, default_value, _ in rows:
            type_name, size = split_declared_type(declared)
            columns.append(
                ColumnRow(
                    name=name,
                    type_name=type_name,
                    nullable=not notnull,
                    default_value=None if default_value is None else str(default_value),
                    size=size,
                    remarks=None,
                )
            )
        logger.debug(f"{len(columns)} columns listed for {table_name}")
        return columns

    def list_primary_keys(self, table_name: str, schema_name: Optional[str] = None) -> List[PrimaryKeyRow]:
        rows = self._fetch_all(f"PRAGMA {self._prefix(schema_name)}table_info({quote_identifier(table_name)})")
        keyed = sorted((row[5], row[1]) for row in rows if row[5] > 0)
        return [PrimaryKeyRow(column_name=name) for _, name in keyed]

    def list_foreign_keys(self, table_name: str, schema_name: Optional[str] = None) -> List[ForeignKeyRow]:
        # id, seq, table, from, to, on_update, on_delete, match
        rows = self._fetch_all(
            f"PRAGMA {self._prefix(schema_name)}foreign_key_list({quote_identifier(table_name)})"
        )
        keys = []
        for row in rows:
            pk_table, fk_column, pk_column = row[2], row[3], row[4]
            if pk_column is None:
                referenced = self.list_primary_keys(pk_table, schema_name)
                pk_column = referenced[0].column_name if referenced else None
            keys.append(
                ForeignKeyRow(pk_table=pk_table, pk_column=pk_column, fk_table=table_name, fk_column=fk_column)
            )
        return keys

    def list_tables(self, pattern: Optional[str] = None, schema_name: Optional[str] = None) -> List[str]:
        rows = self._fetch_all(
            f"SELECT name FROM {self._prefix(schema_name)}sqlite_master "
            f"WHERE type = 'table' AND name NOT LIKE 'sqlite_%' AND name LIKE ? ORDER BY name",
            (pattern or "%",),
        )
        return [row[0] for row in rows]

    def list_schemas(self, pattern: Optional[str] = None) -> List[str]:
        rows = self._fetch_all(
            "SELECT name FROM pragma_database_list WHERE name LIKE ? ORDER BY seq",
            (pattern or "%",),
        )
        return [row[0] for row in rows]


__all__ = ["SQLiteRepository", "split_declared_type", "quote_identifier"]
