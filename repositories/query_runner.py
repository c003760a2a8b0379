# ============================================================================
# QUERY RUNNER
# ============================================================================
# STATUS: Repository - Ad-hoc SQL against a MetadataConnection
# PURPOSE: Rows, maps, scalars and typed tuples, with optional caching
# CREATED: 10 OCT 2026
# EXPORTS: QueryRunner
# ============================================================================
"""
Query Runner

Thin statement executor over MetadataConnection.execute_query():

    runner = QueryRunner(repo, cache=QueryCache(default_ttl=30))
    runner.select_rows("SELECT id, street FROM address")
    runner.select_map("SELECT * FROM address WHERE id = ?", [7])
    runner.select_tuple("SELECT id, street FROM address WHERE id = ?", (int, str), [7])
    runner.execute("DELETE FROM address WHERE id = ?", [7])

Bind placeholders are the backend's own (`?` for SQLite, `%s` for
psycopg). Single-row variants return None for no rows and raise
TooManyRowsError for more than one.

Caching: with a QueryCache injected, reads are memoized under
(sql, params, projection). `nocache=True` skips lookup and store for one
call. execute() is never cached and does not invalidate.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Tuple

from core.errors import TooManyRowsError
from core.logging import ComponentType, get_logger, log_context
from infrastructure.connection import MetadataConnection
from repositories.query_cache import QueryCache
from repositories.tuple_query import select_all, select_one

logger = get_logger(__name__, ComponentType.QUERY)


def _row_values(row: Any) -> tuple:
    return tuple(row.values()) if isinstance(row, Mapping) else tuple(row)


def _column_names(cursor: Any) -> List[str]:
    return [d[0] for d in cursor.description or ()]


class QueryRunner:
    """
    Execute SQL and project results.

    Args:
        connection: Backend providing execute_query()
        cache: Optional QueryCache shared between runners
        ttl_seconds: TTL for entries this runner stores (cache default when None)
    """

    def __init__(
        self,
        connection: MetadataConnection,
        cache: Optional[QueryCache] = None,
        ttl_seconds: Optional[float] = None,
    ):
        self.connection = connection
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    # =========================================================================
    # TUPLES
    # =========================================================================

    def select_tuple(
        self,
        sql: str,
        types: Sequence[type],
        params: Optional[Sequence[Any]] = None,
        nocache: bool = False,
    ) -> Optional[Any]:
        """Single row as a Tuple2 .. Tuple7 (see repositories.tuple_query)."""
        def compute(cursor):
            return select_one(cursor, *types)
        return self._read("tuple", sql, params, nocache, compute)

    def select_tuple_list(
        self,
        sql: str,
        types: Sequence[type],
        params: Optional[Sequence[Any]] = None,
        nocache: bool = False,
    ) -> List[Any]:
        def compute(cursor):
            return select_all(cursor, *types)
        return self._read("tuple_list", sql, params, nocache, compute)

    # =========================================================================
    # ROWS & MAPS
    # =========================================================================

    def select_row(self, sql: str, params: Optional[Sequence[Any]] = None, nocache: bool = False) -> Optional[tuple]:
        return self._single(self.select_rows(sql, params, nocache))

    def select_rows(self, sql: str, params: Optional[Sequence[Any]] = None, nocache: bool = False) -> List[tuple]:
        def compute(cursor):
            return [_row_values(row) for row in cursor.fetchall()]
        return self._read("rows", sql, params, nocache, compute)

    def select_map(
        self, sql: str, params: Optional[Sequence[Any]] = None, nocache: bool = False
    ) -> Optional[Dict[str, Any]]:
        return self._single(self.select_map_list(sql, params, nocache))

    def select_map_list(
        self, sql: str, params: Optional[Sequence[Any]] = None, nocache: bool = False
    ) -> List[Dict[str, Any]]:
        """Rows as column name -> value dicts, in column order."""
        def compute(cursor):
            names = _column_names(cursor)
            return [dict(zip(names, _row_values(row))) for row in cursor.fetchall()]
        return self._read("maps", sql, params, nocache, compute)

    # =========================================================================
    # SCALARS
    # =========================================================================

    def select_value(self, sql: str, params: Optional[Sequence[Any]] = None, nocache: bool = False) -> Any:
        """First column of the only row (None for no rows)."""
        row = self.select_row(sql, params, nocache)
        return None if row is None else row[0]

    def select_values(self, sql: str, params: Optional[Sequence[Any]] = None, nocache: bool = False) -> List[Any]:
        """First column of every row."""
        def compute(cursor):
            return [_row_values(row)[0] for row in cursor.fetchall()]
        return self._read("values", sql, params, nocache, compute)

    # =========================================================================
    # STATEMENTS
    # =========================================================================

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> int:
        """Run an INSERT / UPDATE / DELETE and return the affected row count."""
        with log_context(operation="execute"):
            with self.connection.execute_query(sql, params) as cursor:
                count = cursor.rowcount
            logger.debug(f"Executed statement, {count} rows affected")
        return count

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _single(rows: List[Any]) -> Optional[Any]:
        if len(rows) > 1:
            raise TooManyRowsError()
        return rows[0] if rows else None

    @staticmethod
    def _cache_key(kind: str, sql: str, params: Optional[Sequence[Any]]) -> Tuple[str, Hashable, str]:
        return sql, tuple(params or ()), kind

    def _read(
        self,
        kind: str,
        sql: str,
        params: Optional[Sequence[Any]],
        nocache: bool,
        compute: Callable[[Any], Any],
    ) -> Any:
        use_cache = self.cache is not None and not nocache
        key = self._cache_key(kind, sql, params)
        if use_cache:
            hit, value = self.cache.get(key)
            if hit:
                logger.debug(f"Cache hit ({kind})")
                return value

        with log_context(operation=f"select_{kind}"):
            with self.connection.execute_query(sql, params) as cursor:
                value = compute(cursor)

        if use_cache:
            self.cache.put(key, value, self.ttl_seconds)
        return value


__all__ = ["QueryRunner"]
