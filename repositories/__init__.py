# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Core - Query access layer
# PURPOSE: Typed tuple projection, query runner and query cache
# CREATED: 10 OCT 2026
# ============================================================================
"""
Repositories Module

Runs ad-hoc SQL through a MetadataConnection and projects the results.

Usage:
    from repositories import QueryRunner, QueryCache, select_one

    runner = QueryRunner(repo, cache=QueryCache(default_ttl=30))
    pair = runner.select_tuple("SELECT id, street FROM address WHERE id = ?", (int, str), [7])
"""

from .tuple_query import select_one, select_all, bind_row
from .query_cache import QueryCache
from .query_runner import QueryRunner

__all__ = [
    "select_one",
    "select_all",
    "bind_row",
    "QueryCache",
    "QueryRunner",
]
