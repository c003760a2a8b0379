# ============================================================================
# QUERY RUNNER & CACHE TESTS
# ============================================================================
# STATUS: Tests - Statement executor and TTL query cache
# PURPOSE: Verify projections, cardinality errors and cache behaviour
# CREATED: 13 OCT 2026
# ============================================================================
"""
Query Runner Tests

Unit tests for:
- QueryCache: hits, expiry, per-entry TTL, invalidation
- QueryRunner: rows, maps, scalars, tuples, execute
- Cache use, nocache bypass, key includes bind values

Run with:
    pytest tests/test_query_runner.py -v
"""

import pytest

from core.config import reset_defaults
from core.errors import TooManyRowsError
from infrastructure.sqlite import SQLiteRepository
from repositories import QueryCache, QueryRunner


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repo():
    repo = SQLiteRepository()
    repo.execute_statement("CREATE TABLE address (id INTEGER PRIMARY KEY, street VARCHAR(100), zip_code VARCHAR(10))")
    repo.execute_statement("INSERT INTO address VALUES (1, '1 Main St', '12345')")
    repo.execute_statement("INSERT INTO address VALUES (2, '2 Oak Ave', '54321')")
    yield repo
    repo.close()


# ============================================================================
# CACHE
# ============================================================================


class TestQueryCache:
    def test_miss_then_hit(self, clock):
        cache = QueryCache(default_ttl=10, clock=clock)
        assert cache.get("k") == (False, None)

        cache.put("k", [1, 2])
        assert cache.get("k") == (True, [1, 2])

    def test_cached_none_is_a_hit(self, clock):
        cache = QueryCache(default_ttl=10, clock=clock)
        cache.put("k", None)
        assert cache.get("k") == (True, None)

    def test_expiry_evicts_on_read(self, clock):
        cache = QueryCache(default_ttl=10, clock=clock)
        cache.put("k", "v")

        clock.now = 10.0
        assert cache.get("k") == (True, "v")

        clock.now = 10.5
        assert cache.get("k") == (False, None)
        assert len(cache) == 0

    def test_per_entry_ttl(self, clock):
        cache = QueryCache(default_ttl=10, clock=clock)
        cache.put("short", 1, ttl=1)
        cache.put("long", 2)

        clock.now = 5
        assert cache.get("short") == (False, None)
        assert cache.get("long") == (True, 2)

    def test_non_positive_ttl_not_stored(self, clock):
        cache = QueryCache(default_ttl=0, clock=clock)
        cache.put("k", "v")
        assert len(cache) == 0

    def test_invalidate_and_clear(self, clock):
        cache = QueryCache(default_ttl=10, clock=clock)
        cache.put("a", 1)
        cache.put("b", 2)

        cache.invalidate("a")
        cache.invalidate("missing")
        assert cache.get("a") == (False, None)

        cache.clear()
        assert len(cache) == 0


# ============================================================================
# RUNNER
# ============================================================================


class TestQueryRunner:
    def test_rows_and_row(self, repo):
        runner = QueryRunner(repo)
        assert runner.select_rows("SELECT id, street FROM address ORDER BY id") == [
            (1, "1 Main St"),
            (2, "2 Oak Ave"),
        ]
        assert runner.select_row("SELECT id FROM address WHERE id = ?", [2]) == (2,)
        assert runner.select_row("SELECT id FROM address WHERE id = ?", [9]) is None

    def test_single_row_variants_reject_many(self, repo):
        runner = QueryRunner(repo)
        with pytest.raises(TooManyRowsError):
            runner.select_row("SELECT id FROM address")
        with pytest.raises(TooManyRowsError):
            runner.select_map("SELECT id FROM address")
        with pytest.raises(TooManyRowsError):
            runner.select_value("SELECT id FROM address")

    def test_maps(self, repo):
        runner = QueryRunner(repo)
        assert runner.select_map("SELECT id, zip_code FROM address WHERE id = 1") == {"id": 1, "zip_code": "12345"}
        assert [m["street"] for m in runner.select_map_list("SELECT * FROM address ORDER BY id")] == [
            "1 Main St",
            "2 Oak Ave",
        ]

    def test_scalars(self, repo):
        runner = QueryRunner(repo)
        assert runner.select_value("SELECT COUNT(*) FROM address") == 2
        assert runner.select_value("SELECT id FROM address WHERE id = 9") is None
        assert runner.select_values("SELECT zip_code FROM address ORDER BY id") == ["12345", "54321"]

    def test_tuples(self, repo):
        runner = QueryRunner(repo)
        pair = runner.select_tuple("SELECT id, street FROM address WHERE id = ?", (int, str), [1])
        assert (pair.value1, pair.value2) == (1, "1 Main St")

        triples = runner.select_tuple_list("SELECT id, street, zip_code FROM address ORDER BY id", (int, str, str))
        assert [t.value3 for t in triples] == ["12345", "54321"]

    def test_execute_returns_rowcount(self, repo):
        runner = QueryRunner(repo)
        assert runner.execute("UPDATE address SET zip_code = ?", ["00000"]) == 2
        assert runner.select_values("SELECT DISTINCT zip_code FROM address") == ["00000"]


class TestQueryRunnerCache:
    def test_reads_served_from_cache(self, repo, clock):
        runner = QueryRunner(repo, cache=QueryCache(default_ttl=60, clock=clock))
        sql = "SELECT street FROM address WHERE id = ?"

        assert runner.select_value(sql, [1]) == "1 Main St"
        repo.execute_statement("UPDATE address SET street = 'changed' WHERE id = 1")

        assert runner.select_value(sql, [1]) == "1 Main St"
        assert runner.select_value(sql, [1], nocache=True) == "changed"

    def test_entries_expire(self, repo, clock):
        runner = QueryRunner(repo, cache=QueryCache(default_ttl=60, clock=clock), ttl_seconds=5)
        sql = "SELECT street FROM address WHERE id = 1"

        runner.select_value(sql)
        repo.execute_statement("UPDATE address SET street = 'changed' WHERE id = 1")

        clock.now = 6
        assert runner.select_value(sql) == "changed"

    def test_key_includes_bind_values_and_projection(self, repo, clock):
        cache = QueryCache(default_ttl=60, clock=clock)
        runner = QueryRunner(repo, cache=cache)
        sql = "SELECT id, street FROM address WHERE id = ?"

        assert runner.select_row(sql, [1]) == (1, "1 Main St")
        assert runner.select_row(sql, [2]) == (2, "2 Oak Ave")
        assert runner.select_map(sql, [1]) == {"id": 1, "street": "1 Main St"}
        assert len(cache) == 3

    def test_nocache_does_not_store(self, repo, clock):
        cache = QueryCache(default_ttl=60, clock=clock)
        runner = QueryRunner(repo, cache=cache)
        runner.select_rows("SELECT id FROM address", nocache=True)
        assert len(cache) == 0

    def test_no_cache_injected(self, repo):
        runner = QueryRunner(repo)
        runner.select_value("SELECT street FROM address WHERE id = 1")
        repo.execute_statement("UPDATE address SET street = 'changed' WHERE id = 1")
        assert runner.select_value("SELECT street FROM address WHERE id = 1") == "changed"


class TestConfiguredTtl:
    """QueryCache() without a TTL takes QUERY_CACHE_TTL_SECONDS."""

    @pytest.fixture(autouse=True)
    def fresh_defaults(self):
        reset_defaults()
        yield
        reset_defaults()

    def test_zero_ttl_disables_caching(self, repo, clock, monkeypatch):
        monkeypatch.setenv("QUERY_CACHE_TTL_SECONDS", "0")
        reset_defaults()

        cache = QueryCache(clock=clock)
        runner = QueryRunner(repo, cache=cache)
        runner.select_value("SELECT street FROM address WHERE id = 1")

        assert cache.default_ttl == 0
        assert len(cache) == 0

    def test_configured_ttl_used(self, repo, clock, monkeypatch):
        monkeypatch.setenv("QUERY_CACHE_TTL_SECONDS", "5")
        reset_defaults()

        runner = QueryRunner(repo, cache=QueryCache(clock=clock))
        sql = "SELECT street FROM address WHERE id = 1"
        runner.select_value(sql)
        repo.execute_statement("UPDATE address SET street = 'changed' WHERE id = 1")

        clock.now = 4
        assert runner.select_value(sql) == "1 Main St"
        clock.now = 6
        assert runner.select_value(sql) == "changed"

    def test_explicit_ttl_overrides_environment(self, clock, monkeypatch):
        monkeypatch.setenv("QUERY_CACHE_TTL_SECONDS", "0")
        reset_defaults()
        assert QueryCache(default_ttl=30, clock=clock).default_ttl == 30
