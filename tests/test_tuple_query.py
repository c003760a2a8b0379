# ============================================================================
# TUPLE PROJECTION TESTS
# ============================================================================
# STATUS: Tests - Cursor rows to Tuple2 .. Tuple7
# PURPOSE: Verify arity checks, cardinality checks and positional binding
# CREATED: 13 OCT 2026
# ============================================================================
"""
Tuple Projection Tests

Runs select_one / select_all against real sqlite3 cursors, plus a fake
cursor yielding dict rows (psycopg dict_row shape).

Run with:
    pytest tests/test_tuple_query.py -v
"""

import sqlite3
from datetime import date

import pytest

from core.errors import ArityMismatchError, TooManyRowsError
from core.models.tuples import Tuple2, Tuple3, Tuple7
from repositories.tuple_query import select_all, select_one


@pytest.fixture
def db():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE address (id INTEGER PRIMARY KEY, street TEXT, zip_code TEXT)")
    conn.executemany(
        "INSERT INTO address (id, street, zip_code) VALUES (?, ?, ?)",
        [(1, "1 Main St", "12345"), (2, "2 Oak Ave", "54321")],
    )
    yield conn
    conn.close()


class FakeDictCursor:
    """Cursor returning mapping rows, like psycopg with dict_row."""

    def __init__(self, rows, columns):
        self._rows = list(rows)
        self.description = [(name, None, None, None, None, None, None) for name in columns]

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows


class TestSelectOne:
    def test_binds_positionally(self, db):
        cursor = db.execute("SELECT id, street FROM address WHERE id = 1")
        result = select_one(cursor, int, str)

        assert isinstance(result, Tuple2)
        assert result.value1 == 1
        assert result.value2 == "1 Main St"

    def test_zero_rows(self, db):
        cursor = db.execute("SELECT id, street FROM address WHERE id = 99")
        assert select_one(cursor, int, str) is None

    def test_too_many_rows(self, db):
        cursor = db.execute("SELECT id, street FROM address")
        with pytest.raises(TooManyRowsError):
            select_one(cursor, int, str)

    def test_arity_mismatch_with_rows(self, db):
        cursor = db.execute("SELECT id, street, zip_code FROM address WHERE id = 1")
        with pytest.raises(ArityMismatchError) as exc:
            select_one(cursor, int, str)
        assert (exc.value.expected, exc.value.actual) == (2, 3)

    def test_arity_mismatch_with_zero_rows(self, db):
        cursor = db.execute("SELECT id FROM address WHERE id = 99")
        with pytest.raises(ArityMismatchError):
            select_one(cursor, int, str)

    def test_no_coercion(self, db):
        cursor = db.execute("SELECT id, street FROM address WHERE id = 1")
        # Witness types are not applied to the values
        result = select_one(cursor, str, date)
        assert result.value1 == 1
        assert result.value2 == "1 Main St"

    def test_dict_rows_bound_in_column_order(self):
        cursor = FakeDictCursor([{"id": 7, "street": "7 Elm", "zip_code": "70000"}], ["id", "street", "zip_code"])
        result = select_one(cursor, int, str, str)
        assert isinstance(result, Tuple3)
        assert result == (7, "7 Elm", "70000")


class TestSelectAll:
    def test_all_rows_in_order(self, db):
        cursor = db.execute("SELECT id, street, zip_code FROM address ORDER BY id")
        rows = select_all(cursor, int, str, str)
        assert rows == [(1, "1 Main St", "12345"), (2, "2 Oak Ave", "54321")]
        assert rows[1].value3 == "54321"

    def test_zero_rows_is_empty_list(self, db):
        cursor = db.execute("SELECT id, street FROM address WHERE id > 10")
        assert select_all(cursor, int, str) == []

    def test_arity_mismatch(self, db):
        cursor = db.execute("SELECT id, street FROM address")
        with pytest.raises(ArityMismatchError):
            select_all(cursor, int, str, str)

    def test_seven_columns(self, db):
        cursor = db.execute("SELECT 1, 2, 3, 4, 5, 6, 7")
        rows = select_all(cursor, int, int, int, int, int, int, int)
        assert isinstance(rows[0], Tuple7)
        assert rows[0].value7 == 7

    def test_unsupported_arity(self, db):
        cursor = db.execute("SELECT id FROM address")
        with pytest.raises(ValueError):
            select_all(cursor, int)
