# ============================================================================
# SCHEMA INTROSPECTOR TESTS
# ============================================================================
# STATUS: Tests - Catalog metadata to TableDescription
# PURPOSE: Verify the four introspection passes and connection error handling
# CREATED: 13 OCT 2026
# ============================================================================
"""
Schema Introspector Tests

Unit tests for:
- Column pass order and attributes
- Primary / foreign key marking (exact, case-sensitive matches only)
- Zero key rows is not an error
- Connection failures wrapped as ConnectivityError
- Invalid catalog rows reported per column, not as connectivity failures
- SQLite backend: PRAGMA parsing, declared type sizes, listings
- PostgreSQL backend: udt_name normalisation (no server needed)

Run with:
    pytest tests/test_introspection.py -v
"""

from unittest.mock import MagicMock

import pytest

from core.errors import CatalogMetadataError, ConnectivityError
from infrastructure.connection import ColumnRow, ForeignKeyRow, PrimaryKeyRow, TableInfoRow
from infrastructure.introspection import SchemaIntrospector
from infrastructure.postgresql import PostgreSQLRepository, normalize_type_name
from infrastructure.sqlite import SQLiteRepository, split_declared_type


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def connection():
    """Fake MetadataConnection describing the listing table."""
    conn = MagicMock()
    conn.get_table_info.return_value = TableInfoRow("listing", "sales", "Houses for sale")
    conn.list_columns.return_value = [
        ColumnRow("id", "bigint", nullable=False, size=19),
        ColumnRow("price", "double", nullable=False, size=17),
        ColumnRow("title", "varchar", size=80, remarks="Headline"),
        ColumnRow("address_id", "bigint", size=19),
    ]
    conn.list_primary_keys.return_value = [PrimaryKeyRow("id")]
    conn.list_foreign_keys.return_value = [ForeignKeyRow("address", "id", "listing", "address_id")]
    return conn


@pytest.fixture
def introspector():
    return SchemaIntrospector()


# ============================================================================
# PASSES
# ============================================================================


class TestDescribe:
    def test_table_info(self, introspector, connection):
        table = introspector.describe(connection, "listing")
        assert table.table_name == "listing"
        assert table.schema_name == "sales"
        assert table.comment == "Houses for sale"

    def test_columns_in_order(self, introspector, connection):
        table = introspector.describe(connection, "listing")
        assert table.column_names == ["id", "price", "title", "address_id"]

        title = table.get_column("title")
        assert title.sql_type == "varchar"
        assert title.size == 80
        assert title.nullable is True
        assert title.comment == "Headline"

    def test_exactly_key_columns_marked(self, introspector, connection):
        table = introspector.describe(connection, "listing")

        assert [c.name for c in table.primary_keys] == ["id"]
        assert [c.name for c in table.foreign_keys] == ["address_id"]

        address_id = table.get_column("address_id")
        assert address_id.referenced_table == "address"
        assert address_id.referenced_column == "id"

        for name in ("price", "title"):
            column = table.get_column(name)
            assert not column.primary_key and not column.foreign_key

    def test_no_key_rows(self, introspector, connection):
        connection.list_primary_keys.return_value = []
        connection.list_foreign_keys.return_value = []

        table = introspector.describe(connection, "listing")
        assert table.primary_keys == []
        assert table.foreign_keys == []

    def test_key_match_is_case_sensitive(self, introspector, connection):
        connection.list_primary_keys.return_value = [PrimaryKeyRow("ID")]
        table = introspector.describe(connection, "listing")
        assert table.primary_keys == []

    def test_schema_passed_through(self, introspector, connection):
        introspector.describe(connection, "listing", "sales")
        connection.list_columns.assert_called_once_with("listing", "sales")
        connection.list_foreign_keys.assert_called_once_with("listing", "sales")

    def test_connection_failure_wrapped(self, introspector, connection):
        connection.list_columns.side_effect = OSError("connection reset")

        with pytest.raises(ConnectivityError) as exc:
            introspector.describe(connection, "listing")

        assert exc.value.table_name == "listing"
        assert isinstance(exc.value.__cause__, OSError)

    def test_listing_failure_wrapped(self, introspector, connection):
        connection.list_tables.side_effect = RuntimeError("gone")
        with pytest.raises(ConnectivityError):
            introspector.list_tables(connection)

    def test_unnamed_referenced_column_is_not_connectivity(self, introspector, connection):
        connection.list_foreign_keys.return_value = [ForeignKeyRow("address", None, "listing", "address_id")]

        with pytest.raises(CatalogMetadataError) as exc:
            introspector.describe(connection, "listing")

        assert not isinstance(exc.value, ConnectivityError)
        assert exc.value.table_name == "listing"
        assert exc.value.column_name == "address_id"
        assert "no referenced table/column" in str(exc.value)


# ============================================================================
# SQLITE BACKEND
# ============================================================================


@pytest.fixture
def sqlite_repo():
    repo = SQLiteRepository()
    repo.execute_statement(
        "CREATE TABLE address (id BIGINT NOT NULL PRIMARY KEY, street VARCHAR(100) NOT NULL, zip_code VARCHAR(10))"
    )
    repo.execute_statement(
        "CREATE TABLE listing ("
        " id BIGINT NOT NULL PRIMARY KEY,"
        " price DECIMAL(10, 2) DEFAULT 0,"
        " address_id BIGINT,"
        " FOREIGN KEY(address_id) REFERENCES address)"
    )
    yield repo
    repo.close()


class TestSqliteIntrospection:
    def test_describe_address(self, introspector, sqlite_repo):
        table = introspector.describe(sqlite_repo, "address")

        assert table.schema_name == "main"
        assert [(c.name, c.sql_type, c.size) for c in table.columns] == [
            ("id", "bigint", 0),
            ("street", "varchar", 100),
            ("zip_code", "varchar", 10),
        ]
        assert table.get_column("street").nullable is False
        assert table.get_column("zip_code").nullable is True
        assert [c.name for c in table.primary_keys] == ["id"]
        assert table.foreign_keys == []

    def test_foreign_key_to_implicit_primary_key(self, introspector, sqlite_repo):
        table = introspector.describe(sqlite_repo, "listing")
        address_id = table.get_column("address_id")
        assert address_id.foreign_key
        assert (address_id.referenced_table, address_id.referenced_column) == ("address", "id")

    def test_default_and_precision(self, introspector, sqlite_repo):
        price = introspector.describe(sqlite_repo, "listing").get_column("price")
        assert price.sql_type == "decimal"
        assert price.size == 10
        assert price.default_value == "0"

    def test_listings(self, introspector, sqlite_repo):
        assert introspector.list_tables(sqlite_repo) == ["address", "listing"]
        assert introspector.list_tables(sqlite_repo, "list%") == ["listing"]
        assert introspector.list_schemas(sqlite_repo)[0] == "main"
        assert introspector.list_schemas(sqlite_repo, "ma%") == ["main"]
        assert introspector.table_exists(sqlite_repo, "address")
        assert not introspector.table_exists(sqlite_repo, "agent")

    def test_missing_table_has_no_columns(self, introspector, sqlite_repo):
        table = introspector.describe(sqlite_repo, "agent")
        assert table.columns == ()

    def test_foreign_key_to_table_without_primary_key(self, introspector, sqlite_repo):
        sqlite_repo.execute_statement("CREATE TABLE tag (label VARCHAR(20))")
        sqlite_repo.execute_statement("CREATE TABLE note (id BIGINT PRIMARY KEY, tag_id BIGINT REFERENCES tag)")

        with pytest.raises(CatalogMetadataError) as exc:
            introspector.describe(sqlite_repo, "note")
        assert exc.value.column_name == "tag_id"

    @pytest.mark.parametrize("declared,expected", [
        ("VARCHAR(50)", ("varchar", 50)),
        ("DECIMAL(10, 2)", ("decimal", 10)),
        ("BIGINT", ("bigint", 0)),
        ("double precision", ("double precision", 0)),
        ("", ("", 0)),
    ])
    def test_split_declared_type(self, declared, expected):
        assert split_declared_type(declared) == expected


# ============================================================================
# POSTGRESQL BACKEND
# ============================================================================


class TestPostgresRepository:
    @pytest.mark.parametrize("udt_name,expected", [
        ("int8", "bigint"),
        ("int4", "integer"),
        ("float8", "double"),
        ("bpchar", "char"),
        ("timestamptz", "timestamp"),
        ("varchar", "varchar"),
        ("geometry", "geometry"),
    ])
    def test_normalize_type_name(self, udt_name, expected):
        assert normalize_type_name(udt_name) == expected

    def test_columns_from_catalog_rows(self, monkeypatch):
        repo = PostgreSQLRepository("postgresql://u:p@localhost/db")
        rows = [
            {"column_name": "id", "udt_name": "int8", "is_nullable": "NO",
             "column_default": None, "size": 64, "remarks": None},
            {"column_name": "street", "udt_name": "varchar", "is_nullable": "YES",
             "column_default": None, "size": 100, "remarks": "Street line"},
        ]
        fetch_all = MagicMock(return_value=rows)
        monkeypatch.setattr(repo, "fetch_all", fetch_all)

        columns = repo.list_columns("address")

        assert columns == [
            ColumnRow("id", "bigint", nullable=False, default_value=None, size=64, remarks=None),
            ColumnRow("street", "varchar", nullable=True, default_value=None, size=100, remarks="Street line"),
        ]
        # Default schema applied
        assert fetch_all.call_args.args[1] == ("public", "address")

    def test_connection_string_from_environment(self, monkeypatch):
        from core.config import reset_defaults

        monkeypatch.setenv("DATABASE_URL", "postgresql://env:secret@db/app")
        reset_defaults()
        try:
            assert PostgreSQLRepository().conn_string == "postgresql://env:secret@db/app"
        finally:
            reset_defaults()
