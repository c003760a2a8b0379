# ============================================================================
# CLI TESTS
# ============================================================================
# STATUS: Tests - argparse front end
# PURPOSE: Verify subcommand wiring, dry-run DDL and exit codes
# CREATED: 14 OCT 2026
# ============================================================================
"""
CLI Tests

Drives main() with argv lists against SQLite files in tmp_path.

Run with:
    pytest tests/test_cli.py -v
"""

import argparse
import json
import logging
import sys
import textwrap

import pytest

from core.contracts import RelationshipKind
from infrastructure.sqlite import SQLiteRepository
from main import build_parser, main, parse_directive


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def database(tmp_path):
    path = tmp_path / "app.db"
    with SQLiteRepository(str(path)) as repo:
        repo.execute_statement(
            "CREATE TABLE address (id BIGINT NOT NULL PRIMARY KEY, street VARCHAR(100) NOT NULL, zip_code VARCHAR(10))"
        )
        repo.execute_statement("CREATE TABLE shape (id BIGINT NOT NULL PRIMARY KEY, geom GEOMETRY)")
    return path


@pytest.fixture
def records_package(tmp_path, monkeypatch):
    package = tmp_path / "cli_records"
    package.mkdir()
    (package / "__init__.py").write_text("")
    (package / "address.py").write_text(textwrap.dedent('''
        from typing import ClassVar, List, Optional
        from pydantic import BaseModel, Field
        from core.contracts import Long

        class Address(BaseModel):
            __sql_table__: ClassVar[str] = "address"
            __sql_primary_key__: ClassVar[List[str]] = ["id"]

            id: Optional[Long] = None
            street: str = Field(..., max_length=100)
    '''))
    monkeypatch.setattr(sys, "path", list(sys.path))
    yield tmp_path
    for name in [m for m in sys.modules if m.startswith("cli_records")]:
        del sys.modules[name]


@pytest.fixture
def serial_package(tmp_path, monkeypatch):
    """Building (serial key, one-to-many units) and Unit."""
    package = tmp_path / "cli_serial"
    package.mkdir()
    (package / "__init__.py").write_text("")
    (package / "records.py").write_text(textwrap.dedent('''
        from typing import ClassVar, List, Optional
        from pydantic import BaseModel, Field
        from core.contracts import Long
        from core.models import RelationshipDirective

        class Building(BaseModel):
            __sql_primary_key__: ClassVar[List[str]] = ["id"]
            __sql_serial_columns__: ClassVar[List[str]] = ["id"]
            __sql_relationships__: ClassVar[list] = [
                RelationshipDirective.one_to_many("Unit", "building_id", "id", "units"),
            ]

            id: Optional[Long] = None
            name: str = Field(..., max_length=60)
            units: list = Field(default_factory=list)

        class Unit(BaseModel):
            __sql_primary_key__: ClassVar[List[str]] = ["id"]
            __sql_serial_columns__: ClassVar[List[str]] = ["id"]

            id: Optional[Long] = None
            building_id: Optional[Long] = None
    '''))
    monkeypatch.setattr(sys, "path", list(sys.path))
    yield tmp_path
    for name in [m for m in sys.modules if m.startswith("cli_serial")]:
        del sys.modules[name]


class TestParsing:
    def test_directive_default_reference(self):
        directive = parse_directive("one_to_many", "ListingDetail:listing_id:listingDetails")
        assert directive.kind == RelationshipKind.ONE_TO_MANY
        assert directive.target == "ListingDetail"
        assert directive.column == "listing_id"
        assert directive.referenced_column == "id"
        assert directive.field_name == "listingDetails"

    def test_directive_explicit_reference(self):
        directive = parse_directive("one_to_one", "Address:address_id:address:address_key")
        assert directive.kind == RelationshipKind.ONE_TO_ONE
        assert directive.referenced_column == "address_key"

    def test_directive_malformed(self):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_directive("one_to_one", "Address:address_id")

    def test_connection_sources_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--sqlite", "a.db", "--connection", "postgresql://x", "tables"])


class TestCommands:
    def test_describe(self, database, capsys):
        assert main(["--sqlite", str(database), "describe", "address"]) == 0

        table = json.loads(capsys.readouterr().out)
        assert table["table_name"] == "address"
        assert [c["name"] for c in table["columns"]] == ["id", "street", "zip_code"]

    def test_tables(self, database, capsys):
        assert main(["--sqlite", str(database), "tables", "--pattern", "addr%"]) == 0
        assert capsys.readouterr().out.splitlines() == ["address"]

    def test_generate(self, database, tmp_path, capsys):
        out = tmp_path / "out"
        assert main(["--sqlite", str(database), "generate", "address", "--output-root", str(out)]) == 0

        printed = capsys.readouterr().out.splitlines()
        assert printed == [
            str(out / "models" / "generated" / "address_base.py"),
            str(out / "models" / "address.py"),
        ]
        assert "class AddressBase(BaseModel):" in (out / "models" / "generated" / "address_base.py").read_text()

    def test_generate_unsupported_type_exits_1(self, database, tmp_path, capsys):
        code = main(["--sqlite", str(database), "generate", "shape", "--output-root", str(tmp_path / "out")])
        assert code == 1
        assert capsys.readouterr().out == ""

    def test_create_dry_run(self, records_package, capsys):
        code = main(["create", "cli_records", "--dry-run", "--search-path", str(records_package)])
        assert code == 0

        out = capsys.readouterr().out
        assert out.startswith("CREATE TABLE address (\n")
        assert "street VARCHAR(100) NOT NULL" in out

    def test_create_then_drop(self, records_package, tmp_path):
        db = tmp_path / "records.db"
        args = ["--sqlite", str(db)]
        assert main(args + ["create", "cli_records", "--search-path", str(records_package)]) == 0

        with SQLiteRepository(str(db)) as repo:
            assert repo.list_tables() == ["address"]

        assert main(args + ["drop", "cli_records", "--search-path", str(records_package)]) == 0
        with SQLiteRepository(str(db)) as repo:
            assert repo.list_tables() == []

    def test_sqlite_database_implies_sqlite_dialect(self, serial_package, tmp_path):
        db = tmp_path / "serial.db"
        code = main(["--sqlite", str(db), "create", "cli_serial", "--search-path", str(serial_package)])
        assert code == 0

        with SQLiteRepository(str(db)) as repo:
            assert repo.list_tables() == ["building", "unit"]
            foreign_keys = repo.list_foreign_keys("unit")
            assert [(k.fk_column, k.pk_table) for k in foreign_keys] == [("building_id", "building")]

            repo.execute_statement("INSERT INTO building (name) VALUES ('HQ')")
            with repo.execute_query("SELECT id FROM building") as cursor:
                assert cursor.fetchall() == [(1,)]

    def test_explicit_dialect_wins(self, serial_package, capsys):
        code = main([
            "--sqlite", "unused.db", "create", "cli_serial",
            "--dry-run", "--dialect", "mysql", "--search-path", str(serial_package),
        ])
        assert code == 0

        out = capsys.readouterr().out
        assert "\tid BIGINT NOT NULL AUTO_INCREMENT PRIMARY KEY,\n" in out
        assert "ALTER TABLE unit ADD FOREIGN KEY(building_id) REFERENCES building(id);\n" in out

    def test_sqlite_dry_run(self, serial_package, capsys):
        code = main(["--sqlite", "unused.db", "create", "cli_serial", "--dry-run", "--search-path", str(serial_package)])
        assert code == 0

        out = capsys.readouterr().out
        assert "\tid INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,\n" in out
        assert "ALTER TABLE" not in out
