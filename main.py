#!/usr/bin/env python
# ============================================================================
# SCHEMABRIDGE - COMMAND LINE ENTRY POINT
# ============================================================================
# STATUS: Entry point - CLI over introspection, codegen and DDL
# PURPOSE: describe / generate / create / drop / tables subcommands
# CREATED: 11 OCT 2026
# USAGE:
#   schemabridge --sqlite app.db describe listing
#   schemabridge --connection postgresql://... generate listing --package models
#   schemabridge create myapp.records --dry-run
#   schemabridge --sqlite app.db drop myapp.records --resolve-order
# ============================================================================
"""
SchemaBridge CLI

Thin argparse front end. Every subcommand maps onto one library call:

    describe  SchemaIntrospector.describe      (JSON on stdout)
    generate  ReverseGenerator.generate        (paths on stdout)
    create    DdlSynthesizer.create_tables_in_namespace
    drop      DdlSynthesizer.drop_tables_in_namespace
    tables    SchemaIntrospector.list_tables / list_schemas

DDL text always goes to stdout; logs go to stderr. A SchemaBridgeError is
reported on stderr and the process exits with status 1.
"""

import argparse
import os
import sys
from typing import List, Optional

from __version__ import __version__
from core.config import get_defaults
from core.errors import SchemaBridgeError
from core.logging import ComponentType, configure_logging, get_logger
from core.models.record import RelationshipDirective
from core.schema.ddl_synthesizer import DdlSynthesizer
from core.schema.ddl_utils import SqlDialect
from core.codegen import ReverseGenerator
from infrastructure import PostgreSQLRepository, SchemaIntrospector, SQLiteRepository

logger = get_logger(__name__, ComponentType.CLI)


# ============================================================================
# ARGUMENT PARSING
# ============================================================================

def parse_directive(kind: str, value: str) -> RelationshipDirective:
    """
    Parse TARGET:COLUMN:FIELD[:REFERENCED_COLUMN] into a directive.

    REFERENCED_COLUMN defaults to "id".
    """
    parts = value.split(":")
    if len(parts) not in (3, 4):
        raise argparse.ArgumentTypeError(
            f"Expected TARGET:COLUMN:FIELD[:REFERENCED_COLUMN], got '{value}'"
        )
    target, column, field_name = parts[:3]
    referenced_column = parts[3] if len(parts) == 4 else "id"
    if kind == "one_to_one":
        return RelationshipDirective.one_to_one(target, column, referenced_column, field_name)
    return RelationshipDirective.one_to_many(target, column, referenced_column, field_name)


def build_parser() -> argparse.ArgumentParser:
    defaults = get_defaults()

    parser = argparse.ArgumentParser(
        prog="schemabridge",
        description="Map relational tables to record models and back",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemabridge --sqlite app.db describe listing
  schemabridge --sqlite app.db generate listing \\
      --one-to-many ListingDetail:listing_id:listingDetails
  schemabridge create myapp.records --dry-run --resolve-order

Environment Variables:
  DATABASE_URL          Full PostgreSQL connection string
  POSTGRES_HOST         Database host (default: localhost)
  POSTGRES_DB           Database name (default: postgres)
  POSTGRES_USER         Database user (default: postgres)
  POSTGRES_PASSWORD     Database password
  POSTGRES_PORT         Database port (default: 5432)
  DDL_DIALECT           mysql | postgresql | sqlite (default: mysql;
                        --sqlite implies sqlite)
  CODEGEN_OUTPUT_ROOT   Root directory for generated modules (default: .)
  CODEGEN_PACKAGE       Package for generated modules (default: models)
  LOG_LEVEL / LOG_FORMAT
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--connection", type=str, help="PostgreSQL connection string (overrides environment)")
    source.add_argument("--sqlite", type=str, metavar="PATH", help="Use a SQLite database file instead of PostgreSQL")

    parser.add_argument("--schema", type=str, help="Schema name for metadata lookups")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # describe
    describe = subparsers.add_parser("describe", help="Print a table description as JSON")
    describe.add_argument("table")

    # generate
    generate = subparsers.add_parser("generate", help="Generate a record model from a table")
    generate.add_argument("table")
    generate.add_argument("--package", default=defaults.codegen.package, help="Target package (dotted)")
    generate.add_argument("--output-root", default=defaults.codegen.output_root, help="Directory holding the package")
    generate.add_argument("--class-name", help="Record class name (default: CamelCase of the table)")
    generate.add_argument(
        "--one-to-one",
        action="append",
        default=[],
        metavar="TARGET:COLUMN:FIELD[:REF]",
        type=lambda v: parse_directive("one_to_one", v),
    )
    generate.add_argument(
        "--one-to-many",
        action="append",
        default=[],
        metavar="TARGET:COLUMN:FIELD[:REF]",
        type=lambda v: parse_directive("one_to_many", v),
    )
    generate.add_argument(
        "--foreign-key-field",
        action="append",
        default=[],
        metavar="FIELD",
        help="Field generated read-only (excluded from serialisation)",
    )

    # create / drop
    for name, text in (("create", "Create tables for the records of a module"),
                       ("drop", "Drop tables for the records of a module")):
        sub = subparsers.add_parser(name, help=text)
        sub.add_argument("module", help="Dotted module or package holding the records")
        sub.add_argument("--dry-run", action="store_true", help="Print DDL without executing")
        sub.add_argument(
            "--dialect",
            help=f"mysql | postgresql | sqlite (default: sqlite with --sqlite, else {defaults.ddl.dialect})",
        )
        sub.add_argument("--resolve-order", action="store_true", help="Order tables by their relationships")
        sub.add_argument("--search-path", default=".", help="Directory prepended to the import path")

    # tables
    tables = subparsers.add_parser("tables", help="List tables (or schemas)")
    tables.add_argument("--pattern", help="LIKE pattern, e.g. 'listing%%'")
    tables.add_argument("--schemas", action="store_true", help="List schemas instead of tables")

    return parser


def open_connection(args: argparse.Namespace):
    if args.sqlite:
        return SQLiteRepository(args.sqlite)
    return PostgreSQLRepository(args.connection, schema_name=args.schema)


def resolve_dialect(args: argparse.Namespace) -> SqlDialect:
    """--dialect if given, SQLite for a --sqlite database, else the configured dialect."""
    if args.dialect:
        return SqlDialect.parse(args.dialect)
    if args.sqlite:
        return SqlDialect.SQLITE
    return SqlDialect.parse(get_defaults().ddl.dialect)


# ============================================================================
# COMMANDS
# ============================================================================

def cmd_describe(args, connection) -> None:
    table = SchemaIntrospector().describe(connection, args.table, args.schema)
    print(table.model_dump_json(indent=2))


def cmd_generate(args, connection) -> None:
    table = SchemaIntrospector().describe(connection, args.table, args.schema)
    generator = ReverseGenerator(
        package=args.package,
        class_name=args.class_name,
        foreign_key_fields=args.foreign_key_field,
    )
    base, top_level = generator.generate(table, args.one_to_one + args.one_to_many, args.output_root)
    print(base)
    print(top_level)


def cmd_schema(args, connection) -> None:
    if args.search_path:
        sys.path.insert(0, os.path.abspath(args.search_path))

    synthesizer = DdlSynthesizer(dialect=resolve_dialect(args), executor=connection)
    execute = not args.dry_run
    if args.command == "create":
        text = synthesizer.create_tables_in_namespace(args.module, execute=execute, resolve_order=args.resolve_order)
    else:
        text = synthesizer.drop_tables_in_namespace(args.module, execute=execute, resolve_order=args.resolve_order)
    print(text, end="")


def cmd_tables(args, connection) -> None:
    introspector = SchemaIntrospector()
    if args.schemas:
        names = introspector.list_schemas(connection, args.pattern)
    else:
        names = introspector.list_tables(connection, args.pattern, args.schema)
    for name in names:
        print(name)


COMMANDS = {
    "describe": cmd_describe,
    "generate": cmd_generate,
    "create": cmd_schema,
    "drop": cmd_schema,
    "tables": cmd_tables,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    configure_logging(
        level="DEBUG" if args.verbose else os.environ.get("LOG_LEVEL", "INFO"),
        json_output=args.json_logs,
    )
    logger.debug(f"SchemaBridge {__version__}: {args.command}")

    # Dry-run DDL needs no database
    needs_connection = not getattr(args, "dry_run", False)
    connection = open_connection(args) if needs_connection else None
    try:
        COMMANDS[args.command](args, connection)
    except SchemaBridgeError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    finally:
        if isinstance(connection, SQLiteRepository):
            connection.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
