# ============================================================================
# DDL UTILITIES
# ============================================================================
# STATUS: Core - Shared helpers for DDL text and naming
# PURPOSE: Naming conventions, identifier validation, dialect clauses
# CREATED: 05 OCT 2026
# EXPORTS: SqlDialect, to_db_case, db_to_code, validate_identifier,
#          qualified_name
# ============================================================================
"""
DDL Utilities - Shared naming and dialect helpers.

DDL is plain text with a fixed layout (tab-indented column lines, one
statement per line). Identifiers are validated, not quoted.

Naming conventions:
    code side    ListingDetail / zipCode   (CamelCase / camelCase)
    schema side  listing_detail / zip_code (lower_snake_case)

Usage:
    from core.schema.ddl_utils import to_db_case, db_to_code, SqlDialect

    to_db_case("ListingDetail")          # "listing_detail"
    db_to_code("zip_code")               # "ZipCode"
    db_to_code("zip_code", capitalize=False)  # "zipCode"
"""

import re
from enum import Enum
from typing import Optional

from core.errors import SchemaBridgeError


# ============================================================================
# NAMING
# ============================================================================

# Boundaries: "listingDetail" -> "listing_Detail", "HTTPServer" -> "HTTP_Server"
_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_WORD = re.compile(r"([A-Z]+)([A-Z][a-z])")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*$")


def to_db_case(name: str) -> str:
    """
    Convert a code-side name to the schema's lower_snake_case.

    Dots are dropped to their last segment, so a dotted record path
    ("models.ListingDetail") maps to the same table as its simple name.
    """
    simple = name.rsplit(".", 1)[-1]
    snake = _ACRONYM_WORD.sub(r"\1_\2", simple)
    snake = _LOWER_UPPER.sub(r"\1_\2", snake)
    return snake.replace(" ", "_").lower()


def db_to_code(name: str, capitalize: bool = True) -> str:
    """
    Convert a schema name (snake or space separated) to CamelCase.

    Args:
        name: Table or column name as reported by the database
        capitalize: True for a type name ("ZipCode"), False for a
            field / accessor name ("zipCode")
    """
    parts = [p for p in name.lower().replace("_", " ").split(" ") if p]
    if not parts:
        raise SchemaBridgeError(f"Cannot derive a code name from '{name}'", operation="naming", entity=name)

    joined = "".join(part[0].upper() + part[1:] for part in parts)
    if capitalize:
        return joined
    return joined[0].lower() + joined[1:]


def validate_identifier(name: str, kind: str = "identifier") -> str:
    """
    Check that a table / column name is safe to splice into DDL text.

    Returns:
        The name unchanged

    Raises:
        SchemaBridgeError: If the name is not a plain SQL identifier
    """
    if not name or not _IDENTIFIER.match(name):
        raise SchemaBridgeError(f"Invalid {kind} name: {name!r}", operation="ddl", entity=name)
    return name


def qualified_name(table_name: str, schema_name: Optional[str] = None) -> str:
    """Schema-qualify a table name when a schema is given."""
    validate_identifier(table_name, "table")
    if schema_name:
        return f"{validate_identifier(schema_name, 'schema')}.{table_name}"
    return table_name


# ============================================================================
# DIALECTS
# ============================================================================

# Integer types an auto-generated SQLite key is respelled from
INTEGRAL_TYPES = ("BIGINT", "INT", "INTEGER", "SMALLINT", "TINYINT")


class SqlDialect(str, Enum):
    """
    Target database for synthesized DDL.

    MYSQL is the reference layout. POSTGRESQL keeps the same statement
    shape and only respells what PostgreSQL rejects. SQLITE cannot add a
    foreign key to an existing table, so one-to-many keys are declared
    on the child's CREATE instead of a deferred ALTER.
    """
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"

    @property
    def auto_increment_clause(self) -> str:
        if self is SqlDialect.POSTGRESQL:
            return " GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY"
        if self is SqlDialect.SQLITE:
            return " PRIMARY KEY AUTOINCREMENT"
        return " AUTO_INCREMENT PRIMARY KEY"

    @property
    def supports_alter_foreign_key(self) -> bool:
        return self is not SqlDialect.SQLITE

    def spell_type(self, sql_type: str) -> str:
        """Respell a MySQL type name for this dialect."""
        if self is SqlDialect.POSTGRESQL:
            if sql_type == "DOUBLE":
                return "DOUBLE PRECISION"
            if sql_type == "DATETIME":
                return "TIMESTAMP"
        return sql_type

    def spell_auto_increment_type(self, sql_type: str) -> str:
        """Type of an auto-generated key column (SQLite only accepts INTEGER)."""
        if self is SqlDialect.SQLITE and sql_type in INTEGRAL_TYPES:
            return "INTEGER"
        return sql_type

    @classmethod
    def parse(cls, value) -> "SqlDialect":
        """Accept a dialect, its value, or a common alias ("postgres", "pg", "sqlite3")."""
        if isinstance(value, cls):
            return value
        aliases = {"postgres": "postgresql", "pg": "postgresql", "mariadb": "mysql", "sqlite3": "sqlite"}
        normalized = str(value).strip().lower()
        try:
            return cls(aliases.get(normalized, normalized))
        except ValueError:
            raise SchemaBridgeError(f"Unknown SQL dialect: {value!r}", operation="ddl", entity=str(value))


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SqlDialect",
    "to_db_case",
    "db_to_code",
    "validate_identifier",
    "qualified_name",
]
