# ============================================================================
# TYPE MAPPER
# ============================================================================
# STATUS: Core - Bidirectional SQL <-> FieldType mapping
# PURPOSE: Closed type tables for introspection, DDL and code generation
# CREATED: 06 OCT 2026
# EXPORTS: TypeMapper, PythonType
# ============================================================================
"""
Type Mapper.

Three directions, all closed tables:

    SQL type name  -> FieldType      (introspection -> code generation)
    FieldType      -> SQL type text  (record declaration -> DDL)
    FieldType      -> Python annotation + import (code generation)

Unknown input raises; there is no fallback type.

Name and size rules:
- a date-time field whose name contains "timestamp" (any case) becomes
  TIMESTAMP, every other date-time field becomes DATETIME;
- strings have no default length; a missing max_length is an error.
"""

import re
from typing import Dict, Iterable, NamedTuple, Optional

from core.contracts import EnumEncoding, FieldType
from core.errors import MissingSizeConstraintError, SchemaBridgeError, UnsupportedTypeError


class PythonType(NamedTuple):
    """Annotation text for generated code and the import it needs."""
    annotation: str
    import_line: Optional[str] = None


# Trailing "(50)" / "(10,2)" size suffix on declared type names
_SIZE_SUFFIX = re.compile(r"\s*\(.*\)\s*$")


class TypeMapper:
    """
    Closed mapping between the SQL and code type vocabularies.

    Stateless; one shared instance is fine.
    """

    SQL_TO_FIELD: Dict[str, FieldType] = {
        "bigint": FieldType.LONG,
        "varchar": FieldType.STRING,
        "char": FieldType.STRING,
        "decimal": FieldType.DOUBLE,
        "double": FieldType.DOUBLE,
        "double precision": FieldType.DOUBLE,
        "float": FieldType.FLOAT,
        "date": FieldType.DATE,
        "timestamp": FieldType.DATETIME,
        "datetime": FieldType.DATETIME,
        "int": FieldType.INTEGER,
        "integer": FieldType.INTEGER,
        "bit": FieldType.INTEGER,
        "boolean": FieldType.BOOLEAN,
        "bool": FieldType.BOOLEAN,
    }

    FIELD_TO_SQL: Dict[FieldType, str] = {
        FieldType.LONG: "BIGINT",
        FieldType.INTEGER: "INT",
        FieldType.FLOAT: "FLOAT",
        FieldType.DOUBLE: "DOUBLE",
        FieldType.DATE: "DATE",
        FieldType.BOOLEAN: "BOOLEAN",
    }

    FIELD_TO_PYTHON: Dict[FieldType, PythonType] = {
        FieldType.LONG: PythonType("Long", "from core.contracts import Long"),
        FieldType.INTEGER: PythonType("int"),
        FieldType.FLOAT: PythonType("Float", "from core.contracts import Float"),
        FieldType.DOUBLE: PythonType("float"),
        FieldType.STRING: PythonType("str"),
        FieldType.DATE: PythonType("date", "from datetime import date"),
        FieldType.DATETIME: PythonType("datetime", "from datetime import datetime"),
        FieldType.BOOLEAN: PythonType("bool"),
    }

    # =========================================================================
    # SCHEMA -> CODE
    # =========================================================================

    def to_field_type(self, sql_type: str, column_name: Optional[str] = None) -> FieldType:
        """
        Map a SQL type name to a FieldType (case-insensitive).

        Raises:
            UnsupportedTypeError: For any name outside the closed table
        """
        normalized = _SIZE_SUFFIX.sub("", sql_type or "").strip().lower()
        field_type = self.SQL_TO_FIELD.get(normalized)
        if field_type is None:
            raise UnsupportedTypeError(sql_type, column_name)
        return field_type

    def python_annotation(self, field_type: FieldType) -> PythonType:
        """Annotation and import used by generated models."""
        python_type = self.FIELD_TO_PYTHON.get(field_type)
        if python_type is None:
            raise SchemaBridgeError(
                f"No Python annotation for field type '{field_type.value}'",
                operation="codegen",
                entity=field_type.value,
            )
        return python_type

    # =========================================================================
    # CODE -> SCHEMA
    # =========================================================================

    def to_sql_type(
        self,
        field_type: FieldType,
        size: Optional[int] = None,
        *,
        field_name: Optional[str] = None,
        enum_labels: Optional[Iterable[str]] = None,
        enum_encoding: EnumEncoding = EnumEncoding.ORDINAL,
    ) -> str:
        """
        Map a FieldType (plus its constraints) to SQL column type text.

        Args:
            field_type: Declared field type
            size: max_length for strings
            field_name: Declared field name (error context, timestamp rule)
            enum_labels: Member names, for name-encoded enums
            enum_encoding: ORDINAL -> INT, STRING -> VARCHAR(longest label)

        Raises:
            MissingSizeConstraintError: String without a positive size
        """
        if field_type == FieldType.STRING:
            if not size or size <= 0:
                raise MissingSizeConstraintError(field_name)
            return f"VARCHAR({size})"

        if field_type == FieldType.DATETIME:
            if field_name and "timestamp" in field_name.lower():
                return "TIMESTAMP"
            return "DATETIME"

        if field_type == FieldType.ENUM:
            if enum_encoding == EnumEncoding.ORDINAL:
                return "INT"
            labels = list(enum_labels or [])
            if not labels:
                raise MissingSizeConstraintError(field_name)
            return f"VARCHAR({max(len(label) for label in labels)})"

        sql_type = self.FIELD_TO_SQL.get(field_type)
        if sql_type is None:
            raise UnsupportedTypeError(str(field_type), field_name)
        return sql_type


__all__ = ["TypeMapper", "PythonType"]
