# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# STATUS: Foundation - Type vocabulary shared by schema and code sides
# PURPOSE: Define field types, relationship kinds and key generation enums
# CREATED: 05 OCT 2026
# EXPORTS: FieldType, RelationshipKind, GenerationType, EnumEncoding,
#          SqlKind, Long, Float
# ============================================================================
"""
Base contracts for SchemaBridge.

These enums are the vocabulary that crosses the two boundaries:
- SQL (column type names reported by the database / emitted in DDL)
- Python (field annotations on record declarations / generated models)

The type mapper translates between the two; everything else speaks
FieldType.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated


# ============================================================================
# FIELD TYPES
# ============================================================================

class FieldType(str, Enum):
    """
    Code-side type vocabulary.

    Python has a single int type, so the 64-bit / 32-bit distinction the
    database makes is carried explicitly here.
    """
    LONG = "long"                # 64-bit integer (BIGINT)
    INTEGER = "integer"          # 32-bit integer (INT)
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    DATE = "date"                # calendar date
    DATETIME = "datetime"        # date-time
    BOOLEAN = "boolean"
    ENUM = "enum"                # ordinal- or name-encoded enumeration

    def is_integral(self) -> bool:
        """Check if values of this type are Python ints."""
        return self in (FieldType.LONG, FieldType.INTEGER)


class RelationshipKind(str, Enum):
    """Relationship directive tags."""
    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"


class GenerationType(str, Enum):
    """
    Primary key generation strategies.

    Only AUTO produces an auto-increment column; every other strategy
    (and no strategy at all) leaves value assignment to the caller.
    """
    AUTO = "auto"
    IDENTITY = "identity"
    SEQUENCE = "sequence"
    TABLE = "table"


class EnumEncoding(str, Enum):
    """How an enumerated field is stored."""
    ORDINAL = "ordinal"          # integer column holding the member position
    STRING = "string"            # varchar column holding the member name


# ============================================================================
# ANNOTATION MARKERS
# ============================================================================

@dataclass(frozen=True)
class SqlKind:
    """
    Annotated[] marker that pins the FieldType of a Python annotation.

    Pydantic keeps unknown Annotated metadata in FieldInfo.metadata, which
    is where RecordDefinition.from_model() looks for it.
    """
    field_type: FieldType


# int defaults to INTEGER and float to DOUBLE; these select the other width.
Long = Annotated[int, SqlKind(FieldType.LONG)]
Float = Annotated[float, SqlKind(FieldType.FLOAT)]


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "FieldType",
    "RelationshipKind",
    "GenerationType",
    "EnumEncoding",
    "SqlKind",
    "Long",
    "Float",
]
