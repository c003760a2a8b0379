# ============================================================================
# MODELS MODULE
# ============================================================================
# STATUS: Model exports
# PURPOSE: Central export point for description and declaration models
# CREATED: 05 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Schema side:  ColumnDescription, TableDescription (built by introspection)
Code side:    FieldDefinition, RecordDefinition, RelationshipDirective
Query side:   Tuple2 .. Tuple7
"""

from core.models.column import ColumnDescription, ColumnDescriptionBuilder
from core.models.table import TableDescription
from core.models.record import RelationshipDirective, FieldDefinition, RecordDefinition
from core.models.registry import RecordRegistry
from core.models.tuples import Tuple2, Tuple3, Tuple4, Tuple5, Tuple6, Tuple7, TUPLE_TYPES

__all__ = [
    # Descriptions
    "ColumnDescription",
    "ColumnDescriptionBuilder",
    "TableDescription",
    # Declarations
    "RelationshipDirective",
    "FieldDefinition",
    "RecordDefinition",
    "RecordRegistry",
    # Tuples
    "Tuple2",
    "Tuple3",
    "Tuple4",
    "Tuple5",
    "Tuple6",
    "Tuple7",
    "TUPLE_TYPES",
]
