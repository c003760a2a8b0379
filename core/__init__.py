# ============================================================================
# CORE MODULE
# ============================================================================
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and models
# CREATED: 05 OCT 2026
# ============================================================================

from core.contracts import FieldType, RelationshipKind, GenerationType, EnumEncoding, Long, Float
from core.errors import (
    SchemaBridgeError,
    ConnectivityError,
    CatalogMetadataError,
    UnsupportedTypeError,
    MissingSizeConstraintError,
    DdlExecutionError,
    ArityMismatchError,
    TooManyRowsError,
    RecordDefinitionError,
)
from core.models import (
    ColumnDescription,
    TableDescription,
    RelationshipDirective,
    FieldDefinition,
    RecordDefinition,
    RecordRegistry,
)

__all__ = [
    # Enums
    "FieldType",
    "RelationshipKind",
    "GenerationType",
    "EnumEncoding",
    "Long",
    "Float",
    # Errors
    "SchemaBridgeError",
    "ConnectivityError",
    "CatalogMetadataError",
    "UnsupportedTypeError",
    "MissingSizeConstraintError",
    "DdlExecutionError",
    "ArityMismatchError",
    "TooManyRowsError",
    "RecordDefinitionError",
    # Models
    "ColumnDescription",
    "TableDescription",
    "RelationshipDirective",
    "FieldDefinition",
    "RecordDefinition",
    "RecordRegistry",
]
