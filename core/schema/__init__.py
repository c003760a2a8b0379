# ============================================================================
# SCHEMA MODULE
# ============================================================================
# STATUS: Core - Type mapping and DDL generation
# PURPOSE: Generate DDL from record declarations
# CREATED: 05 OCT 2026
# ============================================================================
"""
Schema Module

Only the dependency-free helpers are exported here; core.models imports
them. Import the synthesizer and ordering from their own modules:

    from core.schema.ddl_synthesizer import DdlSynthesizer
    from core.schema.ordering import creation_order
"""

from core.schema.ddl_utils import (
    SqlDialect,
    to_db_case,
    db_to_code,
    validate_identifier,
    qualified_name,
)
from core.schema.type_mapper import TypeMapper, PythonType

__all__ = [
    # Types
    "TypeMapper",
    "PythonType",
    # Utilities
    "SqlDialect",
    "to_db_case",
    "db_to_code",
    "validate_identifier",
    "qualified_name",
]
