# ============================================================================
# TABLE DESCRIPTION MODEL
# ============================================================================
# STATUS: Core model - One introspected table
# PURPOSE: Immutable, ordered column list plus table-level metadata
# CREATED: 05 OCT 2026
# EXPORTS: TableDescription
# DEPENDENCIES: pydantic
# ============================================================================
"""
Table Description Model

Constructed once per introspection call and never mutated afterwards.
Columns keep the order the database reported them in; the reverse
generator relies on that order for field layout.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from core.models.column import ColumnDescription


class TableDescription(BaseModel):
    """Metadata for one database table."""

    model_config = {"frozen": True}

    table_name: str = Field(..., min_length=1)
    schema_name: Optional[str] = None
    comment: Optional[str] = None
    columns: Tuple[ColumnDescription, ...] = ()

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    @property
    def primary_keys(self) -> List[ColumnDescription]:
        return [c for c in self.columns if c.primary_key]

    @property
    def foreign_keys(self) -> List[ColumnDescription]:
        return [c for c in self.columns if c.foreign_key]

    def get_column(self, name: str) -> Optional[ColumnDescription]:
        """Look up a column by exact (case-sensitive) name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None


__all__ = ["TableDescription"]
