# ============================================================================
# COLUMN DESCRIPTION MODEL
# ============================================================================
# STATUS: Core model - One column of an introspected table
# PURPOSE: Immutable column metadata with primary / foreign key annotations
# CREATED: 05 OCT 2026
# EXPORTS: ColumnDescription, ColumnDescriptionBuilder
# DEPENDENCIES: pydantic
# ============================================================================
"""
Column Description Model

Introspection reads columns first and learns about keys afterwards
(primary and foreign keys arrive as separate result sets keyed by column
name). The key flags are therefore collected on a mutable builder, which
is frozen into a ColumnDescription once all passes are done.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ColumnDescription(BaseModel):
    """
    Metadata for one database column.

    Invariant:
        foreign_key implies referenced_table and referenced_column are set.
        primary_key and foreign_key are independent (a column may be both).
    """

    model_config = {"frozen": True}

    name: str = Field(..., min_length=1)
    sql_type: str = Field(..., description="Type name as reported, e.g. 'bigint', 'varchar'")
    nullable: bool = True
    primary_key: bool = False
    foreign_key: bool = False
    referenced_table: Optional[str] = None
    referenced_column: Optional[str] = None
    size: int = Field(default=0, description="String length or numeric precision")
    default_value: Optional[str] = None
    comment: Optional[str] = None

    @model_validator(mode="after")
    def check_foreign_key_reference(self) -> "ColumnDescription":
        if self.foreign_key and not (self.referenced_table and self.referenced_column):
            raise ValueError(
                f"Column '{self.name}' is a foreign key but has no referenced table/column"
            )
        return self


@dataclass
class ColumnDescriptionBuilder:
    """Mutable column state used while the introspection passes run."""

    name: str
    sql_type: str
    nullable: bool = True
    size: int = 0
    default_value: Optional[str] = None
    comment: Optional[str] = None
    primary_key: bool = False
    foreign_key: bool = False
    referenced_table: Optional[str] = None
    referenced_column: Optional[str] = None

    def mark_primary_key(self) -> "ColumnDescriptionBuilder":
        self.primary_key = True
        return self

    def mark_foreign_key(self, referenced_table: str, referenced_column: str) -> "ColumnDescriptionBuilder":
        self.foreign_key = True
        self.referenced_table = referenced_table
        self.referenced_column = referenced_column
        return self

    def build(self) -> ColumnDescription:
        return ColumnDescription(
            name=self.name,
            sql_type=self.sql_type,
            nullable=self.nullable,
            primary_key=self.primary_key,
            foreign_key=self.foreign_key,
            referenced_table=self.referenced_table,
            referenced_column=self.referenced_column,
            size=self.size,
            default_value=self.default_value,
            comment=self.comment,
        )


__all__ = ["ColumnDescription", "ColumnDescriptionBuilder"]
