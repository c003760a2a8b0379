# ============================================================================
# RECORD DEFINITION MODELS
# ============================================================================
# STATUS: Core model - Code-side declaration of a table-backed record
# PURPOSE: Fields, constraints and relationship directives for DDL synthesis
# CREATED: 05 OCT 2026
# EXPORTS: RelationshipDirective, FieldDefinition, RecordDefinition
# DEPENDENCIES: pydantic, annotated_types
# ============================================================================
"""
Record Definition Models

A RecordDefinition is the statically declared description of a record
type: its fields, their SQL-relevant constraints, and the relationships
it owns. The DDL synthesizer works exclusively from this description.

Two ways to build one:

1. Explicitly, builder style:

    listing = (
        RecordDefinition(name="Listing")
        .add_field("id", FieldType.LONG, primary_key=True, generation=GenerationType.AUTO)
        .add_field("price", FieldType.DOUBLE, not_null=True)
        .one_to_many("ListingDetail", "listing_id", "id", "listingDetails")
    )

2. From a Pydantic model carrying __sql_* ClassVars (the same convention
   the generated models use):

    class Listing(BaseModel):
        __sql_table__: ClassVar[str] = "listing"
        __sql_primary_key__: ClassVar[List[str]] = ["id"]
        __sql_serial_columns__: ClassVar[List[str]] = ["id"]
        __sql_relationships__: ClassVar[List[RelationshipDirective]] = [
            RelationshipDirective.one_to_many("ListingDetail", "listing_id", "id", "listingDetails"),
        ]

        id: Long
        price: float

    listing = RecordDefinition.from_model(Listing)
"""

import types
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Tuple, Type, Union, get_args, get_origin

from annotated_types import MaxLen
from pydantic import BaseModel, Field, model_validator

from core.contracts import EnumEncoding, FieldType, GenerationType, RelationshipKind, SqlKind
from core.errors import RecordDefinitionError
from core.schema.ddl_utils import to_db_case


# ============================================================================
# RELATIONSHIP DIRECTIVE
# ============================================================================

class RelationshipDirective(BaseModel):
    """
    Caller-supplied relationship between two records.

    For ONE_TO_ONE the owning record holds `column`, which references
    `referenced_column` on the target. For ONE_TO_MANY the column lives on
    the target (child) table and references `referenced_column` on the
    owning (parent) table.
    """

    model_config = {"frozen": True}

    kind: RelationshipKind
    target: str = Field(..., min_length=1, description="Record name, plain or dotted pkg.module.Name")
    column: str = Field(..., min_length=1)
    referenced_column: str = Field(default="id", min_length=1)
    field_name: str = Field(..., min_length=1)

    @classmethod
    def one_to_one(cls, target: str, column: str, referenced_column: str, field_name: str) -> "RelationshipDirective":
        return cls(
            kind=RelationshipKind.ONE_TO_ONE,
            target=target,
            column=column,
            referenced_column=referenced_column,
            field_name=field_name,
        )

    @classmethod
    def one_to_many(cls, target: str, column: str, referenced_column: str, field_name: str) -> "RelationshipDirective":
        return cls(
            kind=RelationshipKind.ONE_TO_MANY,
            target=target,
            column=column,
            referenced_column=referenced_column,
            field_name=field_name,
        )

    @property
    def target_name(self) -> str:
        """Simple record name (last segment of a dotted target)."""
        return self.target.rsplit(".", 1)[-1]

    @property
    def is_one_to_one(self) -> bool:
        return self.kind == RelationshipKind.ONE_TO_ONE

    @property
    def is_one_to_many(self) -> bool:
        return self.kind == RelationshipKind.ONE_TO_MANY


# ============================================================================
# FIELD DEFINITION
# ============================================================================

class FieldDefinition(BaseModel):
    """
    One declared field of a record.

    field_type may be None only for relationship placeholders and
    transient fields; neither resolves its own SQL type.
    """

    name: str = Field(..., min_length=1)
    field_type: Optional[FieldType] = None
    column_name: Optional[str] = None
    max_length: Optional[int] = None
    not_null: bool = False
    primary_key: bool = False
    generation: Optional[GenerationType] = None
    transient: bool = False
    enum_labels: List[str] = Field(default_factory=list)
    enum_encoding: EnumEncoding = EnumEncoding.ORDINAL

    @model_validator(mode="after")
    def check_enum_labels(self) -> "FieldDefinition":
        if (
            self.field_type == FieldType.ENUM
            and self.enum_encoding == EnumEncoding.STRING
            and not self.enum_labels
        ):
            raise ValueError(f"Enum field '{self.name}' is name-encoded but declares no labels")
        return self

    @property
    def resolved_column_name(self) -> str:
        """Declared column name, else the field name in db case."""
        return self.column_name or to_db_case(self.name)

    @property
    def is_auto_generated(self) -> bool:
        return self.generation == GenerationType.AUTO


# ============================================================================
# RECORD DEFINITION
# ============================================================================

class RecordDefinition(BaseModel):
    """
    Declaration of a record type and the table that stores it.

    Maps to: resolved_table_name (override verbatim, else db case of name)
    """

    name: str = Field(..., min_length=1)
    table_name: Optional[str] = None
    schema_name: Optional[str] = None
    fields: List[FieldDefinition] = Field(default_factory=list)
    relationships: List[RelationshipDirective] = Field(default_factory=list)

    # =========================================================================
    # DERIVED
    # =========================================================================

    @property
    def resolved_table_name(self) -> str:
        if self.table_name:
            return self.table_name
        return to_db_case(self.name)

    @property
    def primary_key_field(self) -> Optional[FieldDefinition]:
        keys = [f for f in self.fields if f.primary_key]
        if len(keys) > 1:
            raise RecordDefinitionError(
                self.name,
                f"composite primary keys are not supported ({', '.join(f.name for f in keys)})",
            )
        return keys[0] if keys else None

    def field(self, name: str) -> Optional[FieldDefinition]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def relationship_for(self, field_name: str) -> Optional[RelationshipDirective]:
        for directive in self.relationships:
            if directive.field_name == field_name:
                return directive
        return None

    # =========================================================================
    # BUILDER
    # =========================================================================

    def add_field(self, name: str, field_type: Optional[FieldType] = None, **kwargs) -> "RecordDefinition":
        """Append a field; kwargs are FieldDefinition attributes."""
        self.fields.append(FieldDefinition(name=name, field_type=field_type, **kwargs))
        return self

    def one_to_one(self, target: str, column: str, referenced_column: str, field_name: str) -> "RecordDefinition":
        self.relationships.append(RelationshipDirective.one_to_one(target, column, referenced_column, field_name))
        return self

    def one_to_many(self, target: str, column: str, referenced_column: str, field_name: str) -> "RecordDefinition":
        self.relationships.append(RelationshipDirective.one_to_many(target, column, referenced_column, field_name))
        return self

    # =========================================================================
    # PYDANTIC ADAPTER
    # =========================================================================

    @staticmethod
    def get_model_metadata(model: Type[BaseModel]) -> Dict[str, Any]:
        """
        Extract __sql_* metadata from a Pydantic model class.

        Looks for both the plain and the name-mangled attribute.
        """
        def get_attr(name: str, default=None):
            mangled = f"_{model.__name__}__{name}__"
            return getattr(model, mangled, getattr(model, f"__{name}__", default))

        metadata = {
            "table": get_attr("sql_table"),
            "schema": get_attr("sql_schema"),
            "primary_key": get_attr("sql_primary_key", []),
            "serial_columns": get_attr("sql_serial_columns", []),
            "transient": get_attr("sql_transient", []),
            "relationships": get_attr("sql_relationships", []),
            "enum_encoding": get_attr("sql_enum_encoding", {}),
        }

        if isinstance(metadata["primary_key"], str):
            metadata["primary_key"] = [metadata["primary_key"]]

        return metadata

    @classmethod
    def is_record_model(cls, obj: Any) -> bool:
        """True for Pydantic model classes that declare __sql_* metadata."""
        if not (isinstance(obj, type) and issubclass(obj, BaseModel)):
            return False
        meta = cls.get_model_metadata(obj)
        return bool(meta["table"] or meta["primary_key"])

    @classmethod
    def from_model(cls, model: Type[BaseModel]) -> "RecordDefinition":
        """
        Build a RecordDefinition from a Pydantic model class.

        Column names come from field aliases. A non-Optional annotation is
        a not-null constraint; MaxLen metadata is the string size.
        """
        meta = cls.get_model_metadata(model)
        primary_key = list(meta["primary_key"])
        if len(primary_key) > 1:
            raise RecordDefinitionError(
                model.__name__,
                f"composite primary keys are not supported ({', '.join(primary_key)})",
            )

        relationships = [
            d if isinstance(d, RelationshipDirective) else RelationshipDirective.model_validate(d)
            for d in meta["relationships"]
        ]
        by_field = {d.field_name: d for d in relationships}

        fields = []
        for field_name, info in model.model_fields.items():
            column_name = info.alias
            keys = {field_name, column_name or field_name}
            annotation, metadata, optional = _unwrap_annotation(info.annotation, info.metadata)

            if field_name in by_field:
                fields.append(FieldDefinition(name=field_name, column_name=column_name, not_null=not optional))
                continue

            if keys & set(meta["transient"]):
                fields.append(FieldDefinition(name=field_name, column_name=column_name, transient=True))
                continue

            field_type, enum_labels = _resolve_field_type(model.__name__, field_name, annotation, metadata)
            is_pk = bool(keys & set(primary_key))
            fields.append(FieldDefinition(
                name=field_name,
                field_type=field_type,
                column_name=column_name,
                max_length=_max_length(metadata),
                not_null=not optional,
                primary_key=is_pk,
                generation=GenerationType.AUTO if is_pk and keys & set(meta["serial_columns"]) else None,
                enum_labels=enum_labels,
                enum_encoding=EnumEncoding(meta["enum_encoding"].get(field_name, EnumEncoding.ORDINAL)),
            ))

        return cls(
            name=model.__name__,
            table_name=meta["table"],
            schema_name=meta["schema"],
            fields=fields,
            relationships=relationships,
        )


# ============================================================================
# ANNOTATION HELPERS
# ============================================================================

def _unwrap_annotation(annotation: Any, metadata: List[Any]) -> Tuple[Any, List[Any], bool]:
    """
    Strip Optional[...] and nested Annotated[...] from a field annotation.

    Pydantic lifts top-level Annotated metadata into FieldInfo.metadata but
    leaves Optional[Annotated[...]] intact, so both places are searched.

    Returns:
        (bare annotation, combined metadata, optional flag)
    """
    metadata = list(metadata)
    optional = False

    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        optional = len(args) != len(get_args(annotation))
        if len(args) == 1:
            annotation = args[0]

    if get_origin(annotation) is Annotated:
        inner, *extra = get_args(annotation)
        annotation = inner
        metadata.extend(extra)

    return annotation, metadata, optional


def _max_length(metadata: List[Any]) -> Optional[int]:
    for constraint in metadata:
        if isinstance(constraint, MaxLen):
            return constraint.max_length
    return None


def _resolve_field_type(record: str, field_name: str, annotation: Any, metadata: List[Any]) -> Tuple[FieldType, List[str]]:
    for item in metadata:
        if isinstance(item, SqlKind):
            return item.field_type, []

    if isinstance(annotation, type):
        if issubclass(annotation, Enum):
            return FieldType.ENUM, [member.name for member in annotation]
        # bool before int, datetime before date (subclass order)
        if issubclass(annotation, bool):
            return FieldType.BOOLEAN, []
        if issubclass(annotation, int):
            return FieldType.INTEGER, []
        if issubclass(annotation, float):
            return FieldType.DOUBLE, []
        if issubclass(annotation, str):
            return FieldType.STRING, []
        if issubclass(annotation, datetime):
            return FieldType.DATETIME, []
        if issubclass(annotation, date):
            return FieldType.DATE, []

    raise RecordDefinitionError(
        record,
        f"field '{field_name}' has an annotation with no column type: {annotation!r}",
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "RelationshipDirective",
    "FieldDefinition",
    "RecordDefinition",
]
