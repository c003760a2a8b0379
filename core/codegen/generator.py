# ============================================================================
# REVERSE GENERATOR
# ============================================================================
# STATUS: Core - Record source code from table descriptions
# PURPOSE: Emit generated base modules and one-time top-level scaffolds
# CREATED: 08 OCT 2026
# EXPORTS: ReverseGenerator
# DEPENDENCIES: jinja2 (via core.codegen.templates)
# ============================================================================
"""
Reverse Generator (schema -> code).

Turns a TableDescription plus caller-supplied relationship directives into
a Pydantic record model.

Layout, for package "models" and table "listing_detail":

    <output_root>/models/generated/__init__.py
    <output_root>/models/generated/listing_detail_base.py   (always rewritten)
    <output_root>/models/listing_detail.py                  (written once)

Per column:
- field `db_to_code(column, capitalize=False)` aliased to the column name
- `get<Name>` / `set<Name>` accessor pair
- primary key columns go to __sql_primary_key__ and __sql_serial_columns__

Relationships:
- one-to-one suppresses its foreign-key column; a target-typed field takes
  its place
- one-to-many adds a list field (never None) whose setter replaces the
  list contents instead of the list object
- targets are string annotations in the base module; the top-level
  scaffold imports them below its class and rebuilds the model

Names listed in foreign_key_fields shadow a relationship-managed column;
they are generated with exclude=True so they are never serialised back.

Usage:
    generator = ReverseGenerator(package="models")
    generator.generate(
        table,
        [RelationshipDirective.one_to_many("ListingDetail", "listing_id", "id", "listingDetails")],
        output_root="src",
    )
"""

import json
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from __version__ import __version__
from core.codegen.templates import CodeTemplates, GeneratedField, ImportSet
from core.contracts import FieldType
from core.logging import ComponentType, get_logger, log_context
from core.models.record import RelationshipDirective
from core.models.table import TableDescription
from core.schema.ddl_utils import db_to_code, to_db_case
from core.schema.type_mapper import TypeMapper

logger = get_logger(__name__, ComponentType.CODEGEN)

PathLike = Union[str, Path]


class ReverseGenerator:
    """
    Generate Pydantic record modules from table descriptions.

    Args:
        type_mapper: SQL type -> FieldType -> annotation
        package: Dotted target package for generated modules
        class_name: Record class name (default: CamelCase of the table)
        foreign_key_fields: Code-side field names generated read-only
    """

    def __init__(
        self,
        type_mapper: Optional[TypeMapper] = None,
        package: str = "models",
        class_name: Optional[str] = None,
        foreign_key_fields: Sequence[str] = (),
        templates: Optional[CodeTemplates] = None,
    ):
        self.type_mapper = type_mapper or TypeMapper()
        self.package = package
        self.class_name = class_name
        self.foreign_key_fields = list(foreign_key_fields)
        self.templates = templates or CodeTemplates()

    # =========================================================================
    # NAMES & PATHS
    # =========================================================================

    def class_name_for(self, table: TableDescription) -> str:
        return self.class_name or db_to_code(table.table_name)

    def module_name_for(self, table: TableDescription) -> str:
        return to_db_case(self.class_name_for(table))

    def package_dir(self, output_root: PathLike) -> Path:
        return Path(output_root).joinpath(*self.package.split("."))

    def base_path(self, table: TableDescription, output_root: PathLike) -> Path:
        return self.package_dir(output_root) / "generated" / f"{self.module_name_for(table)}_base.py"

    def top_level_path(self, table: TableDescription, output_root: PathLike) -> Path:
        return self.package_dir(output_root) / f"{self.module_name_for(table)}.py"

    # =========================================================================
    # GENERATION
    # =========================================================================

    def generate(
        self,
        table: TableDescription,
        relationships: Iterable[RelationshipDirective],
        output_root: PathLike,
    ) -> Tuple[Path, Path]:
        """Write the base module and, if absent, the top-level scaffold."""
        relationships = list(relationships)
        base = self.generate_base(table, relationships, output_root)
        top_level = self.generate_top_level(table, output_root, relationships)
        return base, top_level

    def generate_base(
        self,
        table: TableDescription,
        relationships: Iterable[RelationshipDirective],
        output_root: PathLike,
    ) -> Path:
        """
        Write `<package>/generated/<module>_base.py`, replacing any old copy.

        Raises:
            UnsupportedTypeError: A column type has no code-side mapping
        """
        with log_context(table_name=table.table_name, operation="generate_base"):
            source = self.render_base(table, relationships)

            path = self.base_path(table, output_root)
            self._ensure_package(path.parent.parent)
            self._ensure_package(path.parent)
            path.write_text(source, encoding="utf-8")

            logger.info(f"Wrote {path}")
        return path

    def generate_top_level(
        self,
        table: TableDescription,
        output_root: PathLike,
        relationships: Iterable[RelationshipDirective] = (),
    ) -> Path:
        """
        Write `<package>/<module>.py` unless it already exists.

        An existing scaffold is never touched; relationship target imports
        it lacks are logged as warnings.
        """
        relationships = list(relationships)
        with log_context(table_name=table.table_name, operation="generate_top_level"):
            path = self.top_level_path(table, output_root)
            if path.exists():
                existing = path.read_text(encoding="utf-8")
                for line in self.reference_imports(table, relationships):
                    if line not in existing:
                        logger.warning(f"{path} lacks '{line}'; add it after the class, then call model_rebuild()")
                logger.info(f"Kept existing {path}")
                return path

            self._ensure_package(path.parent)
            path.write_text(self.render_top_level(table, relationships), encoding="utf-8")
            logger.info(f"Wrote {path}")
        return path

    # =========================================================================
    # RENDERING
    # =========================================================================

    def render_base(self, table: TableDescription, relationships: Iterable[RelationshipDirective]) -> str:
        """Source text of the base module (no file I/O)."""
        relationships = list(relationships)
        one_to_one = [d for d in relationships if d.is_one_to_one]
        one_to_many = [d for d in relationships if d.is_one_to_many]
        suppressed = {d.column for d in one_to_one}

        imports = ImportSet()
        imports.add("typing", "ClassVar").add("typing", "List")
        imports.add("pydantic", "BaseModel").add("pydantic", "Field")
        targets = ImportSet()

        fields: List[GeneratedField] = []
        for column in table.columns:
            if column.name in suppressed:
                continue
            fields.append(self._column_field(column, imports))

        for directive in one_to_one + one_to_many:
            fields.append(self._relationship_field(directive, imports, targets))

        rendered_relationships = []
        if relationships:
            imports.add("typing", "TYPE_CHECKING")
            imports.add("core.models.record", "RelationshipDirective")
            rendered_relationships = [self._directive_literal(d) for d in one_to_one + one_to_many]

        logger.debug(f"Rendering {len(fields)} fields for {table.table_name}")
        return self.templates.render_base(
            version=__version__,
            table_name=table.table_name,
            schema_name=table.schema_name,
            class_name=self.class_name_for(table),
            imports=imports.render(),
            type_checking_imports="\n".join(targets.lines()),
            primary_keys=[c.name for c in table.primary_keys],
            relationships=rendered_relationships,
            fields=fields,
        )

    def render_top_level(
        self,
        table: TableDescription,
        relationships: Iterable[RelationshipDirective] = (),
    ) -> str:
        """Source text of the top-level scaffold (no file I/O)."""
        return self.templates.render_top_level(
            version=__version__,
            table_name=table.table_name,
            class_name=self.class_name_for(table),
            base_module=f"{self.package}.generated.{self.module_name_for(table)}_base",
            references=self.reference_imports(table, relationships),
        )

    def reference_imports(
        self,
        table: TableDescription,
        relationships: Iterable[RelationshipDirective],
    ) -> List[str]:
        """
        Runtime imports of relationship targets for the top-level module.

        A self reference needs none: the class is already bound in its
        own module when model_rebuild() runs.
        """
        own_module = f"{self.package}.{self.module_name_for(table)}"
        own_class = self.class_name_for(table)

        targets = ImportSet()
        for directive in relationships:
            module, target_class = self._target_import(directive)
            if (module, target_class) != (own_module, own_class):
                targets.add(module, target_class)
        return targets.lines()

    # =========================================================================
    # FIELD BUILDERS
    # =========================================================================

    def _column_field(self, column, imports: ImportSet) -> GeneratedField:
        field_type = self.type_mapper.to_field_type(column.sql_type, column.name)
        python_type = self.type_mapper.python_annotation(field_type)
        if python_type.import_line:
            imports.add_line(python_type.import_line)

        name = db_to_code(column.name, capitalize=False)
        optional = column.nullable or column.primary_key
        annotation = python_type.annotation
        if optional:
            imports.add("typing", "Optional")
            annotation = f"Optional[{annotation}]"

        args = ["default=None" if optional else "...", f"alias={json.dumps(column.name)}"]
        if field_type == FieldType.STRING and column.size > 0:
            args.append(f"max_length={column.size}")
        if column.comment:
            args.append(f"description={json.dumps(column.comment)}")
        if name in self.foreign_key_fields:
            args.append("exclude=True")

        return GeneratedField(
            name=name,
            accessor=db_to_code(column.name),
            annotation=annotation,
            field_args=", ".join(args),
        )

    def _target_import(self, directive: RelationshipDirective) -> Tuple[str, str]:
        """(module, class) a relationship target is imported from."""
        target_class = directive.target_name
        if "." in directive.target:
            return directive.target.rsplit(".", 1)[0], target_class
        return f"{self.package}.{to_db_case(target_class)}", target_class

    def _relationship_field(
        self,
        directive: RelationshipDirective,
        imports: ImportSet,
        targets: ImportSet,
    ) -> GeneratedField:
        module, target_class = self._target_import(directive)
        targets.add(module, target_class)

        # Quoted: resolved by the top-level module's model_rebuild()
        accessor = directive.field_name[0].upper() + directive.field_name[1:]
        if directive.is_one_to_many:
            return GeneratedField(
                name=directive.field_name,
                accessor=accessor,
                annotation=f'List["{target_class}"]',
                field_args="default_factory=list",
                many=True,
            )

        imports.add("typing", "Optional")
        return GeneratedField(
            name=directive.field_name,
            accessor=accessor,
            annotation=f'Optional["{target_class}"]',
            field_args="default=None",
        )

    @staticmethod
    def _directive_literal(directive: RelationshipDirective) -> str:
        args = ", ".join(
            json.dumps(v)
            for v in (directive.target, directive.column, directive.referenced_column, directive.field_name)
        )
        return f"RelationshipDirective.{directive.kind.value}({args})"

    @staticmethod
    def _ensure_package(directory: Path) -> None:
        # Concurrent runs may create the same path
        directory.mkdir(parents=True, exist_ok=True)
        init = directory / "__init__.py"
        if not init.exists():
            init.write_text("", encoding="utf-8")


__all__ = ["ReverseGenerator"]
