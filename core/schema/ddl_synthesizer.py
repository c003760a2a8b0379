# ============================================================================
# DDL SYNTHESIZER
# ============================================================================
# STATUS: Core - DDL generation from record declarations
# PURPOSE: CREATE / DROP / deferred ALTER text, optionally executed
# CREATED: 07 OCT 2026
# EXPORTS: DdlSynthesizer, StatementExecutor, TablePlan
# DEPENDENCIES: pydantic
# ============================================================================
"""
Record Declaration to DDL Synthesizer.

Walks a RecordDefinition (or a Pydantic model with __sql_* metadata) and
produces the DDL for its table.

Text format (MySQL reference layout):

    CREATE TABLE listing (
    \tid BIGINT NOT NULL AUTO_INCREMENT PRIMARY KEY,
    \tprice DOUBLE NOT NULL,
    \taddress_id BIGINT,
    \tFOREIGN KEY(address_id) REFERENCES address(id)
    );
    ALTER TABLE listing_detail ADD FOREIGN KEY(listing_id) REFERENCES listing(id);

Column rules:
- transient fields and the "many" side of one-to-many emit nothing
- `\\t<column> <type>[ NOT NULL][ key clause]`
- NOT NULL for the primary key and for not_null fields
- primary key: no strategy or a non-AUTO strategy -> " PRIMARY KEY",
  AUTO -> the dialect's auto-increment clause
- a one-to-one becomes a column named by the directive, typed like the
  target's primary key, plus one inline FOREIGN KEY line
- a one-to-many becomes a deferred ALTER TABLE on the child table

SQLite has no ALTER TABLE ... ADD FOREIGN KEY: under SqlDialect.SQLITE
the child's CREATE carries the key of every registered parent's
one-to-many instead, and the auto-generated key is spelled
`INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT`. Register the parent (or
create both in one batch) before planning the child.

Execution never retries and never rolls back; the caller owns the
transaction. Batch ordering is the caller's unless resolve_order=True.

Usage:
    synthesizer = DdlSynthesizer(registry=registry)
    print(synthesizer.create_table_statement(Listing))

    synthesizer = DdlSynthesizer(registry=registry, executor=connection)
    synthesizer.create_tables([Address, Listing, ListingDetail], execute=True)
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from core.errors import DdlExecutionError, RecordDefinitionError, SchemaBridgeError
from core.logging import ComponentType, get_logger, log_context
from core.models.record import FieldDefinition, RecordDefinition, RelationshipDirective
from core.models.registry import RecordLike, RecordRegistry
from core.schema.ddl_utils import SqlDialect, qualified_name, to_db_case, validate_identifier
from core.schema.ordering import creation_order, drop_order
from core.schema.type_mapper import TypeMapper

logger = get_logger(__name__, ComponentType.DDL)


class StatementExecutor(Protocol):
    """Anything that can run one DDL statement (a MetadataConnection does)."""

    def execute_statement(self, sql: str) -> None:
        ...


@dataclass
class TablePlan:
    """Synthesized DDL for one table, before text assembly."""
    table_name: str
    create: str
    alters: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return f"{self.create};\n" + "".join(f"{alter};\n" for alter in self.alters)


class DdlSynthesizer:
    """
    Synthesize (and optionally execute) DDL for record declarations.

    Args:
        registry: Resolves relationship targets; one-to-one targets must
            be registered, one-to-many targets fall back to db case
        type_mapper: FieldType -> SQL type
        dialect: Auto-increment clause and type spelling
        executor: Runs statements when execute=True
    """

    def __init__(
        self,
        registry: Optional[RecordRegistry] = None,
        type_mapper: Optional[TypeMapper] = None,
        dialect: Union[SqlDialect, str] = SqlDialect.MYSQL,
        executor: Optional[StatementExecutor] = None,
    ):
        self.registry = registry if registry is not None else RecordRegistry()
        self.type_mapper = type_mapper or TypeMapper()
        self.dialect = SqlDialect.parse(dialect)
        self.executor = executor

    # =========================================================================
    # SINGLE TABLE
    # =========================================================================

    def create_table_statement(
        self,
        record: RecordLike,
        relationships: Iterable[RelationshipDirective] = (),
        execute: bool = False,
    ) -> str:
        """
        Synthesize CREATE TABLE (plus deferred ALTERs) for one record.

        Args:
            record: RecordDefinition or Pydantic record model
            relationships: Extra directives on top of the record's own
            execute: Also run CREATE, then each ALTER

        Returns:
            DDL text
        """
        plan = self.plan_create(record, relationships)
        if execute:
            self._execute(plan.table_name, [plan.create])
            self._execute(plan.table_name, plan.alters)
        return plan.text

    def drop_table_statement(self, record: RecordLike, execute: bool = False) -> str:
        """Synthesize `DROP TABLE <name>;` for one record."""
        definition = self._definition(record)
        table_name = self._table_name(definition)
        statement = f"DROP TABLE {table_name}"
        logger.debug(f"Synthesized drop for {definition.name}: {statement}")
        if execute:
            self._execute(table_name, [statement])
        return f"{statement};"

    # =========================================================================
    # BATCHES
    # =========================================================================

    def create_tables(
        self,
        records: Sequence[RecordLike],
        execute: bool = False,
        resolve_order: bool = False,
    ) -> str:
        """
        Synthesize CREATE DDL for several records.

        When executing, every CREATE runs before any ALTER so that
        one-to-many children exist by the time their foreign key is added.
        """
        definitions = [self._definition(r) for r in records]
        self._register_batch(definitions)
        if resolve_order:
            definitions = creation_order(definitions)

        plans = [self.plan_create(d) for d in definitions]
        if execute:
            for plan in plans:
                self._execute(plan.table_name, [plan.create])
            for plan in plans:
                self._execute(plan.table_name, plan.alters)
            logger.info(f"Created {len(plans)} tables")

        return "".join(f"{plan.text}\n" for plan in plans)

    def drop_tables(
        self,
        records: Sequence[RecordLike],
        execute: bool = False,
        resolve_order: bool = False,
    ) -> str:
        """Synthesize DROP DDL for several records, in the given order unless resolved."""
        definitions = [self._definition(r) for r in records]
        if resolve_order:
            definitions = drop_order(definitions)

        text = "".join(f"{self.drop_table_statement(d, execute=execute)}\n" for d in definitions)
        if execute:
            logger.info(f"Dropped {len(definitions)} tables")
        return text

    def create_tables_in_namespace(self, module_name: str, execute: bool = False, resolve_order: bool = False) -> str:
        """Discover the records of a module / package and create them all."""
        records = self.registry.discover(module_name)
        return self.create_tables(records, execute=execute, resolve_order=resolve_order)

    def drop_tables_in_namespace(self, module_name: str, execute: bool = False, resolve_order: bool = False) -> str:
        """Discover the records of a module / package and drop them all."""
        records = self.registry.discover(module_name)
        return self.drop_tables(records, execute=execute, resolve_order=resolve_order)

    # =========================================================================
    # PLANNING
    # =========================================================================

    def plan_create(self, record: RecordLike, relationships: Iterable[RelationshipDirective] = ()) -> TablePlan:
        """Build the CREATE statement and ALTER list for one record."""
        definition = self._definition(record)
        directives = list(definition.relationships)
        directives.extend(d for d in relationships if d not in directives)

        one_to_one = [d for d in directives if d.is_one_to_one]
        one_to_many = [d for d in directives if d.is_one_to_many]
        many_fields = {d.field_name for d in one_to_many}
        by_field = {d.field_name: d for d in one_to_one}

        table_name = self._table_name(definition)

        with log_context(record=definition.name, table_name=table_name, operation="create"):
            primary_key = definition.primary_key_field

            columns: List[str] = []
            placed = set()
            for f in definition.fields:
                if f.transient or f.name in many_fields:
                    continue
                directive = by_field.get(f.name)
                if directive is not None:
                    columns.append(self._one_to_one_column(definition, directive, f.not_null))
                    placed.add(f.name)
                    continue
                if f.field_type is None:
                    raise RecordDefinitionError(
                        definition.name,
                        f"field '{f.name}' has no type and no relationship directive",
                    )
                columns.append(self._column(f))

            for directive in one_to_one:
                if directive.field_name not in placed:
                    columns.append(self._one_to_one_column(definition, directive, False))

            columns.extend(self._inline_foreign_key(definition, d) for d in one_to_one)
            if self.dialect.supports_alter_foreign_key:
                alters = [self._deferred_foreign_key(definition, table_name, d) for d in one_to_many]
            else:
                alters = []
                for line in self._parent_foreign_keys(definition):
                    if line not in columns:
                        columns.append(line)
                if one_to_many:
                    logger.debug(
                        f"{len(one_to_many)} one-to-many keys of {definition.name} "
                        f"are declared on the child CREATE ({self.dialect.value})"
                    )

            create = f"CREATE TABLE {table_name} (\n" + ",\n".join(columns) + "\n)"
            logger.debug(
                f"Synthesized create for {definition.name}: {len(columns)} lines, "
                f"{len(alters)} alters, primary key {primary_key.name if primary_key else None}"
            )

        return TablePlan(table_name=table_name, create=create, alters=alters)

    # =========================================================================
    # LINE BUILDERS
    # =========================================================================

    def _column(self, f: FieldDefinition) -> str:
        column_name = validate_identifier(f.resolved_column_name, "column")
        sql_type = self._sql_type(f)
        nullable = " NOT NULL" if f.primary_key or f.not_null else ""
        key = ""
        if f.primary_key and f.is_auto_generated:
            sql_type = self.dialect.spell_auto_increment_type(sql_type)
            key = self.dialect.auto_increment_clause
        elif f.primary_key:
            key = " PRIMARY KEY"
        return f"\t{column_name} {sql_type}{nullable}{key}"

    def _one_to_one_column(self, owner: RecordDefinition, directive: RelationshipDirective, not_null: bool) -> str:
        _, target_pk = self._one_to_one_target(owner, directive)
        column_name = validate_identifier(directive.column, "column")
        nullable = " NOT NULL" if not_null else ""
        return f"\t{column_name} {self._sql_type(target_pk)}{nullable}"

    def _inline_foreign_key(self, owner: RecordDefinition, directive: RelationshipDirective) -> str:
        target, target_pk = self._one_to_one_target(owner, directive)
        return (
            f"\tFOREIGN KEY({directive.column}) REFERENCES "
            f"{self._table_name(target)}({target_pk.resolved_column_name})"
        )

    def _parent_foreign_keys(self, child: RecordDefinition) -> List[str]:
        """
        Inline FOREIGN KEY lines for registered one-to-many relationships
        that target this record.
        """
        lines = []
        for parent in self.registry:
            for directive in parent.relationships:
                if not directive.is_one_to_many:
                    continue
                target = self.registry.get(directive.target)
                if target is None or target.name != child.name:
                    continue
                validate_identifier(directive.column, "column")
                validate_identifier(directive.referenced_column, "column")
                lines.append(
                    f"\tFOREIGN KEY({directive.column}) REFERENCES "
                    f"{self._table_name(parent)}({directive.referenced_column})"
                )
        return lines

    def _deferred_foreign_key(self, owner: RecordDefinition, table_name: str, directive: RelationshipDirective) -> str:
        target = self.registry.get(directive.target)
        child_table = self._table_name(target) if target else validate_identifier(to_db_case(directive.target), "table")
        validate_identifier(directive.column, "column")
        validate_identifier(directive.referenced_column, "column")
        return (
            f"ALTER TABLE {child_table} ADD FOREIGN KEY({directive.column}) "
            f"REFERENCES {table_name}({directive.referenced_column})"
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _one_to_one_target(self, owner: RecordDefinition, directive: RelationshipDirective):
        target = self.registry.get(directive.target)
        if target is None:
            raise RecordDefinitionError(
                owner.name,
                f"one-to-one target '{directive.target}' of field '{directive.field_name}' is not registered",
            )
        target_pk = target.primary_key_field
        if target_pk is None:
            raise RecordDefinitionError(
                owner.name,
                f"one-to-one target '{target.name}' has no primary key field",
            )
        return target, target_pk

    def _sql_type(self, f: FieldDefinition) -> str:
        sql_type = self.type_mapper.to_sql_type(
            f.field_type,
            f.max_length,
            field_name=f.name,
            enum_labels=f.enum_labels,
            enum_encoding=f.enum_encoding,
        )
        return self.dialect.spell_type(sql_type)

    def _register_batch(self, definitions: List[RecordDefinition]) -> None:
        # Records of one batch can reference each other without prior registration
        for definition in definitions:
            if definition.name not in self.registry:
                self.registry.register(definition)

    @staticmethod
    def _table_name(definition: RecordDefinition) -> str:
        return qualified_name(definition.resolved_table_name, definition.schema_name)

    def _definition(self, record: RecordLike) -> RecordDefinition:
        if isinstance(record, str):
            return self.registry.get_or_raise(record)
        return self.registry.to_definition(record)

    def _execute(self, table_name: str, statements: List[str]) -> None:
        if not statements:
            return
        if self.executor is None:
            raise SchemaBridgeError(
                "execute=True requires a statement executor",
                operation="ddl",
                entity=table_name,
            )
        for statement in statements:
            with log_context(table_name=table_name, operation="execute"):
                try:
                    self.executor.execute_statement(statement)
                except SchemaBridgeError:
                    raise
                except Exception as e:
                    logger.error(f"DDL failed for {table_name}: {e}")
                    raise DdlExecutionError(statement, table_name, e) from e
                logger.info(f"Executed: {statement.splitlines()[0]}")


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["DdlSynthesizer", "StatementExecutor", "TablePlan"]
