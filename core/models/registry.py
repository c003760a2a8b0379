# ============================================================================
# RECORD REGISTRY
# ============================================================================
# STATUS: Core - Record registration and lookup
# PURPOSE: Resolve relationship targets and discover records in a namespace
# CREATED: 06 OCT 2026
# EXPORTS: RecordRegistry
# ============================================================================
"""
Record Registry

Relationship directives name their target by record name ("Address" or
"models.address.Address"). The DDL synthesizer needs the target's table
and primary key, so it resolves names through a registry.

Design:
- Explicit instance, injected into whoever needs lookups
- Keys are both the simple name and, when known, the dotted path
- Fail-fast on registering a different record under a taken name
- Namespace discovery imports a module (or package and its direct
  submodules) and collects Pydantic record models in definition order
"""

import importlib
import logging
import pkgutil
from typing import Dict, Iterator, List, Optional, Type, Union

from pydantic import BaseModel

from core.errors import RecordDefinitionError
from core.models.record import RecordDefinition

logger = logging.getLogger(__name__)

RecordLike = Union[RecordDefinition, Type[BaseModel]]


class RecordRegistry:
    """
    Name -> RecordDefinition lookup.

    Usage:
        registry = RecordRegistry()
        registry.register(Address)                    # Pydantic model
        registry.register(RecordDefinition(name="Agent", ...))
        registry.get("Address").resolved_table_name  # "address"
    """

    def __init__(self, records: Optional[List[RecordLike]] = None):
        self._records: Dict[str, RecordDefinition] = {}
        self._order: List[RecordDefinition] = []
        for record in records or []:
            self.register(record)

    def register(self, record: RecordLike, qualified_name: Optional[str] = None) -> RecordDefinition:
        """
        Register a record definition or a Pydantic record model.

        Returns:
            The registered RecordDefinition
        """
        definition = self.to_definition(record)
        if qualified_name is None and isinstance(record, type):
            qualified_name = f"{record.__module__}.{record.__qualname__}"

        for key in filter(None, (definition.name, qualified_name)):
            existing = self._records.get(key)
            if existing is not None and existing is not definition and existing != definition:
                raise RecordDefinitionError(key, "a different record is already registered under this name")
            self._records[key] = definition

        if not any(r is definition for r in self._order):
            self._order.append(definition)
        logger.debug(f"Registered record: {definition.name} -> {definition.resolved_table_name}")
        return definition

    def get(self, name: str) -> Optional[RecordDefinition]:
        """Look up by dotted path first, then by simple name."""
        record = self._records.get(name)
        if record is None and "." in name:
            record = self._records.get(name.rsplit(".", 1)[-1])
        return record

    def get_or_raise(self, name: str) -> RecordDefinition:
        record = self.get(name)
        if record is None:
            raise RecordDefinitionError(name, "no record is registered under this name")
        return record

    def discover(self, module_name: str) -> List[RecordDefinition]:
        """
        Import a module and register every record model it defines.

        For a package, the package itself and its direct submodules are
        scanned (not nested packages' children).

        Returns:
            Discovered definitions in module / definition order
        """
        module = importlib.import_module(module_name)
        modules = [module]
        if hasattr(module, "__path__"):
            for info in pkgutil.iter_modules(module.__path__):
                modules.append(importlib.import_module(f"{module_name}.{info.name}"))

        found = []
        for mod in modules:
            for obj in vars(mod).values():
                if isinstance(obj, RecordDefinition):
                    found.append(self.register(obj))
                elif RecordDefinition.is_record_model(obj) and obj.__module__ == mod.__name__:
                    found.append(self.register(obj))

        logger.info(f"Discovered {len(found)} records in {module_name}")
        return found

    @staticmethod
    def to_definition(record: RecordLike) -> RecordDefinition:
        if isinstance(record, RecordDefinition):
            return record
        if isinstance(record, type) and issubclass(record, BaseModel):
            return RecordDefinition.from_model(record)
        raise RecordDefinitionError(repr(record), "not a RecordDefinition or Pydantic model class")

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __iter__(self) -> Iterator[RecordDefinition]:
        return iter(list(self._order))

    def __len__(self) -> int:
        return len(self._order)


__all__ = ["RecordRegistry", "RecordLike"]
