# ============================================================================
# CODE GENERATION TEMPLATES
# ============================================================================
# STATUS: Core - Jinja2 templates for generated record modules
# PURPOSE: Render base / top-level record modules and manage their imports
# CREATED: 08 OCT 2026
# EXPORTS: CodeTemplates, ImportSet, GeneratedField, TemplateRenderError
# DEPENDENCIES: jinja2
# ============================================================================
"""
Code Generation Templates

Two modules are generated per table:

- `<package>/generated/<module>_base.py` - a Pydantic model with one
  aliased field and a get/set accessor pair per column, plus relationship
  fields. Rewritten on every run.
- `<package>/<module>.py` - a thin subclass scaffold. Written once, then
  owned by the developer.

Relationship targets are imported by the base module under TYPE_CHECKING
only and annotated as strings. The scaffold imports them after its class
body and calls model_rebuild(), so Listing <-> ListingDetail pairs and
self references (Employee.manager) import in any order.

The Jinja2 environment uses StrictUndefined: a missing context value
raises TemplateRenderError.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Set

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateSyntaxError, UndefinedError

from core.errors import SchemaBridgeError


# ============================================================================
# TEMPLATES
# ============================================================================

BASE_TEMPLATE = '''"""
Base record for table {{ table_name }}.

Generated by SchemaBridge {{ version }}. Rewritten on every run; put
hand-written logic in {{ class_name }} instead.
"""

{{ imports }}
{% if type_checking_imports %}

if TYPE_CHECKING:
{{ type_checking_imports|indent(4, first=True) }}
{% endif %}


class {{ class_name }}Base(BaseModel):
    """Generated fields and accessors for {{ table_name }}."""

    model_config = {"populate_by_name": True, "validate_assignment": True}

    __sql_table__: ClassVar[str] = {{ table_name|pyliteral }}
{% if schema_name %}
    __sql_schema__: ClassVar[str] = {{ schema_name|pyliteral }}
{% endif %}
    __sql_primary_key__: ClassVar[List[str]] = {{ primary_keys|pyliteral }}
    __sql_serial_columns__: ClassVar[List[str]] = {{ primary_keys|pyliteral }}
{% if relationships %}
    __sql_relationships__: ClassVar[List[RelationshipDirective]] = [
{% for rel in relationships %}
        {{ rel }},
{% endfor %}
    ]
{% endif %}

{% for f in fields %}
    {{ f.name }}: {{ f.annotation }} = Field({{ f.field_args }})
{% endfor %}
{% for f in fields %}

    def get{{ f.accessor }}(self) -> {{ f.annotation }}:
        return self.{{ f.name }}

    def set{{ f.accessor }}(self, value: {{ f.annotation }}) -> None:
{% if f.many %}
        items = list(value)
        self.{{ f.name }}.clear()
        self.{{ f.name }}.extend(items)
{% else %}
        self.{{ f.name }} = value
{% endif %}
{% endfor %}
'''

TOP_LEVEL_TEMPLATE = '''"""
Record for table {{ table_name }}.

Scaffolded once by SchemaBridge {{ version }}; never regenerated.
"""

from {{ base_module }} import {{ class_name }}Base


class {{ class_name }}({{ class_name }}Base):
    """{{ class_name }} record."""
{% if references %}


# Relationship targets, bound after {{ class_name }} exists so cyclic imports resolve
{% for line in references %}
{{ line }}  # noqa: E402
{% endfor %}

{{ class_name }}.model_rebuild(raise_errors=False)
{% endif %}
'''


# ============================================================================
# CONTEXT TYPES
# ============================================================================

@dataclass
class GeneratedField:
    """One field (column or relationship) of a generated base model."""
    name: str               # zipCode
    accessor: str           # ZipCode -> getZipCode / setZipCode
    annotation: str         # Optional[str]
    field_args: str         # default=None, alias="zip_code", max_length=10
    many: bool = False      # one-to-many list, replace-contents setter


class ImportSet:
    """
    Deduplicated `from x import y` lines for one generation run.

    Names from the same module are merged onto one line. Rendered in
    three groups (stdlib, third party, local) like hand-written modules.
    """

    STDLIB = ("typing", "datetime", "enum", "decimal")
    THIRD_PARTY = ("pydantic",)

    def __init__(self):
        self._names: Dict[str, Set[str]] = {}

    def add(self, module: str, name: str) -> "ImportSet":
        self._names.setdefault(module, set()).add(name)
        return self

    def add_line(self, line: str) -> "ImportSet":
        """Add a `from module import name` line."""
        module, _, names = line.removeprefix("from ").partition(" import ")
        for name in names.split(","):
            self.add(module.strip(), name.strip())
        return self

    def __contains__(self, module: str) -> bool:
        return module in self._names

    def __len__(self) -> int:
        return sum(len(names) for names in self._names.values())

    def lines(self) -> List[str]:
        """One `from x import y` line per module, sorted by module."""
        return [f"from {module} import {', '.join(sorted(names))}" for module, names in sorted(self._names.items())]

    def render(self) -> str:
        groups: List[List[str]] = [[], [], []]
        for module in sorted(self._names):
            root = module.split(".", 1)[0]
            if root in self.STDLIB:
                group = groups[0]
            elif root in self.THIRD_PARTY:
                group = groups[1]
            else:
                group = groups[2]
            group.append(f"from {module} import {', '.join(sorted(self._names[module]))}")
        return "\n\n".join("\n".join(g) for g in groups if g)


# ============================================================================
# RENDERER
# ============================================================================

def pyliteral(value: Any) -> str:
    """Python literal for strings / lists of strings (double-quoted)."""
    return json.dumps(value)


class CodeTemplates:
    """
    Jinja2 renderer for the generated modules.

    Thread-safe, can be reused across generation runs.
    """

    def __init__(self):
        self._env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["pyliteral"] = pyliteral
        self._base = self._env.from_string(BASE_TEMPLATE)
        self._top_level = self._env.from_string(TOP_LEVEL_TEMPLATE)

    def render_base(self, **context: Any) -> str:
        return self._render(self._base, context)

    def render_top_level(self, **context: Any) -> str:
        return self._render(self._top_level, context)

    @staticmethod
    def _render(template, context: Dict[str, Any]) -> str:
        try:
            return template.render(context)
        except (TemplateSyntaxError, UndefinedError) as e:
            raise TemplateRenderError(f"Failed to render generated module: {e}") from e


class TemplateRenderError(SchemaBridgeError):
    """Raised when a code template cannot be rendered."""

    def __init__(self, message: str):
        super().__init__(message, operation="codegen")


__all__ = [
    "BASE_TEMPLATE",
    "TOP_LEVEL_TEMPLATE",
    "GeneratedField",
    "ImportSet",
    "CodeTemplates",
    "TemplateRenderError",
    "pyliteral",
]
