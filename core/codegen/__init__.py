# ============================================================================
# CODEGEN MODULE
# ============================================================================
# STATUS: Core - Schema to code generation
# PURPOSE: Generate Pydantic record modules from introspected tables
# CREATED: 08 OCT 2026
# ============================================================================

from core.codegen.templates import CodeTemplates, GeneratedField, ImportSet, TemplateRenderError
from core.codegen.generator import ReverseGenerator

__all__ = [
    "ReverseGenerator",
    "CodeTemplates",
    "GeneratedField",
    "ImportSet",
    "TemplateRenderError",
]
