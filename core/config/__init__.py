# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 05 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for SchemaBridge.
"""

from core.config.defaults import (
    DatabaseDefaults,
    DdlDefaults,
    CodegenDefaults,
    CacheDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DatabaseDefaults",
    "DdlDefaults",
    "CodegenDefaults",
    "CacheDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
