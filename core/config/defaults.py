# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for connections, DDL, codegen and caching
# CREATED: 05 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for SchemaBridge operations.
These can be overridden via environment variables or CLI arguments.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class DatabaseDefaults:
    """
    Defaults for database connections.

    DATABASE_URL wins over the individual POSTGRES_* components.
    """
    database_url: Optional[str] = None
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    user: str = "postgres"
    password: str = ""
    sslmode: str = "prefer"

    def connection_string(self) -> str:
        """Build the PostgreSQL conninfo URL."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}"
            f"/{self.database}?sslmode={self.sslmode}"
        )

    @classmethod
    def from_env(cls) -> "DatabaseDefaults":
        """Create from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", 5432)),
            database=os.getenv("POSTGRES_DB", "postgres"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", ""),
            sslmode=os.getenv("POSTGRES_SSLMODE", "prefer"),
        )


@dataclass(frozen=True)
class DdlDefaults:
    """
    Defaults for DDL synthesis.

    The dialect changes the auto-increment clause and a few type
    spellings. Under sqlite, one-to-many keys move from a deferred ALTER
    onto the child table's CREATE.
    """
    dialect: str = "mysql"

    @classmethod
    def from_env(cls) -> "DdlDefaults":
        """Create from environment variables."""
        return cls(
            dialect=os.getenv("DDL_DIALECT", "mysql").lower(),
        )


@dataclass(frozen=True)
class CodegenDefaults:
    """Defaults for the reverse generator."""
    output_root: str = "."
    package: str = "models"

    @classmethod
    def from_env(cls) -> "CodegenDefaults":
        """Create from environment variables."""
        return cls(
            output_root=os.getenv("CODEGEN_OUTPUT_ROOT", "."),
            package=os.getenv("CODEGEN_PACKAGE", "models"),
        )


@dataclass(frozen=True)
class CacheDefaults:
    """Defaults for the query cache."""
    ttl_seconds: float = 60.0

    @classmethod
    def from_env(cls) -> "CacheDefaults":
        """Create from environment variables."""
        return cls(
            ttl_seconds=float(os.getenv("QUERY_CACHE_TTL_SECONDS", 60.0)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    database: DatabaseDefaults = field(default_factory=DatabaseDefaults)
    ddl: DdlDefaults = field(default_factory=DdlDefaults)
    codegen: CodegenDefaults = field(default_factory=CodegenDefaults)
    cache: CacheDefaults = field(default_factory=CacheDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            database=DatabaseDefaults.from_env(),
            ddl=DdlDefaults.from_env(),
            codegen=CodegenDefaults.from_env(),
            cache=CacheDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DatabaseDefaults",
    "DdlDefaults",
    "CodegenDefaults",
    "CacheDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
