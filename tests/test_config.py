# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# STATUS: Tests - Defaults and environment overrides
# PURPOSE: Verify from_env parsing and connection string precedence
# CREATED: 14 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

from dataclasses import FrozenInstanceError

import pytest

from core.config import (
    CacheDefaults,
    CodegenDefaults,
    DatabaseDefaults,
    DdlDefaults,
    get_defaults,
    reset_defaults,
)

ENV_VARS = [
    "DATABASE_URL",
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_SSLMODE",
    "DDL_DIALECT",
    "CODEGEN_OUTPUT_ROOT",
    "CODEGEN_PACKAGE",
    "QUERY_CACHE_TTL_SECONDS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_defaults()
    yield
    reset_defaults()


class TestDatabaseDefaults:
    def test_built_from_components(self):
        defaults = DatabaseDefaults(host="db", port=6543, database="app", user="svc", password="pw")
        assert defaults.connection_string() == "postgresql://svc:pw@db:6543/app?sslmode=prefer"

    def test_database_url_wins(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u@elsewhere/x")
        monkeypatch.setenv("POSTGRES_HOST", "ignored")
        assert DatabaseDefaults.from_env().connection_string() == "postgresql://u@elsewhere/x"

    def test_components_from_env(self, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db.internal")
        monkeypatch.setenv("POSTGRES_PORT", "5433")
        monkeypatch.setenv("POSTGRES_SSLMODE", "require")

        defaults = DatabaseDefaults.from_env()
        assert defaults.host == "db.internal"
        assert defaults.port == 5433
        assert defaults.connection_string().endswith("@db.internal:5433/postgres?sslmode=require")

    def test_empty_database_url_ignored(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")
        assert DatabaseDefaults.from_env().database_url is None

    def test_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DatabaseDefaults().host = "other"


class TestOtherDefaults:
    def test_builtin_values(self):
        assert DdlDefaults().dialect == "mysql"
        assert CodegenDefaults().package == "models"
        assert CodegenDefaults().output_root == "."
        assert CacheDefaults().ttl_seconds == 60.0

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DDL_DIALECT", "PostgreSQL")
        monkeypatch.setenv("CODEGEN_PACKAGE", "app.records")
        monkeypatch.setenv("QUERY_CACHE_TTL_SECONDS", "2.5")

        assert DdlDefaults.from_env().dialect == "postgresql"
        assert CodegenDefaults.from_env().package == "app.records"
        assert CacheDefaults.from_env().ttl_seconds == 2.5


class TestGlobalDefaults:
    def test_cached_until_reset(self, monkeypatch):
        first = get_defaults()
        assert get_defaults() is first

        monkeypatch.setenv("CODEGEN_PACKAGE", "changed")
        assert get_defaults().codegen.package == "models"

        reset_defaults()
        assert get_defaults().codegen.package == "changed"
