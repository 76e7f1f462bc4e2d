"""Database migrations module."""

from mro.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    MigrationResult,
    MigrationStatus,
    SchemaCheck,
    discover_migrations,
    find_drift,
    get_current_version,
    get_migration_status,
    initialize_database,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "REQUIRED_TABLES",
    "MigrationInfo",
    "MigrationResult",
    "MigrationStatus",
    "SchemaCheck",
    "discover_migrations",
    "find_drift",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "run_migrations",
    "verify_schema_integrity",
]
