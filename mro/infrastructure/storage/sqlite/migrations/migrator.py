"""
Versioned schema migrations for the MRO database.

Files named `v001_name.sql` in this package are applied in version order.
Each file runs inside one transaction together with its `schema_migrations`
row, so a failing script leaves neither tables nor a version record behind.
An applied file whose contents later change is reported as drift and blocks
startup rather than being re-applied.
"""

import asyncio
import hashlib
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from mro.config import get_logger, get_settings
from mro.core.exceptions import ConfigurationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "schema_migrations",
    "stock_items",
    "stock_usage_history",
    "wheel_rotations",
    "wheel_rotation_history",
    "user_activities",
)

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER NOT NULL DEFAULT 0,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
)
"""


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    exists: bool
    current_version: str | None = None
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    drifted: list[str] = field(default_factory=list)


@dataclass
class SchemaCheck:
    name: str
    passed: bool
    detail: str = ""


def discover_migrations(migrations_dir: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in version order; misnamed files are skipped."""
    migrations = []
    for path in migrations_dir.glob("v*.sql"):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(migrations, key=lambda m: int(m.version))


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[str, str]:
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await _applied_checksums(conn)
    return max(applied, key=int) if applied else None


def find_drift(applied: dict[str, str], migrations: list[MigrationInfo]) -> list[str]:
    """Versions whose file no longer matches the checksum recorded when applied."""
    return [
        m.version
        for m in migrations
        if m.version in applied and applied[m.version] != m.checksum
    ]


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """Run one migration file and record it atomically."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.monotonic()
    sql = migration.path.read_text(encoding="utf-8")

    try:
        await conn.executescript(f"BEGIN;\n{sql}\n")
        await conn.execute(
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) VALUES (?, ?, ?, ?)",
            (
                migration.version,
                migration.name,
                migration.checksum,
                int((time.monotonic() - started) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=int((time.monotonic() - started) * 1000),
            error=str(e),
        )

    elapsed = int((time.monotonic() - started) * 1000)
    logger.info("migration_applied", version=migration.version, execution_time_ms=elapsed)
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


async def initialize_database(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Bring the database up to the newest migration.

    Returns one result per migration attempted; already applied versions are
    skipped and the run stops at the first failure.

    Raises:
        ConfigurationError: An applied migration file has been edited since.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    migrations = discover_migrations(migrations_dir)
    results: list[MigrationResult] = []

    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        await conn.execute(_VERSION_TABLE)
        await conn.commit()

        applied = await _applied_checksums(conn)
        drifted = find_drift(applied, migrations)
        if drifted:
            logger.error("migration_drift_detected", versions=drifted)
            raise ConfigurationError(
                f"Applied migrations changed on disk: {', '.join(drifted)}"
            )

        for migration in migrations:
            if migration.version in applied:
                continue
            result = await apply_migration(conn, migration)
            results.append(result)
            if not result.success:
                break

    return results


run_migrations = initialize_database


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> MigrationStatus:
    db_path = db_path or get_settings().storage.db_path
    migrations = discover_migrations(migrations_dir)

    if not db_path.exists():
        return MigrationStatus(exists=False, pending=[m.version for m in migrations])

    async with aiosqlite.connect(db_path) as conn:
        applied = await _applied_checksums(conn)

    return MigrationStatus(
        exists=True,
        current_version=max(applied, key=int) if applied else None,
        applied=sorted(applied, key=int),
        pending=[m.version for m in migrations if m.version not in applied],
        drifted=find_drift(applied, migrations),
    )


async def verify_schema_integrity(db_path: Path | None = None) -> list[SchemaCheck]:
    """Page integrity, foreign keys and presence of every MRO table."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = len(await cursor.fetchall())

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row[0] for row in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        SchemaCheck("integrity", integrity == "ok", integrity),
        SchemaCheck("foreign_keys", violations == 0, f"{violations} violation(s)"),
        SchemaCheck("required_tables", not missing, ", ".join(missing)),
    ]


def main() -> None:
    """`mro-migrate` entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="MRO database migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="Show applied and pending versions")
    mode.add_argument("--verify", action="store_true", help="Check schema integrity")
    args = parser.parse_args()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status.exists}")
            print(f"Current version: {status.current_version or 'none'}")
            print(f"Pending: {', '.join(status.pending) or 'none'}")
            if status.drifted:
                print(f"Changed since applied: {', '.join(status.drifted)}")
            return 1 if status.drifted else 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                print(f"[{'PASS' if check.passed else 'FAIL'}] {check.name} {check.detail}".rstrip())
            return 0 if all(c.passed for c in checks) else 1

        results = await initialize_database(args.db_path)
        for result in results:
            outcome = "ok" if result.success else f"FAILED: {result.error}"
            print(f"v{result.version} {result.name}: {outcome} ({result.execution_time_ms}ms)")
        if not results:
            print("Schema is up to date")
        return 0 if all(r.success for r in results) else 1

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
