"""
Versioned schema migrator.

Applies `vNNN_name.sql` files from this directory in order and records
each one with its checksum in `schema_migrations`. The database file is
copied aside before migrating and restored if a migration raises.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from renewals.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "categories",
    "items",
    "user_preferences",
    "reminder_ledger",
    "reminder_interactions",
    "schema_migrations",
)

# Unique keys that deduplicate reminders and interactions across processes
DEDUP_KEYS: dict[str, tuple[str, ...]] = {
    "reminder_ledger": ("item_id", "user_id", "offset_days", "renewal_date"),
    "reminder_interactions": ("entry_id", "type", "outcome_key", "minute_bucket"),
}

_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.match(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        content = path.read_text(encoding="utf-8")
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=hashlib.sha256(content.encode()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in version order."""
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Map of applied version to checksum; empty on a fresh database."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.monotonic()

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        elapsed = int((time.monotonic() - started) * 1000)
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed),
        )
        await conn.commit()
    except Exception as e:
        await conn.rollback()
        elapsed = int((time.monotonic() - started) * 1000)
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(migration.version, migration.name, False, elapsed, str(e))

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(migration.version, migration.name, True, elapsed)


def create_backup(db_path: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Apply all pending migrations.

    Args:
        db_path: Database file, defaults to the configured path.
        create_backup_before: Copy an existing database aside first.

    Returns:
        Results of the migrations that were attempted.
    """
    db_path = Path(db_path or get_settings().storage.db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            applied = await get_applied_migrations(conn)
            for migration in discover_migrations():
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        # Edited after being applied; never re-run
                        logger.warning("migration_checksum_changed", version=migration.version)
                    continue

                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path and backup_path.exists():
            restore_backup(db_path, backup_path)
        raise

    if backup_path and all(r.success for r in results):
        backup_path.unlink()

    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    db_path = Path(db_path or get_settings().storage.db_path)
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": sorted(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
    }


async def _unique_keys(conn: aiosqlite.Connection, table: str) -> set[tuple[str, ...]]:
    keys = set()
    cursor = await conn.execute(f"PRAGMA index_list({table})")
    for _seq, name, unique, *_ in await cursor.fetchall():
        if not unique:
            continue
        info = await conn.execute(f"PRAGMA index_info('{name}')")
        keys.add(tuple(col for _seqno, _cid, col in sorted(await info.fetchall())))
    return keys


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """Integrity, foreign key, required-table and dedup-key checks."""
    db_path = Path(db_path or get_settings().storage.db_path)
    checks = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = await cursor.fetchone()
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity and integrity[0] == "ok" else "FAIL",
        })

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "PASS" if not violations else "FAIL",
            "violations": len(violations),
        })

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        existing = {row[0] for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in existing]
        checks.append({
            "check": "required_tables",
            "status": "PASS" if not missing else "FAIL",
            "missing": missing,
        })

        absent = [
            table
            for table, columns in DEDUP_KEYS.items()
            if columns not in await _unique_keys(conn, table)
        ]
        checks.append({
            "check": "dedup_keys",
            "status": "PASS" if not absent else "FAIL",
            "missing": absent,
        })

    return checks
