"""
Schema migrator for the orderflow database.

Migrations are ``vNNN_name.sql`` files next to this module. Each one runs in
its own transaction together with its ``schema_migrations`` row, so a failed
migration leaves the schema at the previous version. Applied files are pinned
by checksum; editing one after it shipped stops the migrator.

``verify_schema_integrity`` checks more than SQLite's own integrity: the
orderflow invariants that live in the schema (stock floor, discount/payment
lock, one CHARGE per order, the order version column) must be present.
"""

import asyncio
import hashlib
import re
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import aiosqlite

from orderflow.config import get_logger, get_settings
from orderflow.core.exceptions import MigrationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

FILENAME_PATTERN = re.compile(r"v(\d{3})_([a-z0-9_]+)\.sql")

REQUIRED_TABLES = (
    "product_variants",
    "stock_movements",
    "accounts",
    "orders",
    "transactions",
    "pricing_rules",
    "notifications",
    "schema_migrations",
)

REQUIRED_COLUMNS = {
    "orders": ("status", "payment_method", "discount_percent", "version"),
    "product_variants": ("stock", "pieces_per_set"),
}

# Table -> CHECK clauses its CREATE statement must carry (whitespace-normalized)
REQUIRED_CHECKS = {
    "product_variants": ("CHECK (stock >= 0)",),
    "orders": ("CHECK (discount_percent = 0 OR payment_method = 'PAY_NOW')",),
}

CHARGE_INDEX = ("transactions", "idx_transactions_order_charge")

TRACKING_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    execution_time_ms INTEGER,
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
        match = FILENAME_PATTERN.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)

    def script(self) -> str:
        """The file wrapped in a transaction that also records it as applied."""
        sql = self.path.read_text(encoding="utf-8").strip()
        return (
            "BEGIN;\n"
            f"{sql}\n;\n"
            "INSERT INTO schema_migrations (version, name, checksum) "
            f"VALUES ('{self.version}', '{self.name}', '{self.checksum}');\n"
            "COMMIT;"
        )


@dataclass
class MigrationResult:
    version: str
    name: str
    execution_time_ms: int


@dataclass
class MigrationStatus:
    exists: bool
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    @property
    def current_version(self) -> str | None:
        return self.applied[-1] if self.applied else None


@dataclass
class SchemaCheck:
    name: str
    passed: bool
    detail: str = ""


def discover_migrations() -> list[MigrationInfo]:
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum they were applied with."""
    await conn.execute(TRACKING_TABLE_SQL)
    cursor = await conn.execute(
        "SELECT version, checksum FROM schema_migrations ORDER BY version"
    )
    return {row[0]: row[1] for row in await cursor.fetchall()}


def pending_migrations(
    discovered: list[MigrationInfo], applied: dict[str, str]
) -> list[MigrationInfo]:
    """
    Migrations still to run, in version order.

    Raises:
        MigrationError: an applied file was edited afterwards
    """
    pending = []
    for migration in discovered:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise MigrationError(
                migration.version,
                f"checksum {migration.checksum} differs from applied {recorded}",
            )
    return pending


async def apply_migration(conn: aiosqlite.Connection, migration: MigrationInfo) -> MigrationResult:
    """
    Run one migration atomically.

    Raises:
        MigrationError: the script failed; nothing from it was kept
    """
    start = time.perf_counter()
    try:
        await conn.executescript(migration.script())
    except aiosqlite.Error as e:
        if conn.in_transaction:
            await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        raise MigrationError(migration.version, str(e)) from e

    elapsed = int((time.perf_counter() - start) * 1000)
    await conn.execute(
        "UPDATE schema_migrations SET execution_time_ms = ? WHERE version = ?",
        (elapsed, migration.version),
    )
    await conn.commit()
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(
        version=migration.version, name=migration.name, execution_time_ms=elapsed
    )


async def create_backup(conn: aiosqlite.Connection, db_path: Path) -> Path:
    """Copy the live database through SQLite's backup API, WAL contents included."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    async with aiosqlite.connect(backup_path) as target:
        await conn.backup(target)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database up to the newest migration.

    When there is something to apply to an existing database, a backup is
    taken first and removed again once every migration succeeded. On failure
    it is kept for the operator.

    Raises:
        MigrationError: checksum drift or a failing migration
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    existed = db_path.exists()

    results: list[MigrationResult] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        pending = pending_migrations(discover_migrations(), await get_applied_migrations(conn))
        await conn.commit()
        if not pending:
            logger.debug("database_up_to_date", db_path=str(db_path))
            return results

        backup_path = None
        if existed and create_backup_before:
            backup_path = await create_backup(conn, db_path)

        for migration in pending:
            results.append(await apply_migration(conn, migration))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        if violations:
            raise MigrationError(
                pending[-1].version, f"{len(violations)} foreign key violations after migrating"
            )

    if backup_path is not None:
        backup_path.unlink()
    logger.info(
        "database_migrated",
        db_path=str(db_path),
        applied=[r.version for r in results],
    )
    return results


# Alias used by the app lifespan
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    db_path = db_path or get_settings().storage.db_path
    if not db_path.exists():
        return MigrationStatus(exists=False, pending=[m.version for m in discover_migrations()])

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
    return MigrationStatus(
        exists=True,
        applied=sorted(applied),
        pending=[m.version for m in discover_migrations() if m.version not in applied],
    )


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


async def verify_schema_integrity(db_path: Path | None = None) -> list[SchemaCheck]:
    """SQLite integrity plus the schema-level invariants orderflow relies on."""
    db_path = db_path or get_settings().storage.db_path
    checks: list[SchemaCheck] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        result = (await cursor.fetchone())[0]
        checks.append(SchemaCheck("integrity", result == "ok", result))

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        checks.append(
            SchemaCheck("foreign_keys", not violations, f"{len(violations)} violations")
        )

        cursor = await conn.execute("SELECT name, sql FROM sqlite_master WHERE type = 'table'")
        tables = {row[0]: _normalize(row[1] or "") for row in await cursor.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in tables]
        checks.append(SchemaCheck("required_tables", not missing, ", ".join(missing)))

        for table, columns in REQUIRED_COLUMNS.items():
            cursor = await conn.execute(f"PRAGMA table_info({table})")
            present = {row[1] for row in await cursor.fetchall()}
            absent = [c for c in columns if c not in present]
            checks.append(SchemaCheck(f"columns:{table}", not absent, ", ".join(absent)))

        for table, clauses in REQUIRED_CHECKS.items():
            sql = tables.get(table, "")
            absent = [c for c in clauses if _normalize(c) not in sql]
            checks.append(SchemaCheck(f"checks:{table}", not absent, "; ".join(absent)))

        table, index = CHARGE_INDEX
        cursor = await conn.execute(f"PRAGMA index_list({table})")
        indexes = {row[1]: (row[2], row[4]) for row in await cursor.fetchall()}
        unique, partial = indexes.get(index, (0, 0))
        checks.append(
            SchemaCheck(
                "unique_order_charge",
                bool(unique and partial),
                "" if index in indexes else f"{index} missing",
            )
        )

    return checks


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: ``orderflow-migrate [migrate|status|verify]``."""
    import argparse

    parser = argparse.ArgumentParser(prog="orderflow-migrate")
    parser.add_argument(
        "command", nargs="?", default="migrate", choices=["migrate", "status", "verify"]
    )
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    args = parser.parse_args(argv)

    async def run() -> int:
        if args.command == "status":
            status = await get_migration_status(args.db_path)
            print(f"exists={status.exists} current={status.current_version}")
            print(f"pending={status.pending}")
            return 0

        if args.command == "verify":
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                mark = "PASS" if check.passed else "FAIL"
                print(f"[{mark}] {check.name} {check.detail}".rstrip())
            return 0 if all(c.passed for c in checks) else 1

        try:
            results = await initialize_database(
                args.db_path, create_backup_before=not args.no_backup
            )
        except MigrationError as e:
            print(f"[FAILED] {e.message}")
            return 1
        for result in results:
            print(f"[APPLIED] v{result.version}_{result.name} ({result.execution_time_ms}ms)")
        return 0

    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
