"""Unit tests for database migrator."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import aiosqlite
import pytest

from orderflow.core.exceptions import MigrationError
from orderflow.infrastructure.storage.sqlite.migrations.migrator import (
    REQUIRED_TABLES,
    MigrationInfo,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
    main,
    pending_migrations,
    verify_schema_integrity,
)

MIGRATOR = "orderflow.infrastructure.storage.sqlite.migrations.migrator"


def _settings_for(db_path: Path) -> MagicMock:
    mock = MagicMock()
    mock.storage.db_path = db_path
    return mock


class TestMigrationInfo:
    def test_from_file(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial_schema.sql"
        migration_file.write_text("-- Test migration\nSELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial_schema"
        assert len(info.checksum) == 16

    @pytest.mark.parametrize("name", ["initial.sql", "v1_short.sql", "v001_Bad-Name.sql"])
    def test_invalid_filename_raises(self, tmp_path: Path, name):
        bad = tmp_path / name
        bad.write_text("SELECT 1;")
        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(bad)

    def test_script_records_itself_inside_one_transaction(self, tmp_path: Path):
        path = tmp_path / "v003_add_index.sql"
        path.write_text("CREATE INDEX idx_x ON orders(status);\n")

        script = MigrationInfo.from_file(path).script()

        assert script.startswith("BEGIN;")
        assert script.endswith("COMMIT;")
        assert "VALUES ('003', 'add_index'" in script


class TestDiscoverMigrations:
    def test_ships_schema_and_order_version(self):
        versions = [m.version for m in discover_migrations()]
        assert versions[:2] == ["001", "002"]

    def test_sorted_and_skips_invalid(self, tmp_path: Path):
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "v3_loose.sql").write_text("SELECT 3;")

        with patch(f"{MIGRATOR}.MIGRATIONS_DIR", tmp_path):
            result = discover_migrations()

        assert [m.version for m in result] == ["001", "002"]


class TestPendingMigrations:
    def test_skips_applied(self, tmp_path: Path):
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        with patch(f"{MIGRATOR}.MIGRATIONS_DIR", tmp_path):
            discovered = discover_migrations()

        pending = pending_migrations(discovered, {"001": discovered[0].checksum})

        assert [m.version for m in pending] == ["002"]

    def test_edited_applied_file_is_refused(self, tmp_path: Path):
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        with patch(f"{MIGRATOR}.MIGRATIONS_DIR", tmp_path):
            discovered = discover_migrations()

        with pytest.raises(MigrationError) as exc_info:
            pending_migrations(discovered, {"001": "0000000000000000"})

        assert exc_info.value.code == "MIGRATION_FAILED"
        assert exc_info.value.details["version"] == "001"


class TestInitializeDatabase:
    async def test_applies_schema_once(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "orderflow.db"

        with patch(f"{MIGRATOR}.get_settings", return_value=_settings_for(db_path)):
            first = await initialize_database(db_path, create_backup_before=False)
            second = await initialize_database(db_path, create_backup_before=True)

        assert [r.version for r in first] == ["001", "002"]
        assert second == []
        assert list(db_path.parent.glob("*.backup_*.db")) == []

        async with aiosqlite.connect(db_path) as conn:
            applied = await get_applied_migrations(conn)
        assert set(applied) == {"001", "002"}

    async def test_failed_migration_keeps_previous_schema_and_backup(self, tmp_path: Path):
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        (migrations / "v001_first.sql").write_text("CREATE TABLE a (id INTEGER);")
        db_path = tmp_path / "orderflow.db"

        with patch(f"{MIGRATOR}.MIGRATIONS_DIR", migrations):
            await initialize_database(db_path, create_backup_before=False)
            (migrations / "v002_broken.sql").write_text(
                "CREATE TABLE b (id INTEGER);\nINSERT INTO missing_table VALUES (1);"
            )
            with pytest.raises(MigrationError) as exc_info:
                await initialize_database(db_path, create_backup_before=True)

        assert exc_info.value.details["version"] == "002"
        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
            applied = await get_applied_migrations(conn)
        assert "a" in tables
        assert "b" not in tables
        assert set(applied) == {"001"}
        assert len(list(tmp_path.glob("*.backup_*.db"))) == 1

    async def test_every_required_table_created(self, initialized_db: Path):
        async with aiosqlite.connect(initialized_db) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            tables = {row[0] for row in await cursor.fetchall()}
        assert set(REQUIRED_TABLES) <= tables

    async def test_orders_start_at_version_zero(self, initialized_db: Path):
        async with aiosqlite.connect(initialized_db) as conn:
            await conn.execute(
                """
                INSERT INTO orders (
                    id, account_id, status, payment_method, total_amount,
                    factory_amount, items_json, created_at, updated_at
                ) VALUES ('ord-x', 'acc-1', 'PENDING', 'LEDGER',
                          '100.00', '100.00', '[]', 'now', 'now')
                """
            )
            cursor = await conn.execute("SELECT version FROM orders WHERE id = 'ord-x'")
            assert (await cursor.fetchone())[0] == 0

    async def test_schema_rejects_discounted_credit_order(self, initialized_db: Path):
        async with aiosqlite.connect(initialized_db) as conn:
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute(
                    """
                    INSERT INTO orders (
                        id, account_id, status, payment_method, discount_percent,
                        total_amount, factory_amount, items_json, created_at, updated_at
                    ) VALUES ('ord-x', 'acc-1', 'PENDING', 'LEDGER', 2,
                              '100.00', '100.00', '[]', 'now', 'now')
                    """
                )

    async def test_schema_rejects_negative_stock(self, initialized_db: Path):
        async with aiosqlite.connect(initialized_db) as conn:
            with pytest.raises(aiosqlite.IntegrityError):
                await conn.execute(
                    """
                    INSERT INTO product_variants (
                        id, product_id, stock, price_per_piece, pieces_per_set,
                        created_at, updated_at
                    ) VALUES ('var-x', 'prod-x', -1, '1.00', 1, 'now', 'now')
                    """
                )


class TestStatus:
    async def test_up_to_date(self, initialized_db: Path):
        status = await get_migration_status(initialized_db)

        assert status.exists is True
        assert status.pending == []
        assert status.current_version == "002"

    async def test_missing_database_has_everything_pending(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "missing.db")

        assert status.exists is False
        assert status.current_version is None
        assert status.pending[:2] == ["001", "002"]


class TestVerifySchemaIntegrity:
    async def test_fresh_schema_passes(self, initialized_db: Path):
        checks = await verify_schema_integrity(initialized_db)

        names = {c.name for c in checks}
        assert {"checks:orders", "checks:product_variants", "unique_order_charge"} <= names
        assert [c.name for c in checks if not c.passed] == []

    async def test_missing_charge_index_and_version_fail(self, tmp_path: Path):
        db_path = tmp_path / "old.db"
        migrations = tmp_path / "migrations"
        migrations.mkdir()
        shipped = Path(discover_migrations()[0].path)
        (migrations / "v001_initial.sql").write_text(shipped.read_text(encoding="utf-8"))

        with patch(f"{MIGRATOR}.MIGRATIONS_DIR", migrations):
            await initialize_database(db_path, create_backup_before=False)
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("DROP INDEX idx_transactions_order_charge")
            await conn.commit()

        checks = {c.name: c for c in await verify_schema_integrity(db_path)}

        assert checks["unique_order_charge"].passed is False
        assert checks["columns:orders"].passed is False
        assert checks["columns:orders"].detail == "version"
        assert checks["checks:orders"].passed is True


class TestCli:
    def test_migrate_then_verify(self, tmp_path: Path, capsys):
        db_path = tmp_path / "cli.db"

        assert main(["migrate", "--db-path", str(db_path), "--no-backup"]) == 0
        assert main(["verify", "--db-path", str(db_path)]) == 0

        out = capsys.readouterr().out
        assert "[APPLIED] v001_initial" in out
        assert "[FAIL]" not in out
