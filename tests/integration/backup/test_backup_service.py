"""BackupService 통합 테스트"""

import os
import re
import time
from decimal import Decimal
from pathlib import Path

import pytest

from adapters.db.sqlite_adapter import SQLITE_HEADER, SQLiteAdapter
from adapters.mock.uploader import MockBackupUploader
from core.backup.service import SAFETY_COPY_PREFIX, BackupService
from core.config.loader import AppConfig
from core.domain.models import AppSettings, QuickEntry
from core.storage.ledger_store import LedgerStore
from tests.helpers import add_customer, add_tx


@pytest.fixture
def service(db: SQLiteAdapter, store: LedgerStore, app_config: AppConfig, temp_dir: Path) -> BackupService:
    return BackupService(db, store, app_config, retry_delay_sec=0, temp_dir=temp_dir / "tmp")


def _touch_backup(directory: Path, name: str, age_days: float = 0) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_bytes(SQLITE_HEADER)
    if age_days:
        old = time.time() - age_days * 86400
        os.utime(path, (old, old))
    return path


class TestBackup:
    """백업"""

    @pytest.mark.asyncio
    async def test_backup_copies_live_file(self, service: BackupService, store: LedgerStore, app_config: AppConfig) -> None:
        """파일 이름 형식과 내용"""
        await add_customer(store, "Ayşe")

        result = await service.backup()

        assert result.success
        assert result.path.parent == app_config.backup_dir
        assert re.fullmatch(r"kuyumcu_backup_\d{8}_\d{6}\.db3", result.path.name)
        assert result.path.read_bytes() == app_config.db_path.read_bytes()

    @pytest.mark.asyncio
    async def test_backup_includes_uncommitted_changes(self, service: BackupService, db: SQLiteAdapter) -> None:
        """보류 중인 변경도 백업에 포함"""
        await db.execute("INSERT INTO customer (name) VALUES ('Pending')")

        result = await service.backup()

        async with SQLiteAdapter(result.path, readonly=True) as copy:
            row = await copy.fetchone("SELECT COUNT(*) FROM customer")
        assert row[0] == 1

    @pytest.mark.asyncio
    async def test_backup_to_custom_dir(self, service: BackupService, temp_dir: Path) -> None:
        target = temp_dir / "usb"

        result = await service.backup(target)

        assert result.success
        assert result.path.parent == target

    @pytest.mark.asyncio
    async def test_missing_live_file(self, store: LedgerStore, app_config: AppConfig, temp_dir: Path) -> None:
        """연결되지 않은 다른 경로는 실패 결과"""
        missing = AppConfig(
            data_dir=temp_dir / "nowhere",
            db_file="none.db3",
            backup_dir=app_config.backup_dir,
            backup_prefix=app_config.backup_prefix,
            backup_extension=app_config.backup_extension,
            backup_keep_days=30,
            auto_backup_interval_hours=24,
            log_level="INFO",
        )
        service = BackupService(store.db, store, missing, retry_delay_sec=0)

        result = await service.backup()

        assert not result.success
        assert result.path is None

    @pytest.mark.asyncio
    async def test_refused_during_open_transaction(self, service: BackupService, store: LedgerStore, db: SQLiteAdapter) -> None:
        """진행 중인 transaction()은 백업이 커밋하지 않음"""
        await add_customer(store, "Kalıcı")

        with pytest.raises(RuntimeError):
            async with db.transaction():
                await db.execute("DELETE FROM customer")
                result = await service.backup()
                assert not result.success
                raise RuntimeError("abort")

        assert [c.name for c in await store.list_customers()] == ["Kalıcı"]


class TestBackupFiles:
    """백업 목록과 정리"""

    def test_list_newest_first(self, service: BackupService, app_config: AppConfig) -> None:
        directory = app_config.backup_dir
        _touch_backup(directory, "kuyumcu_backup_20260101_090000.db3")
        _touch_backup(directory, "kuyumcu_backup_20260301_090000.db3")
        _touch_backup(directory, "kuyumcu_backup_20260201_090000.db3")
        _touch_backup(directory, "before_restore_20260401_090000.db3")
        _touch_backup(directory, "notes.txt")

        names = [p.name for p in service.list_backups()]

        assert names == [
            "kuyumcu_backup_20260301_090000.db3",
            "kuyumcu_backup_20260201_090000.db3",
            "kuyumcu_backup_20260101_090000.db3",
        ]

    def test_list_without_directory(self, service: BackupService) -> None:
        assert service.list_backups() == []

    def test_cleanup_by_modified_time(self, service: BackupService, app_config: AppConfig) -> None:
        directory = app_config.backup_dir
        old = _touch_backup(directory, "kuyumcu_backup_20250101_090000.db3", age_days=40)
        recent = _touch_backup(directory, "kuyumcu_backup_20260101_090000.db3", age_days=5)

        assert service.cleanup_old_backups(30) == 1
        assert not old.exists()
        assert recent.exists()

    def test_cleanup_uses_config_default(self, service: BackupService, app_config: AppConfig) -> None:
        old = _touch_backup(app_config.backup_dir, "kuyumcu_backup_20250101_090000.db3", age_days=31)

        assert service.cleanup_old_backups() == 1
        assert not old.exists()


class TestRestore:
    """복원"""

    @pytest.mark.asyncio
    async def test_round_trip(self, service: BackupService, store: LedgerStore) -> None:
        """백업 → 변경 → 복원 시 고객/거래만 되돌림"""
        ayse = await add_customer(store, "Ayşe")
        await add_tx(store, ayse.id, "100")
        await add_tx(store, ayse.id, "5", is_deleted=True)
        await store.save_settings(AppSettings(business_name="Eski"))
        backup = await service.backup()

        await add_customer(store, "Sonradan")
        await store.save_settings(AppSettings(business_name="Yeni"))
        await store.save_quick_entry(QuickEntry(full_name="Bekleyen", amount=Decimal("1")))

        result = await service.restore(backup.path)

        assert result.success
        assert result.customer_count == 1
        assert result.transaction_count == 2
        assert [c.name for c in await store.list_customers()] == ["Ayşe"]
        assert len(await store.list_transactions(include_deleted=True)) == 2
        # 설정과 빠른 입력은 그대로
        assert (await store.get_settings()).business_name == "Yeni"
        assert len(await store.list_quick_entries()) == 1

    @pytest.mark.asyncio
    async def test_safety_copy_created(self, service: BackupService, store: LedgerStore, app_config: AppConfig) -> None:
        await add_customer(store, "Ayşe")
        backup = await service.backup()
        await add_customer(store, "Current")

        result = await service.restore(backup.path)

        assert result.safety_copy is not None
        assert result.safety_copy.name.startswith(SAFETY_COPY_PREFIX)
        async with SQLiteAdapter(result.safety_copy, readonly=True) as copy:
            row = await copy.fetchone("SELECT COUNT(*) FROM customer")
        assert row[0] == 2

    @pytest.mark.asyncio
    async def test_invalid_file_changes_nothing(self, service: BackupService, store: LedgerStore, temp_dir: Path, app_config: AppConfig) -> None:
        await add_customer(store, "Kalıcı")
        bogus = temp_dir / "bogus.db3"
        bogus.write_text("not a database", encoding="utf-8")

        result = await service.restore(bogus)

        assert not result.success
        assert result.safety_copy is None
        assert [c.name for c in await store.list_customers()] == ["Kalıcı"]
        assert not app_config.backup_dir.exists()

    @pytest.mark.asyncio
    async def test_missing_file(self, service: BackupService, temp_dir: Path) -> None:
        result = await service.restore(temp_dir / "missing.db3")

        assert not result.success
        assert "bulunamadı" in result.message

    @pytest.mark.asyncio
    async def test_file_without_transactions_table(self, service: BackupService, store: LedgerStore, temp_dir: Path) -> None:
        """거래 테이블이 없는 오래된 파일은 거래 0건으로 복원"""
        await add_tx(store, 1, "10")
        old_file = temp_dir / "old.db3"
        async with SQLiteAdapter(old_file) as old:
            await old.execute("CREATE TABLE customer (id INTEGER PRIMARY KEY, name TEXT, phone_number TEXT)")
            await old.execute("INSERT INTO customer VALUES (7, 'Eski Müşteri', NULL)")
            await old.commit()

        result = await service.restore(old_file)

        assert result.success
        assert result.transaction_count == 0
        assert [(c.id, c.name) for c in await store.list_customers()] == [(7, "Eski Müşteri")]
        assert await store.list_transactions(include_deleted=True) == []

    @pytest.mark.asyncio
    async def test_unexpected_columns_changes_nothing(self, service: BackupService, store: LedgerStore, temp_dir: Path) -> None:
        """컬럼 이름이 다른 파일은 예외 없이 실패 결과"""
        await add_customer(store, "Kalıcı")
        foreign = temp_dir / "foreign.db3"
        async with SQLiteAdapter(foreign) as other:
            await other.execute("CREATE TABLE customer (Id INTEGER PRIMARY KEY, Name TEXT)")
            await other.execute("INSERT INTO customer VALUES (1, 'Yabancı')")
            await other.commit()

        result = await service.restore(foreign)

        assert not result.success
        assert result.safety_copy is None
        assert [c.name for c in await store.list_customers()] == ["Kalıcı"]

    @pytest.mark.asyncio
    async def test_invalid_rows_rejected(self, service: BackupService, store: LedgerStore) -> None:
        """검증을 통과하지 못하는 거래(음수 금액)가 있으면 복원하지 않음"""
        ayse = await add_customer(store, "Ayşe")
        tx = await add_tx(store, ayse.id, "50")
        backup = await service.backup()
        async with SQLiteAdapter(backup.path) as copy:
            await copy.execute("UPDATE transactions SET amount = '-50'")
            await copy.commit()

        result = await service.restore(backup.path)

        assert not result.success
        assert [c.name for c in await store.list_customers()] == ["Ayşe"]
        assert (await store.get_transaction(tx.id)).amount == Decimal("50")


class TestUpload:
    """원격 업로드"""

    @pytest.mark.asyncio
    async def test_requires_credentials(self, service: BackupService) -> None:
        uploader = MockBackupUploader()

        status = await service.upload_backup(uploader)

        assert "ayarlanmamış" in status
        assert uploader.connected_with is None
        assert uploader.uploads == []

    @pytest.mark.asyncio
    async def test_connect_failure(self, service: BackupService, store: LedgerStore) -> None:
        await store.save_settings(AppSettings(google_client_id="id", google_client_secret="secret"))
        uploader = MockBackupUploader(can_connect=False)

        status = await service.upload_backup(uploader)

        assert "bağlantısı kurulamadı" in status
        assert uploader.uploads == []

    @pytest.mark.asyncio
    async def test_upload_failure_removes_snapshot(self, service: BackupService, store: LedgerStore, temp_dir: Path) -> None:
        await store.save_settings(AppSettings(google_client_id="id", google_client_secret="secret"))

        status = await service.upload_backup(MockBackupUploader(should_fail=True))

        assert status == "Yükleme başarısız oldu: Mock upload failure"
        assert list((temp_dir / "tmp").iterdir()) == []

    @pytest.mark.asyncio
    async def test_success(self, service: BackupService, store: LedgerStore, temp_dir: Path) -> None:
        await store.save_settings(AppSettings(google_client_id="id", google_client_secret="secret"))
        uploader = MockBackupUploader()

        status = await service.upload_backup(uploader)

        assert len(uploader.uploads) == 1
        record = uploader.uploads[0]
        assert re.fullmatch(r"\d{8}_\d{6}_kuyumcu_backup\.db3", record.file_name)
        assert record.content.startswith(SQLITE_HEADER)
        assert status == f"Veritabanı yedekleme başarılı. Dosya adı: {record.file_name}"
        assert uploader.connected_with.google_client_id == "id"
        assert list((temp_dir / "tmp").iterdir()) == []
