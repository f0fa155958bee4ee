"""
백업/복원 서비스

백업:
    현재 장부 파일을 통째로 읽어 <prefix>_<yyyyMMdd_HHmmss>.<ext>로 저장.
    파일이 잠겨 있으면 한 번만 대기 후 재시도.

복원:
    검증 → 읽기 전용 로드 → 현재 파일 안전 복사 → 고객/거래 원자적 교체.
    검증/로드 단계에서 실패하면 아무 것도 삭제하지 않음.
    app_settings는 절대 변경하지 않음.

백업/복원은 예외 대신 (success, message) 결과를 반환.
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite

from core.backup.importer import DatabaseImporter
from core.constants import Defaults
from core.errors import ConcurrencyError, FormatError, LedgerError, StorageIOError
from core.utils.timezone import backup_timestamp, now_utc

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter
    from adapters.interfaces import BackupUploader
    from core.config.loader import AppConfig
    from core.storage.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

SAFETY_COPY_PREFIX = "before_restore"


@dataclass(frozen=True)
class BackupResult:
    """백업 결과"""

    success: bool
    message: str
    path: Path | None = None


@dataclass(frozen=True)
class RestoreResult:
    """복원 결과"""

    success: bool
    message: str
    customer_count: int = 0
    transaction_count: int = 0
    safety_copy: Path | None = None


class BackupService:
    """백업/복원 조정자

    Args:
        db: 현재 장부 파일의 SQLite 어댑터
        store: 장부 저장소 (복원 시 replace_ledger 사용)
        config: 애플리케이션 설정 (파일 경로, 접두어, 확장자)
        retry_delay_sec: 잠긴 파일 재시도 대기 시간
        temp_dir: 업로드용 임시 파일 디렉토리 (None이면 시스템 임시 디렉토리)

    사용 예시:
    ```python
    service = BackupService(db, store, config)

    result = await service.backup()
    if result.success:
        print(result.path)

    restore = await service.restore(Path("kuyumcu_backup_20260101_120000.db3"))
    print(restore.message)
    ```
    """

    def __init__(
        self,
        db: SQLiteAdapter,
        store: LedgerStore,
        config: AppConfig,
        retry_delay_sec: float = Defaults.LOCKED_FILE_RETRY_DELAY_SEC,
        temp_dir: Path | None = None,
    ):
        self.db = db
        self.store = store
        self.config = config
        self.retry_delay_sec = retry_delay_sec
        self.temp_dir = temp_dir or Path(tempfile.gettempdir())

    @property
    def live_path(self) -> Path:
        return self.config.db_path

    @property
    def backup_dir(self) -> Path:
        return self.config.backup_dir

    def backup_file_name(self, timestamp: str | None = None) -> str:
        """<prefix>_<yyyyMMdd_HHmmss>.<ext>"""
        timestamp = timestamp or backup_timestamp()
        return f"{self.config.backup_prefix}_{timestamp}.{self.config.backup_extension}"

    # =========================================================================
    # 파일 I/O
    # =========================================================================

    async def _read_live_file(self) -> bytes:
        """현재 장부 파일 전체 읽기

        보류 중인 변경을 먼저 디스크에 반영.
        읽기 실패 시 retry_delay_sec 대기 후 한 번 재시도.

        Raises:
            StorageIOError: 파일 없음 또는 읽기 실패
            ConcurrencyError: 다른 프로세스가 파일을 잠금
        """
        if not self.live_path.is_file():
            raise StorageIOError(f"Veritabanı dosyası bulunamadı: {self.live_path}")

        if self.db.is_connected:
            await self.db.checkpoint()

        try:
            return await asyncio.to_thread(self.live_path.read_bytes)
        except OSError as e:
            logger.warning(
                f"장부 파일 읽기 실패, {self.retry_delay_sec}초 후 재시도: {e}"
            )

        await asyncio.sleep(self.retry_delay_sec)

        try:
            return await asyncio.to_thread(self.live_path.read_bytes)
        except PermissionError as e:
            raise ConcurrencyError(f"Veritabanı dosyası kullanımda: {e}") from e
        except OSError as e:
            raise StorageIOError(f"Veritabanı dosyası okunamadı: {e}") from e

    async def _write_copy(self, target: Path) -> Path:
        content = await self._read_live_file()

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_bytes, content)
        except OSError as e:
            raise StorageIOError(f"Yedek dosyası yazılamadı: {target} ({e})") from e

        return target

    # =========================================================================
    # 백업
    # =========================================================================

    async def backup(self, target_dir: Path | None = None) -> BackupResult:
        """장부 파일 백업

        Args:
            target_dir: 저장 디렉토리 (None이면 설정의 backup_dir)

        Returns:
            BackupResult (실패해도 예외 없음)
        """
        target = (target_dir or self.backup_dir) / self.backup_file_name()

        try:
            await self._write_copy(target)
        except LedgerError as e:
            logger.error(f"백업 실패: {e}")
            return BackupResult(success=False, message=str(e))

        logger.info(f"백업 완료: {target}")
        return BackupResult(
            success=True,
            message=f"Veritabanı başarıyla yedeklendi: {target.name}",
            path=target,
        )

    def list_backups(self) -> list[Path]:
        """백업 파일 목록 (최신순)"""
        if not self.backup_dir.is_dir():
            return []

        pattern = f"{self.config.backup_prefix}_*.{self.config.backup_extension}"
        return sorted(self.backup_dir.glob(pattern), key=lambda p: p.name, reverse=True)

    def cleanup_old_backups(self, days_to_keep: int | None = None) -> int:
        """보관 기간이 지난 백업 삭제

        Args:
            days_to_keep: 보관 일수 (None이면 설정값)

        Returns:
            삭제한 파일 수
        """
        days = days_to_keep if days_to_keep is not None else self.config.backup_keep_days
        cutoff = (now_utc() - timedelta(days=days)).timestamp()

        deleted = 0
        for path in self.list_backups():
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    deleted += 1
                    logger.info(f"오래된 백업 삭제: {path.name}")
            except OSError as e:
                logger.warning(f"백업 삭제 실패: {path.name} ({e})")

        return deleted

    # =========================================================================
    # 복원
    # =========================================================================

    async def restore(self, candidate_path: Path | str) -> RestoreResult:
        """백업 파일에서 고객/거래 복원

        Args:
            candidate_path: 복원할 백업 파일

        Returns:
            RestoreResult (실패해도 예외 없음)
        """
        candidate = Path(candidate_path)
        logger.info(f"복원 시작: {candidate}")

        try:
            async with DatabaseImporter(candidate) as importer:
                customers = await importer.get_customers(include_deleted=True)
                transactions = await importer.get_transactions(include_deleted=True)
        except (LedgerError, aiosqlite.Error) as e:
            logger.error(f"복원 파일 검증/로드 실패: {e}")
            return RestoreResult(success=False, message=_restore_error_message(e))
        except Exception as e:
            logger.exception(f"복원 파일 로드 중 예기치 않은 오류: {e}")
            return RestoreResult(success=False, message=_restore_error_message(e))

        try:
            safety_copy = await self._write_copy(
                self.backup_dir
                / f"{SAFETY_COPY_PREFIX}_{backup_timestamp()}.{self.config.backup_extension}"
            )
        except LedgerError as e:
            logger.error(f"복원 전 안전 복사 실패: {e}")
            return RestoreResult(success=False, message=str(e))

        try:
            await self.store.replace_ledger(customers, transactions)
        except (LedgerError, aiosqlite.Error) as e:
            logger.error(f"장부 교체 실패 (롤백됨): {e}")
            return RestoreResult(
                success=False,
                message=f"Geri yükleme başarısız oldu: {e}",
                safety_copy=safety_copy,
            )

        logger.info(
            f"복원 완료: 고객 {len(customers)}명, 거래 {len(transactions)}건 "
            f"(안전 복사: {safety_copy.name})"
        )
        return RestoreResult(
            success=True,
            message=(
                f"Veritabanı başarıyla geri yüklendi: "
                f"{len(customers)} müşteri, {len(transactions)} işlem"
            ),
            customer_count=len(customers),
            transaction_count=len(transactions),
            safety_copy=safety_copy,
        )

    # =========================================================================
    # 원격 업로드
    # =========================================================================

    async def create_upload_snapshot(self) -> Path:
        """업로드용 임시 복사본 생성 (<yyyyMMdd_HHmmss>_<prefix>.<ext>)

        Raises:
            StorageIOError, ConcurrencyError: 복사 실패
        """
        name = f"{backup_timestamp()}_{self.config.backup_prefix}.{self.config.backup_extension}"
        return await self._write_copy(self.temp_dir / name)

    async def upload_backup(self, uploader: BackupUploader) -> str:
        """원격 저장소로 백업 업로드

        임시 복사본은 결과와 관계없이 삭제.

        Returns:
            사용자에게 표시할 상태 문구
        """
        settings = await self.store.get_settings()
        if not settings.has_cloud_credentials:
            return (
                "Google Drive bilgileri ayarlanmamış. Lütfen Ayarlar sayfasından "
                "Google Client ID ve Secret bilgilerini girin."
            )

        if not self.live_path.is_file():
            return "Veritabanı dosyası bulunamadı."

        if not await uploader.connect(settings):
            return (
                "Google Drive bağlantısı kurulamadı. Lütfen tarayıcıdaki kimlik "
                "doğrulama işlemini tamamlayın."
            )

        try:
            snapshot = await self.create_upload_snapshot()
        except LedgerError as e:
            logger.error(f"업로드용 복사본 생성 실패: {e}")
            return "Veritabanı yedek kopyası oluşturulamadı."

        try:
            content = await asyncio.to_thread(snapshot.read_bytes)
            remote_name = await uploader.upload(snapshot.name, content)
        except Exception as e:
            logger.error(f"백업 업로드 실패: {e}")
            return f"Yükleme başarısız oldu: {e}"
        finally:
            snapshot.unlink(missing_ok=True)

        logger.info(f"백업 업로드 완료: {remote_name}")
        return f"Veritabanı yedekleme başarılı. Dosya adı: {remote_name}"


def _restore_error_message(error: Exception) -> str:
    if isinstance(error, StorageIOError):
        return f"Yedek dosyası bulunamadı: {error}"
    if isinstance(error, FormatError):
        return f"Geçersiz yedek dosyası: {error}"
    return f"Yedek dosyası okunamadı: {error}"
