"""
AutoBackupPoller

주기적 자동 백업.
마지막 백업 이후 interval이 지나면 백업 + 오래된 백업 정리.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from core.backup.service import BackupService
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


class AutoBackupPoller:
    """자동 백업 Poller

    메인 루프에서 should_poll()이 True일 때 poll() 호출.
    마지막 백업 시간은 백업 디렉토리의 최신 파일로 복구.

    Args:
        backup_service: 백업 서비스
        interval_hours: 백업 간격 (시간)
        keep_days: 백업 보관 일수
    """

    poller_name = "auto_backup"

    def __init__(
        self,
        backup_service: BackupService,
        interval_hours: int,
        keep_days: int,
    ):
        self.backup_service = backup_service
        self.poll_interval_seconds = interval_hours * 3600
        self.keep_days = keep_days

        self._last_poll_time: datetime | None = None
        self._is_running: bool = False

    @property
    def last_poll_time(self) -> datetime | None:
        return self._last_poll_time

    def initialize(self) -> None:
        """초기화: 최신 백업 파일 시간으로 마지막 백업 시간 복구"""
        backups = self.backup_service.list_backups()
        if not backups:
            self._last_poll_time = None
            logger.info(f"{self.poller_name} Poller 초기화: 기존 백업 없음")
            return

        mtime = backups[0].stat().st_mtime
        self._last_poll_time = datetime.fromtimestamp(mtime, tz=timezone.utc)
        logger.info(
            f"{self.poller_name} Poller 초기화: 마지막 백업 {backups[0].name}"
        )

    def should_poll(self) -> bool:
        """마지막 백업 이후 간격 경과 여부"""
        if self._is_running:
            return False

        if self._last_poll_time is None:
            return True

        elapsed = (now_utc() - self._last_poll_time).total_seconds()
        return elapsed >= self.poll_interval_seconds

    async def poll(self) -> dict[str, Any]:
        """백업 실행

        Returns:
            {"success": bool, "path": Path | None, "deleted": int}
        """
        if self._is_running:
            logger.warning(f"{self.poller_name} Poller가 이미 실행 중입니다")
            return {"success": False, "skipped": True}

        self._is_running = True
        start_time = now_utc()

        try:
            result = await self.backup_service.backup()
            deleted = 0

            if result.success:
                self._last_poll_time = start_time
                deleted = self.backup_service.cleanup_old_backups(self.keep_days)
            else:
                logger.warning(f"자동 백업 실패: {result.message}")

            return {"success": result.success, "path": result.path, "deleted": deleted}

        finally:
            self._is_running = False
