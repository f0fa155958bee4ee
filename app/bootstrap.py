"""
App Bootstrap

설정 로드, 의존성 주입, 생명주기 관리.

시작 순서:
    1. SQLite 연결 (프로세스당 하나)
    2. 마이그레이션 (다른 컴포넌트보다 먼저)
    3. 저장소 → 계산기 → 조회 엔진 → 백업 서비스
    4. 자동 백업 Poller
"""

import asyncio
import logging
from pathlib import Path

from adapters.db.sqlite_adapter import SQLiteAdapter
from app.poller import AutoBackupPoller
from core.backup.service import BackupService
from core.config.loader import AppConfig
from core.ledger.calculator import LedgerCalculator
from core.query.engine import QueryEngine
from core.storage.ledger_store import LedgerStore
from core.storage.migrations import MigrationManager

logger = logging.getLogger("app")


class LedgerApp:
    """장부 애플리케이션

    모든 컴포넌트를 하나의 SQLiteAdapter로 연결.
    UI/CLI는 start() 이후 store, calculator, query, backup을 사용.

    Args:
        config: 애플리케이션 설정
        temp_dir: 업로드 임시 파일 디렉토리 (None이면 시스템 임시 디렉토리)

    사용 예시:
    ```python
    app = LedgerApp(load_config())
    await app.start()
    try:
        page = await app.query.list_customers_page(search="ali")
    finally:
        await app.stop()
    ```
    """

    def __init__(self, config: AppConfig, temp_dir: Path | None = None):
        self.config = config
        self.temp_dir = temp_dir
        self.db = SQLiteAdapter(config.db_path)

        # 컴포넌트들 (start 시 생성)
        self.store: LedgerStore | None = None
        self.calculator: LedgerCalculator | None = None
        self.query: QueryEngine | None = None
        self.backup: BackupService | None = None
        self.auto_backup: AutoBackupPoller | None = None

        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """연결 + 마이그레이션 + 컴포넌트 생성"""
        if self._started:
            return

        logger.info(f"DB: {self.config.db_path}")
        await self.db.connect()

        applied = await MigrationManager(self.db).migrate()
        if applied:
            logger.info(f"마이그레이션 {applied}단계 적용")

        self.store = LedgerStore(self.db)
        await self.store.initialize()

        self.calculator = LedgerCalculator(self.store)
        self.query = QueryEngine(self.store)
        self.backup = BackupService(
            self.db, self.store, self.config, temp_dir=self.temp_dir
        )
        self.auto_backup = AutoBackupPoller(
            self.backup,
            interval_hours=self.config.auto_backup_interval_hours,
            keep_days=self.config.backup_keep_days,
        )
        self.auto_backup.initialize()

        self._started = True
        logger.info("장부 앱 시작 완료")

    async def stop(self) -> None:
        """연결 종료"""
        await self.db.close()
        self._started = False
        logger.info("장부 앱 종료")

    async def run_main_loop(
        self,
        shutdown_event: asyncio.Event,
        tick_interval: float = 60.0,
    ) -> None:
        """자동 백업 루프 (shutdown_event 설정 시 종료)"""
        if not self._started or self.auto_backup is None:
            raise RuntimeError("LedgerApp is not started")

        while not shutdown_event.is_set():
            if self.auto_backup.should_poll():
                await self.auto_backup.poll()

            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=tick_interval)
            except asyncio.TimeoutError:
                pass

    async def __aenter__(self) -> "LedgerApp":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
