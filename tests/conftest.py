"""
pytest 공통 fixture 정의

임시 파일 SQLite 기반 장부 fixture
"""

import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import AppConfig
from core.storage.ledger_store import LedgerStore
from core.storage.migrations import MigrationManager


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def app_config(temp_dir: Path) -> AppConfig:
    """임시 디렉토리 기반 설정"""
    return AppConfig(
        data_dir=temp_dir / "data",
        db_file="kuyumcu.db3",
        backup_dir=temp_dir / "data" / "backups",
        backup_prefix="kuyumcu_backup",
        backup_extension="db3",
        backup_keep_days=30,
        auto_backup_interval_hours=24,
        log_level="INFO",
    )


@pytest_asyncio.fixture
async def db(app_config: AppConfig) -> AsyncGenerator[SQLiteAdapter, None]:
    """마이그레이션 완료된 장부 DB"""
    adapter = SQLiteAdapter(app_config.db_path)
    await adapter.connect()
    await MigrationManager(adapter).migrate()

    yield adapter

    await adapter.close()


@pytest_asyncio.fixture
async def store(db: SQLiteAdapter) -> LedgerStore:
    """장부 저장소"""
    ledger_store = LedgerStore(db)
    await ledger_store.initialize()
    return ledger_store

