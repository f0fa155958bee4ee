"""
스토리지 모듈

장부 저장소, 스키마 생성, 마이그레이션 제공
"""

from core.storage.ledger_store import LedgerStore
from core.storage.migrations import LATEST_VERSION, MigrationManager
from core.storage.schema import init_ledger_schema

__all__ = [
    "LedgerStore",
    "MigrationManager",
    "LATEST_VERSION",
    "init_ledger_schema",
]
