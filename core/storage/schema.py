"""
장부 스키마 초기화

Store 첫 사용 시 자동으로 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 여러 번 호출해도 안전하게 동작.

주의: 기존 테이블의 컬럼/정렬 규칙 변경은 migrations 모듈에서만 수행.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


CUSTOMER_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS {table} (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        name             TEXT NOT NULL COLLATE NOCASE,
        phone_number     TEXT,
        is_deleted       INTEGER NOT NULL DEFAULT 0
    )
"""

TRANSACTIONS_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS transactions (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        customer_id      INTEGER NOT NULL,
        amount           TEXT NOT NULL,
        direction        TEXT NOT NULL,
        currency         TEXT NOT NULL DEFAULT 'TURKISH_LIRA',
        date             TEXT NOT NULL,
        description      TEXT,
        is_deleted       INTEGER NOT NULL DEFAULT 0,
        is_deposit       INTEGER NOT NULL DEFAULT 0,
        is_hidden        INTEGER NOT NULL DEFAULT 0
    )
"""

QUICK_ENTRY_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS quick_entry (
        id               INTEGER PRIMARY KEY AUTOINCREMENT,
        full_name        TEXT NOT NULL,
        national_id      TEXT,
        created_date     TEXT NOT NULL,
        amount           TEXT NOT NULL,
        is_processed     INTEGER NOT NULL DEFAULT 0,
        is_deleted       INTEGER NOT NULL DEFAULT 0
    )
"""

APP_SETTINGS_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS app_settings (
        id                   INTEGER PRIMARY KEY AUTOINCREMENT,
        business_name        TEXT NOT NULL DEFAULT '',
        google_client_id     TEXT NOT NULL DEFAULT '',
        google_client_secret TEXT NOT NULL DEFAULT '',
        is_setup_completed   INTEGER NOT NULL DEFAULT 0
    )
"""


async def create_ledger_tables(db: "SQLiteAdapter") -> None:
    """장부 테이블 생성 (커밋은 호출자 책임)

    트랜잭션 안에서 호출될 수 있도록 commit하지 않음.
    """
    await db.execute(CUSTOMER_TABLE_SQL.format(table="customer"))
    await db.execute(TRANSACTIONS_TABLE_SQL)
    await db.execute(QUICK_ENTRY_TABLE_SQL)
    await db.execute(APP_SETTINGS_TABLE_SQL)

    # 인덱스 생성
    await db.execute(
        "CREATE INDEX IF NOT EXISTS idx_transactions_customer ON transactions(customer_id)"
    )


async def init_ledger_schema(db: "SQLiteAdapter") -> None:
    """장부 스키마 초기화

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: SQLiteAdapter 인스턴스
    """
    await create_ledger_tables(db)
    await db.commit()
    logger.info("장부 스키마 초기화 완료")
