"""
장부 스키마 마이그레이션

버전 관리형 마이그레이션. 현재 버전은 PRAGMA user_version에 저장.
각 단계는 하나의 트랜잭션 안에서 스키마 변경 + 버전 기록을 함께 커밋하므로
중간에 중단되어도 이전 상태 그대로 남음.

단계:
    1. 모든 테이블 생성 (CREATE IF NOT EXISTS)
    2. 나중에 추가된 플래그 컬럼 추가 (is_deleted, is_deposit, is_hidden)
    3. customer.name에 COLLATE NOCASE 적용 (새 테이블 생성 → 복사 → 교체)

사용 예시:
```python
manager = MigrationManager(db)
applied = await manager.migrate()
```
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.storage.schema import CUSTOMER_TABLE_SQL, create_ledger_tables

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """마이그레이션 단계

    Attributes:
        version: 적용 후 스키마 버전
        name: 단계 이름 (로그용)
        apply: 스키마 변경 함수 (트랜잭션 안에서 호출됨)
    """

    version: int
    name: str
    apply: Callable[["SQLiteAdapter"], Awaitable[None]]


# (테이블, 컬럼, 컬럼 정의) - 초기 버전에는 없던 컬럼
_ADDED_COLUMNS: list[tuple[str, str, str]] = [
    ("customer", "is_deleted", "INTEGER NOT NULL DEFAULT 0"),
    ("transactions", "is_deleted", "INTEGER NOT NULL DEFAULT 0"),
    ("transactions", "is_deposit", "INTEGER NOT NULL DEFAULT 0"),
    ("transactions", "is_hidden", "INTEGER NOT NULL DEFAULT 0"),
    ("quick_entry", "is_deleted", "INTEGER NOT NULL DEFAULT 0"),
]


async def _create_tables(db: "SQLiteAdapter") -> None:
    await create_ledger_tables(db)


async def _add_flag_columns(db: "SQLiteAdapter") -> None:
    for table, column, definition in _ADDED_COLUMNS:
        columns = await db.get_column_names(table)
        if column in columns:
            continue

        await db.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")
        logger.info(f"컬럼 추가: {table}.{column}")


async def customer_name_is_nocase(db: "SQLiteAdapter") -> bool:
    """customer.name에 COLLATE NOCASE가 적용되어 있는지 확인"""
    table_sql = await db.get_table_sql("customer")
    if table_sql is None:
        return False
    return "COLLATE NOCASE" in " ".join(table_sql.upper().split())


async def _rebuild_customer_nocase(db: "SQLiteAdapter") -> None:
    """customer 테이블 재생성 (이름 대소문자 무시 비교)

    새 테이블 생성 → 전체 행 복사 → 기존 테이블 삭제 → 이름 변경.
    호출자가 연 트랜잭션 안에서 실행되므로 전체가 하나의 원자적 단계.
    """
    if await customer_name_is_nocase(db):
        logger.info("customer 테이블은 이미 NOCASE 정렬 적용됨 - 건너뜀")
        return

    before = await db.fetchone("SELECT COUNT(*) FROM customer")

    await db.execute("DROP TABLE IF EXISTS customer_new")
    await db.execute(CUSTOMER_TABLE_SQL.format(table="customer_new"))
    await db.execute(
        """
        INSERT INTO customer_new (id, name, phone_number, is_deleted)
        SELECT id, name, phone_number, COALESCE(is_deleted, 0)
        FROM customer
        """
    )

    after = await db.fetchone("SELECT COUNT(*) FROM customer_new")
    if before[0] != after[0]:
        # 예외 발생 시 트랜잭션 롤백으로 원본 유지
        raise RuntimeError(
            f"customer 복사 행 수 불일치: 원본 {before[0]}, 복사 {after[0]}"
        )

    await db.execute("DROP TABLE customer")
    await db.execute("ALTER TABLE customer_new RENAME TO customer")

    logger.info(f"customer 테이블 NOCASE 재생성 완료: {after[0]}행")


MIGRATIONS: list[Migration] = [
    Migration(1, "create_tables", _create_tables),
    Migration(2, "add_flag_columns", _add_flag_columns),
    Migration(3, "customer_name_nocase", _rebuild_customer_nocase),
]

LATEST_VERSION: int = MIGRATIONS[-1].version


class MigrationManager:
    """마이그레이션 관리자

    시작 시 다른 컴포넌트보다 먼저 한 번 실행.
    여러 번 호출해도 안전 (이미 적용된 단계는 건너뜀).

    Args:
        db: SQLite 어댑터
        migrations: 적용할 마이그레이션 목록 (테스트용 교체 가능)
    """

    def __init__(
        self,
        db: "SQLiteAdapter",
        migrations: list[Migration] | None = None,
    ):
        self.db = db
        self.migrations = migrations if migrations is not None else MIGRATIONS

    async def get_version(self) -> int:
        """현재 스키마 버전"""
        row = await self.db.fetchone("PRAGMA user_version")
        return int(row[0]) if row else 0

    async def migrate(self) -> int:
        """미적용 마이그레이션 실행

        Returns:
            이번에 적용된 단계 수
        """
        current = await self.get_version()
        pending = [m for m in self.migrations if m.version > current]

        if not pending:
            logger.info(f"스키마 최신 상태: v{current}")
            return 0

        for migration in pending:
            async with self.db.transaction():
                await migration.apply(self.db)
                await self.db.execute(f"PRAGMA user_version = {int(migration.version)}")

            logger.info(f"마이그레이션 적용: v{migration.version} {migration.name}")

        return len(pending)
