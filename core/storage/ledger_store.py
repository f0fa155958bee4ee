"""
장부 저장소

Customer, Transaction, QuickEntry, AppSettings 저장 및 조회.

규칙:
- 저장: id가 0이면 INSERT, 아니면 UPDATE (없는 행 UPDATE는 NotFoundError)
- 삭제: 항상 논리 삭제 (is_deleted = 1)
- 고객 삭제 시 해당 고객의 거래도 모두 논리 삭제
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from core.constants import TableNames
from core.domain.models import AppSettings, Customer, QuickEntry, Transaction
from core.errors import NotFoundError, ValidationError
from core.storage.schema import init_ledger_schema
from core.utils.collation import turkish_casefold, turkish_contains, turkish_equals

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)


_TRANSACTION_COLUMNS = (
    "customer_id, amount, direction, currency, date, description, "
    "is_deleted, is_deposit, is_hidden"
)


def _transaction_params(tx: Transaction) -> tuple[Any, ...]:
    return (
        tx.customer_id,
        str(tx.amount),
        tx.direction.value,
        tx.currency.value,
        tx.date.isoformat(),
        tx.description,
        int(tx.is_deleted),
        int(tx.is_deposit),
        int(tx.is_hidden),
    )


class LedgerStore:
    """장부 저장소

    하나의 SQLiteAdapter를 받아 모든 엔티티의 CRUD 제공.
    첫 사용 시 initialize()가 테이블을 한 번만 생성.

    Args:
        db: SQLite 어댑터

    사용 예시:
    ```python
    store = LedgerStore(db)
    customer = Customer(name="Ayşe Yılmaz", phone_number="5551234567")
    await store.save_customer(customer)

    tx = Transaction(customer_id=customer.id, amount=Decimal("2.5"),
                     direction=TransactionDirection.CUSTOMER_OWES_STORE,
                     currency=CurrencyType.GOLD_22K)
    await store.save_transaction(tx)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._initialized = False

    # =========================================================================
    # 초기화
    # =========================================================================

    async def initialize(self) -> None:
        """테이블 생성 (저장소 수명 동안 한 번만 실행)"""
        if self._initialized:
            return

        await init_ledger_schema(self.db)
        self._initialized = True

    def refresh_schema(self) -> None:
        """다음 initialize() 호출 시 스키마 확인을 다시 수행

        복원/마이그레이션 후 호출.
        """
        self._initialized = False

    # =========================================================================
    # Customer
    # =========================================================================

    async def get_customer(
        self,
        customer_id: int,
        include_deleted: bool = False,
    ) -> Customer | None:
        """고객 조회 (기본: 논리 삭제된 고객은 None)"""
        await self.initialize()

        sql = f"SELECT * FROM {TableNames.CUSTOMER} WHERE id = ?"
        if not include_deleted:
            sql += " AND is_deleted = 0"

        rows = await self.db.fetchall_dicts(sql, (customer_id,))
        return Customer.from_row(rows[0]) if rows else None

    async def list_customers(self, include_deleted: bool = False) -> list[Customer]:
        """고객 목록 (id 순)"""
        await self.initialize()

        sql = f"SELECT * FROM {TableNames.CUSTOMER}"
        if not include_deleted:
            sql += " WHERE is_deleted = 0"
        sql += " ORDER BY id"

        rows = await self.db.fetchall_dicts(sql)
        return [Customer.from_row(row) for row in rows]

    async def save_customer(self, customer: Customer) -> int:
        """고객 저장 (INSERT 또는 UPDATE)

        Returns:
            고객 ID (INSERT 시 customer.id도 갱신)

        Raises:
            ValidationError: 입력값 오류
            NotFoundError: UPDATE 대상 없음
        """
        customer.validate()
        await self.initialize()

        if not customer.id:
            cursor = await self.db.execute(
                f"""
                INSERT INTO {TableNames.CUSTOMER} (name, phone_number, is_deleted)
                VALUES (?, ?, ?)
                """,
                (customer.name, customer.phone_number, int(customer.is_deleted)),
            )
            await self.db.commit()
            customer.id = cursor.lastrowid
            logger.debug(f"고객 추가: id={customer.id}")
            return customer.id

        cursor = await self.db.execute(
            f"""
            UPDATE {TableNames.CUSTOMER}
            SET name = ?, phone_number = ?, is_deleted = ?
            WHERE id = ?
            """,
            (customer.name, customer.phone_number, int(customer.is_deleted), customer.id),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"고객을 찾을 수 없음: id={customer.id}")
        return customer.id

    async def delete_customer(self, customer: Customer) -> None:
        """고객 논리 삭제 + 해당 고객 거래 전체 논리 삭제

        고객 플래그를 먼저 기록한 뒤 거래를 하나씩 삭제.
        거래 삭제 도중 실패해도 고객 플래그는 되돌리지 않음.

        Raises:
            NotFoundError: 고객 없음
        """
        if not customer.id:
            raise ValidationError("저장되지 않은 고객은 삭제할 수 없음")
        await self.initialize()

        cursor = await self.db.execute(
            f"UPDATE {TableNames.CUSTOMER} SET is_deleted = 1 WHERE id = ?",
            (customer.id,),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"고객을 찾을 수 없음: id={customer.id}")
        customer.is_deleted = True

        transactions = await self.list_transactions(customer_id=customer.id)
        for tx in transactions:
            await self.delete_transaction(tx)

        logger.info(
            f"고객 삭제: id={customer.id}, 연관 거래 {len(transactions)}건 삭제"
        )

    async def customer_name_exists(
        self,
        name: str,
        exclude_id: int | None = None,
    ) -> bool:
        """같은 이름의 고객 존재 여부 (터키어 대소문자 무시)

        Args:
            name: 확인할 이름
            exclude_id: 비교에서 제외할 고객 ID (수정 중인 고객 자신)
        """
        if not turkish_casefold(name):
            return False

        for customer in await self.list_customers():
            if exclude_id and customer.id == exclude_id:
                continue
            if turkish_equals(customer.name, name):
                return True
        return False

    # =========================================================================
    # Transaction
    # =========================================================================

    async def get_transaction(
        self,
        transaction_id: int,
        include_deleted: bool = False,
    ) -> Transaction | None:
        """거래 조회 (기본: 논리 삭제된 거래는 None)"""
        await self.initialize()

        sql = f"SELECT * FROM {TableNames.TRANSACTIONS} WHERE id = ?"
        if not include_deleted:
            sql += " AND is_deleted = 0"

        rows = await self.db.fetchall_dicts(sql, (transaction_id,))
        return Transaction.from_row(rows[0]) if rows else None

    async def list_transactions(
        self,
        customer_id: int | None = None,
        include_deleted: bool = False,
    ) -> list[Transaction]:
        """거래 목록 (일시, id 순)

        Args:
            customer_id: 특정 고객 거래만 조회 (None이면 전체)
            include_deleted: 논리 삭제된 거래 포함 여부
        """
        await self.initialize()

        conditions: list[str] = []
        params: list[Any] = []

        if customer_id is not None:
            conditions.append("customer_id = ?")
            params.append(customer_id)
        if not include_deleted:
            conditions.append("is_deleted = 0")

        sql = f"SELECT * FROM {TableNames.TRANSACTIONS}"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY date, id"

        rows = await self.db.fetchall_dicts(sql, tuple(params))
        return [Transaction.from_row(row) for row in rows]

    async def save_transaction(self, tx: Transaction) -> int:
        """거래 저장 (INSERT 또는 UPDATE)

        Raises:
            ValidationError: 금액 0 이하 등 입력값 오류
            NotFoundError: UPDATE 대상 없음
        """
        tx.validate()
        await self.initialize()

        if not tx.id:
            cursor = await self.db.execute(
                f"""
                INSERT INTO {TableNames.TRANSACTIONS} ({_TRANSACTION_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                _transaction_params(tx),
            )
            await self.db.commit()
            tx.id = cursor.lastrowid
            logger.debug(
                f"거래 추가: id={tx.id}, customer={tx.customer_id}, "
                f"{tx.direction.value} {tx.amount} {tx.currency.value}"
            )
            return tx.id

        cursor = await self.db.execute(
            f"""
            UPDATE {TableNames.TRANSACTIONS}
            SET customer_id = ?, amount = ?, direction = ?, currency = ?,
                date = ?, description = ?,
                is_deleted = ?, is_deposit = ?, is_hidden = ?
            WHERE id = ?
            """,
            (*_transaction_params(tx), tx.id),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"거래를 찾을 수 없음: id={tx.id}")
        return tx.id

    async def delete_transaction(self, tx: Transaction) -> None:
        """거래 논리 삭제"""
        if not tx.id:
            raise ValidationError("저장되지 않은 거래는 삭제할 수 없음")
        await self.initialize()

        cursor = await self.db.execute(
            f"UPDATE {TableNames.TRANSACTIONS} SET is_deleted = 1 WHERE id = ?",
            (tx.id,),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"거래를 찾을 수 없음: id={tx.id}")
        tx.is_deleted = True

    # =========================================================================
    # QuickEntry
    # =========================================================================

    async def get_quick_entry(
        self,
        entry_id: int,
        include_deleted: bool = False,
    ) -> QuickEntry | None:
        """빠른 입력 조회"""
        await self.initialize()

        sql = f"SELECT * FROM {TableNames.QUICK_ENTRY} WHERE id = ?"
        if not include_deleted:
            sql += " AND is_deleted = 0"

        rows = await self.db.fetchall_dicts(sql, (entry_id,))
        return QuickEntry.from_row(rows[0]) if rows else None

    async def list_quick_entries(
        self,
        include_processed: bool = True,
        include_deleted: bool = False,
    ) -> list[QuickEntry]:
        """빠른 입력 목록 (최신순)"""
        await self.initialize()

        conditions: list[str] = []
        if not include_processed:
            conditions.append("is_processed = 0")
        if not include_deleted:
            conditions.append("is_deleted = 0")

        sql = f"SELECT * FROM {TableNames.QUICK_ENTRY}"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY created_date DESC, id DESC"

        rows = await self.db.fetchall_dicts(sql)
        return [QuickEntry.from_row(row) for row in rows]

    async def search_quick_entries(self, search: str) -> list[QuickEntry]:
        """이름 또는 TC 번호로 빠른 입력 검색 (최신순)

        빈 검색어는 전체 목록 반환.
        """
        entries = await self.list_quick_entries()

        term = search.strip() if search else ""
        if not term:
            return entries

        return [
            entry for entry in entries
            if turkish_contains(entry.full_name, term)
            or (entry.national_id and term in entry.national_id)
        ]

    async def save_quick_entry(self, entry: QuickEntry) -> int:
        """빠른 입력 저장 (INSERT 또는 UPDATE)"""
        entry.validate()
        await self.initialize()

        params = (
            entry.full_name,
            entry.national_id,
            entry.created_date.isoformat(),
            str(entry.amount),
            int(entry.is_processed),
            int(entry.is_deleted),
        )

        if not entry.id:
            cursor = await self.db.execute(
                f"""
                INSERT INTO {TableNames.QUICK_ENTRY}
                    (full_name, national_id, created_date, amount, is_processed, is_deleted)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                params,
            )
            await self.db.commit()
            entry.id = cursor.lastrowid
            return entry.id

        cursor = await self.db.execute(
            f"""
            UPDATE {TableNames.QUICK_ENTRY}
            SET full_name = ?, national_id = ?, created_date = ?, amount = ?,
                is_processed = ?, is_deleted = ?
            WHERE id = ?
            """,
            (*params, entry.id),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"빠른 입력을 찾을 수 없음: id={entry.id}")
        return entry.id

    async def delete_quick_entry(self, entry: QuickEntry) -> None:
        """빠른 입력 논리 삭제"""
        if not entry.id:
            raise ValidationError("저장되지 않은 항목은 삭제할 수 없음")
        await self.initialize()

        cursor = await self.db.execute(
            f"UPDATE {TableNames.QUICK_ENTRY} SET is_deleted = 1 WHERE id = ?",
            (entry.id,),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"빠른 입력을 찾을 수 없음: id={entry.id}")
        entry.is_deleted = True

    # =========================================================================
    # AppSettings (단일 행)
    # =========================================================================

    async def get_settings(self) -> AppSettings:
        """앱 설정 조회 (행이 없으면 기본 행 생성)"""
        await self.initialize()

        rows = await self.db.fetchall_dicts(
            f"SELECT * FROM {TableNames.APP_SETTINGS} ORDER BY id LIMIT 1"
        )
        if rows:
            return AppSettings.from_row(rows[0])

        settings = AppSettings()
        cursor = await self.db.execute(
            f"""
            INSERT INTO {TableNames.APP_SETTINGS}
                (business_name, google_client_id, google_client_secret, is_setup_completed)
            VALUES (?, ?, ?, ?)
            """,
            ("", "", "", 0),
        )
        await self.db.commit()
        settings.id = cursor.lastrowid

        logger.info("기본 앱 설정 생성")
        return settings

    async def save_settings(self, settings: AppSettings) -> None:
        """앱 설정 저장

        id가 0이면 기존 단일 행을 갱신.
        """
        if not settings.id:
            settings.id = (await self.get_settings()).id

        cursor = await self.db.execute(
            f"""
            UPDATE {TableNames.APP_SETTINGS}
            SET business_name = ?, google_client_id = ?,
                google_client_secret = ?, is_setup_completed = ?
            WHERE id = ?
            """,
            (
                settings.business_name,
                settings.google_client_id,
                settings.google_client_secret,
                int(settings.is_setup_completed),
                settings.id,
            ),
        )
        await self.db.commit()

        if cursor.rowcount == 0:
            raise NotFoundError(f"앱 설정을 찾을 수 없음: id={settings.id}")

    # =========================================================================
    # 복원
    # =========================================================================

    async def replace_ledger(
        self,
        customers: list[Customer],
        transactions: list[Transaction],
    ) -> None:
        """고객/거래 전체 교체 (단일 트랜잭션)

        기존 customer, transactions 행을 모두 삭제하고 주어진 행을 ID 그대로 삽입.
        app_settings, quick_entry는 건드리지 않음.
        실패 시 롤백되어 이전 상태 유지.
        """
        await self.initialize()

        async with self.db.transaction():
            await self.db.execute(f"DELETE FROM {TableNames.TRANSACTIONS}")
            await self.db.execute(f"DELETE FROM {TableNames.CUSTOMER}")

            await self.db.executemany(
                f"""
                INSERT INTO {TableNames.CUSTOMER} (id, name, phone_number, is_deleted)
                VALUES (?, ?, ?, ?)
                """,
                [
                    (c.id, c.name, c.phone_number, int(c.is_deleted))
                    for c in customers
                ],
            )
            await self.db.executemany(
                f"""
                INSERT INTO {TableNames.TRANSACTIONS} (id, {_TRANSACTION_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [(tx.id, *_transaction_params(tx)) for tx in transactions],
            )

        logger.info(
            f"장부 교체 완료: 고객 {len(customers)}명, 거래 {len(transactions)}건"
        )
