"""
장부 파일 가져오기 (읽기 전용)

다른 기기/백업의 장부 파일을 읽기 전용으로 열어 조회.
현재 사용 중인 장부 데이터는 절대 변경하지 않음.

오래된 파일 호환:
- transactions 테이블이 없으면 거래 0건으로 취급
- 나중에 추가된 컬럼(is_deleted, is_deposit, is_hidden)이 없으면 기본값 0
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter, is_sqlite_file
from core.constants import TableNames
from core.domain.models import Customer, Transaction
from core.errors import FormatError, StorageIOError, ValidationError

logger = logging.getLogger(__name__)


async def validate_ledger_file(path: Path | str) -> None:
    """장부 파일 검증

    SQLite 헤더와 customer 테이블 존재 여부 확인.

    Raises:
        StorageIOError: 파일 없음
        FormatError: SQLite 파일이 아니거나 customer 테이블 없음
    """
    path = Path(path)
    if not path.is_file():
        raise StorageIOError(f"Dosya bulunamadı: {path}")

    if not is_sqlite_file(path):
        raise FormatError(f"Geçerli bir veritabanı dosyası değil: {path.name}")

    async with SQLiteAdapter(path, readonly=True) as db:
        if not await db.table_exists(TableNames.CUSTOMER):
            raise FormatError(f"Müşteri tablosu bulunamadı: {path.name}")


class DatabaseImporter:
    """읽기 전용 장부 파일 조회

    Args:
        path: 가져올 장부 파일 경로

    사용 예시:
    ```python
    async with DatabaseImporter(path) as importer:
        customers = await importer.get_customers()
        transactions = await importer.get_transactions_by_customer(customers[0].id)
    ```
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._db: SQLiteAdapter | None = None

    @property
    def is_open(self) -> bool:
        return self._db is not None

    async def open(self) -> None:
        """검증 후 읽기 전용 연결

        Raises:
            StorageIOError, FormatError: 검증 실패
        """
        if self._db is not None:
            return

        await validate_ledger_file(self.path)

        db = SQLiteAdapter(self.path, readonly=True)
        await db.connect()
        self._db = db

        logger.info(f"장부 파일 열기 (읽기 전용): {self.path}")

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    def _require_db(self) -> SQLiteAdapter:
        if self._db is None:
            raise RuntimeError("Imported database is not open")
        return self._db

    async def _read_rows(self, table: str) -> list[dict[str, Any]]:
        db = self._require_db()
        if not await db.table_exists(table):
            logger.warning(f"테이블 없음, 빈 목록으로 처리: {table}")
            return []
        return await db.fetchall_dicts(f"SELECT * FROM {table} ORDER BY id")

    async def get_customers(self, include_deleted: bool = False) -> list[Customer]:
        """고객 목록 (id 순)

        Raises:
            FormatError: 행을 해석할 수 없거나 검증 실패 (컬럼 누락, 잘못된 이름/전화번호)
        """
        customers = []
        for row in await self._read_rows(TableNames.CUSTOMER):
            try:
                customer = Customer.from_row(row)
                customer.validate()
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise FormatError(f"Geçersiz müşteri kaydı: id={row.get('id')} ({e})") from e
            customers.append(customer)

        if include_deleted:
            return customers
        return [c for c in customers if not c.is_deleted]

    async def get_transactions(self, include_deleted: bool = False) -> list[Transaction]:
        """거래 목록 (id 순)

        Raises:
            FormatError: 행을 해석할 수 없거나 검증 실패 (잘못된 금액/통화/일시)
        """
        transactions = []
        for row in await self._read_rows(TableNames.TRANSACTIONS):
            try:
                tx = Transaction.from_row(row)
                tx.validate()
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise FormatError(f"Geçersiz işlem kaydı: id={row.get('id')} ({e})") from e
            transactions.append(tx)

        if include_deleted:
            return transactions
        return [tx for tx in transactions if not tx.is_deleted]

    async def get_transactions_by_customer(self, customer_id: int) -> list[Transaction]:
        """특정 고객 거래 (일시 순)"""
        transactions = [
            tx for tx in await self.get_transactions() if tx.customer_id == customer_id
        ]
        return sorted(transactions, key=lambda tx: (tx.date, tx.id))

    async def __aenter__(self) -> "DatabaseImporter":
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
