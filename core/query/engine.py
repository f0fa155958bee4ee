"""
조회 엔진

검색 → 정렬 → 페이지 분할을 메모리에서 순서대로 수행.
건수 조회는 목록 조회와 같은 조건 함수를 사용하므로 항상 일치.

터키어 비교는 core.utils.collation 사용 (호스트 로케일 무관).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from core.constants import Defaults
from core.domain.models import Customer, Transaction
from core.errors import ValidationError
from core.types import (
    CurrencyType,
    CustomerSortField,
    SortDirection,
    TransactionDirection,
    TransactionSortField,
)
from core.utils.collation import turkish_contains, turkish_sort_key

if TYPE_CHECKING:
    from core.storage.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PageResult(Generic[T]):
    """페이지 조회 결과

    Attributes:
        items: 현재 페이지 항목
        total_count: 조건에 맞는 전체 건수
        page: 페이지 번호 (0부터)
        page_size: 페이지 크기
    """

    items: list[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 0
    page_size: int = Defaults.PAGE_SIZE

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return (self.total_count + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * self.page_size < self.total_count

    @property
    def has_previous(self) -> bool:
        return self.page > 0


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """skip = page * page_size, take = page_size

    Raises:
        ValidationError: 음수 페이지 또는 0 이하 페이지 크기
    """
    if page < 0:
        raise ValidationError(f"잘못된 페이지 번호: {page}")
    if page_size <= 0:
        raise ValidationError(f"잘못된 페이지 크기: {page_size}")

    skip = page * page_size
    return list(items[skip:skip + page_size])


# =============================================================================
# 조건 함수
# =============================================================================


def customer_matches(customer: Customer, search: str | None) -> bool:
    """이름(터키어 대소문자 무시) 또는 전화번호(원본) 부분 일치"""
    term = search.strip() if search else ""
    if not term:
        return True
    if turkish_contains(customer.name, term):
        return True
    return bool(customer.phone_number) and term in customer.phone_number


@dataclass(frozen=True)
class TransactionFilter:
    """거래 목록 조건

    Attributes:
        customer_id: 특정 고객만 (None이면 전체)
        currency: 특정 통화만
        direction: 특정 방향만
        search: 설명 부분 일치 (터키어 대소문자 무시)
        include_hidden: 숨김 거래 포함 여부
        include_deposits: 예치 거래 포함 여부
    """

    customer_id: int | None = None
    currency: CurrencyType | None = None
    direction: TransactionDirection | None = None
    search: str | None = None
    include_hidden: bool = False
    include_deposits: bool = True

    def matches(self, tx: Transaction) -> bool:
        if tx.is_deleted:
            return False
        if self.customer_id is not None and tx.customer_id != self.customer_id:
            return False
        if self.currency is not None and tx.currency != self.currency:
            return False
        if self.direction is not None and tx.direction != self.direction:
            return False
        if not self.include_hidden and tx.is_hidden:
            return False
        if not self.include_deposits and tx.is_deposit:
            return False
        if self.search and self.search.strip():
            return turkish_contains(tx.description, self.search)
        return True


# =============================================================================
# 정렬 키
# =============================================================================


def _customer_sort_key(sort_field: CustomerSortField) -> Callable[[Customer], Any]:
    if sort_field == CustomerSortField.PHONE:
        return lambda c: (c.phone_number or "", c.id)
    return lambda c: (turkish_sort_key(c.name), c.id)


_TRANSACTION_SORT_KEYS: dict[TransactionSortField, Callable[[Transaction], Any]] = {
    TransactionSortField.DATE: lambda tx: (tx.date, tx.id),
    TransactionSortField.AMOUNT: lambda tx: (tx.amount, tx.id),
    TransactionSortField.DIRECTION: lambda tx: (tx.direction.value, tx.id),
    TransactionSortField.CURRENCY: lambda tx: (tx.currency.order, tx.id),
}


def _parse_enum(enum_type: type, value: Any) -> Any:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        return None


def sort_customers(
    customers: list[Customer],
    sort_field: CustomerSortField | str | None = CustomerSortField.NAME,
    sort_direction: SortDirection | str | None = SortDirection.ASCENDING,
) -> list[Customer]:
    """고객 정렬 (알 수 없는 기준은 이름 오름차순, 마지막 기준은 ID)"""
    field_ = _parse_enum(CustomerSortField, sort_field) or CustomerSortField.NAME
    direction = _parse_enum(SortDirection, sort_direction) or SortDirection.ASCENDING

    return sorted(
        customers,
        key=_customer_sort_key(field_),
        reverse=direction == SortDirection.DESCENDING,
    )


def sort_transactions(
    transactions: list[Transaction],
    sort_field: TransactionSortField | str | None = TransactionSortField.DATE,
    sort_direction: SortDirection | str | None = SortDirection.DESCENDING,
) -> list[Transaction]:
    """거래 정렬

    정렬 기준이 없거나 알 수 없는 값이면 일시 내림차순.
    """
    field_ = _parse_enum(TransactionSortField, sort_field)
    direction = _parse_enum(SortDirection, sort_direction)

    if field_ is None:
        field_, direction = TransactionSortField.DATE, SortDirection.DESCENDING
    elif direction is None:
        direction = SortDirection.DESCENDING

    return sorted(
        transactions,
        key=_TRANSACTION_SORT_KEYS[field_],
        reverse=direction == SortDirection.DESCENDING,
    )


class QueryEngine:
    """고객/거래 목록 조회

    Args:
        store: 장부 저장소

    사용 예시:
    ```python
    engine = QueryEngine(store)
    page = await engine.list_customers_page(search="ayş", page=0, page_size=20)
    for customer in page.items:
        ...
    ```
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    # =========================================================================
    # 고객
    # =========================================================================

    async def search_customers(self, search: str | None = None) -> list[Customer]:
        """조건에 맞는 고객 (터키어 이름 순)"""
        customers = await self.store.list_customers()
        matched = [c for c in customers if customer_matches(c, search)]
        return sort_customers(matched)

    async def count_customers(self, search: str | None = None) -> int:
        """조건에 맞는 고객 수"""
        customers = await self.store.list_customers()
        return sum(1 for c in customers if customer_matches(c, search))

    async def list_customers_page(
        self,
        search: str | None = None,
        sort_field: CustomerSortField | str | None = CustomerSortField.NAME,
        sort_direction: SortDirection | str | None = SortDirection.ASCENDING,
        page: int = 0,
        page_size: int = Defaults.PAGE_SIZE,
    ) -> PageResult[Customer]:
        """고객 목록 페이지"""
        customers = await self.store.list_customers()
        matched = [c for c in customers if customer_matches(c, search)]
        ordered = sort_customers(matched, sort_field, sort_direction)

        return PageResult(
            items=paginate(ordered, page, page_size),
            total_count=len(matched),
            page=page,
            page_size=page_size,
        )

    async def get_previous_customer_id(self, customer_id: int) -> int | None:
        """터키어 이름 순서상 이전 고객 ID (처음이거나 없으면 None)"""
        ids = await self._ordered_customer_ids()
        if customer_id not in ids:
            return None
        index = ids.index(customer_id)
        return ids[index - 1] if index > 0 else None

    async def get_next_customer_id(self, customer_id: int) -> int | None:
        """터키어 이름 순서상 다음 고객 ID (마지막이거나 없으면 None)"""
        ids = await self._ordered_customer_ids()
        if customer_id not in ids:
            return None
        index = ids.index(customer_id)
        return ids[index + 1] if index + 1 < len(ids) else None

    async def _ordered_customer_ids(self) -> list[int]:
        customers = sort_customers(await self.store.list_customers())
        return [c.id for c in customers]

    # =========================================================================
    # 거래
    # =========================================================================

    async def count_transactions(self, criteria: TransactionFilter | None = None) -> int:
        """조건에 맞는 거래 수"""
        criteria = criteria or TransactionFilter()
        transactions = await self._load_transactions(criteria)
        return sum(1 for tx in transactions if criteria.matches(tx))

    async def list_transactions_page(
        self,
        criteria: TransactionFilter | None = None,
        sort_field: TransactionSortField | str | None = TransactionSortField.DATE,
        sort_direction: SortDirection | str | None = SortDirection.DESCENDING,
        page: int = 0,
        page_size: int = Defaults.PAGE_SIZE,
    ) -> PageResult[Transaction]:
        """거래 목록 페이지"""
        criteria = criteria or TransactionFilter()
        transactions = await self._load_transactions(criteria)
        matched = [tx for tx in transactions if criteria.matches(tx)]
        ordered = sort_transactions(matched, sort_field, sort_direction)

        return PageResult(
            items=paginate(ordered, page, page_size),
            total_count=len(matched),
            page=page,
            page_size=page_size,
        )

    async def _load_transactions(self, criteria: TransactionFilter) -> list[Transaction]:
        return await self.store.list_transactions(customer_id=criteria.customer_id)
