"""
장부 잔액 계산

통화별 잔액은 절대 섞지 않음 (TL과 금을 합산하지 않음).

부호 규칙:
    outgoing: 고객이 가게에 빚진 금액 (CUSTOMER_OWES_STORE)
    incoming: 가게가 고객에게 빚진 금액 (STORE_OWES_CUSTOMER)
    net = outgoing - incoming (양수면 고객이 빚짐)

모든 계산은 Decimal. 반올림은 표시 단계에서만.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from core.domain.models import Transaction
from core.types import CurrencyType, TransactionDirection

if TYPE_CHECKING:
    from core.storage.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER_NAME = "Bilinmeyen Müşteri"


@dataclass
class CurrencyBalance:
    """단일 통화 잔액"""

    outgoing: Decimal = Decimal("0")
    incoming: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.outgoing - self.incoming

    @property
    def customer_owes(self) -> bool:
        return self.outgoing > self.incoming


@dataclass
class CurrencySummary:
    """전체 고객 통화별 합계

    Attributes:
        owed_to_business: 순잔액이 양수인 고객들의 합 (받을 돈)
        owed_to_customers: 순잔액이 음수인 고객들의 절대값 합 (줄 돈)
    """

    owed_to_business: Decimal = Decimal("0")
    owed_to_customers: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        return self.owed_to_business - self.owed_to_customers


@dataclass
class CustomerActivity:
    """고객별 거래 건수"""

    customer_id: int
    customer_name: str
    transaction_count: int


@dataclass
class TransactionGroup:
    """영수증/명세서용 통화별 거래 묶음"""

    currency: CurrencyType
    transactions: list[Transaction] = field(default_factory=list)
    balance: Decimal = Decimal("0")


def calculate_currency_balances(
    transactions: Iterable[Transaction],
    exclude_deposits: bool = False,
) -> dict[CurrencyType, CurrencyBalance]:
    """통화별 잔액 계산

    논리 삭제된 거래는 항상 제외. 거래가 없는 통화는 결과에 없음.

    Args:
        transactions: 거래 목록
        exclude_deposits: 예치 거래 제외 여부

    Returns:
        {통화: CurrencyBalance}
    """
    balances: dict[CurrencyType, CurrencyBalance] = {}

    for tx in transactions:
        if tx.is_deleted:
            continue
        if exclude_deposits and tx.is_deposit:
            continue

        balance = balances.setdefault(tx.currency, CurrencyBalance())
        if tx.direction == TransactionDirection.CUSTOMER_OWES_STORE:
            balance.outgoing += tx.amount
        else:
            balance.incoming += tx.amount

    return balances


def _active_transactions(
    transactions: Iterable[Transaction],
    exclude_deposits: bool,
) -> list[Transaction]:
    return [
        tx for tx in transactions
        if not tx.is_deleted and not (exclude_deposits and tx.is_deposit)
    ]


class LedgerCalculator:
    """장부 잔액/통계 계산기

    저장소에서 거래를 읽어 메모리에서 집계.
    논리 삭제된 고객의 거래는 전체 통계에 포함하지 않음.

    Args:
        store: 장부 저장소
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    async def _active_customer_ids(self) -> set[int]:
        return {c.id for c in await self.store.list_customers()}

    async def get_customer_balances(
        self,
        customer_id: int,
        exclude_deposits: bool = False,
    ) -> dict[CurrencyType, CurrencyBalance]:
        """고객 통화별 잔액"""
        transactions = await self.store.list_transactions(customer_id=customer_id)
        return calculate_currency_balances(transactions, exclude_deposits)

    async def get_customer_balance(
        self,
        customer_id: int,
        currency: CurrencyType,
        exclude_deposits: bool = False,
    ) -> Decimal:
        """고객의 단일 통화 순잔액 (거래 없으면 0)"""
        balances = await self.get_customer_balances(customer_id, exclude_deposits)
        balance = balances.get(currency)
        return balance.net if balance else Decimal("0")

    async def get_most_active_currency(self) -> tuple[CurrencyType, int]:
        """거래 건수가 가장 많은 통화

        예치 거래 제외. 동률이면 선언 순서가 앞선 통화.
        거래가 없으면 (TURKISH_LIRA, 0).
        """
        active_ids = await self._active_customer_ids()
        transactions = _active_transactions(
            await self.store.list_transactions(), exclude_deposits=True
        )

        counts = Counter(
            tx.currency for tx in transactions if tx.customer_id in active_ids
        )
        if not counts:
            return CurrencyType.TURKISH_LIRA, 0

        currency = min(counts, key=lambda c: (-counts[c], c.order))
        return currency, counts[currency]

    async def count_indebted_customers(self) -> int:
        """빚이 있는 고객 수

        어느 한 통화라도 outgoing > incoming이면 1명으로 집계 (통화 수와 무관).
        예치 거래 제외.
        """
        active_ids = await self._active_customer_ids()
        transactions = await self.store.list_transactions()

        by_customer: dict[int, list[Transaction]] = {}
        for tx in transactions:
            if tx.customer_id in active_ids:
                by_customer.setdefault(tx.customer_id, []).append(tx)

        count = 0
        for customer_transactions in by_customer.values():
            balances = calculate_currency_balances(
                customer_transactions, exclude_deposits=True
            )
            if any(b.customer_owes for b in balances.values()):
                count += 1

        return count

    async def get_currency_summary(
        self,
        exclude_deposits: bool = False,
    ) -> dict[CurrencyType, CurrencySummary]:
        """전체 통화별 받을 돈/줄 돈 합계

        모든 통화를 포함 (거래가 없으면 0).
        """
        summary = {currency: CurrencySummary() for currency in CurrencyType}

        active_ids = await self._active_customer_ids()
        transactions = await self.store.list_transactions()

        by_customer: dict[int, list[Transaction]] = {}
        for tx in transactions:
            if tx.customer_id in active_ids:
                by_customer.setdefault(tx.customer_id, []).append(tx)

        for customer_transactions in by_customer.values():
            balances = calculate_currency_balances(
                customer_transactions, exclude_deposits
            )
            for currency, balance in balances.items():
                if balance.net > 0:
                    summary[currency].owed_to_business += balance.net
                elif balance.net < 0:
                    summary[currency].owed_to_customers += -balance.net

        return summary

    async def get_most_active_customers(self, limit: int = 5) -> list[CustomerActivity]:
        """거래 건수 상위 고객

        건수 내림차순, 동률이면 고객 ID 오름차순.
        고객 행이 없거나 삭제된 경우 이름은 UNKNOWN_CUSTOMER_NAME.
        """
        if limit <= 0:
            return []

        customers = {c.id: c for c in await self.store.list_customers()}
        transactions = _active_transactions(
            await self.store.list_transactions(), exclude_deposits=False
        )

        counts = Counter(tx.customer_id for tx in transactions)
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

        return [
            CustomerActivity(
                customer_id=customer_id,
                customer_name=(
                    customers[customer_id].name
                    if customer_id in customers
                    else UNKNOWN_CUSTOMER_NAME
                ),
                transaction_count=count,
            )
            for customer_id, count in ranked[:limit]
        ]

    async def get_transaction_groups(
        self,
        customer_id: int,
        include_hidden: bool = True,
    ) -> list[TransactionGroup]:
        """고객 거래를 통화별로 묶음 (통화 선언 순서, 그룹 내 일시 순)"""
        transactions = await self.store.list_transactions(customer_id=customer_id)
        if not include_hidden:
            transactions = [tx for tx in transactions if not tx.is_hidden]

        grouped: dict[CurrencyType, list[Transaction]] = {}
        for tx in transactions:
            grouped.setdefault(tx.currency, []).append(tx)

        groups = []
        for currency in sorted(grouped, key=lambda c: c.order):
            items = sorted(grouped[currency], key=lambda tx: (tx.date, tx.id))
            balances = calculate_currency_balances(items)
            groups.append(
                TransactionGroup(
                    currency=currency,
                    transactions=items,
                    balance=balances[currency].net,
                )
            )

        return groups
