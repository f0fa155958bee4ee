"""
고객 명세서 데이터

영수증/명세서 출력용 데이터 구성 (출력 레이아웃은 범위 밖).
통화별로 거래를 묶고 각 묶음의 잔액 문구를 제공.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from core.domain.models import Customer
from core.errors import NotFoundError
from core.ledger.calculator import LedgerCalculator, TransactionGroup
from core.utils.formatting import format_balance_label, format_phone_number
from core.utils.timezone import format_trt, now_utc

if TYPE_CHECKING:
    from core.storage.ledger_store import LedgerStore


@dataclass
class CustomerStatement:
    """고객 명세서"""

    customer: Customer
    groups: list[TransactionGroup] = field(default_factory=list)
    generated_at: datetime = field(default_factory=now_utc)

    @property
    def phone_display(self) -> str | None:
        return format_phone_number(self.customer.phone_number)

    def balance_lines(self) -> list[str]:
        """통화별 잔액 문구 ('22 Ayar: 2,5 gr (Borcum)')"""
        return [
            f"{group.currency.display_name}: "
            f"{format_balance_label(group.balance, group.currency)}"
            for group in self.groups
        ]

    @property
    def header(self) -> str:
        return f"{self.customer.name} - {format_trt(self.generated_at, '%d/%m/%Y %H:%M')}"


async def build_customer_statement(
    store: LedgerStore,
    customer_id: int,
    include_hidden: bool = False,
) -> CustomerStatement:
    """고객 명세서 생성

    Args:
        store: 장부 저장소
        customer_id: 고객 ID
        include_hidden: 숨김 거래 포함 여부

    Raises:
        NotFoundError: 고객이 없거나 삭제됨
    """
    customer = await store.get_customer(customer_id)
    if customer is None:
        raise NotFoundError(f"고객을 찾을 수 없음: id={customer_id}")

    calculator = LedgerCalculator(store)
    groups = await calculator.get_transaction_groups(
        customer_id, include_hidden=include_hidden
    )
    return CustomerStatement(customer=customer, groups=groups)
