"""
테스트 헬퍼

거래/고객 생성 단축 함수
"""

from datetime import datetime, timezone
from decimal import Decimal

from core.domain.models import Customer, Transaction
from core.storage.ledger_store import LedgerStore
from core.types import CurrencyType, TransactionDirection


def make_tx(
    customer_id: int,
    amount: str,
    direction: TransactionDirection = TransactionDirection.CUSTOMER_OWES_STORE,
    currency: CurrencyType = CurrencyType.TURKISH_LIRA,
    day: int = 1,
    **kwargs,
) -> Transaction:
    """테스트용 거래 생성 (2026-01-<day> 10:00 UTC)"""
    return Transaction(
        customer_id=customer_id,
        amount=Decimal(amount),
        direction=direction,
        currency=currency,
        date=datetime(2026, 1, day, 10, 0, tzinfo=timezone.utc),
        **kwargs,
    )


async def add_customer(store: LedgerStore, name: str, phone: str | None = None) -> Customer:
    """테스트용 고객 저장"""
    customer = Customer(name=name, phone_number=phone)
    await store.save_customer(customer)
    return customer


async def add_tx(store: LedgerStore, *args, **kwargs) -> Transaction:
    """테스트용 거래 저장"""
    tx = make_tx(*args, **kwargs)
    await store.save_transaction(tx)
    return tx
