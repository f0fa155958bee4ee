"""
장부 잔액 계산

통화별 잔액, 전체 요약, 활동 통계 제공.

사용 예시:
```python
from core.ledger import LedgerCalculator

calculator = LedgerCalculator(store)

# 고객 통화별 잔액
balances = await calculator.get_customer_balances(customer_id)

# 전체 요약
summary = await calculator.get_currency_summary(exclude_deposits=True)
```
"""

from core.ledger.calculator import (
    CurrencyBalance,
    CurrencySummary,
    CustomerActivity,
    LedgerCalculator,
    TransactionGroup,
    calculate_currency_balances,
)

__all__ = [
    "LedgerCalculator",
    "calculate_currency_balances",
    "CurrencyBalance",
    "CurrencySummary",
    "CustomerActivity",
    "TransactionGroup",
]
