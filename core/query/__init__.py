"""
조회 엔진

터키어 검색/정렬과 페이지 분할
"""

from core.query.engine import (
    PageResult,
    QueryEngine,
    TransactionFilter,
    paginate,
    sort_customers,
    sort_transactions,
)

__all__ = [
    "QueryEngine",
    "PageResult",
    "TransactionFilter",
    "paginate",
    "sort_customers",
    "sort_transactions",
]
