"""
출력용 데이터 구성 (명세서, 금 시세판)
"""

from core.export.prices import GoldPrice, PriceBoardRow, build_price_board, parse_price_text
from core.export.statement import CustomerStatement, build_customer_statement

__all__ = [
    "CustomerStatement",
    "build_customer_statement",
    "GoldPrice",
    "PriceBoardRow",
    "build_price_board",
    "parse_price_text",
]
