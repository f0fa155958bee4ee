"""
금 시세판 데이터

원시 시세 목록(외부 수집)을 매장 표시 순서의 행으로 변환.
이미지 합성/시세 수집은 이 모듈 범위 밖.

표시 순서: 24 Ayar, 22 Ayar, 14 Ayar, Beşli, Tam(Ata), Yarım, Çeyrek, Gram
14 Ayar, 24 Ayar는 판매가만 표시.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from core.errors import ValidationError
from core.utils.collation import turkish_contains
from core.utils.formatting import format_price


@dataclass(frozen=True)
class GoldPrice:
    """수집된 원시 시세 한 줄"""

    type: str
    buy_price: Decimal
    sell_price: Decimal


@dataclass(frozen=True)
class PriceBoardRow:
    """시세판 한 줄"""

    label: str
    buy: Decimal
    sell: Decimal

    @property
    def sell_only(self) -> bool:
        return self.label in _SELL_ONLY_LABELS

    @property
    def text(self) -> str:
        """'22 Ayar: 2.700-2.800' 형식 (판매가 전용은 '24 Ayar: 3.000')"""
        if self.sell_only:
            return f"{self.label}: {format_price(self.sell)}"
        return f"{self.label}: {format_price(self.buy)}-{format_price(self.sell)}"


_SELL_ONLY_LABELS = frozenset({"24 Ayar", "14 Ayar"})

# (표시 이름, 검색어 목록) - 목록의 첫 일치 항목 사용
_BOARD_ORDER: list[tuple[str, tuple[str, ...]]] = [
    ("24 Ayar", ("24 Ayar",)),
    ("22 Ayar", ("22 Ayar",)),
    ("14 Ayar", ("14 Ayar",)),
    ("Beşli", ("beşl", "besli")),
    ("Tam", ("Ata",)),
    ("Yarım", ("yarım", "yarim")),
    ("Çeyrek", ("Çeyrek",)),
    ("Gram", ("GRAM",)),
]


def parse_price_text(text: str) -> Decimal:
    """터키식 숫자 문자열 변환 ('1.234,56' → Decimal('1234.56'))

    Raises:
        ValidationError: 숫자가 아닌 경우
    """
    normalized = text.strip().replace(".", "").replace(",", ".")
    try:
        value = Decimal(normalized)
    except InvalidOperation as e:
        raise ValidationError(f"Geçersiz fiyat: {text!r}") from e
    if not value.is_finite():
        raise ValidationError(f"Geçersiz fiyat: {text!r}")
    return value


def _find(prices: list[GoldPrice], terms: tuple[str, ...]) -> GoldPrice | None:
    for term in terms:
        for price in prices:
            if turkish_contains(price.type, term):
                return price
    return None


def build_price_board(prices: list[GoldPrice]) -> list[PriceBoardRow]:
    """시세판 행 목록 (찾지 못한 종류는 생략)"""
    rows = []
    for label, terms in _BOARD_ORDER:
        price = _find(prices, terms)
        if price is not None:
            rows.append(PriceBoardRow(label=label, buy=price.buy_price, sell=price.sell_price))
    return rows
