"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능 (DB에는 value 저장)
"""

from enum import Enum


class CurrencyType(str, Enum):
    """통화/금 종류

    선언 순서가 곧 표시 순서이자 동률 판정 순서.
    ZIYNET_GOLD는 나중에 추가되었으므로 반드시 마지막에 유지.
    """

    TURKISH_LIRA = "TURKISH_LIRA"  # 자국 통화
    DOLLAR = "DOLLAR"
    EURO = "EURO"
    STERLING = "STERLING"
    GOLD_14K = "GOLD_14K"  # 14 Ayar (gr)
    GOLD_22K = "GOLD_22K"  # 22 Ayar (gr)
    GOLD_24K = "GOLD_24K"  # 24 Ayar (gr)
    QUARTER_GOLD = "QUARTER_GOLD"  # Çeyrek (adet)
    HALF_GOLD = "HALF_GOLD"  # Yarım (adet)
    FULL_GOLD = "FULL_GOLD"  # Tam (adet)
    ZIYNET_GOLD = "ZIYNET_GOLD"  # Ziynet (gr)

    @property
    def display_name(self) -> str:
        """화면/영수증 표시 이름"""
        return _CURRENCY_DISPLAY_NAMES[self]

    @property
    def symbol(self) -> str:
        """단위 기호"""
        return _CURRENCY_SYMBOLS[self]

    @property
    def order(self) -> int:
        """선언 순서 (정렬용)"""
        return _CURRENCY_ORDER[self]


_CURRENCY_DISPLAY_NAMES: dict[CurrencyType, str] = {
    CurrencyType.TURKISH_LIRA: "TL",
    CurrencyType.DOLLAR: "Dolar",
    CurrencyType.EURO: "Euro",
    CurrencyType.STERLING: "Sterlin",
    CurrencyType.GOLD_14K: "14 Ayar",
    CurrencyType.GOLD_22K: "22 Ayar",
    CurrencyType.GOLD_24K: "24 Ayar",
    CurrencyType.QUARTER_GOLD: "Çeyrek Altın",
    CurrencyType.HALF_GOLD: "Yarım Altın",
    CurrencyType.FULL_GOLD: "Tam Altın",
    CurrencyType.ZIYNET_GOLD: "Ziynet Altın",
}

_CURRENCY_SYMBOLS: dict[CurrencyType, str] = {
    CurrencyType.TURKISH_LIRA: "₺",
    CurrencyType.DOLLAR: "$",
    CurrencyType.EURO: "€",
    CurrencyType.STERLING: "£",
    CurrencyType.GOLD_14K: "gr",
    CurrencyType.GOLD_22K: "gr",
    CurrencyType.GOLD_24K: "gr",
    CurrencyType.QUARTER_GOLD: "adet",
    CurrencyType.HALF_GOLD: "adet",
    CurrencyType.FULL_GOLD: "adet",
    CurrencyType.ZIYNET_GOLD: "gr",
}

_CURRENCY_ORDER: dict[CurrencyType, int] = {
    currency: index for index, currency in enumerate(CurrencyType)
}


class TransactionDirection(str, Enum):
    """거래 방향"""

    CUSTOMER_OWES_STORE = "CUSTOMER_OWES_STORE"  # 고객이 가게에 빚짐 (외상)
    STORE_OWES_CUSTOMER = "STORE_OWES_CUSTOMER"  # 가게가 고객에게 빚짐 (예치/선수)


class SortDirection(str, Enum):
    """정렬 방향"""

    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class CustomerSortField(str, Enum):
    """고객 정렬 기준"""

    NAME = "name"
    PHONE = "phone"


class TransactionSortField(str, Enum):
    """거래 정렬 기준"""

    DATE = "date"
    AMOUNT = "amount"
    DIRECTION = "direction"
    CURRENCY = "currency"
