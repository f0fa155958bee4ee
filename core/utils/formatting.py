"""
표시용 포맷 헬퍼

반올림은 표시 단계에서만 수행 (저장/계산은 Decimal 원본 유지).
"""

from decimal import ROUND_HALF_UP, Decimal

from core.types import CurrencyType


def format_phone_number(phone_number: str | None) -> str | None:
    """전화번호 표시 형식 변환

    숫자만 추려 10자리일 때만 "(555) 123 45 67" 형식으로 변환.
    그 외에는 입력값 그대로 반환.
    """
    if phone_number is None or not phone_number.strip():
        return phone_number

    digits = "".join(ch for ch in phone_number if ch.isdigit())
    if len(digits) != 10:
        return phone_number

    return f"({digits[0:3]}) {digits[3:6]} {digits[6:8]} {digits[8:10]}"


def _group_thousands(integer_part: str) -> str:
    """천 단위 구분 (터키식 마침표)"""
    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)
    return ".".join(groups)


def format_price(amount: Decimal) -> str:
    """금액 표시

    정수면 소수점 없이, 아니면 소수 둘째 자리까지 (터키식: 1.234,50).
    """
    rounded = abs(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 and rounded != 0 else ""

    if rounded % 1 == 0:
        return f"{sign}{_group_thousands(str(int(rounded)))}"

    integer_part, fraction = f"{rounded:f}".split(".")
    return f"{sign}{_group_thousands(integer_part)},{fraction}"


def format_amount(amount: Decimal, currency: CurrencyType) -> str:
    """금액 + 단위 기호"""
    return f"{format_price(amount)} {currency.symbol}"


def format_balance_label(balance: Decimal, currency: CurrencyType) -> str:
    """영수증용 잔액 문구

    양수: 고객이 가게에 빚짐 (Borcum)
    음수: 가게가 고객에게 빚짐 (Alacak)
    """
    if balance == 0:
        return "Hesap Sıfır"
    if balance > 0:
        return f"{format_amount(balance, currency)} (Borcum)"
    return f"{format_amount(abs(balance), currency)} (Alacak)"
