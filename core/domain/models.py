"""
장부 도메인 모델

Customer, Transaction, QuickEntry, AppSettings 정의.
금액은 반드시 Decimal 사용 (float 금지).
모든 엔티티는 is_deleted 플래그로 논리 삭제 (물리 삭제 없음).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from core.constants import Limits
from core.errors import ValidationError
from core.types import CurrencyType, TransactionDirection
from core.utils.timezone import ensure_utc, now_utc, parse_datetime


def to_decimal(value: Any) -> Decimal:
    """금액 값을 Decimal로 변환

    Raises:
        ValidationError: 숫자로 해석할 수 없는 경우
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValidationError(f"금액 형식이 잘못되었습니다: {value!r}") from e


def _require_positive_amount(amount: Decimal) -> None:
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"금액은 0보다 커야 합니다: {amount}")


def _parse_row_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    return parse_datetime(str(value))


@dataclass
class Customer:
    """고객

    Attributes:
        name: 표시 이름 (필수, 최대 100자, 터키어 대소문자 무시 비교)
        phone_number: 전화번호 (선택, 숫자 최대 10자리)
        id: 고객 ID (0이면 미저장)
        is_deleted: 논리 삭제 여부
    """

    name: str
    phone_number: str | None = None
    id: int = 0
    is_deleted: bool = False

    def validate(self) -> None:
        """입력값 검증

        Raises:
            ValidationError: 이름 누락/초과, 전화번호 형식 오류
        """
        if self.id is None or self.id < 0:
            raise ValidationError(f"잘못된 고객 ID: {self.id}")

        if not self.name or not self.name.strip():
            raise ValidationError("İsim alanı zorunludur")

        if len(self.name) > Limits.CUSTOMER_NAME_MAX:
            raise ValidationError(
                f"İsim en fazla {Limits.CUSTOMER_NAME_MAX} karakter olabilir"
            )

        if self.phone_number:
            if not self.phone_number.isdigit():
                raise ValidationError("Telefon numarası sadece rakam içermelidir")
            if len(self.phone_number) > Limits.PHONE_NUMBER_MAX:
                raise ValidationError(
                    f"Telefon numarası en fazla {Limits.PHONE_NUMBER_MAX} karakter olabilir"
                )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Customer":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            name=row["name"],
            phone_number=str(row["phone_number"]) if row.get("phone_number") else None,
            is_deleted=bool(row.get("is_deleted") or 0),
        )

    def __str__(self) -> str:
        return self.name


@dataclass
class Transaction:
    """장부 거래

    Attributes:
        customer_id: 소유 고객 ID (논리 참조, FK 없음)
        amount: 금액 (항상 양수, 통화와 무관한 크기)
        direction: 거래 방향
        currency: 통화/금 종류
        date: 거래 일시 (UTC 저장)
        description: 설명 (선택, 최대 255자)
        id: 거래 ID (0이면 미저장)
        is_deleted: 논리 삭제 여부
        is_deposit: 예치 거래 (일부 활성 잔액 집계에서 제외)
        is_hidden: 숨김 거래 (표시 토글 시에만 노출)
    """

    customer_id: int
    amount: Decimal
    direction: TransactionDirection
    currency: CurrencyType = CurrencyType.TURKISH_LIRA
    date: datetime = field(default_factory=now_utc)
    description: str | None = None
    id: int = 0
    is_deleted: bool = False
    is_deposit: bool = False
    is_hidden: bool = False

    def __post_init__(self) -> None:
        self.amount = to_decimal(self.amount)
        self.direction = TransactionDirection(self.direction)
        self.currency = CurrencyType(self.currency)
        self.date = ensure_utc(self.date)

    @property
    def signed_amount(self) -> Decimal:
        """부호 있는 금액 (+: 고객 채무, -: 가게 채무)"""
        if self.direction == TransactionDirection.CUSTOMER_OWES_STORE:
            return self.amount
        return -self.amount

    def validate(self) -> None:
        """입력값 검증

        Raises:
            ValidationError: 금액 0 이하, 고객 ID 누락, 설명 길이 초과
        """
        if self.id is None or self.id < 0:
            raise ValidationError(f"잘못된 거래 ID: {self.id}")

        if not isinstance(self.customer_id, int) or self.customer_id <= 0:
            raise ValidationError(f"잘못된 고객 ID: {self.customer_id}")

        _require_positive_amount(self.amount)

        if self.description and len(self.description) > Limits.DESCRIPTION_MAX:
            raise ValidationError(
                f"Açıklama en fazla {Limits.DESCRIPTION_MAX} karakter olabilir"
            )

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Transaction":
        """DB 행에서 생성

        오래된 백업 파일에는 is_deposit/is_hidden 컬럼이 없을 수 있음 (기본값 0).
        """
        return cls(
            id=row["id"],
            customer_id=row["customer_id"],
            amount=to_decimal(row["amount"]),
            direction=TransactionDirection(row["direction"]),
            currency=CurrencyType(row.get("currency") or CurrencyType.TURKISH_LIRA.value),
            date=_parse_row_datetime(row["date"]),
            description=row.get("description"),
            is_deleted=bool(row.get("is_deleted") or 0),
            is_deposit=bool(row.get("is_deposit") or 0),
            is_hidden=bool(row.get("is_hidden") or 0),
        )


@dataclass
class QuickEntry:
    """빠른 입력 (대기 기록)

    장부 잔액 계산에는 포함되지 않음.

    Attributes:
        full_name: 이름 (필수, 최대 100자)
        amount: 금액 (양수)
        national_id: TC 신분증 번호 (선택, 정확히 11자리)
        created_date: 생성 일시
        is_processed: 처리 완료 여부
        id: ID (0이면 미저장)
        is_deleted: 논리 삭제 여부
    """

    full_name: str
    amount: Decimal
    national_id: str | None = None
    created_date: datetime = field(default_factory=now_utc)
    is_processed: bool = False
    id: int = 0
    is_deleted: bool = False

    def __post_init__(self) -> None:
        self.amount = to_decimal(self.amount)
        self.created_date = ensure_utc(self.created_date)

    def validate(self) -> None:
        """입력값 검증"""
        if self.id is None or self.id < 0:
            raise ValidationError(f"잘못된 ID: {self.id}")

        if not self.full_name or not self.full_name.strip():
            raise ValidationError("Ad Soyad alanı zorunludur")

        if len(self.full_name) > Limits.QUICK_ENTRY_NAME_MAX:
            raise ValidationError(
                f"Ad Soyad en fazla {Limits.QUICK_ENTRY_NAME_MAX} karakter olabilir"
            )

        if self.national_id and (
            len(self.national_id) != Limits.NATIONAL_ID_LENGTH
            or not self.national_id.isdigit()
        ):
            raise ValidationError(
                f"TC Kimlik Numarası {Limits.NATIONAL_ID_LENGTH} haneli olmalıdır"
            )

        _require_positive_amount(self.amount)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "QuickEntry":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            full_name=row["full_name"],
            national_id=row.get("national_id") or None,
            created_date=_parse_row_datetime(row["created_date"]),
            amount=to_decimal(row["amount"]),
            is_processed=bool(row.get("is_processed") or 0),
            is_deleted=bool(row.get("is_deleted") or 0),
        )


@dataclass
class AppSettings:
    """앱 설정 (단일 행)

    복원 작업은 이 행을 절대 변경하지 않음.
    """

    business_name: str = ""
    google_client_id: str = ""
    google_client_secret: str = ""
    is_setup_completed: bool = False
    id: int = 0

    @property
    def has_cloud_credentials(self) -> bool:
        """클라우드 백업 인증 정보 설정 여부"""
        return bool(self.google_client_id.strip() and self.google_client_secret.strip())

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "AppSettings":
        """DB 행에서 생성"""
        return cls(
            id=row["id"],
            business_name=row.get("business_name") or "",
            google_client_id=row.get("google_client_id") or "",
            google_client_secret=row.get("google_client_secret") or "",
            is_setup_completed=bool(row.get("is_setup_completed") or 0),
        )
