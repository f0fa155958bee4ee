"""
타임존 유틸리티

내부 저장: UTC | 외부 표시: TRT(터키 시간) 원칙 준수를 위한 헬퍼 함수
"""

from datetime import datetime, timezone, timedelta

# TRT 타임존 (UTC+3, 서머타임 없음)
TRT = timezone(timedelta(hours=3))

# 백업 파일명 타임스탬프 형식 (yyyyMMdd_HHmmss)
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def ensure_utc(dt: datetime) -> datetime:
    """datetime을 UTC로 정규화

    naive datetime은 UTC로 간주.

    Args:
        dt: datetime 객체

    Returns:
        tzinfo=timezone.utc인 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_trt(dt: datetime) -> datetime:
    """UTC datetime을 TRT로 변환

    Args:
        dt: datetime 객체 (UTC 권장, naive면 UTC로 간주)

    Returns:
        TRT 타임존의 datetime

    Example:
        >>> utc_dt = datetime(2026, 2, 20, 22, 0, 0, tzinfo=timezone.utc)
        >>> to_trt(utc_dt).hour
        1  # 다음날 01:00
    """
    return ensure_utc(dt).astimezone(TRT)


def format_trt(dt: datetime, fmt: str = "%d/%m/%Y %H:%M:%S") -> str:
    """UTC datetime을 TRT 문자열로 포맷

    Args:
        dt: datetime 객체 (UTC 권장)
        fmt: strftime 포맷 문자열

    Returns:
        TRT 시간의 포맷된 문자열
    """
    return to_trt(dt).strftime(fmt)


def backup_timestamp(dt: datetime | None = None) -> str:
    """백업 파일명용 타임스탬프 (TRT 기준 yyyyMMdd_HHmmss)"""
    return format_trt(dt or now_utc(), BACKUP_TIMESTAMP_FORMAT)


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)

    datetime.now(timezone.utc)의 축약형.

    Returns:
        현재 UTC 시간 (tzinfo=timezone.utc)
    """
    return datetime.now(timezone.utc)


def parse_datetime(value: str) -> datetime:
    """DB에 저장된 ISO 문자열을 UTC datetime으로 변환"""
    return ensure_utc(datetime.fromisoformat(value))
