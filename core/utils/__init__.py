"""
유틸리티 패키지

터키어 정렬/검색, 타임존 처리, 표시 포맷 등 공통 유틸리티
"""

from core.utils.collation import (
    turkish_casefold,
    turkish_contains,
    turkish_equals,
    turkish_lower,
    turkish_sort_key,
    turkish_upper,
)
from core.utils.timezone import (
    TRT,
    backup_timestamp,
    ensure_utc,
    format_trt,
    now_utc,
    parse_datetime,
    to_trt,
)

__all__ = [
    "turkish_casefold",
    "turkish_contains",
    "turkish_equals",
    "turkish_lower",
    "turkish_sort_key",
    "turkish_upper",
    "TRT",
    "backup_timestamp",
    "ensure_utc",
    "format_trt",
    "now_utc",
    "parse_datetime",
    "to_trt",
]
