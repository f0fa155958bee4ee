"""
터키어 대소문자 변환 및 정렬 키

호스트 로케일에 의존하지 않는 명시적 변환표 사용.
str.lower()는 'I' → 'i', 'İ' → 'i̇'(결합 점 포함)로 바꾸므로 터키어 이름에 사용 금지.

터키어 규칙:
    대문자 I ↔ 소문자 ı (점 없음)
    대문자 İ ↔ 소문자 i (점 있음)

사용 예:
    >>> turkish_lower("IŞIK")
    'ışık'
    >>> sorted(["İlker", "Irmak", "Ayşe"], key=turkish_sort_key)
    ['Ayşe', 'Irmak', 'İlker']
"""

# 대문자 → 소문자 특수 규칙 (나머지는 str.lower 사용)
_LOWER_SPECIAL: dict[str, str] = {
    "I": "ı",
    "İ": "i",
}

# 소문자 → 대문자 특수 규칙
_UPPER_SPECIAL: dict[str, str] = {
    "i": "İ",
    "ı": "I",
}

# 터키어 알파벳 순서 (외래 문자 q, w, x 포함)
TURKISH_ALPHABET = "abcçdefgğhıijklmnoöpqrsştuüvwxyz"

_ALPHABET_RANK: dict[str, int] = {ch: rank for rank, ch in enumerate(TURKISH_ALPHABET)}

# 순위 구간: 공백 < 숫자 < 터키어 알파벳 < 기타 문자(코드 포인트 순)
_WHITESPACE_RANK = 0
_DIGIT_BASE = 1
_ALPHABET_BASE = _DIGIT_BASE + 10
_OUTSIDE_ALPHABET_BASE = _ALPHABET_BASE + len(TURKISH_ALPHABET)


def turkish_lower(text: str) -> str:
    """터키어 규칙 소문자 변환"""
    return "".join(_LOWER_SPECIAL.get(ch) or ch.lower() for ch in text)


def turkish_upper(text: str) -> str:
    """터키어 규칙 대문자 변환"""
    return "".join(_UPPER_SPECIAL.get(ch) or ch.upper() for ch in text)


def turkish_casefold(text: str | None) -> str:
    """검색/비교용 정규화 (None은 빈 문자열)"""
    if not text:
        return ""
    return turkish_lower(text.strip())


def _char_rank(ch: str) -> int:
    if ch.isspace():
        return _WHITESPACE_RANK
    if "0" <= ch <= "9":
        return _DIGIT_BASE + int(ch)
    rank = _ALPHABET_RANK.get(ch)
    if rank is not None:
        return _ALPHABET_BASE + rank
    return _OUTSIDE_ALPHABET_BASE + ord(ch)


def turkish_sort_key(text: str | None) -> tuple[int, ...]:
    """터키어 정렬 키

    대소문자 구분 없이 터키어 알파벳 순서로 비교.
    접두어가 같으면 짧은 문자열이 먼저 (튜플 비교 규칙).

    Args:
        text: 정렬 대상 문자열 (None은 빈 문자열 취급)

    Returns:
        문자별 순위 튜플
    """
    return tuple(_char_rank(ch) for ch in turkish_casefold(text))


def turkish_contains(text: str | None, term: str | None) -> bool:
    """대소문자 무시 부분 문자열 포함 여부 (터키어 규칙)

    빈 검색어는 항상 일치.
    """
    needle = turkish_casefold(term)
    if not needle:
        return True
    return needle in turkish_casefold(text)


def turkish_equals(left: str | None, right: str | None) -> bool:
    """대소문자 무시 동일 여부 (터키어 규칙)"""
    return turkish_casefold(left) == turkish_casefold(right)
