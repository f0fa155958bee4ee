"""
장부 예외 정의

검증 오류는 호출자에게 그대로 전달.
I/O, 형식 오류는 백업/복원 경계에서 (success, message)로 변환.
"""


class LedgerError(Exception):
    """장부 예외 기본 클래스"""

    pass


class ValidationError(LedgerError):
    """입력값 검증 실패 (금액 0 이하, 이름 길이 초과, 잘못된 ID 등)"""

    pass


class NotFoundError(LedgerError):
    """고객/거래/설정 행을 찾을 수 없음"""

    pass


class StorageIOError(LedgerError):
    """파일 없음, 잠김, 읽기 불가"""

    pass


class FormatError(LedgerError):
    """백업 파일에 필요한 테이블/형식이 없음"""

    pass


class ConcurrencyError(LedgerError):
    """백업/복원 중 파일 사용 중"""

    pass
