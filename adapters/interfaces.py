"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import Protocol, runtime_checkable

from core.domain.models import AppSettings


@runtime_checkable
class BackupUploader(Protocol):
    """백업 파일 원격 업로드 인터페이스

    인증/전송 방식은 구현체 책임 (OAuth 등).
    장부 코어는 파일 이름과 내용만 전달.
    """

    async def connect(self, settings: AppSettings) -> bool:
        """원격 저장소 연결/인증

        Args:
            settings: 인증 정보가 담긴 앱 설정

        Returns:
            연결 성공 여부
        """
        ...

    async def upload(self, file_name: str, content: bytes) -> str:
        """파일 업로드

        Args:
            file_name: 원격에 저장할 파일 이름
            content: 파일 내용

        Returns:
            원격에 저장된 파일 이름

        Raises:
            Exception: 전송 실패 (메시지는 사용자에게 표시됨)
        """
        ...
