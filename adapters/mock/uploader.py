"""
Mock 백업 업로더

테스트용 Mock Uploader.
BackupUploader Protocol 준수.
"""

from dataclasses import dataclass
from datetime import datetime

from core.domain.models import AppSettings
from core.utils.timezone import now_utc


@dataclass
class UploadRecord:
    """업로드 기록"""

    file_name: str
    content: bytes
    timestamp: datetime


class MockBackupUploader:
    """Mock 백업 업로더

    BackupUploader Protocol 구현.
    업로드된 모든 파일을 기록하여 테스트에서 검증 가능.

    사용 예시:
    ```python
    uploader = MockBackupUploader()
    status = await backup_service.upload_backup(uploader)

    assert len(uploader.uploads) == 1
    assert uploader.uploads[0].content.startswith(b"SQLite format 3")
    ```
    """

    def __init__(self, should_fail: bool = False, can_connect: bool = True):
        """
        Args:
            should_fail: True면 업로드 실패 (에러 시나리오 테스트용)
            can_connect: False면 연결 실패
        """
        self.should_fail = should_fail
        self.can_connect = can_connect
        self.connected_with: AppSettings | None = None
        self.uploads: list[UploadRecord] = []

    async def connect(self, settings: AppSettings) -> bool:
        self.connected_with = settings
        return self.can_connect

    async def upload(self, file_name: str, content: bytes) -> str:
        if self.should_fail:
            raise ConnectionError("Mock upload failure")

        self.uploads.append(
            UploadRecord(file_name=file_name, content=content, timestamp=now_utc())
        )
        return file_name

    def clear(self) -> None:
        """기록 초기화"""
        self.uploads.clear()
        self.connected_with = None
