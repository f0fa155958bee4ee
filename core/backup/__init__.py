"""
백업/복원 및 장부 파일 가져오기
"""

from core.backup.importer import DatabaseImporter, validate_ledger_file
from core.backup.service import BackupResult, BackupService, RestoreResult

__all__ = [
    "BackupService",
    "BackupResult",
    "RestoreResult",
    "DatabaseImporter",
    "validate_ledger_file",
]
