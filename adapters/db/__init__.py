"""
데이터베이스 어댑터

SQLite 연결 관리 (DELETE 저널 모드).
"""

from adapters.db.sqlite_adapter import (
    SQLiteAdapter,
    create_connection,
    is_sqlite_file,
)

__all__ = [
    "SQLiteAdapter",
    "create_connection",
    "is_sqlite_file",
]
