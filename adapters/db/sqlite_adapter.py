"""
SQLite 어댑터

장부 데이터 파일(SQLite) 연결 관리.
프로세스 시작 시 한 번 생성하여 모든 컴포넌트에 전달.

주의: 백업은 메인 DB 파일만 복사하므로 journal_mode는 DELETE 유지 (WAL 사용 금지)
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.errors import ConcurrencyError

logger = logging.getLogger(__name__)

# SQLite 파일 헤더 (모든 유효한 DB 파일의 처음 16바이트)
SQLITE_HEADER = b"SQLite format 3\x00"


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (백업 파일 검증/가져오기용)

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    if readonly:
        # 읽기 전용 모드 (파일이 없으면 생성하지 않고 실패)
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        # 디렉토리가 없으면 생성
        if db_path_str != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(db_path_str)
        await conn.execute("PRAGMA journal_mode=DELETE")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


def is_sqlite_file(path: Path | str) -> bool:
    """파일 헤더로 SQLite DB 파일 여부 확인

    Args:
        path: 검사할 파일 경로

    Returns:
        SQLite 헤더로 시작하면 True
    """
    try:
        with open(path, "rb") as f:
            return f.read(len(SQLITE_HEADER)) == SQLITE_HEADER
    except OSError:
        return False


class SQLiteAdapter:
    """SQLite 어댑터

    연결 수명 관리와 트랜잭션 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (가져온 파일 조회용)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("INSERT INTO ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None
        self._transaction_depth = 0

    @property
    def in_explicit_transaction(self) -> bool:
        """transaction() 블록 실행 중 여부"""
        return self._transaction_depth > 0

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def executemany(
        self,
        sql: str,
        parameters: list[tuple[Any, ...]],
    ) -> aiosqlite.Cursor:
        """SQL 다중 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        return await self._conn.executemany(sql, parameters)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchall()

    async def fetchall_dicts(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[dict[str, Any]]:
        """전체 행 조회 (컬럼명 → 값 dict 목록)"""
        cursor = await self.execute(sql, parameters)
        rows = await cursor.fetchall()

        columns = [desc[0] for desc in cursor.description]
        return [dict(zip(columns, row)) for row in rows]

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    async def checkpoint(self) -> None:
        """백업 전 디스크 반영

        보류 중인 변경을 커밋하고 저널 내용을 메인 파일에 기록.
        DELETE 저널 모드에서는 wal_checkpoint가 아무 것도 하지 않음.

        Raises:
            ConcurrencyError: transaction() 블록이 진행 중
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if self._transaction_depth:
            raise ConcurrencyError("Veritabanı işlemi devam ediyor, yedek alınamaz")

        if self._conn.in_transaction:
            await self._conn.commit()
        await self._conn.execute("PRAGMA wal_checkpoint(TRUNCATE)")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        명시적 BEGIN으로 시작하므로 DDL(CREATE/DROP/ALTER)도 같은 트랜잭션에 포함.
        성공 시 자동 커밋, 예외 시 자동 롤백.

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("DELETE FROM ...")
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if not self._conn.in_transaction:
            await self._conn.execute("BEGIN")

        self._transaction_depth += 1
        try:
            yield self._conn
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise
        finally:
            self._transaction_depth -= 1

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def get_table_sql(self, table_name: str) -> str | None:
        """테이블 생성 SQL 조회 (없으면 None)"""
        result = await self.fetchone(
            "SELECT sql FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result[0] if result else None

    async def get_table_info(self, table_name: str) -> list[dict[str, Any]]:
        """테이블 정보 조회"""
        rows = await self.fetchall(f"PRAGMA table_info({table_name})")

        columns = []
        for row in rows:
            columns.append({
                "cid": row[0],
                "name": row[1],
                "type": row[2],
                "notnull": bool(row[3]),
                "default_value": row[4],
                "pk": bool(row[5]),
            })

        return columns

    async def get_column_names(self, table_name: str) -> set[str]:
        """테이블 컬럼명 집합 조회"""
        return {column["name"] for column in await self.get_table_info(table_name)}

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
