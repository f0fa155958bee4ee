"""
장부 로깅 설정

콘솔(stdout)과 일별 회전 파일 두 핸들러를 루트 로거에 연결한다.
로그 시각은 매장 기준인 TRT로 기록.

이 모듈이 붙인 핸들러에는 "ledger." 접두사 이름이 붙으며,
재설정/종료 시 그 핸들러만 교체하고 다른 핸들러(pytest caplog 등)는 그대로 둔다.

사용법:
    from core.logging import setup_logging, shutdown_logging
    setup_logging("app", console_level="DEBUG")
    ...
    shutdown_logging()
"""

import logging
import sys
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths
from core.utils.timezone import TRT


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_KEEP_DAYS = 14

HANDLER_PREFIX = "ledger."
CONSOLE_HANDLER_NAME = HANDLER_PREFIX + "console"
FILE_HANDLER_NAME = HANDLER_PREFIX + "file"

# DB 쿼리마다 로그를 남기는 라이브러리
QUIET_LOGGERS = ("aiosqlite", "asyncio")


class TRTFormatter(logging.Formatter):
    """asctime을 TRT(UTC+3)로 표시하는 Formatter"""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        stamp = datetime.fromtimestamp(record.created, TRT)
        return stamp.strftime(datefmt or LOG_DATE_FORMAT)


def build_console_handler(level: int | str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(TRTFormatter(LOG_FORMAT))
    return handler


def build_file_handler(
    log_file: Path,
    level: int | str,
    keep_days: int = DEFAULT_KEEP_DAYS,
) -> TimedRotatingFileHandler:
    """자정마다 회전하는 파일 핸들러

    회전된 파일 이름: ledger.log.2026-02-21
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=keep_days,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    handler.set_name(FILE_HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(TRTFormatter(LOG_FORMAT))
    return handler


def get_log_file_path(process_name: str, log_dir: Path | None = None) -> Path:
    return (log_dir or Paths.LOGS_DIR) / f"{process_name}.log"


def shutdown_logging() -> int:
    """이 모듈이 붙인 핸들러를 닫고 제거

    Returns:
        제거한 핸들러 수
    """
    root_logger = logging.getLogger()
    owned = [h for h in root_logger.handlers if (h.get_name() or "").startswith(HANDLER_PREFIX)]
    for handler in owned:
        root_logger.removeHandler(handler)
        handler.close()
    return len(owned)


def setup_logging(
    process_name: str,
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.INFO,
    log_dir: Path | None = None,
    keep_days: int = DEFAULT_KEEP_DAYS,
) -> Path:
    """루트 로거에 콘솔/파일 핸들러 연결

    여러 번 호출해도 핸들러가 중복되지 않는다.

    Args:
        process_name: 로그 파일 이름 (app -> app.log)
        console_level: 콘솔 레벨 (설정 파일 logging.level)
        file_level: 파일 레벨
        log_dir: 로그 디렉토리 (None이면 Paths.LOGS_DIR)
        keep_days: 보관할 회전 파일 수

    Returns:
        로그 파일 경로
    """
    shutdown_logging()

    log_file = get_log_file_path(process_name, log_dir)
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(build_console_handler(console_level))
    root_logger.addHandler(build_file_handler(log_file, file_level, keep_days))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"로깅 시작: {process_name} -> {log_file} ({keep_days}일 보관)")
    return log_file
