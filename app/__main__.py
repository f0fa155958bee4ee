"""
장부 앱 진입점

실행 방법:
    python -m app run                  # 자동 백업 루프 실행
    python -m app migrate              # 스키마 마이그레이션만 실행
    python -m app backup [--dir DIR]   # 즉시 백업
    python -m app restore FILE         # 백업 파일에서 복원
    python -m app list-backups         # 백업 목록
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from app.bootstrap import LedgerApp
from core.config.loader import ConfigLoadError, load_config
from core.logging import setup_logging, shutdown_logging
from core.utils.timezone import format_trt

logger = logging.getLogger("app")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m app", description="Kuyumcu 장부")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="settings.yaml 경로 (기본: config/settings.yaml)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("run", help="자동 백업 루프 실행")
    subparsers.add_parser("migrate", help="스키마 마이그레이션")

    backup = subparsers.add_parser("backup", help="즉시 백업")
    backup.add_argument("--dir", type=Path, default=None, help="백업 저장 디렉토리")

    restore = subparsers.add_parser("restore", help="백업 파일에서 복원")
    restore.add_argument("file", type=Path, help="복원할 백업 파일")

    subparsers.add_parser("list-backups", help="백업 목록")

    return parser


async def run_command(app: LedgerApp, args: argparse.Namespace) -> int:
    """명령 실행

    Returns:
        종료 코드
    """
    await app.start()

    try:
        if args.command == "migrate":
            logger.info("마이그레이션 완료")
            return 0

        if args.command == "backup":
            result = await app.backup.backup(args.dir)
            print(result.message)
            return 0 if result.success else 1

        if args.command == "restore":
            result = await app.backup.restore(args.file)
            print(result.message)
            return 0 if result.success else 1

        if args.command == "list-backups":
            backups = app.backup.list_backups()
            if not backups:
                print("Yedek bulunamadı.")
            for path in backups:
                modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
                print(f"{format_trt(modified)}  {path.name}")
            return 0

        # run
        shutdown_event = asyncio.Event()
        logger.info("자동 백업 루프 시작 (종료: Ctrl+C)")
        try:
            await app.run_main_loop(shutdown_event)
        except asyncio.CancelledError:
            logger.info("메인 루프 취소됨")
        return 0

    finally:
        await app.stop()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigLoadError as e:
        print(f"설정 로드 실패: {e}", file=sys.stderr)
        return 1

    setup_logging("app", console_level=config.log_level)

    try:
        return asyncio.run(run_command(LedgerApp(config), args))
    except KeyboardInterrupt:
        logger.info("Ctrl+C 감지")
        return 0
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
