"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수 (settings.yaml에 값이 없을 때 사용)"""

    DB_FILE: str = "kuyumcu.db3"

    BACKUP_PREFIX: str = "kuyumcu_backup"
    BACKUP_EXTENSION: str = "db3"
    BACKUP_KEEP_DAYS: int = 30
    AUTO_BACKUP_INTERVAL_HOURS: int = 24

    # 잠긴 파일 재시도 대기 (초)
    LOCKED_FILE_RETRY_DELAY_SEC: float = 0.5

    PAGE_SIZE: int = 20
    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    BACKUP_DIR: Path = DATA_DIR / "backups"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"


class Limits:
    """입력값 길이 제한"""

    CUSTOMER_NAME_MAX: int = 100
    PHONE_NUMBER_MAX: int = 10
    DESCRIPTION_MAX: int = 255
    QUICK_ENTRY_NAME_MAX: int = 100
    NATIONAL_ID_LENGTH: int = 11


class TableNames:
    """장부 파일 테이블 이름"""

    CUSTOMER: str = "customer"
    TRANSACTIONS: str = "transactions"
    QUICK_ENTRY: str = "quick_entry"
    APP_SETTINGS: str = "app_settings"
