"""
설정 로더

settings.yaml 로드 및 애플리케이션 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths


@dataclass(frozen=True)
class AppConfig:
    """애플리케이션 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    data_dir: Path
    db_file: str
    backup_dir: Path
    backup_prefix: str
    backup_extension: str
    backup_keep_days: int
    auto_backup_interval_hours: int
    log_level: str

    @property
    def db_path(self) -> Path:
        """장부 DB 파일 경로"""
        return self.data_dir / self.db_file


class ConfigLoadError(Exception):
    """설정 로드 실패 예외"""

    pass


def _resolve_dir(value: Any, default: Path) -> Path:
    """디렉토리 설정값 해석 (상대 경로는 프로젝트 루트 기준)"""
    if value is None:
        return default

    path = Path(str(value))
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def _positive_int(data: dict[str, Any], key: str, default: int) -> int:
    """양의 정수 설정값 검증"""
    value = data.get(key, default)

    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigLoadError(
            f"settings.yaml의 '{key}' 값은 양의 정수여야 합니다: {value!r}"
        )
    return value


def load_config(path: Path | None = None) -> AppConfig:
    """settings.yaml 파일 로드

    파일이 없으면 기본값으로 설정 생성 (첫 실행).

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        AppConfig 인스턴스

    Raises:
        ConfigLoadError: 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    data: dict[str, Any] = {}

    if path.exists():
        try:
            content = path.read_text(encoding="utf-8")
            loaded = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"settings.yaml 파싱 실패: {e}") from e

        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ConfigLoadError("settings.yaml 최상위는 매핑이어야 합니다")
            data = loaded

    storage = data.get("storage") or {}
    backup = data.get("backup") or {}
    logging_section = data.get("logging") or {}

    if not isinstance(storage, dict) or not isinstance(backup, dict):
        raise ConfigLoadError("settings.yaml의 storage/backup 섹션은 매핑이어야 합니다")

    data_dir = _resolve_dir(storage.get("data_dir"), Paths.DATA_DIR)

    backup_extension = str(backup.get("extension", Defaults.BACKUP_EXTENSION)).lstrip(".")
    if not backup_extension:
        raise ConfigLoadError("settings.yaml의 backup.extension이 비어 있습니다")

    return AppConfig(
        data_dir=data_dir,
        db_file=str(storage.get("db_file", Defaults.DB_FILE)),
        backup_dir=_resolve_dir(backup.get("dir"), data_dir / "backups"),
        backup_prefix=str(backup.get("prefix", Defaults.BACKUP_PREFIX)),
        backup_extension=backup_extension,
        backup_keep_days=_positive_int(backup, "keep_days", Defaults.BACKUP_KEEP_DAYS),
        auto_backup_interval_hours=_positive_int(
            backup, "interval_hours", Defaults.AUTO_BACKUP_INTERVAL_HOURS
        ),
        log_level=str(logging_section.get("level", Defaults.LOG_LEVEL)).upper(),
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 한 번만 로드하여 공유
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_config(settings_path)

    @property
    def config(self) -> AppConfig:
        """로드된 설정"""
        assert self._config is not None
        return self._config

    @property
    def db_path(self) -> Path:
        """장부 DB 파일 경로"""
        return self.config.db_path

    @classmethod
    def reset(cls) -> None:
        """싱글턴 초기화 (테스트용)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 싱글턴 반환"""
    return Settings(settings_path)
