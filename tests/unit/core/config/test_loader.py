"""
core/config/loader.py 테스트

settings.yaml 로드, 기본값, 검증 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    AppConfig,
    ConfigLoadError,
    Settings,
    get_settings,
    load_config,
)
from core.constants import PROJECT_ROOT, Defaults, Paths


class TestAppConfig:
    """AppConfig 데이터클래스 테스트"""

    def test_db_path(self, app_config: AppConfig) -> None:
        """db_path = data_dir / db_file"""
        assert app_config.db_path == app_config.data_dir / "kuyumcu.db3"

    def test_frozen(self, app_config: AppConfig) -> None:
        """불변성 확인"""
        with pytest.raises(AttributeError):
            app_config.db_file = "other.db3"  # type: ignore


class TestLoadConfig:
    """load_config 테스트"""

    def test_missing_file_uses_defaults(self, temp_dir: Path) -> None:
        """파일이 없으면 기본값"""
        config = load_config(temp_dir / "missing.yaml")

        assert config.data_dir == Paths.DATA_DIR
        assert config.db_file == Defaults.DB_FILE
        assert config.backup_prefix == Defaults.BACKUP_PREFIX
        assert config.backup_keep_days == Defaults.BACKUP_KEEP_DAYS

    def test_empty_file_uses_defaults(self, temp_dir: Path) -> None:
        """빈 파일도 기본값"""
        path = temp_dir / "settings.yaml"
        path.write_text("", encoding="utf-8")

        config = load_config(path)

        assert config.backup_extension == "db3"

    def test_loads_values(self, temp_dir: Path) -> None:
        """섹션별 값 로드"""
        path = temp_dir / "settings.yaml"
        path.write_text(
            f"""
storage:
  data_dir: {temp_dir / "store"}
  db_file: ledger.db3
backup:
  prefix: shop
  extension: .bak
  keep_days: 7
  interval_hours: 6
logging:
  level: debug
""",
            encoding="utf-8",
        )

        config = load_config(path)

        assert config.db_path == temp_dir / "store" / "ledger.db3"
        assert config.backup_dir == temp_dir / "store" / "backups"
        assert config.backup_prefix == "shop"
        assert config.backup_extension == "bak"
        assert config.backup_keep_days == 7
        assert config.auto_backup_interval_hours == 6
        assert config.log_level == "DEBUG"

    def test_relative_dir_resolved_from_project_root(self, temp_dir: Path) -> None:
        """상대 경로는 프로젝트 루트 기준"""
        path = temp_dir / "settings.yaml"
        path.write_text("storage:\n  data_dir: mydata\n", encoding="utf-8")

        config = load_config(path)

        assert config.data_dir == PROJECT_ROOT / "mydata"

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """파싱 실패"""
        path = temp_dir / "settings.yaml"
        path.write_text("storage: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            load_config(path)

    def test_top_level_not_mapping(self, temp_dir: Path) -> None:
        """최상위가 목록"""
        path = temp_dir / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            load_config(path)

    def test_non_positive_keep_days(self, temp_dir: Path) -> None:
        """보관 일수는 양수"""
        path = temp_dir / "settings.yaml"
        path.write_text("backup:\n  keep_days: 0\n", encoding="utf-8")

        with pytest.raises(ConfigLoadError):
            load_config(path)


class TestSettings:
    """Settings 싱글턴 테스트"""

    def setup_method(self) -> None:
        Settings.reset()

    def teardown_method(self) -> None:
        Settings.reset()

    def test_singleton(self, temp_dir: Path) -> None:
        """같은 인스턴스 반환"""
        first = get_settings(temp_dir / "missing.yaml")
        second = get_settings()

        assert first is second
        assert first.db_path == first.config.db_path
