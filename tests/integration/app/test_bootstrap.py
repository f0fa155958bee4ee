"""LedgerApp / CLI 통합 테스트"""

import asyncio
from pathlib import Path
from typing import Iterator

import pytest
import yaml

from app.__main__ import main
from app.bootstrap import LedgerApp
from core.config.loader import AppConfig
from core.constants import Paths
from core.logging import shutdown_logging
from core.storage.migrations import LATEST_VERSION, MigrationManager
from tests.helpers import add_customer


def _write_settings(temp_dir: Path) -> Path:
    path = temp_dir / "settings.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "storage": {"data_dir": str(temp_dir / "data"), "db_file": "cli.db3"},
                "backup": {"dir": str(temp_dir / "backups"), "keep_days": 7},
                "logging": {"level": "warning"},
            }
        ),
        encoding="utf-8",
    )
    return path


class TestLedgerApp:
    """LedgerApp 생명주기"""

    @pytest.mark.asyncio
    async def test_start_wires_components(self, app_config: AppConfig, temp_dir: Path) -> None:
        async with LedgerApp(app_config, temp_dir=temp_dir) as app:
            assert app.is_started
            assert await MigrationManager(app.db).get_version() == LATEST_VERSION

            customer = await add_customer(app.store, "Ayşe")
            page = await app.query.list_customers_page(search="AYŞE")
            assert [c.id for c in page.items] == [customer.id]
            assert await app.calculator.count_indebted_customers() == 0
            assert app.auto_backup.should_poll()

        assert not app.is_started
        assert not app.db.is_connected

    @pytest.mark.asyncio
    async def test_main_loop_backs_up_and_stops(self, app_config: AppConfig) -> None:
        """첫 틱에서 백업 후 종료 이벤트로 정지"""
        async with LedgerApp(app_config) as app:
            shutdown_event = asyncio.Event()
            loop_task = asyncio.create_task(app.run_main_loop(shutdown_event, tick_interval=0.01))

            await asyncio.sleep(0.1)
            shutdown_event.set()
            await asyncio.wait_for(loop_task, timeout=1)

            assert len(app.backup.list_backups()) == 1
            assert not app.auto_backup.should_poll()

    @pytest.mark.asyncio
    async def test_main_loop_requires_start(self, app_config: AppConfig) -> None:
        with pytest.raises(RuntimeError):
            await LedgerApp(app_config).run_main_loop(asyncio.Event())


class TestCli:
    """python -m app 명령"""

    @pytest.fixture(autouse=True)
    def isolated_logs(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
        """로그 파일은 임시 디렉토리에, 테스트 후 핸들러 정리"""
        monkeypatch.setattr(Paths, "LOGS_DIR", temp_dir / "logs")
        yield
        shutdown_logging()

    def test_backup_and_list(self, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        settings = _write_settings(temp_dir)

        assert main(["--config", str(settings), "backup"]) == 0
        assert len(list((temp_dir / "backups").glob("kuyumcu_backup_*.db3"))) == 1

        assert main(["--config", str(settings), "list-backups"]) == 0
        assert "kuyumcu_backup_" in capsys.readouterr().out

    def test_migrate_creates_database(self, temp_dir: Path) -> None:
        settings = _write_settings(temp_dir)

        assert main(["--config", str(settings), "migrate"]) == 0
        assert (temp_dir / "data" / "cli.db3").is_file()

    def test_restore_invalid_file(self, temp_dir: Path) -> None:
        settings = _write_settings(temp_dir)
        bogus = temp_dir / "bogus.db3"
        bogus.write_text("nope", encoding="utf-8")

        assert main(["--config", str(settings), "restore", str(bogus)]) == 1

    def test_bad_config(self, temp_dir: Path) -> None:
        settings = temp_dir / "broken.yaml"
        settings.write_text("backup:\n  keep_days: -1\n", encoding="utf-8")

        assert main(["--config", str(settings), "migrate"]) == 1
