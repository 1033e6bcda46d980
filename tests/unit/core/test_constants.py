"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from decimal import Decimal
from pathlib import Path

from core.constants import PROJECT_ROOT, Defaults, Paths


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """PROJECT_ROOT가 Path 타입인지 확인"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """PROJECT_ROOT가 절대 경로인지 확인"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """PROJECT_ROOT에 core 디렉토리가 있는지 확인"""
        core_dir = PROJECT_ROOT / "core"
        assert core_dir.exists()


class TestDefaults:
    """Defaults 테스트"""

    def test_journal_number(self) -> None:
        """분개 번호 기본값"""
        assert Defaults.JOURNAL_NUMBER_PREFIX == "J"
        assert Defaults.JOURNAL_NUMBER_WIDTH == 6
        assert Defaults.JOURNAL_NUMBER_START == 1

    def test_balance_tolerance_is_decimal(self) -> None:
        """허용 오차는 Decimal"""
        assert isinstance(Defaults.BALANCE_TOLERANCE, Decimal)
        assert Defaults.BALANCE_TOLERANCE == Decimal("0.01")

    def test_division_codes(self) -> None:
        """회계구분 코드"""
        assert Defaults.DIVISION_CODES == ("MANAGEMENT", "RESERVE", "PARKING", "COMMON")

    def test_web_port(self) -> None:
        """웹 포트 범위"""
        assert 0 < Defaults.WEB_PORT < 65536


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        """모든 경로 상수가 Path 타입인지 확인"""
        for name in dir(Paths):
            if name.startswith("_"):
                continue
            assert isinstance(getattr(Paths, name), Path), name

    def test_paths_under_project_root(self) -> None:
        """경로가 프로젝트 루트 하위인지 확인"""
        assert Paths.CONFIG_DIR.parent == PROJECT_ROOT
        assert Paths.LEDGER_CONFIG_FILE.parent == Paths.CONFIG_DIR
        assert Paths.SNAPSHOT_FILE.parent == Paths.DATA_DIR
