"""
core/constants.py 테스트

모든 경로가 pathlib.Path 타입이고, 상수가 정상적으로 접근 가능한지 확인
"""

from decimal import Decimal
from pathlib import Path

from core.constants import PROJECT_ROOT, Defaults, Paths, SnapshotKeys


class TestProjectRoot:
    """PROJECT_ROOT 테스트"""

    def test_project_root_is_path(self) -> None:
        """Path 타입"""
        assert isinstance(PROJECT_ROOT, Path)

    def test_project_root_is_absolute(self) -> None:
        """절대 경로"""
        assert PROJECT_ROOT.is_absolute()

    def test_project_root_contains_core_directory(self) -> None:
        """core 디렉토리 포함"""
        assert (PROJECT_ROOT / "core").exists()


class TestDefaults:
    """Defaults 테스트"""

    def test_fiscal_year(self) -> None:
        """회계연도 기본값"""
        assert Defaults.FISCAL_YEAR == "2023 - 2024"
        assert Defaults.FISCAL_YEAR_START_MONTH == 4

    def test_tolerance_is_decimal(self) -> None:
        """허용 오차는 Decimal"""
        assert isinstance(Defaults.BALANCE_TOLERANCE, Decimal)
        assert Defaults.BALANCE_TOLERANCE == Decimal("0.01")

    def test_numbering(self) -> None:
        """번호 형식 기본값"""
        assert Defaults.SERIAL_WIDTH == 5
        assert Defaults.FALLBACK_PREFIX == "VCH"


class TestPaths:
    """Paths 테스트"""

    def test_all_paths_are_path_type(self) -> None:
        """모든 경로는 Path"""
        for value in (Paths.CONFIG_DIR, Paths.DATA_DIR, Paths.LOGS_DIR, Paths.SETTINGS_FILE, Paths.DB_FILE):
            assert isinstance(value, Path)

    def test_paths_under_project_root(self) -> None:
        """프로젝트 루트 하위 경로"""
        assert Paths.SETTINGS_FILE.parent == Paths.CONFIG_DIR
        assert Paths.DB_FILE.parent == PROJECT_ROOT / "data"

    def test_settings_file_exists(self) -> None:
        """settings.yaml 존재"""
        assert Paths.SETTINGS_FILE.exists()


class TestSnapshotKeys:
    """SnapshotKeys 테스트"""

    def test_all_unique(self) -> None:
        """키 중복 없음"""
        assert len(set(SnapshotKeys.ALL)) == len(SnapshotKeys.ALL)

    def test_contains_vouchers(self) -> None:
        """전표 키 포함"""
        assert SnapshotKeys.VOUCHERS in SnapshotKeys.ALL
        assert SnapshotKeys.RECONCILIATION_LOG in SnapshotKeys.ALL
