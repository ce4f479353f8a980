"""
core/logging.py 테스트
"""

import logging
from pathlib import Path

import pytest

from core.logging import get_log_file_path, setup_logging


@pytest.fixture
def restore_root_logger():
    """테스트 후 루트 로거 핸들러 복원"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_creates_log_file(self, temp_dir: Path, restore_root_logger) -> None:
        """로그 파일 생성"""
        setup_logging("engine", log_dir=temp_dir)
        logging.getLogger("core.voucher.posting").info("Posted voucher")

        assert (temp_dir / "engine.log").exists()

    def test_handlers_not_duplicated(self, temp_dir: Path, restore_root_logger) -> None:
        """재호출 시 핸들러 중복 없음"""
        setup_logging("engine", log_dir=temp_dir)
        root = setup_logging("engine", log_dir=temp_dir)

        assert len(root.handlers) == 2

    def test_noisy_loggers_quieted(self, temp_dir: Path, restore_root_logger) -> None:
        """외부 라이브러리 로그는 WARNING"""
        setup_logging("engine", log_dir=temp_dir)

        assert logging.getLogger("aiosqlite").level == logging.WARNING


def test_get_log_file_path(temp_dir: Path) -> None:
    assert get_log_file_path("check_db", temp_dir) == temp_dir / "check_db.log"
