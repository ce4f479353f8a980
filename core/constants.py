"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → voucherengine/)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class Defaults:
    """기본값 상수

    settings.yaml에 값이 없을 때 사용
    """

    COMPANY_NAME: str = "Nexus Trading Co."
    FISCAL_YEAR: str = "2023 - 2024"
    FISCAL_YEAR_START_MONTH: int = 4  # 4월 시작 (인도 회계연도)

    SERIAL_WIDTH: int = 5  # SL/23-24/00001
    FALLBACK_PREFIX: str = "VCH"  # 매핑 없는 전표 유형

    # 차변/대변 균형 허용 오차
    BALANCE_TOLERANCE: Decimal = Decimal("0.01")

    LOG_LEVEL: str = "INFO"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    DB_FILE: Path = DATA_DIR / "voucherengine.db"


class SnapshotKeys:
    """SnapshotStore 저장 키

    키마다 JSON 배열 하나 (snapshot_store.snapshot_key)
    """

    LEDGERS: str = "ledgers"
    ACCOUNT_GROUPS: str = "account_groups"
    TAXES: str = "taxes"
    TAX_GROUPS: str = "tax_groups"
    ITEMS: str = "items"
    VOUCHERS: str = "vouchers"
    RECONCILIATION_LOG: str = "reconciliation_log"

    ALL: tuple[str, ...] = (
        LEDGERS,
        ACCOUNT_GROUPS,
        TAXES,
        TAX_GROUPS,
        ITEMS,
        VOUCHERS,
        RECONCILIATION_LOG,
    )
