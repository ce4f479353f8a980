"""
설정 로더

settings.yaml 로드 및 엔진 설정 생성
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, Paths
from core.types import VoucherType


@dataclass(frozen=True)
class CompanyConfig:
    """회사 정보"""

    name: str = Defaults.COMPANY_NAME
    state: str = ""


@dataclass(frozen=True)
class FiscalYearConfig:
    """회계연도 설정

    locked=True이면 해당 회계연도는 전기 불가 (컴플라이언스 잠금)
    """

    current: str = Defaults.FISCAL_YEAR
    start_month: int = Defaults.FISCAL_YEAR_START_MONTH
    locked: bool = False


@dataclass(frozen=True)
class NumberingConfig:
    """전표 번호 설정"""

    serial_width: int = Defaults.SERIAL_WIDTH
    fallback_prefix: str = Defaults.FALLBACK_PREFIX
    prefixes: dict[str, str] = field(default_factory=dict)  # 유형별 접두사 재정의


@dataclass(frozen=True)
class PostingConfig:
    """전기 규칙 설정"""

    balance_tolerance: Decimal = Defaults.BALANCE_TOLERANCE
    enforce_fiscal_period: bool = True


@dataclass(frozen=True)
class EngineSettings:
    """엔진 전체 설정 (불변)"""

    company: CompanyConfig = field(default_factory=CompanyConfig)
    fiscal_year: FiscalYearConfig = field(default_factory=FiscalYearConfig)
    numbering: NumberingConfig = field(default_factory=NumberingConfig)
    posting: PostingConfig = field(default_factory=PostingConfig)
    db_path: Path = Paths.DB_FILE


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """하위 섹션 조회 (없으면 빈 dict)"""
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise SettingsLoadError(f"settings.yaml의 '{key}' 섹션 형식이 잘못되었습니다")
    return value


def _parse_fiscal_year(section: dict[str, Any]) -> FiscalYearConfig:
    start_month = int(section.get("start_month", Defaults.FISCAL_YEAR_START_MONTH))
    if not 1 <= start_month <= 12:
        raise SettingsLoadError(
            f"fiscal_year.start_month는 1~12 사이여야 합니다: {start_month}"
        )

    return FiscalYearConfig(
        current=str(section.get("current", Defaults.FISCAL_YEAR)),
        start_month=start_month,
        locked=bool(section.get("locked", False)),
    )


def _parse_numbering(section: dict[str, Any]) -> NumberingConfig:
    prefixes = section.get("prefixes") or {}
    if not isinstance(prefixes, dict):
        raise SettingsLoadError("numbering.prefixes는 매핑이어야 합니다")

    # 전표 유형 검증
    valid_types = {t.value for t in VoucherType}
    for type_name in prefixes:
        if type_name not in valid_types:
            raise SettingsLoadError(
                f"numbering.prefixes에 알 수 없는 전표 유형: '{type_name}'. "
                f"유효한 값: {sorted(valid_types)}"
            )

    serial_width = int(section.get("serial_width", Defaults.SERIAL_WIDTH))
    if serial_width < 1:
        raise SettingsLoadError(f"numbering.serial_width는 1 이상이어야 합니다: {serial_width}")

    return NumberingConfig(
        serial_width=serial_width,
        fallback_prefix=str(section.get("fallback_prefix", Defaults.FALLBACK_PREFIX)),
        prefixes={str(k): str(v) for k, v in prefixes.items()},
    )


def _parse_posting(section: dict[str, Any]) -> PostingConfig:
    raw_tolerance = section.get("balance_tolerance", Defaults.BALANCE_TOLERANCE)
    try:
        tolerance = Decimal(str(raw_tolerance))
    except InvalidOperation as e:
        raise SettingsLoadError(
            f"posting.balance_tolerance가 숫자가 아닙니다: {raw_tolerance}"
        ) from e
    if not tolerance.is_finite() or tolerance <= 0:
        raise SettingsLoadError(
            f"posting.balance_tolerance는 0보다 큰 유한한 값이어야 합니다: {raw_tolerance}"
        )

    return PostingConfig(
        balance_tolerance=tolerance,
        enforce_fiscal_period=bool(section.get("enforce_fiscal_period", True)),
    )


def load_settings(path: Path | None = None) -> EngineSettings:
    """settings.yaml 파일 로드

    섹션이 없으면 Defaults 값 사용.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        EngineSettings 인스턴스

    Raises:
        SettingsLoadError: 파일이 없거나 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml이 비어 있습니다")
    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    company = _section(data, "company")
    storage = _section(data, "storage")

    db_path = Path(storage["db_path"]) if storage.get("db_path") else Paths.DB_FILE
    if not db_path.is_absolute():
        db_path = path.parent / db_path

    return EngineSettings(
        company=CompanyConfig(
            name=str(company.get("name", Defaults.COMPANY_NAME)),
            state=str(company.get("state", "")),
        ),
        fiscal_year=_parse_fiscal_year(_section(data, "fiscal_year")),
        numbering=_parse_numbering(_section(data, "numbering")),
        posting=_parse_posting(_section(data, "posting")),
        db_path=db_path,
    )


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _settings: EngineSettings | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._settings is None:
            self._settings = load_settings(settings_path)

    @property
    def engine(self) -> EngineSettings:
        """전체 엔진 설정"""
        assert self._settings is not None
        return self._settings

    @property
    def fiscal_year(self) -> str:
        """현재 회계연도 (예: "2023 - 2024")"""
        assert self._settings is not None
        return self._settings.fiscal_year.current

    @property
    def is_fiscal_year_locked(self) -> bool:
        """현재 회계연도 잠금 여부"""
        assert self._settings is not None
        return self._settings.fiscal_year.locked

    @property
    def db_path(self) -> Path:
        """SnapshotStore DB 경로"""
        assert self._settings is not None
        return self._settings.db_path

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._settings = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
