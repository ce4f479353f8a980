"""
전표 번호 생성기

규칙: {prefix}/{year_token}/{serial:05d}
예: SL/23-24/00001

- 전표 유형별, 회계연도별로 독립적인 일련번호
- 기존 전표 중 같은 유형 + 같은 연도 토큰의 최대 일련번호 + 1
- 충돌 검사는 하지 않음 (VoucherLedger.post가 담당)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date

from core.constants import Defaults
from core.errors import ValidationError
from core.types import VoucherType

logger = logging.getLogger(__name__)


# 전표 유형별 번호 접두사
VOUCHER_PREFIXES: dict[VoucherType, str] = {
    VoucherType.SALES: "SL",
    VoucherType.PURCHASE: "PR",
    VoucherType.SALES_RETURN: "SR",
    VoucherType.PURCHASE_RETURN: "PN",
    VoucherType.PAYMENT: "PY",
    VoucherType.RECEIPT: "RC",
    VoucherType.CONTRA: "CN",
    VoucherType.JOURNAL: "JR",
    VoucherType.DELIVERY_NOTE: "DN",
    VoucherType.GOODS_RECEIPT_NOTE: "GR",
    VoucherType.STOCK_ADJUSTMENT: "SA",
    VoucherType.PURCHASE_ORDER: "PO",
}

# "2023 - 2024", "2023-2024", "2023-24", "2023/24"
_FISCAL_YEAR_RE = re.compile(r"^\s*(\d{4})\s*[-/]\s*(\d{2}|\d{4})\s*$")
_TRAILING_SERIAL_RE = re.compile(r"(\d+)$")


@dataclass(frozen=True)
class FiscalYear:
    """회계연도

    start_month=4 → 2023-04-01 ~ 2024-03-31
    """

    start_year: int
    end_year: int
    start_month: int = Defaults.FISCAL_YEAR_START_MONTH

    @classmethod
    def parse(cls, label: str, start_month: int = Defaults.FISCAL_YEAR_START_MONTH) -> FiscalYear:
        """회계연도 문자열 파싱

        Raises:
            ValidationError: 형식이 잘못되었거나 연도가 연속하지 않는 경우
        """
        match = _FISCAL_YEAR_RE.match(label or "")
        if match is None:
            raise ValidationError(f"Invalid fiscal year '{label}', expected e.g. '2023 - 2024'")

        start_year = int(match.group(1))
        end_raw = match.group(2)
        if len(end_raw) == 2:
            end_year = (start_year // 100) * 100 + int(end_raw)
            if end_year < start_year:
                end_year += 100
        else:
            end_year = int(end_raw)

        if end_year != start_year + 1:
            raise ValidationError(
                f"Invalid fiscal year '{label}', end year must follow start year"
            )

        return cls(start_year=start_year, end_year=end_year, start_month=start_month)

    @property
    def token(self) -> str:
        """번호용 연도 토큰 (예: "23-24")"""
        return f"{self.start_year % 100:02d}-{self.end_year % 100:02d}"

    @property
    def label(self) -> str:
        """표시용 라벨 (예: "2023 - 2024")"""
        return f"{self.start_year} - {self.end_year}"

    @property
    def start_date(self) -> date:
        return date(self.start_year, self.start_month, 1)

    @property
    def end_date(self) -> date:
        # 다음 회계연도 시작 전날
        if self.start_month == 1:
            return date(self.start_year, 12, 31)
        next_start = date(self.end_year, self.start_month, 1)
        return date.fromordinal(next_start.toordinal() - 1)

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


def year_token(fiscal_year: str | FiscalYear) -> str:
    """회계연도에서 연도 토큰 추출 ("2023 - 2024" → "23-24")"""
    if isinstance(fiscal_year, FiscalYear):
        return fiscal_year.token
    return FiscalYear.parse(fiscal_year).token


def parse_serial(voucher_id: str) -> int | None:
    """전표 ID 끝의 일련번호 추출 (없으면 None)"""
    match = _TRAILING_SERIAL_RE.search(voucher_id or "")
    if match is None:
        return None
    return int(match.group(1))


class VoucherNumberer:
    """전표 번호 생성기

    상태는 기존 전표 목록에서만 유도 (내부 카운터 없음).
    호출자는 전기 직전에 최신 목록으로 next_id를 다시 계산해야 함.

    Args:
        prefixes: 유형별 접두사 재정의 (유형 값 → 접두사)
        serial_width: 일련번호 자릿수
        fallback_prefix: 매핑 없는 유형에 사용할 접두사
    """

    def __init__(
        self,
        prefixes: Mapping[str, str] | None = None,
        serial_width: int = Defaults.SERIAL_WIDTH,
        fallback_prefix: str = Defaults.FALLBACK_PREFIX,
    ):
        self._prefixes: dict[str, str] = {t.value: p for t, p in VOUCHER_PREFIXES.items()}
        if prefixes:
            self._prefixes.update({str(k): v for k, v in prefixes.items()})
        self.serial_width = serial_width
        self.fallback_prefix = fallback_prefix

    def prefix_for(self, voucher_type: VoucherType | str) -> str:
        """유형별 접두사 (매핑 없으면 fallback, 전기를 막지 않음)"""
        type_name = voucher_type.value if isinstance(voucher_type, VoucherType) else str(voucher_type)
        prefix = self._prefixes.get(type_name)
        if prefix is None:
            logger.warning(
                f"No number prefix for voucher type '{type_name}', "
                f"using '{self.fallback_prefix}'"
            )
            return self.fallback_prefix
        return prefix

    def next_id(
        self,
        voucher_type: VoucherType | str,
        fiscal_year: str | FiscalYear,
        existing_vouchers: Iterable[object],
    ) -> str:
        """다음 전표 번호 계산

        Args:
            voucher_type: 전표 유형
            fiscal_year: 회계연도 ("2023 - 2024" 또는 FiscalYear)
            existing_vouchers: 현재 전표 목록 (id, voucher_type 속성 필요)

        Returns:
            "{prefix}/{token}/{serial}" 형식 번호

        Raises:
            ValidationError: 회계연도 형식 오류
        """
        type_name = voucher_type.value if isinstance(voucher_type, VoucherType) else str(voucher_type)
        token = year_token(fiscal_year)
        marker = f"/{token}/"

        last_serial = 0
        for voucher in existing_vouchers:
            existing_type = getattr(voucher, "voucher_type", None)
            existing_name = (
                existing_type.value if isinstance(existing_type, VoucherType) else existing_type
            )
            if existing_name != type_name:
                continue

            voucher_id = getattr(voucher, "id", "")
            if marker not in voucher_id:
                continue

            serial = parse_serial(voucher_id)
            if serial is not None and serial > last_serial:
                last_serial = serial

        next_serial = last_serial + 1
        voucher_id = f"{self.prefix_for(voucher_type)}{marker}{next_serial:0{self.serial_width}d}"
        logger.debug(f"Next voucher id for {type_name} {token}: {voucher_id}")
        return voucher_id
