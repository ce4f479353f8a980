"""
세율 분할기

세율과 공급 관할로 CGST/SGST/IGST 분할 계산.
라인 품목의 세금 필드는 반드시 이 모듈을 통해서만 설정됨.

- Local: CGST = SGST = rate / 2, IGST = 0
- Central: IGST = rate, CGST = SGST = 0
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.errors import TaxRateRangeError
from core.types import Jurisdiction
from core.utils.money import HUNDRED, ZERO, to_decimal

TWO = Decimal("2")


@dataclass(frozen=True)
class TaxSplit:
    """세율 분할 결과 (퍼센트)"""

    cgst: Decimal
    sgst: Decimal
    igst: Decimal

    @property
    def total(self) -> Decimal:
        """분할 합계 (원래 세율과 동일)"""
        return self.cgst + self.sgst + self.igst


ZERO_SPLIT = TaxSplit(cgst=ZERO, sgst=ZERO, igst=ZERO)


def check_rate(rate: Any) -> Decimal:
    """세율 범위 검증 (0~100)

    Args:
        rate: 세율 (퍼센트)

    Returns:
        Decimal 세율

    Raises:
        TaxRateRangeError: 숫자가 아니거나 0~100 범위 밖인 경우
    """
    try:
        value = to_decimal(rate)
    except ValueError as e:
        raise TaxRateRangeError(rate) from e

    if not value.is_finite() or value < ZERO or value > HUNDRED:
        raise TaxRateRangeError(rate)
    return value


def split_tax(rate: Any, jurisdiction: Jurisdiction | str) -> TaxSplit:
    """세율을 관할에 따라 분할

    Args:
        rate: 전체 GST 세율 (0~100)
        jurisdiction: Local 또는 Central

    Returns:
        TaxSplit(cgst, sgst, igst)

    Example:
        >>> split_tax(18, Jurisdiction.LOCAL)
        TaxSplit(cgst=Decimal('9'), sgst=Decimal('9'), igst=Decimal('0'))
    """
    value = check_rate(rate)
    jurisdiction = Jurisdiction(jurisdiction)

    if value == ZERO:
        return ZERO_SPLIT

    if jurisdiction == Jurisdiction.LOCAL:
        half = value / TWO
        return TaxSplit(cgst=half, sgst=half, igst=ZERO)
    return TaxSplit(cgst=ZERO, sgst=ZERO, igst=value)


def tax_amount(base_amount: Any, rate: Any) -> Decimal:
    """세액 계산 (base * rate / 100)

    반올림하지 않음. 표시 시점에만 round_money 적용.
    """
    value = check_rate(rate)
    return to_decimal(base_amount) * value / HUNDRED
