"""
금액 유틸리티

내부 계산은 Decimal 원본값 유지, 반올림은 표시/내보내기 시점에만 수행
(여러 라인에 걸친 반올림 오차 누적 방지)
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def to_decimal(value: Any, default: Decimal | None = None) -> Decimal:
    """숫자 입력을 Decimal로 변환

    float은 str을 거쳐 변환하여 이진 부동소수점 오차 유입 방지.

    Args:
        value: int, float, str, Decimal
        default: None/빈 문자열일 때 반환할 값 (None이면 ValueError)

    Raises:
        ValueError: 숫자로 해석할 수 없거나 NaN/Infinity인 경우
    """
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        if default is not None:
            return default
        raise ValueError("Numeric value is required")
    if isinstance(value, bool):
        raise ValueError(f"Not a numeric value: {value!r}")

    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Not a numeric value: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    """표시용 2자리 반올림 (ROUND_HALF_UP)"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """표시용 문자열 (천 단위 구분, 2자리)"""
    return f"{round_money(value):,.2f}"
