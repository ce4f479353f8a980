"""
유틸리티 패키지

Decimal 변환, 표시용 반올림, 타임존 등 공통 유틸리티
"""

from core.utils.money import (
    CENT,
    HUNDRED,
    ZERO,
    format_money,
    round_money,
    to_decimal,
)
from core.utils.timezone import utc_now, utc_now_iso

__all__ = [
    "CENT",
    "HUNDRED",
    "ZERO",
    "format_money",
    "round_money",
    "to_decimal",
    "utc_now",
    "utc_now_iso",
]
