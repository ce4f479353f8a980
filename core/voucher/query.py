"""
전표 조회 / 일계표

읽기 전용 필터. 원본 컬렉션을 변경하지 않으며 지연 평가(generator).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from core.types import VoucherStatus, VoucherType
from core.utils.money import ZERO, to_decimal
from core.voucher.models import Voucher, parse_date


@dataclass(frozen=True)
class VoucherFilter:
    """전표 조회 조건 (None인 조건은 무시)"""

    start: date | None = None
    end: date | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    text: str | None = None  # 거래처명 / 전표번호 부분 일치
    voucher_type: VoucherType | None = None
    status: VoucherStatus | None = None

    @classmethod
    def create(
        cls,
        start: date | str | None = None,
        end: date | str | None = None,
        min_amount: Any = None,
        max_amount: Any = None,
        text: str | None = None,
        voucher_type: VoucherType | str | None = None,
        status: VoucherStatus | str | None = None,
    ) -> VoucherFilter:
        return cls(
            start=parse_date(start) if start else None,
            end=parse_date(end) if end else None,
            min_amount=to_decimal(min_amount) if min_amount not in (None, "") else None,
            max_amount=to_decimal(max_amount) if max_amount not in (None, "") else None,
            text=text or None,
            voucher_type=VoucherType(voucher_type) if voucher_type else None,
            status=VoucherStatus(status) if status else None,
        )

    def matches(self, voucher: Voucher) -> bool:
        if self.start is not None and voucher.date < self.start:
            return False
        if self.end is not None and voucher.date > self.end:
            return False
        if self.min_amount is not None and voucher.amount < self.min_amount:
            return False
        if self.max_amount is not None and voucher.amount > self.max_amount:
            return False
        if self.voucher_type is not None and voucher.voucher_type != self.voucher_type:
            return False
        if self.status is not None and voucher.status != self.status:
            return False
        if self.text:
            needle = self.text.lower()
            if needle not in voucher.party.lower() and needle not in voucher.id.lower():
                return False
        return True


def filter_vouchers(
    vouchers: Iterable[Voucher],
    filters: VoucherFilter | None = None,
) -> Iterator[Voucher]:
    """조건에 맞는 전표를 순서대로 반환"""
    if filters is None:
        yield from vouchers
        return
    for voucher in vouchers:
        if filters.matches(voucher):
            yield voucher


@dataclass(frozen=True)
class DayBookTotals:
    """일계표 합계"""

    count: int
    gross: Decimal


def summarize(vouchers: Iterable[Voucher]) -> DayBookTotals:
    """조회 결과 건수 및 총액"""
    count = 0
    gross = ZERO
    for voucher in vouchers:
        count += 1
        gross += voucher.amount
    return DayBookTotals(count=count, gross=gross)
