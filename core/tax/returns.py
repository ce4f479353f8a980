"""
GST 신고서 요약

- GSTR-1: 매출(Output) 전표 명세
- GSTR-2: 매입(Input) 전표 명세
- GSTR-3B: 과세표준 / 매출세 / 매입세액공제(ITC) / 납부세액 요약 + 세율별 내역
- HSN 요약: HSN 코드별 수량 / 과세표준 / 세액

Posted 전표만 대상. 반품 전표는 세금 부채 집계와 같은 부호 규칙으로 차감.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from core.tax.liability import classification_of, tax_sign
from core.types import GstClassification, GstReportType
from core.utils.money import ZERO, round_money
from core.voucher.models import Voucher, parse_date

logger = logging.getLogger(__name__)


@dataclass
class RateBucket:
    """세율별 집계"""

    taxable: Decimal = ZERO
    tax: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO

    def to_dict(self) -> dict[str, str]:
        return {
            "taxable": str(round_money(self.taxable)),
            "tax": str(round_money(self.tax)),
            "cgst": str(round_money(self.cgst)),
            "sgst": str(round_money(self.sgst)),
            "igst": str(round_money(self.igst)),
        }


@dataclass
class GstReturnSummary:
    """GSTR-3B 요약"""

    taxable_value: Decimal = ZERO
    cgst: Decimal = ZERO
    sgst: Decimal = ZERO
    igst: Decimal = ZERO
    itc_cgst: Decimal = ZERO
    itc_sgst: Decimal = ZERO
    itc_igst: Decimal = ZERO
    rate_breakdown: dict[Decimal, RateBucket] = field(default_factory=dict)

    @property
    def output_tax(self) -> Decimal:
        return self.cgst + self.sgst + self.igst

    @property
    def itc_available(self) -> Decimal:
        return self.itc_cgst + self.itc_sgst + self.itc_igst

    @property
    def net_payable(self) -> Decimal:
        return self.output_tax - self.itc_available

    def to_dict(self) -> dict[str, Any]:
        return {
            "taxable_value": str(round_money(self.taxable_value)),
            "cgst": str(round_money(self.cgst)),
            "sgst": str(round_money(self.sgst)),
            "igst": str(round_money(self.igst)),
            "itc_available": str(round_money(self.itc_available)),
            "itc_cgst": str(round_money(self.itc_cgst)),
            "itc_sgst": str(round_money(self.itc_sgst)),
            "itc_igst": str(round_money(self.itc_igst)),
            "net_payable": str(round_money(self.net_payable)),
            "rate_breakdown": {
                str(rate): bucket.to_dict()
                for rate, bucket in sorted(self.rate_breakdown.items())
            },
        }


@dataclass
class HsnSummaryRow:
    """HSN 코드별 집계"""

    hsn: str
    description: str
    unit: str
    qty: Decimal = ZERO
    taxable: Decimal = ZERO
    tax: Decimal = ZERO


def _in_period(voucher: Voucher, start: date | None, end: date | None) -> bool:
    if start is not None and voucher.date < start:
        return False
    if end is not None and voucher.date > end:
        return False
    return True


def _period_vouchers(
    vouchers: Iterable[Voucher],
    start: date | str | None,
    end: date | str | None,
) -> list[Voucher]:
    start_date = parse_date(start) if start else None
    end_date = parse_date(end) if end else None
    return [
        v for v in vouchers
        if v.is_posted and _in_period(v, start_date, end_date)
    ]


def register(
    vouchers: Iterable[Voucher],
    report_type: GstReportType | str,
    start: date | str | None = None,
    end: date | str | None = None,
) -> list[Voucher]:
    """신고서별 전표 명세

    GSTR-1은 Output, GSTR-2는 Input 전표. GSTR-3B/HSN은 기간 내 전체 과세 전표.
    """
    report_type = GstReportType(report_type)
    selected = _period_vouchers(vouchers, start, end)

    if report_type == GstReportType.GSTR_1:
        return [v for v in selected if classification_of(v) == GstClassification.OUTPUT]
    if report_type == GstReportType.GSTR_2:
        return [v for v in selected if classification_of(v) == GstClassification.INPUT]
    return [v for v in selected if classification_of(v) is not None]


def summarize(
    vouchers: Iterable[Voucher],
    start: date | str | None = None,
    end: date | str | None = None,
) -> GstReturnSummary:
    """GSTR-3B 요약 계산

    세율별 내역은 매출(Output) 라인 기준, 라인의 tax_rate로 묶음.
    """
    summary = GstReturnSummary()

    for voucher in _period_vouchers(vouchers, start, end):
        classification = classification_of(voucher)
        if classification is None:
            continue

        sign = tax_sign(voucher.voucher_type, classification)
        cgst = sum((item.cgst_amount for item in voucher.items), ZERO) * sign
        sgst = sum((item.sgst_amount for item in voucher.items), ZERO) * sign
        igst = sum((item.igst_amount for item in voucher.items), ZERO) * sign

        if classification == GstClassification.INPUT:
            summary.itc_cgst += cgst
            summary.itc_sgst += sgst
            summary.itc_igst += igst
            continue

        taxable = voucher.sub_total if voucher.sub_total is not None else voucher.amount
        summary.taxable_value += abs(taxable) * sign
        summary.cgst += cgst
        summary.sgst += sgst
        summary.igst += igst

        for item in voucher.items:
            bucket = summary.rate_breakdown.setdefault(item.tax_rate, RateBucket())
            bucket.taxable += item.amount * sign
            bucket.tax += item.tax_amount * sign
            bucket.cgst += item.cgst_amount * sign
            bucket.sgst += item.sgst_amount * sign
            bucket.igst += item.igst_amount * sign

    logger.debug(f"GSTR-3B summary: output={summary.output_tax}, itc={summary.itc_available}")
    return summary


def hsn_summary(
    vouchers: Iterable[Voucher],
    start: date | str | None = None,
    end: date | str | None = None,
) -> list[HsnSummaryRow]:
    """HSN 코드별 요약 (코드 없는 라인은 "N/A")"""
    rows: dict[str, HsnSummaryRow] = {}

    for voucher in _period_vouchers(vouchers, start, end):
        classification = classification_of(voucher)
        if classification is None:
            continue
        sign = tax_sign(voucher.voucher_type, classification)

        for item in voucher.items:
            code = item.hsn or "N/A"
            row = rows.get(code)
            if row is None:
                row = HsnSummaryRow(hsn=code, description=item.name, unit=item.unit or "Nos")
                rows[code] = row
            row.qty += item.qty * sign
            row.taxable += item.amount * sign
            row.tax += item.tax_amount * sign

    return sorted(rows.values(), key=lambda r: r.hsn)
