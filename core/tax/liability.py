"""
세금 부채 집계 (TaxLiabilityAggregator)

Posted 전표의 tax_total을 분류(Output/Input) x 관할(Local/Central)로 집계.

부호 규칙 (집계기가 단독으로 결정):
- Output: Sales Return이면 -1, 그 외 +1
- Input: Purchase Return이면 -1, 그 외 +1

tax_total의 절대값에 부호를 곱하므로 상위에서 이미 음수로 저장된 값도
부호가 두 번 뒤집히지 않음.

net_payable = total_output - total_input (양수: 납부, 음수: 환급 가능)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.types import GstClassification, Jurisdiction, VoucherType, default_gst_classification
from core.utils.money import ZERO, round_money
from core.voucher.models import Voucher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxLiability:
    """세금 부채 집계 결과"""

    output_local: Decimal = ZERO
    output_central: Decimal = ZERO
    input_local: Decimal = ZERO
    input_central: Decimal = ZERO

    @property
    def total_output(self) -> Decimal:
        return self.output_local + self.output_central

    @property
    def total_input(self) -> Decimal:
        return self.input_local + self.input_central

    @property
    def net_payable(self) -> Decimal:
        return self.total_output - self.total_input

    def to_dict(self) -> dict[str, Any]:
        """표시용 (2자리 반올림)"""
        return {
            "output_local": str(round_money(self.output_local)),
            "output_central": str(round_money(self.output_central)),
            "input_local": str(round_money(self.input_local)),
            "input_central": str(round_money(self.input_central)),
            "total_output": str(round_money(self.total_output)),
            "total_input": str(round_money(self.total_input)),
            "net_payable": str(round_money(self.net_payable)),
        }


def classification_of(voucher: Voucher) -> GstClassification | None:
    """전표의 GST 분류 (저장값 우선, 없으면 유형 기준)"""
    return voucher.gst_classification or default_gst_classification(voucher.voucher_type)


def tax_sign(voucher_type: VoucherType, classification: GstClassification) -> int:
    """반품 전표는 이전에 인식한 세금을 되돌림"""
    if classification == GstClassification.OUTPUT and voucher_type == VoucherType.SALES_RETURN:
        return -1
    if classification == GstClassification.INPUT and voucher_type == VoucherType.PURCHASE_RETURN:
        return -1
    return 1


def signed_tax(voucher: Voucher) -> Decimal | None:
    """전표의 부호 적용 세액 (집계 대상이 아니면 None)"""
    if not voucher.is_posted or voucher.tax_total is None:
        return None
    classification = classification_of(voucher)
    if classification is None:
        return None
    return abs(voucher.tax_total) * tax_sign(voucher.voucher_type, classification)


class TaxLiabilityAggregator:
    """세금 부채 집계기 (상태 없음)"""

    def aggregate(self, vouchers: Iterable[Voucher]) -> TaxLiability:
        buckets = {
            (GstClassification.OUTPUT, Jurisdiction.LOCAL): ZERO,
            (GstClassification.OUTPUT, Jurisdiction.CENTRAL): ZERO,
            (GstClassification.INPUT, Jurisdiction.LOCAL): ZERO,
            (GstClassification.INPUT, Jurisdiction.CENTRAL): ZERO,
        }

        counted = 0
        for voucher in vouchers:
            amount = signed_tax(voucher)
            if amount is None:
                continue
            jurisdiction = voucher.jurisdiction or Jurisdiction.LOCAL
            buckets[(classification_of(voucher), jurisdiction)] += amount
            counted += 1

        liability = TaxLiability(
            output_local=buckets[(GstClassification.OUTPUT, Jurisdiction.LOCAL)],
            output_central=buckets[(GstClassification.OUTPUT, Jurisdiction.CENTRAL)],
            input_local=buckets[(GstClassification.INPUT, Jurisdiction.LOCAL)],
            input_central=buckets[(GstClassification.INPUT, Jurisdiction.CENTRAL)],
        )
        logger.debug(f"Tax liability from {counted} vouchers: net_payable={liability.net_payable}")
        return liability


def aggregate(vouchers: Iterable[Voucher]) -> TaxLiability:
    """TaxLiabilityAggregator().aggregate 단축 함수"""
    return TaxLiabilityAggregator().aggregate(vouchers)
