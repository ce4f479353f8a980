"""
품목 라인 생성기

품목 마스터 + 관할로 VoucherLineItem 생성.
세율 결정 순서:
1. 명시적 tax_rate 인자
2. 품목의 tax_group_id가 있고 TaxMasterBook이 주어지면 그룹 유효 세율
3. 품목 마스터의 gst_rate

관할(Local/Central)이 바뀌면 reprice_for_jurisdiction으로 모든 라인을 재분할.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.tax.resolver import split_tax
from core.types import GstClassification, Jurisdiction
from core.voucher.models import VoucherLineItem

if TYPE_CHECKING:
    from core.inventory.items import StockItem
    from core.tax.masters import TaxMasterBook

logger = logging.getLogger(__name__)


def resolve_item_rate(
    item: StockItem,
    jurisdiction: Jurisdiction | str,
    classification: GstClassification | str = GstClassification.OUTPUT,
    tax_book: TaxMasterBook | None = None,
) -> Decimal:
    """품목에 적용할 전체 GST 세율 결정"""
    if item.tax_group_id and tax_book is not None:
        group_rate = tax_book.effective_rate(item.tax_group_id, classification, jurisdiction)
        if group_rate > 0:
            return group_rate
        logger.debug(
            f"Tax group {item.tax_group_id} has no components for item {item.id}, "
            f"falling back to item rate {item.gst_rate}"
        )
    return item.gst_rate


def build_line_item(
    item: StockItem,
    qty: Any,
    jurisdiction: Jurisdiction | str,
    rate: Any = None,
    tax_rate: Any = None,
    classification: GstClassification | str = GstClassification.OUTPUT,
    tax_book: TaxMasterBook | None = None,
) -> VoucherLineItem:
    """품목 마스터에서 라인 생성

    Args:
        item: 품목 마스터
        qty: 수량
        jurisdiction: 공급 관할
        rate: 단가 (None이면 품목 판매가)
        tax_rate: 세율 (None이면 resolve_item_rate)
        classification: 세율 그룹 조회용 분류 (매출 Output / 매입 Input)
        tax_book: 세금 그룹 조회용 TaxMasterBook

    Raises:
        TaxRateRangeError: 세율이 0~100 밖인 경우
    """
    if tax_rate is None:
        tax_rate = resolve_item_rate(item, jurisdiction, classification, tax_book)

    return VoucherLineItem.create(
        item_id=item.id,
        qty=qty,
        rate=item.sale_price if rate is None else rate,
        tax_rate=tax_rate,
        jurisdiction=jurisdiction,
        name=item.name,
        hsn=item.hsn_code,
        unit=item.unit,
    )


def reprice_for_jurisdiction(
    items: Iterable[VoucherLineItem],
    jurisdiction: Jurisdiction | str,
) -> tuple[VoucherLineItem, ...]:
    """관할 변경 시 모든 라인의 분할 세율 재계산

    tax_rate(전체 세율)는 유지, cgst/sgst/igst만 교체.
    """
    repriced = []
    for line in items:
        split = split_tax(line.tax_rate, jurisdiction)
        repriced.append(replace(
            line,
            cgst_rate=split.cgst,
            sgst_rate=split.sgst,
            igst_rate=split.igst,
        ))
    return tuple(repriced)


def split_matches(line: VoucherLineItem, jurisdiction: Jurisdiction | str) -> bool:
    """라인의 분할 세율이 관할 규칙과 일치하는지"""
    split = split_tax(line.tax_rate, jurisdiction)
    return (
        line.cgst_rate == split.cgst
        and line.sgst_rate == split.sgst
        and line.igst_rate == split.igst
    )
