"""
재고 현황

전기된 품목 전표에서 품목별 입고/출고 수량을 집계하고 판매가 기준으로 평가.

- 입고: Purchase, Goods Receipt Note (GRN), Sales Return
- 출고: Sales, Delivery Note, Purchase Return
- Purchase Order, Stock Adjustment, 분개 전표, Cancelled 전표는 제외

평가액 = 기말 수량 * 판매가 (반올림 없음)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from core.inventory.items import ItemCatalog
from core.types import VoucherType
from core.utils.money import ZERO, round_money
from core.voucher.models import Voucher, parse_date

logger = logging.getLogger(__name__)


STOCK_IN_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.PURCHASE,
    VoucherType.GOODS_RECEIPT_NOTE,
    VoucherType.SALES_RETURN,
})

STOCK_OUT_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.SALES,
    VoucherType.DELIVERY_NOTE,
    VoucherType.PURCHASE_RETURN,
})


@dataclass(frozen=True)
class StockPosition:
    """품목별 재고 현황"""

    item_id: str
    name: str
    category: str
    unit: str
    qty_in: Decimal
    qty_out: Decimal
    sale_price: Decimal

    @property
    def closing_qty(self) -> Decimal:
        return self.qty_in - self.qty_out

    @property
    def valuation(self) -> Decimal:
        return self.closing_qty * self.sale_price

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "qty_in": str(self.qty_in),
            "qty_out": str(self.qty_out),
            "closing_qty": str(self.closing_qty),
            "valuation": str(round_money(self.valuation)),
        }


@dataclass(frozen=True)
class StockSummary:
    """재고 평가 요약"""

    positions: tuple[StockPosition, ...]

    @property
    def total_valuation(self) -> Decimal:
        return sum((p.valuation for p in self.positions), ZERO)

    def get(self, item_id: str) -> StockPosition | None:
        for position in self.positions:
            if position.item_id == item_id:
                return position
        return None


def stock_direction(voucher_type: VoucherType | str) -> int:
    """재고 증감 방향 (+1 입고, -1 출고, 0 영향 없음)"""
    vtype = VoucherType(voucher_type)
    if vtype in STOCK_IN_TYPES:
        return 1
    if vtype in STOCK_OUT_TYPES:
        return -1
    return 0


def stock_summary(
    catalog: ItemCatalog,
    vouchers: Iterable[Voucher],
    as_of: date | str | None = None,
) -> StockSummary:
    """품목 마스터 순서대로 재고 현황 계산

    마스터에 없는 품목 라인은 무시.

    Args:
        catalog: 품목 마스터
        vouchers: 전표 목록
        as_of: 주어지면 해당 일자까지의 전표만 반영
    """
    cutoff = parse_date(as_of) if as_of else None
    qty_in: dict[str, Decimal] = {item.id: ZERO for item in catalog.items}
    qty_out: dict[str, Decimal] = {item.id: ZERO for item in catalog.items}

    for voucher in vouchers:
        if not voucher.is_posted:
            continue
        if cutoff is not None and voucher.date > cutoff:
            continue
        direction = stock_direction(voucher.voucher_type)
        if direction == 0:
            continue

        for line in voucher.items:
            if line.item_id not in qty_in:
                logger.debug(f"{voucher.id}: item {line.item_id} not in catalog, skipped")
                continue
            if direction > 0:
                qty_in[line.item_id] += line.qty
            else:
                qty_out[line.item_id] += line.qty

    return StockSummary(positions=tuple(
        StockPosition(
            item_id=item.id,
            name=item.name,
            category=item.category,
            unit=item.unit,
            qty_in=qty_in[item.id],
            qty_out=qty_out[item.id],
            sale_price=item.sale_price,
        )
        for item in catalog.items
    ))
