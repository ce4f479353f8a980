"""
core/inventory/stock.py 테스트

전표 기반 품목별 입고/출고 수량과 판매가 기준 평가액
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from core.inventory.items import ItemCatalog
from core.inventory.stock import stock_direction, stock_summary
from core.types import VoucherStatus, VoucherType


@pytest.fixture
def movements(voucher_ledger, make_itemized_draft, make_ledger_draft):
    """i1 입고 10 + 5(GRN) + 1(매출 반품) / 출고 3 + 2(납품서) + 4(매입 반품)"""
    voucher_ledger.post(make_itemized_draft("Purchase", qty=10, party_ledger_id="l5"))
    voucher_ledger.post(make_itemized_draft("Goods Receipt Note (GRN)", qty=5, party_ledger_id="l5"))
    voucher_ledger.post(make_itemized_draft("Sales", qty=3, date="2023-08-01"))
    voucher_ledger.post(make_itemized_draft("Delivery Note", qty=2, date="2023-08-02"))
    voucher_ledger.post(make_itemized_draft("Sales Return", qty=1, date="2023-09-01"))
    voucher_ledger.post(make_itemized_draft(
        "Purchase Return", qty=4, party_ledger_id="l5", date="2023-09-02",
    ))
    voucher_ledger.post(make_ledger_draft())
    return voucher_ledger.vouchers


class TestStockDirection:
    """전표 유형별 재고 방향"""

    @pytest.mark.parametrize(
        ("voucher_type", "expected"),
        [
            (VoucherType.PURCHASE, 1),
            (VoucherType.GOODS_RECEIPT_NOTE, 1),
            (VoucherType.SALES_RETURN, 1),
            (VoucherType.SALES, -1),
            (VoucherType.DELIVERY_NOTE, -1),
            (VoucherType.PURCHASE_RETURN, -1),
            (VoucherType.PURCHASE_ORDER, 0),
            (VoucherType.STOCK_ADJUSTMENT, 0),
            (VoucherType.PAYMENT, 0),
        ],
    )
    def test_direction(self, voucher_type: VoucherType, expected: int) -> None:
        """입고 +1, 출고 -1, 그 외 0"""
        assert stock_direction(voucher_type) == expected

    def test_accepts_string(self) -> None:
        """문자열 유형도 허용"""
        assert stock_direction("Delivery Note") == -1


class TestStockSummary:
    """재고 현황 집계"""

    def test_quantities(self, catalog, movements) -> None:
        """반품은 원 거래 방향을 되돌림"""
        position = stock_summary(catalog, movements).get("i1")

        assert position.qty_in == Decimal("16")
        assert position.qty_out == Decimal("9")
        assert position.closing_qty == Decimal("7")

    def test_valuation_uses_sale_price(self, catalog, movements) -> None:
        """평가액 = 기말 수량 * 판매가"""
        summary = stock_summary(catalog, movements)

        assert summary.get("i1").valuation == Decimal("700")
        assert summary.get("i2").valuation == Decimal("0")
        assert summary.total_valuation == Decimal("700")

    def test_every_catalog_item_listed(self, catalog, movements) -> None:
        """움직임 없는 품목도 0으로 포함"""
        summary = stock_summary(catalog, movements)

        assert [p.item_id for p in summary.positions] == ["i1", "i2"]
        assert summary.get("i2").closing_qty == Decimal("0")

    def test_as_of_cutoff(self, catalog, movements) -> None:
        """기준일 이후 전표 제외"""
        position = stock_summary(catalog, movements, as_of="2023-08-01").get("i1")

        assert position.qty_in == Decimal("15")
        assert position.qty_out == Decimal("3")

    def test_cancelled_voucher_ignored(self, catalog, voucher_ledger, make_itemized_draft) -> None:
        """Cancelled 전표는 재고에 반영하지 않음"""
        purchase = voucher_ledger.post(make_itemized_draft("Purchase", qty=10, party_ledger_id="l5"))
        cancelled = replace(purchase, status=VoucherStatus.CANCELLED)

        assert stock_summary(catalog, [cancelled]).get("i1").closing_qty == Decimal("0")

    def test_purchase_order_not_stock(self, catalog, voucher_ledger, make_itemized_draft) -> None:
        """발주서는 재고 변동 없음"""
        order = voucher_ledger.post(make_itemized_draft("Purchase Order", qty=50, party_ledger_id="l5"))

        assert stock_summary(catalog, [order]).get("i1").qty_in == Decimal("0")

    def test_unknown_item_skipped(self, movements) -> None:
        """마스터에 없는 품목은 무시"""
        summary = stock_summary(ItemCatalog(), movements)

        assert summary.positions == ()
        assert summary.get("i1") is None

    def test_to_dict_rounds_valuation(self, catalog, movements) -> None:
        """평가액은 표시용 2자리"""
        data = stock_summary(catalog, movements).get("i1").to_dict()

        assert data["closing_qty"] == "7"
        assert data["valuation"] == "700.00"
