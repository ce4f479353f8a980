"""
core/types.py 테스트

모든 Enum이 문자열 직렬화 가능하고, 유형별 헬퍼가 올바르게 동작하는지 확인
"""

import pytest

from core.types import (
    BANK_VOUCHER_TYPES,
    LEDGER_MODE_TYPES,
    RETURN_TYPES,
    AdjustmentKind,
    EntrySide,
    GstClassification,
    GstReportType,
    Jurisdiction,
    VoucherMode,
    VoucherStatus,
    VoucherType,
    default_gst_classification,
    mode_for_type,
)


class TestVoucherType:
    """VoucherType 테스트"""

    def test_all_types(self) -> None:
        """전표 유형 목록"""
        assert len(VoucherType) == 12

    def test_string_serialization(self) -> None:
        """문자열 직렬화"""
        assert VoucherType.SALES_RETURN.value == "Sales Return"
        assert VoucherType("Goods Receipt Note (GRN)") == VoucherType.GOODS_RECEIPT_NOTE

    def test_str_comparison(self) -> None:
        """str 상속으로 문자열과 직접 비교 가능"""
        assert VoucherType.PAYMENT == "Payment"

    def test_unknown(self) -> None:
        """알 수 없는 값 거부"""
        with pytest.raises(ValueError):
            VoucherType("Invoice")


class TestSimpleEnums:
    """단순 Enum 값 확인"""

    def test_values(self) -> None:
        """Enum 값"""
        assert VoucherMode.LEDGER.value == "LEDGER"
        assert VoucherStatus.POSTED.value == "Posted"
        assert EntrySide.DR.value == "Dr"
        assert Jurisdiction.CENTRAL.value == "Central"
        assert GstClassification.OUTPUT.value == "Output"
        assert AdjustmentKind.LESS.value == "Less"
        assert GstReportType.GSTR_3B.value == "GSTR-3B"


class TestModeForType:
    """mode_for_type 테스트"""

    @pytest.mark.parametrize("voucher_type", sorted(LEDGER_MODE_TYPES))
    def test_ledger_types(self, voucher_type: VoucherType) -> None:
        """분개 입력 유형"""
        assert mode_for_type(voucher_type) == VoucherMode.LEDGER

    @pytest.mark.parametrize(
        "voucher_type",
        ["Sales", "Purchase Return", "Delivery Note", "Stock Adjustment", "Purchase Order"],
    )
    def test_itemized_types(self, voucher_type: str) -> None:
        """품목 입력 유형"""
        assert mode_for_type(voucher_type) == VoucherMode.ITEMIZED

    def test_bank_types_are_ledger_mode(self) -> None:
        """은행 전표는 분개 입력"""
        assert BANK_VOUCHER_TYPES <= LEDGER_MODE_TYPES
        assert VoucherType.JOURNAL not in BANK_VOUCHER_TYPES


class TestDefaultClassification:
    """default_gst_classification 테스트"""

    def test_sales_side(self) -> None:
        """매출 계열은 Output"""
        assert default_gst_classification("Sales") == GstClassification.OUTPUT
        assert default_gst_classification("Sales Return") == GstClassification.OUTPUT

    def test_purchase_side(self) -> None:
        """매입 계열은 Input"""
        assert default_gst_classification("Purchase") == GstClassification.INPUT
        assert default_gst_classification("Purchase Return") == GstClassification.INPUT

    def test_stock_only(self) -> None:
        """재고 전용 전표는 분류 없음"""
        assert default_gst_classification(VoucherType.DELIVERY_NOTE) is None
        assert default_gst_classification(VoucherType.JOURNAL) is None

    def test_return_types(self) -> None:
        """반품 전표 유형"""
        assert RETURN_TYPES == {VoucherType.SALES_RETURN, VoucherType.PURCHASE_RETURN}
