"""
타입 정의 모듈

전표 엔진에서 공통으로 사용하는 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class VoucherType(str, Enum):
    """전표 유형"""

    SALES = "Sales"
    PURCHASE = "Purchase"
    SALES_RETURN = "Sales Return"
    PURCHASE_RETURN = "Purchase Return"
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    JOURNAL = "Journal"
    CONTRA = "Contra"
    DELIVERY_NOTE = "Delivery Note"
    GOODS_RECEIPT_NOTE = "Goods Receipt Note (GRN)"
    STOCK_ADJUSTMENT = "Stock Adjustment"
    PURCHASE_ORDER = "Purchase Order"


class VoucherMode(str, Enum):
    """전표 입력 방식 (Payload 판별자)"""

    LEDGER = "LEDGER"  # 차변/대변 분개
    ITEMIZED = "ITEMIZED"  # 품목 명세


class VoucherStatus(str, Enum):
    """전표 상태"""

    DRAFT = "Draft"
    POSTED = "Posted"
    CANCELLED = "Cancelled"


class EntrySide(str, Enum):
    """분개 방향 (차변/대변)"""

    DR = "Dr"
    CR = "Cr"


class AccountNature(str, Enum):
    """계정 성격 (재무제표 집계 기준)"""

    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    INCOME = "Income"
    EXPENSES = "Expenses"


class BalanceSide(str, Enum):
    """계정 잔액의 정상 방향"""

    DEBIT = "Debit"
    CREDIT = "Credit"


class Jurisdiction(str, Enum):
    """공급 관할

    Local: 주 내 거래 (CGST + SGST)
    Central: 주 간 거래 (IGST)
    """

    LOCAL = "Local"
    CENTRAL = "Central"


class GstClassification(str, Enum):
    """GST 분류 (매출세 / 매입세)"""

    INPUT = "Input"
    OUTPUT = "Output"


class TaxComponent(str, Enum):
    """세금 구성 요소"""

    CGST = "CGST"
    SGST = "SGST"
    IGST = "IGST"
    OTHER = "Other"


class AdjustmentKind(str, Enum):
    """소계 이후 가감 항목"""

    ADD = "Add"
    LESS = "Less"


class GstReportType(str, Enum):
    """GST 신고서 유형"""

    GSTR_1 = "GSTR-1"  # 매출 명세
    GSTR_2 = "GSTR-2"  # 매입 명세
    GSTR_3B = "GSTR-3B"  # 월별 요약
    HSN_SUMMARY = "HSN-SUMMARY"


# 차변/대변 분개로 입력하는 전표 유형
LEDGER_MODE_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.PAYMENT,
    VoucherType.RECEIPT,
    VoucherType.CONTRA,
    VoucherType.JOURNAL,
})

# 은행 잔액에 영향을 주는 전표 유형 (은행 대사 대상)
BANK_VOUCHER_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.PAYMENT,
    VoucherType.RECEIPT,
    VoucherType.CONTRA,
})

# 이전에 인식한 세금을 되돌리는 반품 전표
RETURN_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.SALES_RETURN,
    VoucherType.PURCHASE_RETURN,
})


def mode_for_type(voucher_type: VoucherType | str) -> VoucherMode:
    """전표 유형에 맞는 입력 방식 반환"""
    vtype = VoucherType(voucher_type)
    if vtype in LEDGER_MODE_TYPES:
        return VoucherMode.LEDGER
    return VoucherMode.ITEMIZED


def default_gst_classification(voucher_type: VoucherType | str) -> GstClassification | None:
    """전표 유형 기준 기본 GST 분류

    Sales 계열은 Output, Purchase 계열은 Input.
    재고 전용 전표(Delivery Note 등)는 세금 분류 없음.
    """
    vtype = VoucherType(voucher_type)
    if vtype in (VoucherType.SALES, VoucherType.SALES_RETURN):
        return GstClassification.OUTPUT
    if vtype in (VoucherType.PURCHASE, VoucherType.PURCHASE_RETURN):
        return GstClassification.INPUT
    return None
