"""
core/tax/returns.py 테스트

GSTR-1/2 명세, GSTR-3B 요약, 세율별 내역, HSN 요약
"""

from decimal import Decimal

import pytest

from core.tax.returns import hsn_summary, register, summarize
from core.types import GstReportType, Jurisdiction, VoucherType
from core.voucher.posting import VoucherLedger


@pytest.fixture
def posted(voucher_ledger: VoucherLedger, make_itemized_draft) -> VoucherLedger:
    """매출 2건 + 매입 1건 + 매출 반품 1건"""
    voucher_ledger.post(make_itemized_draft(VoucherType.SALES, date="2023-07-01"))
    voucher_ledger.post(make_itemized_draft(
        VoucherType.SALES, rate=2000, jurisdiction=Jurisdiction.CENTRAL, date="2023-07-10",
    ))
    voucher_ledger.post(make_itemized_draft(
        VoucherType.PURCHASE, rate=500, party_ledger_id="l5", party="Global Suppliers",
        date="2023-07-12", hsn="5208",
    ))
    voucher_ledger.post(make_itemized_draft(VoucherType.SALES_RETURN, date="2023-08-05"))
    return voucher_ledger


class TestRegister:
    """register 테스트"""

    def test_gstr1_outward_only(self, posted: VoucherLedger) -> None:
        """GSTR-1은 매출 전표만"""
        ids = [v.id for v in register(posted.vouchers, GstReportType.GSTR_1)]

        assert ids == ["SL/23-24/00001", "SL/23-24/00002", "SR/23-24/00001"]

    def test_gstr2_inward_only(self, posted: VoucherLedger) -> None:
        """GSTR-2는 매입 전표만"""
        ids = [v.id for v in register(posted.vouchers, "GSTR-2")]

        assert ids == ["PR/23-24/00001"]

    def test_period_filter(self, posted: VoucherLedger) -> None:
        """기간 필터"""
        selected = register(posted.vouchers, GstReportType.GSTR_1, "2023-07-01", "2023-07-31")

        assert len(selected) == 2

    def test_non_tax_vouchers_excluded(self, posted: VoucherLedger, make_ledger_draft) -> None:
        """세금 없는 전표 제외"""
        posted.post(make_ledger_draft())

        assert len(register(posted.vouchers, GstReportType.GSTR_3B)) == 4


class TestSummarize:
    """GSTR-3B 요약 테스트"""

    def test_totals(self, posted: VoucherLedger) -> None:
        """GSTR-3B 합계"""
        summary = summarize(posted.vouchers)

        assert summary.taxable_value == Decimal("2000")
        assert summary.cgst == Decimal("0")
        assert summary.sgst == Decimal("0")
        assert summary.igst == Decimal("360")
        assert summary.itc_cgst == Decimal("45")
        assert summary.itc_sgst == Decimal("45")
        assert summary.itc_available == Decimal("90")
        assert summary.net_payable == Decimal("270")

    def test_rate_breakdown(self, posted: VoucherLedger) -> None:
        """세율별 내역은 매출 라인 기준"""
        bucket = summarize(posted.vouchers).rate_breakdown[Decimal("18")]

        assert bucket.taxable == Decimal("2000")
        assert bucket.tax == Decimal("360")
        assert bucket.igst == Decimal("360")
        assert bucket.cgst == Decimal("0")

    def test_period(self, posted: VoucherLedger) -> None:
        """기간 지정 요약"""
        summary = summarize(posted.vouchers, start="2023-07-01", end="2023-07-31")

        assert summary.cgst == Decimal("90")
        assert summary.net_payable == Decimal("450")

    def test_to_dict(self, posted: VoucherLedger) -> None:
        """표시용 dict 변환"""
        data = summarize(posted.vouchers).to_dict()

        assert data["net_payable"] == "270.00"
        assert data["rate_breakdown"]["18"]["taxable"] == "2000.00"


class TestHsnSummary:
    """HSN 요약 테스트"""

    def test_grouped_by_code(self, posted: VoucherLedger) -> None:
        """HSN 코드별 집계"""
        rows = hsn_summary(posted.vouchers, end="2023-07-31")

        assert [r.hsn for r in rows] == ["5208", "7214"]
        steel = rows[1]
        assert steel.qty == Decimal("2")
        assert steel.taxable == Decimal("3000")
        assert steel.tax == Decimal("540")
        assert steel.unit == "Kg"

    def test_missing_code(self, voucher_ledger: VoucherLedger, make_itemized_draft) -> None:
        """HSN 없는 라인은 N/A로 집계"""
        voucher_ledger.post(make_itemized_draft(hsn=""))

        assert hsn_summary(voucher_ledger.vouchers)[0].hsn == "N/A"
