"""
core/ledger 테스트

계정 등록/조회, 기말 잔액, 시산표
"""

from decimal import Decimal

import pytest

from core.errors import DuplicateLedgerError, LedgerNotFoundError, ValidationError
from core.ledger.accounts import AccountGroup, GroupNames, LedgerAccount, natural_side
from core.ledger.book import LedgerBook, ledger_movements
from core.types import AccountNature, BalanceSide, VoucherType


class TestLedgerAccount:
    """LedgerAccount 테스트"""

    def test_balance_side_follows_nature(self) -> None:
        """계정 성격에 따른 정상 잔액 방향"""
        account = LedgerAccount.create("x", "Bank", GroupNames.BANK_ACCOUNTS, "Assets", 100)

        assert account.balance_side == BalanceSide.DEBIT
        assert account.opening_balance == Decimal("100")
        assert natural_side(AccountNature.INCOME) == BalanceSide.CREDIT

    def test_signed_opening(self) -> None:
        """기초 잔액 부호"""
        account = LedgerAccount.create(
            "x", "Capital", GroupNames.CAPITAL_ACCOUNT, "Liabilities", 500, "Credit",
        )

        assert account.signed_opening == Decimal("-500")

    def test_dict_round_trip(self) -> None:
        """dict 변환 후 복원"""
        account = LedgerAccount.create(
            "x", "Rent", GroupNames.INDIRECT_EXPENSES, "Expenses", 0, budget="12000",
        )

        assert LedgerAccount.from_dict(account.to_dict()) == account


class TestLedgerBookRegistry:
    """계정 등록/조회 테스트"""

    def test_default_groups(self) -> None:
        """기본 계정 그룹 등록"""
        book = LedgerBook()

        names = {g.name for g in book.groups}
        assert GroupNames.SUNDRY_DEBTORS in names
        assert GroupNames.DUTIES_AND_TAXES in names
        assert all(g.is_system for g in book.groups)

    def test_open_account_takes_group_nature(self, ledger_book: LedgerBook) -> None:
        """계정은 그룹 성격 상속"""
        assert ledger_book.nature_of("l5") == AccountNature.LIABILITIES
        assert ledger_book.get("l5").balance_side == BalanceSide.CREDIT
        assert ledger_book.nature_of("l3") == AccountNature.EXPENSES

    def test_duplicate_id(self, ledger_book: LedgerBook) -> None:
        """중복 계정 ID 거부"""
        with pytest.raises(DuplicateLedgerError):
            ledger_book.open_account("l1", "Another Bank", GroupNames.BANK_ACCOUNTS)

    def test_duplicate_name_case_insensitive(self, ledger_book: LedgerBook) -> None:
        """계정명 중복은 대소문자 무시"""
        with pytest.raises(DuplicateLedgerError):
            ledger_book.open_account("l9", "hdfc bank - 0012", GroupNames.BANK_ACCOUNTS)

    def test_unknown_group(self, ledger_book: LedgerBook) -> None:
        """없는 그룹 거부"""
        with pytest.raises(ValidationError):
            ledger_book.open_account("l9", "Mystery", "No Such Group")

    def test_duplicate_group(self) -> None:
        """중복 그룹 거부"""
        book = LedgerBook()
        with pytest.raises(DuplicateLedgerError):
            book.add_group(AccountGroup("g-other", GroupNames.BANK_ACCOUNTS, AccountNature.ASSETS))

    def test_get_missing(self, ledger_book: LedgerBook) -> None:
        """없는 계정 조회 에러"""
        with pytest.raises(LedgerNotFoundError):
            ledger_book.get("nope")

    def test_lookup_error_compatible(self, ledger_book: LedgerBook) -> None:
        """LookupError로도 처리 가능"""
        with pytest.raises(LookupError):
            ledger_book.get("nope")

    def test_find_by_name(self, ledger_book: LedgerBook) -> None:
        """이름으로 조회"""
        assert ledger_book.find_by_name(" acme retailers ").id == "l4"
        assert ledger_book.find_by_name("Nobody") is None

    def test_bank_accounts(self, ledger_book: LedgerBook) -> None:
        """은행 계정 목록"""
        assert [a.id for a in ledger_book.bank_accounts()] == ["l1"]

    def test_party_accounts(self, ledger_book: LedgerBook) -> None:
        """전표 유형별 거래처 계정"""
        assert [a.id for a in ledger_book.party_accounts(VoucherType.SALES)] == ["l4"]
        assert [a.id for a in ledger_book.party_accounts("Purchase Return")] == ["l5"]
        assert [a.id for a in ledger_book.party_accounts()] == ["l4", "l5"]

    def test_contains_and_len(self, ledger_book: LedgerBook) -> None:
        """in / len 지원"""
        assert "l1" in ledger_book
        assert "l9" not in ledger_book
        assert len(ledger_book) == 5


class TestBalances:
    """기말 잔액 / 시산표 테스트"""

    def test_payment_reduces_bank(self, ledger_book, voucher_ledger, make_ledger_draft) -> None:
        """지급은 은행 잔액 감소"""
        voucher_ledger.post(make_ledger_draft())

        assert ledger_book.closing_balance("l1", voucher_ledger.vouchers) == Decimal("49000")
        assert ledger_book.closing_balance("l3", voucher_ledger.vouchers) == Decimal("5000")

    def test_itemized_moves_party(self, ledger_book, voucher_ledger, make_itemized_draft) -> None:
        """품목 전표는 거래처 계정만 변동"""
        voucher_ledger.post(make_itemized_draft(VoucherType.SALES))
        voucher_ledger.post(make_itemized_draft(
            VoucherType.PURCHASE, rate=500, party_ledger_id="l5", party="Global Suppliers",
        ))

        assert ledger_book.closing_balance("l4", voucher_ledger.vouchers) == Decimal("1180")
        assert ledger_book.closing_balance("l5", voucher_ledger.vouchers) == Decimal("590")

    def test_sales_return_credits_party(self, ledger_book, voucher_ledger, make_itemized_draft) -> None:
        """매출 반품은 거래처 대변"""
        voucher_ledger.post(make_itemized_draft(VoucherType.SALES))
        voucher_ledger.post(make_itemized_draft(VoucherType.SALES_RETURN))

        assert ledger_book.closing_balance("l4", voucher_ledger.vouchers) == Decimal("0")

    def test_inventory_vouchers_have_no_effect(self, voucher_ledger, make_itemized_draft) -> None:
        """재고 전용 전표는 계정 영향 없음"""
        voucher = voucher_ledger.post(make_itemized_draft(VoucherType.DELIVERY_NOTE))

        assert ledger_movements(voucher) == []

    def test_trial_balance(self, ledger_book, voucher_ledger, make_ledger_draft, make_itemized_draft) -> None:
        """시산표 합계"""
        voucher_ledger.post(make_ledger_draft())
        voucher_ledger.post(make_itemized_draft(VoucherType.SALES))
        voucher_ledger.post(make_itemized_draft(
            VoucherType.PURCHASE, rate=500, party_ledger_id="l5", party="Global Suppliers",
        ))

        trial_balance = ledger_book.trial_balance(voucher_ledger.vouchers)
        rows = {r.ledger_id: r for r in trial_balance.rows}

        assert rows["l1"].debit == Decimal("49000")
        assert rows["l5"].credit == Decimal("590")
        assert rows["l5"].debit == Decimal("0")
        assert trial_balance.total_debit == Decimal("65180")
        assert trial_balance.total_credit == Decimal("590")
        assert trial_balance.to_dict()["total_debit"] == "65180.00"
