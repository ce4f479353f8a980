"""
pytest 공통 fixture 정의

계정 장부, 품목, 전표 Draft 등 엔진 테스트용 fixture
"""

import tempfile
from collections.abc import Callable
from pathlib import Path

import pytest

from core.config.loader import Settings
from core.inventory.items import ItemCatalog, StockItem
from core.ledger.book import LedgerBook
from core.types import Jurisdiction, VoucherType
from core.voucher.models import (
    Adjustment,
    ItemizedPosting,
    LedgerEntry,
    LedgerPosting,
    VoucherDraft,
    VoucherLineItem,
)
from core.voucher.posting import VoucherLedger
from core.voucher.validator import VoucherValidator


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> None:
    """Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
company:
  name: "Nexus Trading Co."
  state: "Maharashtra"

fiscal_year:
  current: "2023 - 2024"
  start_month: 4
  locked: false

numbering:
  serial_width: 5
  fallback_prefix: "VCH"
  prefixes:
    Sales: "INV"

posting:
  balance_tolerance: "0.01"
  enforce_fiscal_period: true

storage:
  db_path: "data/test.db"
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


# -------------------------------------------------------------------------
# 마스터 데이터
# -------------------------------------------------------------------------

@pytest.fixture
def ledger_book() -> LedgerBook:
    """샘플 계정 장부

    l1: HDFC 은행 (기초 54,000 차변)
    l2: 현금
    l3: 임차료
    l4: 매출처 (Sundry Debtors)
    l5: 매입처 (Sundry Creditors)
    """
    book = LedgerBook()
    book.open_account("l1", "HDFC Bank - 0012", "Bank Accounts", opening_balance=54000)
    book.open_account("l2", "Cash-in-hand", "Cash-in-hand", opening_balance=10000)
    book.open_account("l3", "Office Rent", "Indirect Expenses")
    book.open_account("l4", "Acme Retailers", "Sundry Debtors")
    book.open_account("l5", "Global Suppliers", "Sundry Creditors")
    return book


@pytest.fixture
def catalog() -> ItemCatalog:
    """샘플 품목"""
    return ItemCatalog([
        StockItem.create("i1", "Steel Rod", "Kg", 100, "7214", 18, category="Raw Material"),
        StockItem.create("i2", "Cotton Fabric", "Mtr", 200, "5208", 5, category="Textile"),
    ])


@pytest.fixture
def voucher_ledger(ledger_book: LedgerBook) -> VoucherLedger:
    """2023 - 2024 회계연도 전표 저장소"""
    return VoucherLedger(
        validator=VoucherValidator(ledger_book=ledger_book),
        fiscal_year="2023 - 2024",
    )


# -------------------------------------------------------------------------
# Draft 팩토리
# -------------------------------------------------------------------------

@pytest.fixture
def make_ledger_draft() -> Callable[..., VoucherDraft]:
    """분개 전표 Draft 생성기 (기본: 은행 l1에서 임차료 5,000 지급)"""

    def _make(
        voucher_type: VoucherType | str = VoucherType.PAYMENT,
        amount: object = 5000,
        date: str = "2023-06-01",
        debit_ledger: str = "l3",
        credit_ledger: str = "l1",
        ledger_id: str | None = "l1",
        party: str = "Office Rent",
    ) -> VoucherDraft:
        return VoucherDraft.create(
            voucher_type=voucher_type,
            date=date,
            party=party,
            payload=LedgerPosting(entries=(
                LedgerEntry.create(debit_ledger, "Dr", amount),
                LedgerEntry.create(credit_ledger, "Cr", amount),
            )),
            ledger_id=ledger_id,
        )

    return _make


@pytest.fixture
def make_itemized_draft() -> Callable[..., VoucherDraft]:
    """품목 전표 Draft 생성기 (기본: 1,000 x 1, 18% Local 매출 → 총액 1,180)"""

    def _make(
        voucher_type: VoucherType | str = VoucherType.SALES,
        rate: object = 1000,
        qty: object = 1,
        tax_rate: object = 18,
        jurisdiction: Jurisdiction = Jurisdiction.LOCAL,
        party_ledger_id: str = "l4",
        party: str = "Acme Retailers",
        date: str = "2023-07-15",
        adjustments: tuple[Adjustment, ...] = (),
        hsn: str = "7214",
    ) -> VoucherDraft:
        return VoucherDraft.create(
            voucher_type=voucher_type,
            date=date,
            party=party,
            payload=ItemizedPosting(
                party_ledger_id=party_ledger_id,
                items=(
                    VoucherLineItem.create(
                        "i1", qty, rate, tax_rate, jurisdiction,
                        name="Steel Rod", hsn=hsn, unit="Kg",
                    ),
                ),
                adjustments=adjustments,
                jurisdiction=jurisdiction,
            ),
        )

    return _make
