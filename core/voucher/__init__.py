"""
전표 엔진

Draft 검증 → 번호 생성 → 전기 → 조회/은행 대사/무결성 검사

사용 예시:
```python
from core.voucher import VoucherLedger, VoucherDraft, LedgerPosting, LedgerEntry

ledger = VoucherLedger(fiscal_year="2023 - 2024")
draft = VoucherDraft.create(
    voucher_type="Payment",
    date="2023-06-01",
    party="Office Rent",
    payload=LedgerPosting(entries=(
        LedgerEntry.create("l3", "Dr", 5000),
        LedgerEntry.create("l1", "Cr", 5000),
    )),
    ledger_id="l1",
)
voucher = ledger.post(draft)  # PY/23-24/00001
```
"""

from core.voucher.integrity import IntegrityIssue, IntegrityReport, check_integrity
from core.voucher.lines import (
    build_line_item,
    reprice_for_jurisdiction,
    resolve_item_rate,
    split_matches,
)
from core.voucher.models import (
    Adjustment,
    ItemizedPosting,
    ItemizedTotals,
    LedgerEntry,
    LedgerPosting,
    Voucher,
    VoucherDraft,
    VoucherLineItem,
    VoucherPayload,
    compute_totals,
    payload_from_dict,
)
from core.voucher.numbering import VOUCHER_PREFIXES, FiscalYear, VoucherNumberer, year_token
from core.voucher.posting import VoucherLedger
from core.voucher.query import DayBookTotals, VoucherFilter, filter_vouchers, summarize
from core.voucher.reconciliation import (
    ReconciliationChange,
    ReconciliationSummary,
    ReconciliationTracker,
)
from core.voucher.validator import ValidationResult, VoucherValidator

__all__ = [
    # 모델
    "Adjustment",
    "ItemizedPosting",
    "ItemizedTotals",
    "LedgerEntry",
    "LedgerPosting",
    "Voucher",
    "VoucherDraft",
    "VoucherLineItem",
    "VoucherPayload",
    "compute_totals",
    "payload_from_dict",
    # 라인
    "build_line_item",
    "reprice_for_jurisdiction",
    "resolve_item_rate",
    "split_matches",
    # 번호
    "VOUCHER_PREFIXES",
    "FiscalYear",
    "VoucherNumberer",
    "year_token",
    # 검증 / 전기
    "ValidationResult",
    "VoucherValidator",
    "VoucherLedger",
    # 조회
    "DayBookTotals",
    "VoucherFilter",
    "filter_vouchers",
    "summarize",
    # 은행 대사
    "ReconciliationChange",
    "ReconciliationSummary",
    "ReconciliationTracker",
    # 무결성
    "IntegrityIssue",
    "IntegrityReport",
    "check_integrity",
]
