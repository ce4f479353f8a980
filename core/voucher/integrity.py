"""
데이터 무결성 검사

전표 저장소 전체를 훑어 불변식 위반을 보고. 읽기 전용, 수정하지 않음.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from core.constants import Defaults
from core.errors import TaxRateRangeError
from core.voucher.lines import split_matches
from core.voucher.models import ItemizedPosting, LedgerPosting, Voucher

if TYPE_CHECKING:
    from core.ledger.book import LedgerBook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntegrityIssue:
    """무결성 문제 1건"""

    voucher_id: str
    code: str
    message: str


@dataclass(frozen=True)
class IntegrityReport:
    """무결성 검사 결과"""

    checked: int
    issues: tuple[IntegrityIssue, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.issues

    def codes(self) -> set[str]:
        return {issue.code for issue in self.issues}


def check_integrity(
    vouchers: Iterable[Voucher],
    ledger_book: LedgerBook | None = None,
    tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
) -> IntegrityReport:
    """전표 무결성 검사

    검사 항목:
    - duplicate_id: 중복 전표 번호
    - unbalanced: 분개 전표 차변/대변 불일치 또는 amount != 차변 합계
    - total_mismatch: 품목 전표 amount != 소계 + 세액 + 가감
    - tax_split: 라인 분할 세율이 관할 규칙과 불일치
    - reconciliation_flag: is_reconciled가 bank_date와 불일치
    - unknown_ledger: 계정 장부에 없는 계정 참조 (ledger_book 주어진 경우)
    """
    vouchers = list(vouchers)
    issues: list[IntegrityIssue] = []

    counts = Counter(v.id for v in vouchers)
    for voucher_id, count in sorted(counts.items()):
        if count > 1:
            issues.append(IntegrityIssue(
                voucher_id, "duplicate_id", f"Voucher id appears {count} times"
            ))

    for voucher in vouchers:
        payload = voucher.payload

        if isinstance(payload, LedgerPosting):
            if abs(payload.total_debit - payload.total_credit) >= tolerance:
                issues.append(IntegrityIssue(
                    voucher.id,
                    "unbalanced",
                    f"Debit {payload.total_debit} != credit {payload.total_credit}",
                ))
            elif voucher.amount != payload.total_debit:
                issues.append(IntegrityIssue(
                    voucher.id,
                    "unbalanced",
                    f"Amount {voucher.amount} != debit total {payload.total_debit}",
                ))

        elif isinstance(payload, ItemizedPosting):
            has_rate_error = False
            for index, line in enumerate(payload.items, start=1):
                try:
                    matched = split_matches(line, payload.jurisdiction)
                except TaxRateRangeError as e:
                    has_rate_error = True
                    issues.append(IntegrityIssue(voucher.id, "tax_split", f"Line {index}: {e}"))
                    continue
                if not matched:
                    issues.append(IntegrityIssue(
                        voucher.id,
                        "tax_split",
                        f"Line {index} split does not match {payload.jurisdiction.value}",
                    ))

            if not has_rate_error:
                grand_total = payload.totals().grand_total
                if voucher.amount != grand_total:
                    issues.append(IntegrityIssue(
                        voucher.id,
                        "total_mismatch",
                        f"Amount {voucher.amount} != computed total {grand_total}",
                    ))

        if voucher.is_reconciled != (voucher.bank_date is not None):
            issues.append(IntegrityIssue(
                voucher.id,
                "reconciliation_flag",
                f"is_reconciled={voucher.is_reconciled} but bank_date={voucher.bank_date}",
            ))

        if ledger_book is not None:
            referenced = set(payload.ledger_ids())
            if voucher.ledger_id:
                referenced.add(voucher.ledger_id)
            for ledger_id in sorted(referenced):
                if ledger_id not in ledger_book:
                    issues.append(IntegrityIssue(
                        voucher.id, "unknown_ledger", f"Unknown ledger: {ledger_id}"
                    ))

    if issues:
        logger.warning(f"Integrity check found {len(issues)} issue(s) in {len(vouchers)} vouchers")
    else:
        logger.info(f"Integrity check passed for {len(vouchers)} vouchers")

    return IntegrityReport(checked=len(vouchers), issues=tuple(issues))
