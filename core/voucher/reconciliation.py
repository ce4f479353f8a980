"""
은행 대사 (ReconciliationTracker)

장부 잔액 vs 은행 잔액:
- 시작: 대상 계정의 기초 잔액
- 대상: Posted 상태의 Payment/Receipt/Contra 중 대상 계정을 참조하는 전표
  (주 계정 ledger_id 또는 분개 라인)
- Payment는 음수, 그 외는 양수
- book_balance: 모든 대상 전표 누적
- bank_balance: is_reconciled인 전표만 누적
- gap = |book - bank|

is_reconciled는 항상 bank_date에서 파생. 변경 이력은 append-only로 기록하며
플래그 계산에는 사용하지 않음.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from core.types import BANK_VOUCHER_TYPES, VoucherType
from core.utils.timezone import utc_now_iso
from core.voucher.models import Voucher, parse_date

if TYPE_CHECKING:
    from core.ledger.book import LedgerBook
    from core.voucher.posting import VoucherLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationSummary:
    """대사 요약"""

    ledger_id: str
    book_balance: Decimal
    bank_balance: Decimal
    gap: Decimal

    @property
    def is_matched(self) -> bool:
        return self.gap == 0


@dataclass(frozen=True)
class ReconciliationChange:
    """대사 변경 이력 (감사 기록)"""

    voucher_id: str
    bank_date: date | None
    is_reconciled: bool
    changed_at: str
    actor: str = "user"

    def to_dict(self) -> dict[str, Any]:
        return {
            "voucher_id": self.voucher_id,
            "bank_date": self.bank_date.isoformat() if self.bank_date else None,
            "is_reconciled": self.is_reconciled,
            "changed_at": self.changed_at,
            "actor": self.actor,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReconciliationChange:
        bank_date = data.get("bank_date")
        return cls(
            voucher_id=data["voucher_id"],
            bank_date=parse_date(bank_date) if bank_date else None,
            is_reconciled=bool(data.get("is_reconciled", False)),
            changed_at=data.get("changed_at", ""),
            actor=data.get("actor", "user"),
        )


def signed_bank_amount(voucher: Voucher) -> Decimal:
    """Payment는 출금(-), Receipt/Contra는 입금(+)"""
    if voucher.voucher_type == VoucherType.PAYMENT:
        return -voucher.amount
    return voucher.amount


def is_bank_candidate(voucher: Voucher, ledger_id: str) -> bool:
    """대사 대상 전표 여부"""
    return (
        voucher.is_posted
        and voucher.voucher_type in BANK_VOUCHER_TYPES
        and voucher.touches_ledger(ledger_id)
    )


class ReconciliationTracker:
    """은행 대사 추적기

    Args:
        ledger_book: 기초 잔액 조회용
        voucher_ledger: 전표 저장소 (mark_cleared는 update로 위임)
        history: 복원할 기존 변경 이력
    """

    def __init__(
        self,
        ledger_book: LedgerBook,
        voucher_ledger: VoucherLedger,
        history: Iterable[ReconciliationChange] = (),
    ):
        self.ledger_book = ledger_book
        self.voucher_ledger = voucher_ledger
        self._history: list[ReconciliationChange] = list(history)

    @property
    def history(self) -> tuple[ReconciliationChange, ...]:
        return tuple(self._history)

    def outstanding(self, ledger_id: str, include_reconciled: bool = False) -> list[Voucher]:
        """대사 후보 전표 목록 (기본: 미대사만)"""
        return [
            v
            for v in self.voucher_ledger.vouchers
            if is_bank_candidate(v, ledger_id) and (include_reconciled or not v.is_reconciled)
        ]

    def reconcile(
        self,
        ledger_id: str,
        vouchers: Iterable[Voucher] | None = None,
    ) -> ReconciliationSummary:
        """장부/은행 잔액 계산

        Args:
            ledger_id: 대상 은행 계정
            vouchers: 계산 대상 (None이면 저장소 전체)

        Raises:
            LedgerNotFoundError: 존재하지 않는 계정
        """
        account = self.ledger_book.get(ledger_id)
        if vouchers is None:
            vouchers = self.voucher_ledger.vouchers

        book_balance = account.opening_balance
        bank_balance = account.opening_balance
        for voucher in vouchers:
            if not is_bank_candidate(voucher, ledger_id):
                continue
            amount = signed_bank_amount(voucher)
            book_balance += amount
            if voucher.is_reconciled:
                bank_balance += amount

        summary = ReconciliationSummary(
            ledger_id=ledger_id,
            book_balance=book_balance,
            bank_balance=bank_balance,
            gap=abs(book_balance - bank_balance),
        )
        logger.debug(
            f"Reconciliation {ledger_id}: book={book_balance}, bank={bank_balance}, gap={summary.gap}"
        )
        return summary

    def mark_cleared(
        self,
        voucher_id: str,
        cleared_date: date | str | None,
        actor: str = "user",
    ) -> Voucher:
        """은행 결제일 설정 (빈 문자열/None이면 대사 해제)

        Raises:
            VoucherNotFoundError: 존재하지 않는 전표
            ValidationError: 잘못된 일자
        """
        updated = self.voucher_ledger.update(voucher_id, {"bank_date": cleared_date})
        self._history.append(ReconciliationChange(
            voucher_id=voucher_id,
            bank_date=updated.bank_date,
            is_reconciled=updated.is_reconciled,
            changed_at=utc_now_iso(),
            actor=actor,
        ))
        if updated.is_reconciled:
            logger.info(f"Voucher {voucher_id} cleared on {updated.bank_date}")
        else:
            logger.info(f"Voucher {voucher_id} uncleared")
        return updated
