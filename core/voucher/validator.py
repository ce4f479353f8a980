"""
전표 검증기

전기 전 Draft 검증. 부수 효과 없음, Draft 크기에 선형.
실패한 조건마다 구체적인 사유를 반환 (일반적인 "검증 실패" 메시지 없음).

분개 전표 (LEDGER):
- 최소 2개 라인
- 모든 라인에 계정 ID와 양수 금액
- |차변 합계 - 대변 합계| < 허용 오차
- 차변 합계 > 0

품목 전표 (ITEMIZED):
- 거래처 계정 선택
- 금액 > 0인 품목 라인 최소 1개
- 총액 > 0
- 라인 분할 세율이 관할 규칙과 일치
- 가감 항목 금액 음수 불가
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from core.constants import Defaults
from core.errors import TaxRateRangeError, ValidationError
from core.types import mode_for_type
from core.utils.money import ZERO
from core.voucher.lines import split_matches
from core.voucher.models import ItemizedPosting, LedgerPosting, VoucherDraft

if TYPE_CHECKING:
    from core.ledger.book import LedgerBook
    from core.voucher.numbering import FiscalYear

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """검증 결과"""

    ok: bool
    reasons: tuple[str, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.ok


class VoucherValidator:
    """전표 Draft 검증기

    Args:
        tolerance: 차변/대변 균형 허용 오차
        ledger_book: 주어지면 참조 계정 존재 여부도 검사
        enforce_fiscal_period: 회계연도가 주어졌을 때 기간 검사 여부
    """

    def __init__(
        self,
        tolerance: Decimal = Defaults.BALANCE_TOLERANCE,
        ledger_book: LedgerBook | None = None,
        enforce_fiscal_period: bool = True,
    ):
        self.tolerance = tolerance
        self.ledger_book = ledger_book
        self.enforce_fiscal_period = enforce_fiscal_period

    def validate(self, draft: VoucherDraft, fiscal_year: FiscalYear | None = None) -> ValidationResult:
        """Draft 검증

        Args:
            draft: 검증 대상
            fiscal_year: 주어지면 전표 일자가 기간 안에 있는지 검사

        Returns:
            ValidationResult (ok=False면 reasons에 사유 목록)
        """
        reasons: list[str] = []

        if not (draft.party or "").strip():
            reasons.append("Party name is required")

        expected_mode = mode_for_type(draft.voucher_type)
        if draft.mode != expected_mode:
            reasons.append(
                f"{draft.voucher_type.value} vouchers must be entered in "
                f"{expected_mode.value} mode, got {draft.mode.value}"
            )

        if isinstance(draft.payload, LedgerPosting):
            reasons.extend(self._check_ledger_posting(draft.payload))
        elif isinstance(draft.payload, ItemizedPosting):
            reasons.extend(self._check_itemized_posting(draft.payload))
        else:
            reasons.append(f"Unsupported voucher payload: {type(draft.payload).__name__}")

        if self.ledger_book is not None:
            reasons.extend(self._check_ledger_refs(draft))

        if fiscal_year is not None and self.enforce_fiscal_period:
            if not fiscal_year.contains(draft.date):
                reasons.append(
                    f"Voucher date {draft.date.isoformat()} is outside fiscal year "
                    f"{fiscal_year.label}"
                )

        if reasons:
            logger.debug(f"Draft {draft.voucher_type.value} rejected: {reasons}")
            return ValidationResult(ok=False, reasons=tuple(reasons))
        return ValidationResult(ok=True)

    def ensure_valid(self, draft: VoucherDraft, fiscal_year: FiscalYear | None = None) -> None:
        """검증 실패 시 예외

        Raises:
            ValidationError: 사유 목록 포함
        """
        result = self.validate(draft, fiscal_year)
        if not result.ok:
            raise ValidationError(result.reasons)

    # =========================================================================
    # 모드별 검사
    # =========================================================================

    def _check_ledger_posting(self, payload: LedgerPosting) -> list[str]:
        reasons = []
        entries = payload.entries

        if len(entries) < 2:
            reasons.append("At least two ledger entries are required")

        has_non_finite = False
        for index, entry in enumerate(entries, start=1):
            if not entry.ledger_id:
                reasons.append(f"Entry {index}: ledger is not selected")
            if not entry.amount.is_finite():
                has_non_finite = True
                reasons.append(f"Entry {index}: amount must be a finite number")
            elif entry.amount <= ZERO:
                reasons.append(f"Entry {index}: amount must be greater than zero")

        # NaN/Infinity가 섞이면 합계 비교 불가
        if has_non_finite:
            return reasons

        total_debit = payload.total_debit
        total_credit = payload.total_credit
        if abs(total_debit - total_credit) >= self.tolerance:
            reasons.append(
                f"Debit total {total_debit} does not match credit total {total_credit}"
            )
        if total_debit <= ZERO:
            reasons.append("Debit total must be greater than zero")

        return reasons

    def _check_itemized_posting(self, payload: ItemizedPosting) -> list[str]:
        reasons = []

        if not payload.party_ledger_id:
            reasons.append("Party ledger is not selected")

        has_non_finite = False
        for index, item in enumerate(payload.items, start=1):
            if not (item.qty.is_finite() and item.rate.is_finite()):
                has_non_finite = True
                reasons.append(f"Line {index}: quantity and rate must be finite numbers")

        finite_items = [i for i in payload.items if i.qty.is_finite() and i.rate.is_finite()]
        if not any(item.amount > ZERO for item in finite_items):
            reasons.append("At least one line item with a positive amount is required")

        has_rate_error = False
        for index, item in enumerate(payload.items, start=1):
            try:
                if not split_matches(item, payload.jurisdiction):
                    reasons.append(
                        f"Line {index}: tax split does not match "
                        f"{payload.jurisdiction.value} jurisdiction"
                    )
            except TaxRateRangeError as e:
                has_rate_error = True
                reasons.append(f"Line {index}: {e}")

        for adjustment in payload.adjustments:
            if not adjustment.amount.is_finite():
                has_non_finite = True
                reasons.append(f"Adjustment '{adjustment.label}' must be a finite number")
            elif adjustment.amount < ZERO:
                reasons.append(f"Adjustment '{adjustment.label}' must not be negative")

        # 세율 범위/비유한 값 오류는 라인별 사유로 이미 보고됨
        if not (has_rate_error or has_non_finite) and payload.totals().grand_total <= ZERO:
            reasons.append("Grand total must be greater than zero")

        return reasons

    def _check_ledger_refs(self, draft: VoucherDraft) -> list[str]:
        reasons = []
        ledger_ids = set(draft.payload.ledger_ids())
        if draft.ledger_id:
            ledger_ids.add(draft.ledger_id)

        for ledger_id in sorted(ledger_ids):
            if ledger_id not in self.ledger_book:
                reasons.append(f"Unknown ledger: {ledger_id}")
        return reasons
