"""
전표 전기 엔진 (VoucherLedger)

전표 컬렉션을 소유하는 저장소 객체. 전역 상태 없음.

핵심 원칙:
- 전기 전 반드시 검증 통과
- 번호는 전기 직전 최신 스냅샷으로 생성
- ID 충돌 검사와 append는 한 단계에서 수행
- 전기된 전표는 append-only (은행 대사 필드만 교체 가능)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any

from core.constants import Defaults
from core.errors import (
    FiscalYearLockedError,
    IdCollisionError,
    ImmutabilityViolation,
    ValidationError,
    VoucherNotFoundError,
)
from core.types import VoucherStatus, default_gst_classification
from core.utils.timezone import utc_now_iso
from core.voucher.models import (
    ItemizedPosting,
    LedgerPosting,
    Voucher,
    VoucherDraft,
    parse_date,
)
from core.voucher.numbering import FiscalYear, VoucherNumberer
from core.voucher.query import VoucherFilter, filter_vouchers
from core.voucher.validator import VoucherValidator

if TYPE_CHECKING:
    from core.config.loader import EngineSettings
    from core.ledger.book import LedgerBook

logger = logging.getLogger(__name__)


# 전기 후 변경 가능한 필드 (은행 대사)
MUTABLE_FIELDS: frozenset[str] = frozenset({"is_reconciled", "bank_date"})


def _coerce_bank_date(value: Any) -> date | None:
    """은행 일자 패치 값 변환 (빈 문자열/None → 대사 해제)"""
    if value is None or value == "":
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        raise ValidationError(f"Invalid bank date: {value!r}") from e


class VoucherLedger:
    """전표 저장소 + 전기 엔진

    Args:
        validator: 전표 검증기 (None이면 기본 설정)
        numberer: 번호 생성기 (None이면 기본 접두사)
        fiscal_year: 기본 회계연도 (post에서 생략 시 사용)
        locked_years: 전기 잠금된 회계연도 라벨 목록
        vouchers: 기존 전표 (스냅샷 복원용)
    """

    def __init__(
        self,
        validator: VoucherValidator | None = None,
        numberer: VoucherNumberer | None = None,
        fiscal_year: str | FiscalYear = Defaults.FISCAL_YEAR,
        locked_years: Iterable[str] = (),
        vouchers: Iterable[Voucher] = (),
    ):
        self.validator = validator or VoucherValidator()
        self.numberer = numberer or VoucherNumberer()
        self.fiscal_year = self._as_fiscal_year(fiscal_year)
        self._locked: set[str] = {FiscalYear.parse(label).label for label in locked_years}

        self._vouchers: list[Voucher] = []
        self._index: dict[str, int] = {}
        for voucher in vouchers:
            if voucher.id in self._index:
                raise IdCollisionError(voucher.id)
            self._index[voucher.id] = len(self._vouchers)
            self._vouchers.append(voucher)

    @classmethod
    def from_settings(
        cls,
        settings: EngineSettings,
        ledger_book: LedgerBook | None = None,
        vouchers: Iterable[Voucher] = (),
    ) -> VoucherLedger:
        """설정 기반 생성"""
        fy = settings.fiscal_year
        fiscal_year = FiscalYear.parse(fy.current, start_month=fy.start_month)
        return cls(
            validator=VoucherValidator(
                tolerance=settings.posting.balance_tolerance,
                ledger_book=ledger_book,
                enforce_fiscal_period=settings.posting.enforce_fiscal_period,
            ),
            numberer=VoucherNumberer(
                prefixes=settings.numbering.prefixes,
                serial_width=settings.numbering.serial_width,
                fallback_prefix=settings.numbering.fallback_prefix,
            ),
            fiscal_year=fiscal_year,
            locked_years=[fiscal_year.label] if fy.locked else [],
            vouchers=vouchers,
        )

    def _as_fiscal_year(self, fiscal_year: str | FiscalYear) -> FiscalYear:
        if isinstance(fiscal_year, FiscalYear):
            return fiscal_year
        start_month = getattr(getattr(self, "fiscal_year", None), "start_month", None)
        if start_month is None:
            return FiscalYear.parse(fiscal_year)
        return FiscalYear.parse(fiscal_year, start_month=start_month)

    # =========================================================================
    # 조회
    # =========================================================================

    def __len__(self) -> int:
        return len(self._vouchers)

    def __contains__(self, voucher_id: object) -> bool:
        return voucher_id in self._index

    @property
    def vouchers(self) -> tuple[Voucher, ...]:
        """불변 스냅샷"""
        return tuple(self._vouchers)

    def get(self, voucher_id: str) -> Voucher:
        """
        Raises:
            VoucherNotFoundError: 존재하지 않는 ID
        """
        position = self._index.get(voucher_id)
        if position is None:
            raise VoucherNotFoundError(voucher_id)
        return self._vouchers[position]

    def query(self, filters: VoucherFilter | None = None) -> Iterator[Voucher]:
        """필터 조회 (지연 평가, 호출 시점 스냅샷 기준)"""
        return filter_vouchers(self.vouchers, filters)

    # =========================================================================
    # 회계연도 잠금
    # =========================================================================

    def lock(self, fiscal_year: str | FiscalYear) -> None:
        """회계연도 전기 잠금"""
        label = self._as_fiscal_year(fiscal_year).label
        self._locked.add(label)
        logger.info(f"Fiscal year {label} locked for posting")

    def unlock(self, fiscal_year: str | FiscalYear) -> None:
        label = self._as_fiscal_year(fiscal_year).label
        self._locked.discard(label)
        logger.info(f"Fiscal year {label} unlocked")

    def is_locked(self, fiscal_year: str | FiscalYear) -> bool:
        return self._as_fiscal_year(fiscal_year).label in self._locked

    # =========================================================================
    # 전기
    # =========================================================================

    def post(self, draft: VoucherDraft, fiscal_year: str | FiscalYear | None = None) -> Voucher:
        """Draft 전기

        Args:
            draft: 전기할 Draft
            fiscal_year: 회계연도 (None이면 기본 회계연도)

        Returns:
            전기된 Voucher

        Raises:
            FiscalYearLockedError: 잠긴 회계연도
            ValidationError: 검증 실패
            IdCollisionError: 생성된 번호가 이미 존재
        """
        fy = self.fiscal_year if fiscal_year is None else self._as_fiscal_year(fiscal_year)

        if fy.label in self._locked:
            logger.warning(f"Rejected {draft.voucher_type.value} voucher: {fy.label} is locked")
            raise FiscalYearLockedError(fy.label)

        try:
            self.validator.ensure_valid(draft, fy)
        except ValidationError as e:
            logger.warning(f"Rejected {draft.voucher_type.value} voucher: {e}")
            raise

        voucher_id = self.numberer.next_id(draft.voucher_type, fy, self._vouchers)
        voucher = self._build_voucher(voucher_id, draft)

        # 충돌 검사 + append (단일 단계)
        if voucher_id in self._index:
            logger.warning(f"Voucher id collision: {voucher_id}")
            raise IdCollisionError(voucher_id)
        self._index[voucher_id] = len(self._vouchers)
        self._vouchers.append(voucher)

        logger.info(
            f"Posted {voucher.voucher_type.value} voucher {voucher.id}: "
            f"party={voucher.party}, amount={voucher.amount}"
        )
        return voucher

    def post_with_retry(
        self,
        draft: VoucherDraft,
        fiscal_year: str | FiscalYear | None = None,
        attempts: int = 2,
    ) -> Voucher:
        """ID 충돌 시 최신 스냅샷으로 번호를 다시 생성하여 재시도

        Raises:
            IdCollisionError: 재시도 후에도 충돌 (저장 계층 문제)
        """
        for attempt in range(1, attempts + 1):
            try:
                return self.post(draft, fiscal_year)
            except IdCollisionError as e:
                if attempt >= attempts:
                    logger.error(f"Voucher id collision persisted after {attempts} attempts: {e.voucher_id}")
                    raise
                logger.warning(f"Retrying post after id collision ({attempt}/{attempts}): {e.voucher_id}")
        raise ValueError(f"attempts must be >= 1, got {attempts}")

    def _build_voucher(self, voucher_id: str, draft: VoucherDraft) -> Voucher:
        """Draft에서 전표 생성 (합계 계산)"""
        common = dict(
            id=voucher_id,
            voucher_type=draft.voucher_type,
            date=draft.date,
            party=draft.party,
            status=VoucherStatus.POSTED,
            narration=draft.narration,
            reference=draft.reference,
            source_doc_ref=draft.source_doc_ref,
            return_reason=draft.return_reason,
            ledger_id=draft.ledger_id,
            posted_at=utc_now_iso(),
        )

        payload = draft.payload
        if isinstance(payload, LedgerPosting):
            return Voucher(amount=payload.total_debit, payload=payload, **common)

        if isinstance(payload, ItemizedPosting):
            classification = payload.gst_classification or default_gst_classification(
                draft.voucher_type
            )
            payload = replace(payload, gst_classification=classification)
            totals = payload.totals()
            return Voucher(
                amount=totals.grand_total,
                payload=payload,
                sub_total=totals.sub_total,
                tax_total=totals.tax_total,
                jurisdiction=payload.jurisdiction,
                gst_classification=classification,
                **common,
            )

        raise ValidationError(f"Unsupported voucher payload: {type(payload).__name__}")

    # =========================================================================
    # 변경 (은행 대사 필드만)
    # =========================================================================

    def update(self, voucher_id: str, patch: Mapping[str, Any]) -> Voucher:
        """전기된 전표의 대사 필드 교체

        is_reconciled는 bank_date에서 파생.
        patch의 is_reconciled가 결과 bank_date와 모순되면 거부.

        Raises:
            VoucherNotFoundError: 존재하지 않는 ID
            ImmutabilityViolation: 대사 외 필드 변경 시도
            ValidationError: is_reconciled와 bank_date 불일치
        """
        current = self.get(voucher_id)

        forbidden = set(patch) - MUTABLE_FIELDS
        if forbidden:
            logger.error(f"Immutable fields change attempted on {voucher_id}: {sorted(forbidden)}")
            raise ImmutabilityViolation(voucher_id, forbidden)

        bank_date = current.bank_date
        if "bank_date" in patch:
            bank_date = _coerce_bank_date(patch["bank_date"])
        elif patch.get("is_reconciled") is False:
            bank_date = None

        is_reconciled = bank_date is not None
        if "is_reconciled" in patch and bool(patch["is_reconciled"]) != is_reconciled:
            raise ValidationError(
                f"is_reconciled={patch['is_reconciled']} contradicts bank_date={bank_date}"
            )

        updated = replace(current, bank_date=bank_date, is_reconciled=is_reconciled)
        self._vouchers[self._index[voucher_id]] = updated
        logger.debug(f"Voucher {voucher_id} reconciliation set to {is_reconciled} ({bank_date})")
        return updated

    # =========================================================================
    # 복제
    # =========================================================================

    def clone(self, voucher_id: str, date: date | str | None = None) -> VoucherDraft:
        """기존 전표로 미저장 Draft 생성 (컬렉션 변경 없음)

        대사 상태와 번호는 복사하지 않음.
        """
        source = self.get(voucher_id)
        return VoucherDraft(
            voucher_type=source.voucher_type,
            date=source.date if date is None else parse_date(date),
            party=source.party,
            payload=source.payload,
            narration=source.narration,
            reference=source.reference,
            source_doc_ref=source.source_doc_ref,
            return_reason=source.return_reason,
            ledger_id=source.ledger_id,
        )
