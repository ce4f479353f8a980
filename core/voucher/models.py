"""
전표 도메인 모델

전표는 두 가지 Payload 중 정확히 하나를 가짐 (태그드 유니언):
- LedgerPosting: 차변/대변 분개 (Payment, Receipt, Contra, Journal)
- ItemizedPosting: 품목 명세 + 가감 항목 (Sales, Purchase, 반품 등)

mode 속성이 명시적 판별자 역할을 하며, 검증기/집계기는 이 값으로 분기.
전기된 Voucher는 불변(frozen). 은행 대사 필드만 replace로 교체 가능.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Union

from core.tax.resolver import check_rate, split_tax, tax_amount
from core.types import (
    AdjustmentKind,
    EntrySide,
    GstClassification,
    Jurisdiction,
    VoucherMode,
    VoucherStatus,
    VoucherType,
)
from core.utils.money import HUNDRED, ZERO, to_decimal


def parse_date(value: date | str) -> date:
    """ISO 문자열 또는 date를 date로 변환"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _optional_date(value: date | str | None) -> date | None:
    if value is None or value == "":
        return None
    return parse_date(value)


# =========================================================================
# 분개 / 품목 / 가감 항목
# =========================================================================


@dataclass(frozen=True)
class LedgerEntry:
    """분개 라인 (차변 또는 대변)"""

    ledger_id: str
    side: EntrySide
    amount: Decimal
    ledger_name: str = ""

    @classmethod
    def create(
        cls,
        ledger_id: str,
        side: EntrySide | str,
        amount: Any,
        ledger_name: str = "",
    ) -> LedgerEntry:
        return cls(
            ledger_id=ledger_id,
            side=EntrySide(side),
            amount=to_decimal(amount, default=ZERO),
            ledger_name=ledger_name,
        )

    @property
    def is_debit(self) -> bool:
        return self.side == EntrySide.DR

    def to_dict(self) -> dict[str, Any]:
        return {
            "ledger_id": self.ledger_id,
            "side": self.side.value,
            "amount": str(self.amount),
            "ledger_name": self.ledger_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LedgerEntry:
        return cls.create(
            ledger_id=data.get("ledger_id", ""),
            side=data["side"],
            amount=data.get("amount", "0"),
            ledger_name=data.get("ledger_name", ""),
        )


@dataclass(frozen=True)
class VoucherLineItem:
    """품목 라인

    cgst_rate/sgst_rate/igst_rate는 split_tax로만 설정됨.
    직접 생성하지 말고 create() 또는 core.voucher.lines 사용.
    """

    item_id: str
    qty: Decimal
    rate: Decimal
    tax_rate: Decimal
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    name: str = ""
    hsn: str = ""
    unit: str = "Nos"

    @classmethod
    def create(
        cls,
        item_id: str,
        qty: Any,
        rate: Any,
        tax_rate: Any,
        jurisdiction: Jurisdiction | str,
        name: str = "",
        hsn: str = "",
        unit: str = "Nos",
    ) -> VoucherLineItem:
        """관할에 맞게 세율을 분할하여 라인 생성

        Raises:
            TaxRateRangeError: 세율이 0~100 밖인 경우
        """
        full_rate = check_rate(tax_rate)
        split = split_tax(full_rate, jurisdiction)
        return cls(
            item_id=item_id,
            qty=to_decimal(qty, default=ZERO),
            rate=to_decimal(rate, default=ZERO),
            tax_rate=full_rate,
            cgst_rate=split.cgst,
            sgst_rate=split.sgst,
            igst_rate=split.igst,
            name=name,
            hsn=hsn,
            unit=unit,
        )

    @property
    def amount(self) -> Decimal:
        """과세 금액 (qty * rate)"""
        return self.qty * self.rate

    @property
    def tax_amount(self) -> Decimal:
        """세액 (amount * tax_rate / 100), 반올림 없음"""
        return tax_amount(self.amount, self.tax_rate)

    @property
    def cgst_amount(self) -> Decimal:
        return self.amount * self.cgst_rate / HUNDRED

    @property
    def sgst_amount(self) -> Decimal:
        return self.amount * self.sgst_rate / HUNDRED

    @property
    def igst_amount(self) -> Decimal:
        return self.amount * self.igst_rate / HUNDRED

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "name": self.name,
            "hsn": self.hsn,
            "unit": self.unit,
            "qty": str(self.qty),
            "rate": str(self.rate),
            "amount": str(self.amount),
            "tax_rate": str(self.tax_rate),
            "tax_amount": str(self.tax_amount),
            "cgst_rate": str(self.cgst_rate),
            "sgst_rate": str(self.sgst_rate),
            "igst_rate": str(self.igst_rate),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoucherLineItem:
        """저장된 라인 복원

        저장된 분할 세율을 그대로 복원 (무결성 검사에서 split_tax와 비교).
        amount/tax_amount는 파생값이므로 무시.
        """
        return cls(
            item_id=data.get("item_id", ""),
            qty=to_decimal(data.get("qty"), default=ZERO),
            rate=to_decimal(data.get("rate"), default=ZERO),
            tax_rate=to_decimal(data.get("tax_rate"), default=ZERO),
            cgst_rate=to_decimal(data.get("cgst_rate"), default=ZERO),
            sgst_rate=to_decimal(data.get("sgst_rate"), default=ZERO),
            igst_rate=to_decimal(data.get("igst_rate"), default=ZERO),
            name=data.get("name", ""),
            hsn=data.get("hsn", ""),
            unit=data.get("unit", "Nos"),
        )


@dataclass(frozen=True)
class Adjustment:
    """소계 이후 가감 항목 (운송비, 할인 등). 세금 계산 대상 아님"""

    label: str
    kind: AdjustmentKind
    amount: Decimal

    @classmethod
    def create(cls, label: str, kind: AdjustmentKind | str, amount: Any) -> Adjustment:
        return cls(label=label, kind=AdjustmentKind(kind), amount=to_decimal(amount, default=ZERO))

    @property
    def signed_amount(self) -> Decimal:
        """Add는 +, Less는 -"""
        return self.amount if self.kind == AdjustmentKind.ADD else -self.amount

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "kind": self.kind.value, "amount": str(self.amount)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Adjustment:
        return cls.create(data.get("label", ""), data["kind"], data.get("amount", "0"))


@dataclass(frozen=True)
class ItemizedTotals:
    """품목 전표 합계"""

    sub_total: Decimal
    cgst_total: Decimal
    sgst_total: Decimal
    igst_total: Decimal
    tax_total: Decimal
    adjustment_total: Decimal

    @property
    def grand_total(self) -> Decimal:
        return self.sub_total + self.tax_total + self.adjustment_total


def compute_totals(
    items: tuple[VoucherLineItem, ...] | list[VoucherLineItem],
    adjustments: tuple[Adjustment, ...] | list[Adjustment] = (),
) -> ItemizedTotals:
    """품목/가감 항목 합계 계산 (반올림 없음)"""
    return ItemizedTotals(
        sub_total=sum((i.amount for i in items), ZERO),
        cgst_total=sum((i.cgst_amount for i in items), ZERO),
        sgst_total=sum((i.sgst_amount for i in items), ZERO),
        igst_total=sum((i.igst_amount for i in items), ZERO),
        tax_total=sum((i.tax_amount for i in items), ZERO),
        adjustment_total=sum((a.signed_amount for a in adjustments), ZERO),
    )


# =========================================================================
# Payload (태그드 유니언)
# =========================================================================


@dataclass(frozen=True)
class LedgerPosting:
    """차변/대변 분개 Payload"""

    entries: tuple[LedgerEntry, ...] = ()

    @property
    def mode(self) -> VoucherMode:
        return VoucherMode.LEDGER

    @property
    def total_debit(self) -> Decimal:
        return sum((e.amount for e in self.entries if e.side == EntrySide.DR), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((e.amount for e in self.entries if e.side == EntrySide.CR), ZERO)

    def ledger_ids(self) -> set[str]:
        return {e.ledger_id for e in self.entries if e.ledger_id}

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "entries": [e.to_dict() for e in self.entries],
        }


@dataclass(frozen=True)
class ItemizedPosting:
    """품목 명세 Payload

    gst_classification이 None이면 전기 시 전표 유형으로 결정.
    """

    party_ledger_id: str
    items: tuple[VoucherLineItem, ...] = ()
    adjustments: tuple[Adjustment, ...] = ()
    jurisdiction: Jurisdiction = Jurisdiction.LOCAL
    gst_classification: GstClassification | None = None

    @property
    def mode(self) -> VoucherMode:
        return VoucherMode.ITEMIZED

    def totals(self) -> ItemizedTotals:
        return compute_totals(self.items, self.adjustments)

    def ledger_ids(self) -> set[str]:
        return {self.party_ledger_id} if self.party_ledger_id else set()

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "party_ledger_id": self.party_ledger_id,
            "items": [i.to_dict() for i in self.items],
            "adjustments": [a.to_dict() for a in self.adjustments],
            "jurisdiction": self.jurisdiction.value,
            "gst_classification": (
                self.gst_classification.value if self.gst_classification else None
            ),
        }


VoucherPayload = Union[LedgerPosting, ItemizedPosting]


def payload_from_dict(data: dict[str, Any]) -> VoucherPayload:
    """직렬화된 Payload 복원 (mode 판별자 기준)

    Raises:
        ValueError: 알 수 없는 mode
    """
    mode = VoucherMode(data["mode"])
    if mode == VoucherMode.LEDGER:
        return LedgerPosting(
            entries=tuple(LedgerEntry.from_dict(e) for e in data.get("entries", [])),
        )

    classification = data.get("gst_classification")
    return ItemizedPosting(
        party_ledger_id=data.get("party_ledger_id", ""),
        items=tuple(VoucherLineItem.from_dict(i) for i in data.get("items", [])),
        adjustments=tuple(Adjustment.from_dict(a) for a in data.get("adjustments", [])),
        jurisdiction=Jurisdiction(data.get("jurisdiction", Jurisdiction.LOCAL.value)),
        gst_classification=GstClassification(classification) if classification else None,
    )


# =========================================================================
# Draft / Voucher
# =========================================================================


@dataclass(frozen=True)
class VoucherDraft:
    """미저장 전표 (입력 폼 또는 clone 결과)

    ID가 없으므로 같은 Draft를 두 번 전기하면 서로 다른 전표 두 개가 생성됨.
    """

    voucher_type: VoucherType
    date: date
    party: str
    payload: VoucherPayload
    narration: str = ""
    reference: str | None = None
    source_doc_ref: str | None = None  # 반품 시 원 전표 참조
    return_reason: str | None = None
    ledger_id: str | None = None  # 주 계정 (은행/현금 등)

    @classmethod
    def create(
        cls,
        voucher_type: VoucherType | str,
        date: date | str,
        party: str,
        payload: VoucherPayload,
        narration: str = "",
        reference: str | None = None,
        source_doc_ref: str | None = None,
        return_reason: str | None = None,
        ledger_id: str | None = None,
    ) -> VoucherDraft:
        return cls(
            voucher_type=VoucherType(voucher_type),
            date=parse_date(date),
            party=party,
            payload=payload,
            narration=narration,
            reference=reference,
            source_doc_ref=source_doc_ref,
            return_reason=return_reason,
            ledger_id=ledger_id,
        )

    @property
    def mode(self) -> VoucherMode:
        return self.payload.mode


@dataclass(frozen=True)
class Voucher:
    """전기된 전표

    id, voucher_type, 금액 필드는 전기 후 불변.
    is_reconciled/bank_date만 은행 대사로 교체 가능.
    """

    id: str
    voucher_type: VoucherType
    date: date
    party: str
    amount: Decimal
    payload: VoucherPayload
    status: VoucherStatus = VoucherStatus.POSTED
    narration: str = ""
    reference: str | None = None
    source_doc_ref: str | None = None
    return_reason: str | None = None
    ledger_id: str | None = None
    sub_total: Decimal | None = None
    tax_total: Decimal | None = None
    jurisdiction: Jurisdiction | None = None
    gst_classification: GstClassification | None = None
    is_reconciled: bool = False
    bank_date: date | None = None
    posted_at: str | None = field(default=None, compare=False)

    @property
    def mode(self) -> VoucherMode:
        return self.payload.mode

    @property
    def entries(self) -> tuple[LedgerEntry, ...]:
        if isinstance(self.payload, LedgerPosting):
            return self.payload.entries
        return ()

    @property
    def items(self) -> tuple[VoucherLineItem, ...]:
        if isinstance(self.payload, ItemizedPosting):
            return self.payload.items
        return ()

    @property
    def adjustments(self) -> tuple[Adjustment, ...]:
        if isinstance(self.payload, ItemizedPosting):
            return self.payload.adjustments
        return ()

    @property
    def is_posted(self) -> bool:
        return self.status == VoucherStatus.POSTED

    def touches_ledger(self, ledger_id: str) -> bool:
        """주 계정 또는 분개 라인에서 해당 계정을 참조하는지"""
        if self.ledger_id == ledger_id:
            return True
        return any(e.ledger_id == ledger_id for e in self.entries)

    def to_dict(self) -> dict[str, Any]:
        """직렬화 (SnapshotStore, JSON 내보내기용)"""
        return {
            "id": self.id,
            "voucher_type": self.voucher_type.value,
            "date": self.date.isoformat(),
            "party": self.party,
            "amount": str(self.amount),
            "status": self.status.value,
            "narration": self.narration,
            "reference": self.reference,
            "source_doc_ref": self.source_doc_ref,
            "return_reason": self.return_reason,
            "ledger_id": self.ledger_id,
            "sub_total": str(self.sub_total) if self.sub_total is not None else None,
            "tax_total": str(self.tax_total) if self.tax_total is not None else None,
            "jurisdiction": self.jurisdiction.value if self.jurisdiction else None,
            "gst_classification": (
                self.gst_classification.value if self.gst_classification else None
            ),
            "is_reconciled": self.is_reconciled,
            "bank_date": self.bank_date.isoformat() if self.bank_date else None,
            "posted_at": self.posted_at,
            "payload": self.payload.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Voucher:
        """저장된 전표 복원"""
        sub_total = data.get("sub_total")
        tax_total = data.get("tax_total")
        jurisdiction = data.get("jurisdiction")
        classification = data.get("gst_classification")

        return cls(
            id=data["id"],
            voucher_type=VoucherType(data["voucher_type"]),
            date=parse_date(data["date"]),
            party=data.get("party", ""),
            amount=to_decimal(data.get("amount"), default=ZERO),
            payload=payload_from_dict(data["payload"]),
            status=VoucherStatus(data.get("status", VoucherStatus.POSTED.value)),
            narration=data.get("narration") or "",
            reference=data.get("reference"),
            source_doc_ref=data.get("source_doc_ref"),
            return_reason=data.get("return_reason"),
            ledger_id=data.get("ledger_id"),
            sub_total=to_decimal(sub_total) if sub_total is not None else None,
            tax_total=to_decimal(tax_total) if tax_total is not None else None,
            jurisdiction=Jurisdiction(jurisdiction) if jurisdiction else None,
            gst_classification=GstClassification(classification) if classification else None,
            is_reconciled=bool(data.get("is_reconciled", False)),
            bank_date=_optional_date(data.get("bank_date")),
            posted_at=data.get("posted_at"),
        )
