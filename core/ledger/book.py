"""
계정 장부 (LedgerBook)

계정/계정 그룹 소유, 잔액 및 시산표 계산.

잔액 계산 규칙:
- 분개 전표(LEDGER): 각 라인이 해당 계정을 차변/대변 방향으로 이동
- 품목 전표(ITEMIZED): 거래처 계정을 전표 총액만큼 이동
  - Sales, Purchase Return → 차변
  - Purchase, Sales Return → 대변
  - 재고 전용 전표(Delivery Note, GRN 등)는 영향 없음
- Posted 전표만 반영
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from core.errors import DuplicateLedgerError, LedgerNotFoundError, ValidationError
from core.ledger.accounts import AccountGroup, GroupNames, LedgerAccount, default_groups
from core.types import AccountNature, BalanceSide, EntrySide, VoucherType
from core.utils.money import ZERO, round_money
from core.voucher.models import ItemizedPosting, LedgerPosting, Voucher

logger = logging.getLogger(__name__)


# 품목 전표의 거래처 계정 이동 방향
PARTY_SIDE: dict[VoucherType, EntrySide] = {
    VoucherType.SALES: EntrySide.DR,
    VoucherType.PURCHASE_RETURN: EntrySide.DR,
    VoucherType.PURCHASE: EntrySide.CR,
    VoucherType.SALES_RETURN: EntrySide.CR,
}

SALES_SIDE_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.SALES,
    VoucherType.SALES_RETURN,
    VoucherType.DELIVERY_NOTE,
})

PURCHASE_SIDE_TYPES: frozenset[VoucherType] = frozenset({
    VoucherType.PURCHASE,
    VoucherType.PURCHASE_RETURN,
    VoucherType.GOODS_RECEIPT_NOTE,
    VoucherType.PURCHASE_ORDER,
})


@dataclass(frozen=True)
class TrialBalanceRow:
    """시산표 행"""

    ledger_id: str
    name: str
    group: str
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    """시산표"""

    rows: tuple[TrialBalanceRow, ...] = field(default_factory=tuple)

    @property
    def total_debit(self) -> Decimal:
        return sum((r.debit for r in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((r.credit for r in self.rows), ZERO)

    @property
    def difference(self) -> Decimal:
        return self.total_debit - self.total_credit

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows": [
                {
                    "ledger_id": r.ledger_id,
                    "name": r.name,
                    "group": r.group,
                    "debit": str(round_money(r.debit)),
                    "credit": str(round_money(r.credit)),
                }
                for r in self.rows
            ],
            "total_debit": str(round_money(self.total_debit)),
            "total_credit": str(round_money(self.total_credit)),
        }


def ledger_movements(voucher: Voucher) -> list[tuple[str, Decimal]]:
    """전표가 계정에 주는 영향 (ledger_id, 차변 기준 부호 금액)"""
    if not voucher.is_posted:
        return []

    payload = voucher.payload
    if isinstance(payload, LedgerPosting):
        return [
            (e.ledger_id, e.amount if e.is_debit else -e.amount)
            for e in payload.entries
        ]

    if isinstance(payload, ItemizedPosting):
        side = PARTY_SIDE.get(voucher.voucher_type)
        if side is None or not payload.party_ledger_id:
            return []
        amount = voucher.amount if side == EntrySide.DR else -voucher.amount
        return [(payload.party_ledger_id, amount)]

    return []


class LedgerBook:
    """계정 장부

    Args:
        accounts: 초기 계정
        groups: 계정 그룹 (None이면 기본 시스템 그룹)
    """

    def __init__(
        self,
        accounts: Iterable[LedgerAccount] = (),
        groups: Iterable[AccountGroup] | None = None,
    ):
        self._groups: dict[str, AccountGroup] = {}
        self._accounts: dict[str, LedgerAccount] = {}

        for group in default_groups() if groups is None else groups:
            self.add_group(group)
        for account in accounts:
            self.add(account)

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, ledger_id: object) -> bool:
        return ledger_id in self._accounts

    @property
    def accounts(self) -> tuple[LedgerAccount, ...]:
        return tuple(self._accounts.values())

    @property
    def groups(self) -> tuple[AccountGroup, ...]:
        return tuple(self._groups.values())

    # =========================================================================
    # 등록 / 조회
    # =========================================================================

    def add_group(self, group: AccountGroup) -> None:
        if group.id in self._groups:
            raise DuplicateLedgerError(f"Account group already exists: {group.id}")
        if self._group_by_name(group.name) is not None:
            raise DuplicateLedgerError(f"Account group name already exists: {group.name}")
        self._groups[group.id] = group

    def add(self, account: LedgerAccount) -> None:
        """계정 등록

        Raises:
            DuplicateLedgerError: 같은 ID 또는 이름(대소문자 무시)
            ValidationError: 등록되지 않은 그룹
        """
        if account.id in self._accounts:
            raise DuplicateLedgerError(f"Ledger already exists: {account.id}")
        if self.find_by_name(account.name) is not None:
            raise DuplicateLedgerError(f"Ledger name already exists: {account.name}")
        if self._group_by_name(account.group) is None:
            raise ValidationError(f"Unknown account group: {account.group}")

        self._accounts[account.id] = account
        logger.debug(f"Ledger added: {account.id} ({account.name}, {account.group})")

    def open_account(
        self,
        id: str,
        name: str,
        group: str,
        opening_balance: Any = 0,
        balance_side: BalanceSide | str | None = None,
        nature: AccountNature | str | None = None,
        budget: Any = None,
    ) -> LedgerAccount:
        """그룹의 성격을 따라 계정 생성 후 등록"""
        group_obj = self._group_by_name(group)
        if group_obj is None:
            raise ValidationError(f"Unknown account group: {group}")

        account = LedgerAccount.create(
            id=id,
            name=name,
            group=group,
            nature=nature or group_obj.nature,
            opening_balance=opening_balance,
            balance_side=balance_side,
            budget=budget,
        )
        self.add(account)
        return account

    def get(self, ledger_id: str) -> LedgerAccount:
        """
        Raises:
            LedgerNotFoundError: 존재하지 않는 계정
        """
        account = self._accounts.get(ledger_id)
        if account is None:
            raise LedgerNotFoundError(ledger_id)
        return account

    def find_by_name(self, name: str) -> LedgerAccount | None:
        needle = name.strip().lower()
        for account in self._accounts.values():
            if account.name.lower() == needle:
                return account
        return None

    def by_group(self, group: str) -> list[LedgerAccount]:
        return [a for a in self._accounts.values() if a.group == group]

    def bank_accounts(self) -> list[LedgerAccount]:
        """은행 대사 대상 계정"""
        return self.by_group(GroupNames.BANK_ACCOUNTS)

    def party_accounts(self, voucher_type: VoucherType | str | None = None) -> list[LedgerAccount]:
        """전표 유형별 거래처 후보

        매출 계열은 Sundry Debtors, 매입 계열은 Sundry Creditors, 그 외는 둘 다.
        """
        vtype = VoucherType(voucher_type) if voucher_type else None
        if vtype in SALES_SIDE_TYPES:
            return self.by_group(GroupNames.SUNDRY_DEBTORS)
        if vtype in PURCHASE_SIDE_TYPES:
            return self.by_group(GroupNames.SUNDRY_CREDITORS)
        return self.by_group(GroupNames.SUNDRY_DEBTORS) + self.by_group(GroupNames.SUNDRY_CREDITORS)

    def nature_of(self, ledger_id: str) -> AccountNature:
        return self.get(ledger_id).nature

    def _group_by_name(self, name: str) -> AccountGroup | None:
        for group in self._groups.values():
            if group.name == name:
                return group
        return None

    # =========================================================================
    # 잔액 / 시산표
    # =========================================================================

    def net_debit_balance(self, ledger_id: str, vouchers: Iterable[Voucher]) -> Decimal:
        """차변 기준 순잔액 (차변 +, 대변 -)"""
        balance = self.get(ledger_id).signed_opening
        for voucher in vouchers:
            for moved_id, amount in ledger_movements(voucher):
                if moved_id == ledger_id:
                    balance += amount
        return balance

    def closing_balance(self, ledger_id: str, vouchers: Iterable[Voucher]) -> Decimal:
        """계정의 정상 방향(balance_side) 기준 기말 잔액

        음수면 반대 방향 잔액.
        """
        account = self.get(ledger_id)
        net = self.net_debit_balance(ledger_id, vouchers)
        return net if account.balance_side == BalanceSide.DEBIT else -net

    def trial_balance(self, vouchers: Iterable[Voucher]) -> TrialBalance:
        """전체 계정 시산표"""
        net: dict[str, Decimal] = {a.id: a.signed_opening for a in self._accounts.values()}
        for voucher in vouchers:
            for ledger_id, amount in ledger_movements(voucher):
                if ledger_id in net:
                    net[ledger_id] += amount
                else:
                    logger.warning(f"Voucher {voucher.id} references unknown ledger {ledger_id}")

        rows = []
        for account in self._accounts.values():
            balance = net[account.id]
            rows.append(TrialBalanceRow(
                ledger_id=account.id,
                name=account.name,
                group=account.group,
                debit=balance if balance > 0 else ZERO,
                credit=-balance if balance < 0 else ZERO,
            ))

        trial_balance = TrialBalance(rows=tuple(rows))
        logger.debug(
            f"Trial balance: debit={trial_balance.total_debit}, credit={trial_balance.total_credit}"
        )
        return trial_balance
