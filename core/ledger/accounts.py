"""
계정 / 계정 그룹 정의

LedgerAccount는 LedgerBook이 소유하고 전표는 ledger_id로 참조만 함.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from core.types import AccountNature, BalanceSide
from core.utils.money import ZERO, to_decimal


# 시스템 계정 그룹 이름
class GroupNames:
    BANK_ACCOUNTS = "Bank Accounts"
    CASH_IN_HAND = "Cash-in-hand"
    SUNDRY_DEBTORS = "Sundry Debtors"
    SUNDRY_CREDITORS = "Sundry Creditors"
    DUTIES_AND_TAXES = "Duties & Taxes"
    SALES_ACCOUNTS = "Sales Accounts"
    PURCHASE_ACCOUNTS = "Purchase Accounts"
    DIRECT_EXPENSES = "Direct Expenses"
    INDIRECT_EXPENSES = "Indirect Expenses"
    DIRECT_INCOMES = "Direct Incomes"
    INDIRECT_INCOMES = "Indirect Incomes"
    CAPITAL_ACCOUNT = "Capital Account"
    FIXED_ASSETS = "Fixed Assets"
    CURRENT_ASSETS = "Current Assets"
    CURRENT_LIABILITIES = "Current Liabilities"
    LOANS_LIABILITY = "Loans (Liability)"


@dataclass(frozen=True)
class AccountGroup:
    """계정 그룹"""

    id: str
    name: str
    nature: AccountNature
    is_system: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "nature": self.nature.value,
            "is_system": self.is_system,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccountGroup:
        return cls(
            id=data["id"],
            name=data["name"],
            nature=AccountNature(data["nature"]),
            is_system=bool(data.get("is_system", False)),
        )


# 기본 시스템 그룹 (group_id, name, nature)
DEFAULT_ACCOUNT_GROUPS: list[tuple[str, str, AccountNature]] = [
    ("g-bank", GroupNames.BANK_ACCOUNTS, AccountNature.ASSETS),
    ("g-cash", GroupNames.CASH_IN_HAND, AccountNature.ASSETS),
    ("g-debtors", GroupNames.SUNDRY_DEBTORS, AccountNature.ASSETS),
    ("g-creditors", GroupNames.SUNDRY_CREDITORS, AccountNature.LIABILITIES),
    ("g-duties", GroupNames.DUTIES_AND_TAXES, AccountNature.LIABILITIES),
    ("g-sales", GroupNames.SALES_ACCOUNTS, AccountNature.INCOME),
    ("g-purchase", GroupNames.PURCHASE_ACCOUNTS, AccountNature.EXPENSES),
    ("g-direct-exp", GroupNames.DIRECT_EXPENSES, AccountNature.EXPENSES),
    ("g-indirect-exp", GroupNames.INDIRECT_EXPENSES, AccountNature.EXPENSES),
    ("g-direct-inc", GroupNames.DIRECT_INCOMES, AccountNature.INCOME),
    ("g-indirect-inc", GroupNames.INDIRECT_INCOMES, AccountNature.INCOME),
    ("g-capital", GroupNames.CAPITAL_ACCOUNT, AccountNature.LIABILITIES),
    ("g-fixed-assets", GroupNames.FIXED_ASSETS, AccountNature.ASSETS),
    ("g-current-assets", GroupNames.CURRENT_ASSETS, AccountNature.ASSETS),
    ("g-current-liab", GroupNames.CURRENT_LIABILITIES, AccountNature.LIABILITIES),
    ("g-loans", GroupNames.LOANS_LIABILITY, AccountNature.LIABILITIES),
]


def default_groups() -> list[AccountGroup]:
    return [
        AccountGroup(id=gid, name=name, nature=nature, is_system=True)
        for gid, name, nature in DEFAULT_ACCOUNT_GROUPS
    ]


def natural_side(nature: AccountNature) -> BalanceSide:
    """자산/비용은 차변, 부채/수익은 대변이 정상 잔액 방향"""
    if nature in (AccountNature.ASSETS, AccountNature.EXPENSES):
        return BalanceSide.DEBIT
    return BalanceSide.CREDIT


@dataclass(frozen=True)
class LedgerAccount:
    """계정 (원장)

    group은 그룹 이름 (예: "Bank Accounts").
    opening_balance는 balance_side 방향의 양수 금액.
    """

    id: str
    name: str
    group: str
    nature: AccountNature
    opening_balance: Decimal = ZERO
    balance_side: BalanceSide = BalanceSide.DEBIT
    budget: Decimal | None = None

    @classmethod
    def create(
        cls,
        id: str,
        name: str,
        group: str,
        nature: AccountNature | str,
        opening_balance: Any = 0,
        balance_side: BalanceSide | str | None = None,
        budget: Any = None,
    ) -> LedgerAccount:
        nature = AccountNature(nature)
        return cls(
            id=id,
            name=name,
            group=group,
            nature=nature,
            opening_balance=to_decimal(opening_balance, default=ZERO),
            balance_side=BalanceSide(balance_side) if balance_side else natural_side(nature),
            budget=to_decimal(budget) if budget not in (None, "") else None,
        )

    @property
    def signed_opening(self) -> Decimal:
        """차변 기준 부호 (차변 +, 대변 -)"""
        if self.balance_side == BalanceSide.DEBIT:
            return self.opening_balance
        return -self.opening_balance

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "group": self.group,
            "nature": self.nature.value,
            "opening_balance": str(self.opening_balance),
            "balance_side": self.balance_side.value,
            "budget": str(self.budget) if self.budget is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LedgerAccount:
        return cls.create(
            id=data["id"],
            name=data["name"],
            group=data["group"],
            nature=data["nature"],
            opening_balance=data.get("opening_balance", "0"),
            balance_side=data.get("balance_side"),
            budget=data.get("budget"),
        )
