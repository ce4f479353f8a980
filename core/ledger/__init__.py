"""
계정 장부 (Double-Entry Ledger Book)

계정/계정 그룹 관리와 전표 기반 잔액, 시산표 계산.

사용 예시:
```python
from core.ledger import LedgerBook

book = LedgerBook()
book.open_account("l1", "HDFC Bank - 0012", "Bank Accounts", opening_balance=54000)

# 잔액 조회
balance = book.closing_balance("l1", voucher_ledger.vouchers)

# 시산표 조회
trial_balance = book.trial_balance(voucher_ledger.vouchers)
```
"""

from core.ledger.accounts import (
    DEFAULT_ACCOUNT_GROUPS,
    AccountGroup,
    GroupNames,
    LedgerAccount,
    default_groups,
    natural_side,
)
from core.ledger.book import (
    LedgerBook,
    TrialBalance,
    TrialBalanceRow,
    ledger_movements,
)

__all__ = [
    # 핵심 클래스
    "LedgerBook",
    "LedgerAccount",
    "AccountGroup",
    "TrialBalance",
    "TrialBalanceRow",
    # 상수
    "DEFAULT_ACCOUNT_GROUPS",
    "GroupNames",
    # 함수
    "default_groups",
    "ledger_movements",
    "natural_side",
]
