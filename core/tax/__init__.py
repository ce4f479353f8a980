"""
GST 세금 계산 / 집계

resolver → masters 순으로 먼저 로드 (voucher 모델이 resolver에 의존)
"""

from core.tax.resolver import ZERO_SPLIT, TaxSplit, check_rate, split_tax, tax_amount
from core.tax.masters import TaxGroup, TaxMaster, TaxMasterBook
from core.tax.liability import TaxLiability, TaxLiabilityAggregator, aggregate, tax_sign
from core.tax.returns import (
    GstReturnSummary,
    HsnSummaryRow,
    RateBucket,
    hsn_summary,
    register,
    summarize,
)

__all__ = [
    "ZERO_SPLIT",
    "TaxSplit",
    "check_rate",
    "split_tax",
    "tax_amount",
    "TaxGroup",
    "TaxMaster",
    "TaxMasterBook",
    "TaxLiability",
    "TaxLiabilityAggregator",
    "aggregate",
    "tax_sign",
    "GstReturnSummary",
    "HsnSummaryRow",
    "RateBucket",
    "hsn_summary",
    "register",
    "summarize",
]
