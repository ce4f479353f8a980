"""
보고서 내보내기

표시 계층이므로 금액은 여기서만 2자리 반올림 (round_money).
DataFrame의 금액 컬럼은 반올림 후 float.
"""

import json
import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from core.inventory.stock import StockSummary
from core.ledger.book import TrialBalance
from core.tax.liability import classification_of
from core.tax.returns import HsnSummaryRow, hsn_summary, register, summarize
from core.types import GstReportType
from core.utils.money import round_money
from core.voucher.models import Voucher

logger = logging.getLogger(__name__)


VOUCHER_REGISTER_COLUMNS = [
    "Vch ID", "Date", "Type", "Party", "Status", "Amount", "Reconciled", "Bank Date",
]

GST_REGISTER_COLUMNS = [
    "Vch ID", "Date", "Party", "Supply Type", "Class", "Taxable Value", "Tax Total", "Grand Total",
]

HSN_COLUMNS = ["HSN/SAC", "Description", "UQC", "Qty", "Taxable Value", "Tax"]

TRIAL_BALANCE_COLUMNS = ["Ledger ID", "Ledger", "Group", "Debit", "Credit"]

STOCK_SUMMARY_COLUMNS = ["Item ID", "Item", "Category", "Unit", "Qty In", "Qty Out", "Closing Qty", "Value"]


def _money(value) -> float:
    return float(round_money(value))


def voucher_register_frame(vouchers: Iterable[Voucher]) -> pd.DataFrame:
    """전표 명세 (일계표)"""
    rows = [
        {
            "Vch ID": v.id,
            "Date": v.date.isoformat(),
            "Type": v.voucher_type.value,
            "Party": v.party,
            "Status": v.status.value,
            "Amount": _money(v.amount),
            "Reconciled": v.is_reconciled,
            "Bank Date": v.bank_date.isoformat() if v.bank_date else "",
        }
        for v in vouchers
    ]
    return pd.DataFrame(rows, columns=VOUCHER_REGISTER_COLUMNS)


def gst_register_frame(
    vouchers: Iterable[Voucher],
    report_type: GstReportType | str = GstReportType.GSTR_1,
    start: date | str | None = None,
    end: date | str | None = None,
) -> pd.DataFrame:
    """GSTR-1 / GSTR-2 명세"""
    rows = []
    for v in register(vouchers, report_type, start, end):
        classification = classification_of(v)
        taxable = v.sub_total if v.sub_total is not None else v.amount
        rows.append({
            "Vch ID": v.id,
            "Date": v.date.isoformat(),
            "Party": v.party,
            "Supply Type": v.jurisdiction.value if v.jurisdiction else "",
            "Class": classification.value if classification else "",
            "Taxable Value": _money(taxable),
            "Tax Total": _money(v.tax_total or 0),
            "Grand Total": _money(v.amount),
        })
    return pd.DataFrame(rows, columns=GST_REGISTER_COLUMNS)


def hsn_summary_frame(rows: Iterable[HsnSummaryRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "HSN/SAC": r.hsn,
                "Description": r.description,
                "UQC": r.unit,
                "Qty": float(r.qty),
                "Taxable Value": _money(r.taxable),
                "Tax": _money(r.tax),
            }
            for r in rows
        ],
        columns=HSN_COLUMNS,
    )


def trial_balance_frame(trial_balance: TrialBalance) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "Ledger ID": r.ledger_id,
                "Ledger": r.name,
                "Group": r.group,
                "Debit": _money(r.debit),
                "Credit": _money(r.credit),
            }
            for r in trial_balance.rows
        ],
        columns=TRIAL_BALANCE_COLUMNS,
    )


def stock_summary_frame(summary: StockSummary) -> pd.DataFrame:
    """재고 평가표 (판매가 기준)"""
    return pd.DataFrame(
        [
            {
                "Item ID": p.item_id,
                "Item": p.name,
                "Category": p.category,
                "Unit": p.unit,
                "Qty In": float(p.qty_in),
                "Qty Out": float(p.qty_out),
                "Closing Qty": float(p.closing_qty),
                "Value": _money(p.valuation),
            }
            for p in summary.positions
        ],
        columns=STOCK_SUMMARY_COLUMNS,
    )


def to_csv(frame: pd.DataFrame, path: Path | str) -> Path:
    """CSV 저장 (디렉토리 자동 생성)"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    logger.info(f"Exported {len(frame)} rows to {path}")
    return path


def gst_report_json(
    vouchers: Iterable[Voucher],
    report_type: GstReportType | str,
    company: str,
    start: date | str | None = None,
    end: date | str | None = None,
    path: Path | str | None = None,
) -> str:
    """GST 신고서 JSON

    Returns:
        JSON 문자열 (path가 주어지면 파일로도 저장)
    """
    vouchers = list(vouchers)
    report_type = GstReportType(report_type)

    document: dict[str, Any] = {
        "company": company,
        "period": f"{start or ''} to {end or ''}".strip(),
        "report": report_type.value,
        "summary": summarize(vouchers, start, end).to_dict(),
        "hsn_summary": [
            {
                "hsn": r.hsn,
                "description": r.description,
                "unit": r.unit,
                "qty": str(r.qty),
                "taxable": str(round_money(r.taxable)),
                "tax": str(round_money(r.tax)),
            }
            for r in hsn_summary(vouchers, start, end)
        ],
        "vouchers": [v.to_dict() for v in register(vouchers, report_type, start, end)],
    }
    content = json.dumps(document, ensure_ascii=False, indent=2)

    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info(f"Exported {report_type.value} report to {path}")

    return content
