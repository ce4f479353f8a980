"""
보고서 내보내기

전표 명세 / GST 명세 / HSN 요약 / 시산표 / 재고 평가표를 DataFrame, CSV, JSON으로 변환
"""

from core.reports.export import (
    gst_register_frame,
    gst_report_json,
    hsn_summary_frame,
    stock_summary_frame,
    to_csv,
    trial_balance_frame,
    voucher_register_frame,
)

__all__ = [
    "gst_register_frame",
    "gst_report_json",
    "hsn_summary_frame",
    "stock_summary_frame",
    "to_csv",
    "trial_balance_frame",
    "voucher_register_frame",
]
