"""
타임존 유틸리티

전기/대사 타임스탬프는 UTC ISO 문자열로 저장
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """현재 UTC 시각"""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """현재 UTC 시각 ISO 문자열 (전기/대사 타임스탬프용)"""
    return utc_now().isoformat()
