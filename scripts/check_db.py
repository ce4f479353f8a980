#!/usr/bin/env python3
"""스냅샷 DB 상태 확인 스크립트

저장된 스냅샷 건수, 무결성 검사, 세금 부채 요약 출력
"""

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config import get_settings
from core.constants import SnapshotKeys
from core.logging import setup_logging
from core.storage import SnapshotStore
from core.tax import aggregate
from core.utils.money import format_money
from core.voucher import check_integrity


async def main():
    setup_logging("check_db")
    settings = get_settings()
    db_path = settings.db_path

    print(f"DB Path: {db_path}")
    if not db_path.exists():
        print("  DB file not found")
        return

    async with SQLiteAdapter(db_path, readonly=True) as db:
        if not await db.table_exists("snapshot_store"):
            print("  snapshot_store table not initialized")
            return
        store = SnapshotStore(db)

        for key in SnapshotKeys.ALL:
            records = await store.get(key)
            version = await store.version(key)
            print(f"  - {key}: {len(records)} records (version {version})")

        ledger_book = await store.load_ledger_book()
        vouchers = await store.load_vouchers()

        report = check_integrity(vouchers, ledger_book)
        print(f"\nIntegrity: {'OK' if report.ok else f'{len(report.issues)} issue(s)'}")
        for issue in report.issues:
            print(f"  - {issue.voucher_id}: [{issue.code}] {issue.message}")

        liability = aggregate(vouchers)
        print(f"\nOutput tax: {format_money(liability.total_output)}")
        print(f"Input tax:  {format_money(liability.total_input)}")
        print(f"Net payable: {format_money(liability.net_payable)}")


if __name__ == "__main__":
    asyncio.run(main())
