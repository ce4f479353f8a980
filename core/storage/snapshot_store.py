"""
SnapshotStore - 마스터 / 전표 스냅샷 저장소

snapshot_store 테이블에 키별 JSON 배열로 저장.

스냅샷 키 구조 (SnapshotKeys):
- "ledgers": 계정 목록
- "account_groups": 계정 그룹 목록
- "taxes": TaxMaster 목록
- "tax_groups": TaxGroup 목록
- "items": 재고 품목 목록
- "vouchers": 전표 목록
- "reconciliation_log": 은행 대사 변경 이력
"""

import json
import logging
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import SnapshotKeys
from core.inventory.items import ItemCatalog, StockItem
from core.ledger.accounts import AccountGroup, LedgerAccount
from core.ledger.book import LedgerBook
from core.tax.masters import TaxGroup, TaxMaster, TaxMasterBook
from core.utils.timezone import utc_now_iso
from core.voucher.models import Voucher
from core.voucher.reconciliation import ReconciliationChange

logger = logging.getLogger(__name__)


class SnapshotStore:
    """스냅샷 저장소

    저장 실패 시 예외 대신 로그 후 False 반환, 조회 실패 시 빈 목록 반환.

    Args:
        db: SQLiteAdapter 인스턴스 (init_schema 완료 상태)

    사용 예시:
    ```python
    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)
        store = SnapshotStore(db)

        await store.save_vouchers(voucher_ledger.vouchers)
        vouchers = await store.load_vouchers()
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db
        self._cache: dict[str, list[Any]] = {}
        self._cache_version: dict[str, int] = {}

    async def get(self, key: str, use_cache: bool = True) -> list[Any]:
        """스냅샷 조회

        Args:
            key: 스냅샷 키
            use_cache: 캐시 사용 여부 (기본 True)

        Returns:
            저장된 JSON 배열. 없으면 빈 목록.
        """
        if use_cache and key in self._cache:
            return self._cache[key]

        try:
            row = await self.db.fetchone(
                """
                SELECT value_json, version
                FROM snapshot_store
                WHERE snapshot_key = ?
                """,
                (key,),
            )

            if row:
                value = json.loads(row[0]) if isinstance(row[0], str) else row[0]
                self._cache[key] = value
                self._cache_version[key] = row[1]
                return value

        except Exception as e:
            logger.warning(f"Failed to get snapshot '{key}': {e}")

        return []

    async def version(self, key: str) -> int:
        """스냅샷 버전 (저장 횟수, 없으면 0)

        get()으로 캐시된 키는 캐시 시점의 버전 반환.
        """
        if key in self._cache_version:
            return self._cache_version[key]

        row = await self.db.fetchone(
            "SELECT version FROM snapshot_store WHERE snapshot_key = ?",
            (key,),
        )
        return row[0] if row else 0

    async def set(
        self,
        key: str,
        value: list[Any],
        updated_by: str = "engine:system",
    ) -> bool:
        """스냅샷 저장 (UPSERT)

        Args:
            key: 스냅샷 키 (SnapshotKeys.ALL 중 하나)
            value: JSON 직렬화 가능한 목록
            updated_by: 저장 주체

        Returns:
            성공 여부
        """
        if key not in SnapshotKeys.ALL:
            logger.error(f"Unknown snapshot key '{key}'")
            return False

        now = utc_now_iso()
        value_json = json.dumps(value, ensure_ascii=False)

        try:
            async with self.db.transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO snapshot_store (snapshot_key, value_json, version, updated_by, created_at, updated_at)
                    VALUES (?, ?, 1, ?, ?, ?)
                    ON CONFLICT(snapshot_key) DO UPDATE SET
                        value_json = excluded.value_json,
                        version = snapshot_store.version + 1,
                        updated_by = excluded.updated_by,
                        updated_at = excluded.updated_at
                    """,
                    (key, value_json, updated_by, now, now),
                )

            self._cache.pop(key, None)
            self._cache_version.pop(key, None)

            logger.info(f"Snapshot '{key}' saved ({len(value)} records) by {updated_by}")
            return True

        except Exception as e:
            logger.error(f"Failed to set snapshot '{key}': {e}")
            return False

    def clear_cache(self) -> None:
        """캐시 초기화"""
        self._cache.clear()
        self._cache_version.clear()

    # =========================================================================
    # 계정 장부
    # =========================================================================

    async def save_ledger_book(self, book: LedgerBook) -> bool:
        groups_ok = await self.set(
            SnapshotKeys.ACCOUNT_GROUPS, [g.to_dict() for g in book.groups]
        )
        ledgers_ok = await self.set(
            SnapshotKeys.LEDGERS, [a.to_dict() for a in book.accounts]
        )
        return groups_ok and ledgers_ok

    async def load_ledger_book(self) -> LedgerBook:
        """계정 장부 복원 (그룹 스냅샷이 없으면 기본 시스템 그룹)"""
        groups = [AccountGroup.from_dict(g) for g in await self.get(SnapshotKeys.ACCOUNT_GROUPS)]
        accounts = [LedgerAccount.from_dict(a) for a in await self.get(SnapshotKeys.LEDGERS)]
        return LedgerBook(accounts=accounts, groups=groups or None)

    # =========================================================================
    # 세금 마스터 / 품목
    # =========================================================================

    async def save_tax_book(self, book: TaxMasterBook) -> bool:
        groups_ok = await self.set(SnapshotKeys.TAX_GROUPS, [g.to_dict() for g in book.groups])
        taxes_ok = await self.set(SnapshotKeys.TAXES, [t.to_dict() for t in book.taxes])
        return groups_ok and taxes_ok

    async def load_tax_book(self) -> TaxMasterBook:
        return TaxMasterBook(
            taxes=[TaxMaster.from_dict(t) for t in await self.get(SnapshotKeys.TAXES)],
            groups=[TaxGroup.from_dict(g) for g in await self.get(SnapshotKeys.TAX_GROUPS)],
        )

    async def save_items(self, catalog: ItemCatalog) -> bool:
        return await self.set(SnapshotKeys.ITEMS, [i.to_dict() for i in catalog.items])

    async def load_items(self) -> ItemCatalog:
        return ItemCatalog(StockItem.from_dict(i) for i in await self.get(SnapshotKeys.ITEMS))

    # =========================================================================
    # 전표 / 대사 이력
    # =========================================================================

    async def save_vouchers(self, vouchers: tuple[Voucher, ...] | list[Voucher]) -> bool:
        return await self.set(
            SnapshotKeys.VOUCHERS,
            [v.to_dict() for v in vouchers],
            updated_by="engine:posting",
        )

    async def load_vouchers(self) -> list[Voucher]:
        return [Voucher.from_dict(v) for v in await self.get(SnapshotKeys.VOUCHERS)]

    async def save_reconciliation_log(
        self,
        history: tuple[ReconciliationChange, ...] | list[ReconciliationChange],
    ) -> bool:
        return await self.set(
            SnapshotKeys.RECONCILIATION_LOG,
            [c.to_dict() for c in history],
            updated_by="engine:reconciliation",
        )

    async def load_reconciliation_log(self) -> list[ReconciliationChange]:
        return [
            ReconciliationChange.from_dict(c)
            for c in await self.get(SnapshotKeys.RECONCILIATION_LOG)
        ]
