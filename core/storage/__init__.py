"""
스토리지 모듈

마스터/전표 스냅샷 저장소 제공
"""

from core.storage.snapshot_store import SnapshotStore

__all__ = [
    "SnapshotStore",
]
