"""
SQLite 어댑터

쓰기 연결은 WAL 모드, 점검용 연결은 읽기 전용 URI로 연다.
SnapshotStore가 마스터/전표 스냅샷을 저장하는 데 사용.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, AsyncIterator

import aiosqlite

from core.constants import Paths

if TYPE_CHECKING:
    from core.config.loader import EngineSettings

logger = logging.getLogger(__name__)


def get_db_path(settings: "EngineSettings | None" = None) -> Path:
    """설정에 따른 DB 경로 반환

    Args:
        settings: 엔진 설정 (None이면 기본 경로)

    Returns:
        DB 파일 경로 (Path 타입)
    """
    if settings is None:
        return Paths.DB_FILE
    return settings.db_path


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성

    쓰기 연결은 WAL 모드로 열고 상위 디렉토리를 만든다.
    읽기 전용 연결은 기존 파일만 열며 journal 설정을 바꾸지 않는다.

    Args:
        db_path: DB 파일 경로
        readonly: 읽기 전용 여부 (점검/보고서 스크립트용)

    Raises:
        FileNotFoundError: 읽기 전용인데 DB 파일이 없는 경우
    """
    db_path = Path(db_path)

    if readonly:
        if not db_path.exists():
            raise FileNotFoundError(f"DB 파일을 찾을 수 없습니다: {db_path}")
        conn = await aiosqlite.connect(f"{db_path.resolve().as_uri()}?mode=ro", uri=True)
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(db_path))
        await conn.execute("PRAGMA journal_mode=WAL")

    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    logger.info(f"SQLite 연결 생성: {db_path} (readonly={readonly})")
    return conn


class SQLiteAdapter:
    """스냅샷 DB 연결

    SnapshotStore의 UPSERT는 transaction()으로 묶고,
    scripts/check_db.py 같은 점검 스크립트는 readonly=True로 연다.

    Args:
        db_path: DB 파일 경로 (":memory:" 허용)
        readonly: 읽기 전용 여부
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchall()

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        try:
            yield self._conn
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    # snapshot_store (키별 JSON 스냅샷)
    await adapter.execute("""
        CREATE TABLE IF NOT EXISTS snapshot_store (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            snapshot_key TEXT NOT NULL UNIQUE,
            value_json   TEXT NOT NULL,
            version      INTEGER NOT NULL DEFAULT 1,

            updated_by   TEXT NOT NULL,
            created_at   TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at   TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    await adapter.commit()

    logger.info("스키마 초기화 완료")
