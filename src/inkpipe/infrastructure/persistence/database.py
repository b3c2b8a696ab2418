"""SQLite storage for the file summary cache."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from inkpipe.infrastructure.persistence.models import FileSummaryModel

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"

_CACHE_TABLES = [FileSummaryModel.__table__]  # type: ignore[attr-defined]


def build_database_url(database_path: str) -> str:
    """キャッシュ DB のパスを aiosqlite の接続 URL に変換する

    Args:
        database_path: SQLite ファイルのパス、または ":memory:"

    Returns:
        SQLAlchemy 接続 URL
    """
    if database_path == MEMORY_DATABASE:
        return f"sqlite+aiosqlite:///{MEMORY_DATABASE}"
    return f"sqlite+aiosqlite:///{Path(database_path).expanduser()}"


class DatabaseManager:
    """ファイル要約キャッシュ用データベース管理

    file_summaries テーブルを保持する SQLite を扱う。
    エンジンは最初の利用時に生成し、close() で破棄する。
    close() 後に再利用すると新しいエンジンを生成する。
    """

    def __init__(self, database_path: str) -> None:
        """初期化

        Args:
            database_path: キャッシュ DB ファイルのパス
                          ":memory:" の場合は再起動で要約が消える
        """
        self._database_path = database_path
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_persistent(self) -> bool:
        """要約がプロセス終了後も残るか"""
        return self._database_path != MEMORY_DATABASE

    def get_engine(self) -> AsyncEngine:
        """非同期エンジンを取得する

        ファイル DB の場合は親ディレクトリを作成する。

        Returns:
            AsyncEngine インスタンス
        """
        if self._engine is None:
            self._engine, self._session_factory = self._open()
        return self._engine

    async def create_tables(self) -> None:
        """要約キャッシュのテーブルを作成する

        既に存在するテーブルはそのまま残す。
        """
        async with self.get_engine().begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all, tables=_CACHE_TABLES)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """キャッシュ用セッションを取得する（async context manager）

        Yields:
            AsyncSession インスタンス
        """
        if self._session_factory is None:
            self._engine, self._session_factory = self._open()
        async with self._session_factory() as session:
            yield session

    async def close(self) -> None:
        """エンジンを破棄して接続を閉じる"""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._session_factory = None

    def _open(self) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
        """エンジンとセッションファクトリを生成する（内部用）"""
        if self.is_persistent:
            Path(self._database_path).expanduser().parent.mkdir(
                parents=True, exist_ok=True
            )
        url = build_database_url(self._database_path)
        logger.debug("Opening file summary cache database: %s", url)
        engine = create_async_engine(url)
        return engine, async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
