"""SQLite implementation of FileSummaryCache."""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from inkpipe.domain.entities.cache_entry import SummaryCacheResult
from inkpipe.infrastructure.persistence.datetime_utils import normalize_to_utc, utc_now
from inkpipe.infrastructure.persistence.exceptions import DatabaseError
from inkpipe.infrastructure.persistence.models import FileSummaryModel

logger = logging.getLogger(__name__)


class SQLiteFileSummaryCache:
    """SQLite 版 FileSummaryCache 実装

    ファイルの絶対パスをキーに要約を永続化する。
    SQLAlchemy のエラーは DatabaseError に変換して送出する。
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
    ) -> None:
        """初期化

        Args:
            session_factory: 非同期セッション生成関数
        """
        self._session_factory = session_factory

    async def read(self, file_path: str) -> SummaryCacheResult | None:
        """要約を読み込む

        Args:
            file_path: ファイルの絶対パス

        Returns:
            キャッシュ（存在しない場合は None）

        Raises:
            DatabaseError: データベース操作に失敗
        """
        try:
            async with self._session_factory() as session:
                model = await self._find_model(session, file_path)
                if model is None:
                    return None
                return self._to_entity(model)
        except SQLAlchemyError as e:
            raise DatabaseError("read", file_path, str(e)) from e

    async def write(self, file_path: str, content: str) -> None:
        """要約を保存（upsert）

        同じパスのレコードは本文とキャッシュ日時を更新する。

        Args:
            file_path: ファイルの絶対パス
            content: 要約本文

        Raises:
            DatabaseError: データベース操作に失敗
        """
        try:
            async with self._session_factory() as session:
                existing = await self._find_model(session, file_path)
                if existing:
                    existing.content = content
                    existing.cached_at = utc_now()
                    session.add(existing)
                else:
                    session.add(FileSummaryModel(file_path=file_path, content=content))
                await session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("write", file_path, str(e)) from e

        logger.debug("Cached file summary: %s (%d chars)", file_path, len(content))

    async def delete(self, file_path: str) -> bool:
        """要約を削除（手動失効）

        Args:
            file_path: ファイルの絶対パス

        Returns:
            削除した場合 True
        """
        try:
            async with self._session_factory() as session:
                model = await self._find_model(session, file_path)
                if model is None:
                    return False
                await session.delete(model)
                await session.commit()
                return True
        except SQLAlchemyError as e:
            raise DatabaseError("delete", file_path, str(e)) from e

    async def clear(self) -> int:
        """全要約を削除

        Returns:
            削除したレコード数
        """
        try:
            async with self._session_factory() as session:
                result = await session.exec(select(FileSummaryModel))
                models = result.all()
                for model in models:
                    await session.delete(model)
                await session.commit()
                return len(models)
        except SQLAlchemyError as e:
            raise DatabaseError("clear", None, str(e)) from e

    async def _find_model(
        self, session: AsyncSession, file_path: str
    ) -> FileSummaryModel | None:
        """パスでモデルを検索（内部用）"""
        statement = select(FileSummaryModel).where(
            FileSummaryModel.file_path == file_path
        )
        result = await session.exec(statement)
        return result.first()

    def _to_entity(self, model: FileSummaryModel) -> SummaryCacheResult:
        return SummaryCacheResult(
            content=model.content,
            cached_at=normalize_to_utc(model.cached_at),
        )
