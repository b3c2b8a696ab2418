"""SQLModel table definitions."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from inkpipe.infrastructure.persistence.datetime_utils import utc_now


class FileSummaryModel(SQLModel, table=True):
    """ファイル要約キャッシュテーブル"""

    __tablename__ = "file_summaries"

    id: int | None = Field(default=None, primary_key=True)
    file_path: str = Field(unique=True, index=True)
    content: str
    cached_at: datetime = Field(default_factory=utc_now)
