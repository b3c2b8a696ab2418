"""Tests for SQLiteFileSummaryCache."""

from datetime import timezone
from pathlib import Path

import pytest

from inkpipe.infrastructure.persistence import (
    DatabaseManager,
    SQLiteFileSummaryCache,
)


@pytest.fixture
async def db_manager() -> DatabaseManager:
    """Create an in-memory database manager."""
    manager = DatabaseManager(":memory:")
    await manager.create_tables()
    return manager


@pytest.fixture
def cache(db_manager: DatabaseManager) -> SQLiteFileSummaryCache:
    """Create a cache instance."""
    return SQLiteFileSummaryCache(db_manager.get_session)


class TestReadWrite:
    """Tests for read and write."""

    async def test_read_missing(self, cache: SQLiteFileSummaryCache) -> None:
        assert await cache.read("/nowhere.md") is None

    async def test_write_then_read(self, cache: SQLiteFileSummaryCache) -> None:
        await cache.write("/abs/report.md", "digest")

        result = await cache.read("/abs/report.md")

        assert result is not None
        assert result.content == "digest"
        assert result.cached_at.tzinfo == timezone.utc

    async def test_write_overwrites(self, cache: SQLiteFileSummaryCache) -> None:
        """Writing the same path replaces the digest and refreshes the time."""
        await cache.write("/abs/report.md", "old")
        first = await cache.read("/abs/report.md")

        await cache.write("/abs/report.md", "new")
        second = await cache.read("/abs/report.md")

        assert first is not None and second is not None
        assert second.content == "new"
        assert second.cached_at >= first.cached_at

    async def test_paths_are_independent(self, cache: SQLiteFileSummaryCache) -> None:
        await cache.write("/a.md", "A")
        await cache.write("/b.md", "B")

        a = await cache.read("/a.md")
        b = await cache.read("/b.md")

        assert a is not None and a.content == "A"
        assert b is not None and b.content == "B"

    async def test_persists_across_managers(self, tmp_path: Path) -> None:
        """Digests survive a restart when stored in a file."""
        db_path = str(tmp_path / "cache.db")
        first = DatabaseManager(db_path)
        await first.create_tables()
        await SQLiteFileSummaryCache(first.get_session).write("/a.md", "A")
        await first.close()

        second = DatabaseManager(db_path)
        result = await SQLiteFileSummaryCache(second.get_session).read("/a.md")
        await second.close()

        assert result is not None
        assert result.content == "A"


class TestInvalidation:
    """Tests for delete and clear."""

    async def test_delete(self, cache: SQLiteFileSummaryCache) -> None:
        await cache.write("/a.md", "A")

        assert await cache.delete("/a.md") is True
        assert await cache.read("/a.md") is None
        assert await cache.delete("/a.md") is False

    async def test_clear(self, cache: SQLiteFileSummaryCache) -> None:
        await cache.write("/a.md", "A")
        await cache.write("/b.md", "B")

        assert await cache.clear() == 2
        assert await cache.read("/a.md") is None
