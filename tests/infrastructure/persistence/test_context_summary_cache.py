"""Tests for InMemoryContextSummaryCache."""

from collections.abc import Callable

from inkpipe.infrastructure.persistence import InMemoryContextSummaryCache


class TestInMemoryContextSummaryCache:
    """InMemoryContextSummaryCache tests."""

    async def test_get_missing(self) -> None:
        assert await InMemoryContextSummaryCache().get("default") is None

    async def test_save_and_get(self, make_summary_entry: Callable) -> None:
        cache = InMemoryContextSummaryCache()
        entry = make_summary_entry(["m1", "m2"], total=40)

        await cache.save("conv", entry)
        stored = await cache.get("conv")

        assert stored is not None
        assert stored.summarized_message_ids == ("m1", "m2")
        assert stored.last_message_id == "m2"
        assert stored.total_chars == 40

    async def test_saved_message_is_detached(self, make_summary_entry: Callable) -> None:
        """Later edits to the caller's message do not reach the cache."""
        cache = InMemoryContextSummaryCache()
        entry = make_summary_entry(["m1"])

        await cache.save("conv", entry)
        entry.summary_message.content = "edited"

        stored = await cache.get("conv")
        assert stored is not None
        assert stored.summary_message.content != "edited"

    async def test_delete_and_clear(self, make_summary_entry: Callable) -> None:
        cache = InMemoryContextSummaryCache()
        await cache.save("a", make_summary_entry(["m1"]))
        await cache.save("b", make_summary_entry(["m1", "m2"]))

        await cache.delete("a")
        await cache.delete("missing")
        assert await cache.get("a") is None
        assert await cache.get("b") is not None

        await cache.clear()
        assert await cache.get("b") is None
