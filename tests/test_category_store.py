"""Tests for the category cache and loader."""

import asyncio
import time

import pytest

from pramanta.src.core.exceptions import CategoryNotFoundError, CategoryParseError
from pramanta.src.database.category_store import CategoryCache, CategoryDataStore, normalize_record
from pramanta.src.utils.text_utils import PRICE_TIER_MEDIUM, PRICE_TIER_UNSPECIFIED, PRICE_TIERS


class TestCategoryCache:
    """Test suite for ``CategoryCache``."""

    def test_entry_valid_strictly_before_ttl(self, clock):
        cache = CategoryCache(ttl_seconds=300, clock=clock)
        records = ({"Name": "A"},)
        cache.put("food", records)

        clock.advance(299.9)
        assert cache.get("food") is records

        clock.advance(0.1)
        assert cache.get("food") is None
        assert len(cache) == 0

    def test_put_replaces_whole_entry_and_resets_timestamp(self, clock):
        cache = CategoryCache(ttl_seconds=10, clock=clock)
        cache.put("food", ({"Name": "A"},))
        clock.advance(8)
        replacement = ({"Name": "B"},)
        cache.put("food", replacement)
        clock.advance(8)
        assert cache.get("food") is replacement

    def test_invalidate(self, clock):
        cache = CategoryCache(ttl_seconds=10, clock=clock)
        cache.put("food", ())
        cache.put("stay", ())
        cache.invalidate("food")
        assert cache.get("food") is None
        assert cache.get("stay") == ()
        cache.invalidate()
        assert len(cache) == 0


class TestCategoryDataStore:
    """Test suite for ``CategoryDataStore.load``."""

    @pytest.mark.asyncio
    async def test_load_parses_and_normalises(self, store):
        records = await store.load("food")

        assert records == ({"Name": "Taverna X", "Website": "https://tavernax.example", "Εύρος_Τιμών": PRICE_TIER_MEDIUM},)

    @pytest.mark.asyncio
    async def test_second_load_within_ttl_serves_cache_without_io(self, store, data_dir):
        first = await store.load("food")
        (data_dir / "food.csv").unlink()

        second = await store.load("food")

        assert second is first

    @pytest.mark.asyncio
    async def test_load_after_ttl_rereads_changed_file(self, store, data_dir, clock):
        await store.load("food")
        (data_dir / "food.csv").write_text("Name;Website\nTaverna Y;https://y.example\n", encoding="utf-8")

        clock.advance(60)
        assert (await store.load("food"))[0]["Name"] == "Taverna X"

        clock.advance(300)
        reloaded = await store.load("food")
        assert reloaded[0]["Name"] == "Taverna Y"

    @pytest.mark.asyncio
    async def test_missing_category_raises_not_found(self, store):
        with pytest.raises(CategoryNotFoundError) as exc_info:
            await store.load("drinks")

        assert "drinks.csv" in exc_info.value.message
        assert exc_info.value.category == "drinks"

    @pytest.mark.asyncio
    async def test_unknown_categories_do_not_accumulate_locks(self, store):
        for i in range(200):
            with pytest.raises(CategoryNotFoundError):
                await store.load(f"nope{i}")

        assert store._locks == {}

        await store.load("food")
        assert list(store._locks) == ["food"]

    @pytest.mark.asyncio
    async def test_failed_load_is_not_cached(self, store, data_dir):
        with pytest.raises(CategoryNotFoundError):
            await store.load("drinks")

        (data_dir / "drinks.csv").write_text("Name\nOuzeri\n", encoding="utf-8")
        records = await store.load("drinks")
        assert records[0]["Name"] == "Ouzeri"

    @pytest.mark.asyncio
    async def test_ragged_rows_raise_parse_error(self, store, data_dir):
        (data_dir / "bad.csv").write_text("Name;Website\nA;http://a.example\nB;http://b.example;x;y\n", encoding="utf-8")

        with pytest.raises(CategoryParseError):
            await store.load("bad")

    @pytest.mark.asyncio
    async def test_trailing_delimiter_keeps_columns_aligned(self, store, data_dir):
        (data_dir / "bar.csv").write_text("Name;Website\nTaverna X;https://x.example;\nOuzeri;https://o.example;\n", encoding="utf-8")

        records = await store.load("bar")

        assert [r["Name"] for r in records] == ["Taverna X", "Ouzeri"]
        assert records[0]["Website"] == "https://x.example"
        assert records[1]["Website"] == "https://o.example"

    @pytest.mark.asyncio
    async def test_invalid_utf8_raises_parse_error(self, store, data_dir):
        (data_dir / "bad.csv").write_bytes(b"Name;Website\n\xff\xfe\xfa;x\n")

        with pytest.raises(CategoryParseError):
            await store.load("bad")

    @pytest.mark.asyncio
    async def test_empty_file_has_no_records(self, store, data_dir):
        (data_dir / "empty.csv").write_text("", encoding="utf-8")

        assert await store.load("empty") == ()

    @pytest.mark.asyncio
    async def test_bom_blank_cells_and_short_rows(self, store, data_dir):
        (data_dir / "stay.csv").write_text("\ufeffName ; Website;Social_Media;Εύρος_Τιμών\nHotel A;;;€€€\nHotel B;https://b.example\n", encoding="utf-8")

        records = await store.load("stay")

        assert [r["Name"] for r in records] == ["Hotel A", "Hotel B"]
        assert records[0]["Website"] == ""
        assert records[1]["Social_Media"] == ""
        assert all(r["Εύρος_Τιμών"] in PRICE_TIERS for r in records)
        assert records[1]["Εύρος_Τιμών"] == PRICE_TIER_UNSPECIFIED

    @pytest.mark.asyncio
    async def test_price_field_added_when_column_missing(self, store, data_dir):
        (data_dir / "walks.csv").write_text("Name;Website\nTrail;https://trail.example\n", encoding="utf-8")

        records = await store.load("walks")

        assert records[0]["Εύρος_Τιμών"] == PRICE_TIER_UNSPECIFIED

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_read(self, store, monkeypatch):
        original = CategoryDataStore.read_records
        calls = []

        def slow_read(self, category):
            calls.append(category)
            time.sleep(0.05)
            return original(self, category)

        monkeypatch.setattr(CategoryDataStore, "read_records", slow_read)

        results = await asyncio.gather(*(store.load("food") for _ in range(5)))

        assert calls == ["food"]
        assert all(r is results[0] for r in results)

    def test_list_categories(self, store, data_dir):
        (data_dir / "stay.csv").write_text("Name\n", encoding="utf-8")
        (data_dir / "not valid.csv").write_text("Name\n", encoding="utf-8")
        (data_dir / "notes.md").write_text("x", encoding="utf-8")

        assert store.list_categories() == ["food", "stay"]


def test_normalize_record_cleans_keys_and_values():
    record = normalize_record({" Name ": "  Taverna\u200b X ", "Website": float("nan"), "Εύρος_Τιμών": "ΕΕ"})

    assert record == {"Name": "Taverna X", "Website": "", "Εύρος_Τιμών": PRICE_TIER_MEDIUM}
