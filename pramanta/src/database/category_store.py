"""
Pramanta - CategoryDataStore
=============================
Loads the semicolon-delimited record sheet behind a category, cleans
it once, and keeps the result in a TTL cache shared by every request.

Design decisions:
  • **Explicit cache object** — ``CategoryCache`` is constructed once at
    startup and injected; nothing lives in module globals.
  • **Whole-entry replacement** — a reload swaps the cached tuple for a
    new one, so readers see either the old or the new record set.
  • **Single-flight** — concurrent misses for the same category wait
    on one per-category ``asyncio.Lock`` and share a single read.
  • **Clean on load** — cells are sanitised and the price tier is
    normalised exactly once, never at read time.
  • **Off-loop parsing** — pandas runs in a worker thread
    (``asyncio.to_thread``) so parsing never blocks the event loop.

Usage:
    store = CategoryDataStore(data_dir=settings.DATA_DIR)
    records = await store.load("food")
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from pramanta.config.settings import settings
from pramanta.src.core.exceptions import CategoryNotFoundError, CategoryParseError
from pramanta.src.core.schemas import PRICE_FIELD, Record
from pramanta.src.core.validator import is_valid_category
from pramanta.src.utils.logger import get_logger
from pramanta.src.utils.text_utils import clean_text, normalize_price_tier

logger = get_logger(__name__)

Records = tuple[Record, ...]

_DATA_SUFFIX = ".csv"
_TEMPLATE_SUFFIX = ".txt"


# ══════════════════════════════════════════════════════════════════════
#  TTL CACHE
# ══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One category's records and the monotonic time they were stored."""

    records: Records
    timestamp: float


class CategoryCache:
    """
    Process-wide category → records map with time-to-live expiry.

    An entry is valid iff ``clock() - timestamp < ttl``.  Expired
    entries are dropped on lookup and reported as absent.

    Parameters
    ----------
    ttl_seconds
        Entry lifetime.  Defaults to ``settings.CACHE_TTL_SECONDS``.
    clock
        Monotonic time source; injectable for tests.
    """

    __slots__ = ("_ttl", "_clock", "_entries")

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}


    @property
    def ttl(self) -> float:
        return self._ttl


    def get(self, category: str) -> Records | None:
        """Return the cached records for *category*, or ``None`` if absent/expired."""
        entry = self._entries.get(category)
        if entry is None:
            return None

        age = self._clock() - entry.timestamp
        if age >= self._ttl:
            logger.debug("[CACHE] '%s' expired (age %.1fs ≥ ttl %.1fs).", category, age, self._ttl)
            if self._entries.get(category) is entry:
                del self._entries[category]
            return None

        return entry.records


    def put(self, category: str, records: Records) -> None:
        """Store *records* for *category*, replacing any previous entry."""
        self._entries[category] = CacheEntry(records=records, timestamp=self._clock())


    def invalidate(self, category: str | None = None) -> None:
        """Drop one category, or every category when *category* is ``None``."""
        if category is None:
            self._entries.clear()
        else:
            self._entries.pop(category, None)


    def __len__(self) -> int:
        return len(self._entries)


# ══════════════════════════════════════════════════════════════════════
#  DATA STORE
# ══════════════════════════════════════════════════════════════════════


class CategoryDataStore:
    """
    Category-scoped record loader backed by ``<data_dir>/<category>.csv``.

    Parameters
    ----------
    data_dir
        Directory holding category sheets and prompt templates.
        Defaults to ``settings.DATA_DIR``.
    cache
        Shared ``CategoryCache``.  A fresh one is created if omitted.
    delimiter
        Column separator.  Defaults to ``settings.CSV_DELIMITER``.
    """

    __slots__ = ("_data_dir", "_cache", "_delimiter", "_locks")

    def __init__(self, data_dir: Path | None = None, cache: CategoryCache | None = None, delimiter: str | None = None) -> None:
        self._data_dir = Path(data_dir or settings.DATA_DIR)
        self._cache = cache if cache is not None else CategoryCache()
        self._delimiter = delimiter or settings.CSV_DELIMITER
        self._locks: dict[str, asyncio.Lock] = {}


    @property
    def data_dir(self) -> Path:
        return self._data_dir


    @property
    def cache(self) -> CategoryCache:
        return self._cache


    def data_path(self, category: str) -> Path:
        return self._data_dir / f"{category}{_DATA_SUFFIX}"


    def template_path(self, category: str) -> Path:
        return self._data_dir / f"{category}{_TEMPLATE_SUFFIX}"


    def list_categories(self) -> list[str]:
        """Return every category with a data sheet, sorted by name."""
        if not self._data_dir.is_dir():
            return []
        return sorted(p.stem for p in self._data_dir.glob(f"*{_DATA_SUFFIX}") if is_valid_category(p.stem))

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC ENTRY POINT
    # ══════════════════════════════════════════════════════════════════

    async def load(self, category: str) -> Records:
        """
        Return the cleaned records for *category*.

        A valid cache entry is returned without any I/O.  Otherwise the
        sheet is read (once, even under concurrent misses), cleaned,
        cached and returned.

        Raises
        ------
        CategoryNotFoundError
            The category has no data sheet.
        CategoryParseError
            The sheet is not valid UTF-8 or cannot be tokenised.
        """
        cached = self._cache.get(category)
        if cached is not None:
            logger.info("[CACHE] Hit for '%s' (%d records).", category, len(cached))
            return cached

        # Only categories with a sheet on disk get a lock.
        self._require_sheet(category)
        lock = self._locks.setdefault(category, asyncio.Lock())
        async with lock:
            cached = self._cache.get(category)
            if cached is not None:
                logger.info("[CACHE] Hit for '%s' after waiting on a concurrent load.", category)
                return cached

            logger.info("[CACHE] Miss for '%s' — reading %s", category, self.data_path(category).name)
            t_read = time.perf_counter()
            records = await asyncio.to_thread(self.read_records, category)
            self._cache.put(category, records)

        read_ms = (time.perf_counter() - t_read) * 1000
        logger.info("[CACHE] Loaded %d record(s) for '%s' in %.1fms.", len(records), category, read_ms)
        return records


    def read_records(self, category: str) -> Records:
        """Read and clean the sheet for *category*, bypassing the cache."""
        path = self._require_sheet(category)

        # index_col=False: a trailing delimiter must not shift columns into the index.
        try:
            frame = pd.read_csv(path, sep=self._delimiter, dtype=str, keep_default_na=False, encoding="utf-8-sig", skip_blank_lines=True, index_col=False)
        except pd.errors.EmptyDataError:
            logger.warning("[CACHE] %s is empty — category '%s' has no records.", path.name, category)
            return ()
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise CategoryParseError(category, f"Could not parse {path.name}: {exc}") from exc

        rows = frame.to_dict(orient="records")
        return tuple(normalize_record(row) for row in rows)


    def _require_sheet(self, category: str) -> Path:
        path = self.data_path(category)
        if not path.is_file():
            raise CategoryNotFoundError(category, f"No data found for category '{category}' ({path.name} does not exist)")
        return path


def normalize_record(row: Mapping[object, object]) -> Record:
    """
    Clean one parsed row into a ``Record``.

    Header names and string cells go through ``clean_text``; missing
    cells (short rows) become ``""``.  The price-tier field is always
    present afterwards and holds one of ``PRICE_TIERS``.
    """
    record: Record = {}
    for key, value in row.items():
        record[clean_text(str(key))] = clean_text(value) if isinstance(value, str) else ""

    record[PRICE_FIELD] = normalize_price_tier(record.get(PRICE_FIELD))
    return record
