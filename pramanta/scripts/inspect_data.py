"""
Pramanta - Category Data Audit
===============================
CLI entry point that loads every category sheet exactly the way the
server does and reports what the model will actually see:

    1. Parse + clean ``<category>.csv`` through ``CategoryDataStore``.
    2. Check ``<category>.txt`` exists and carries each placeholder once.
    3. Print record counts, price-tier distribution and link coverage.

Exits with status 1 if any category has a problem, so it can gate a
data update in CI.

Usage:
    python -m pramanta.scripts.inspect_data                   # all categories
    python -m pramanta.scripts.inspect_data --category food
    python -m pramanta.scripts.inspect_data --data-dir ./data
"""

from __future__ import annotations

import argparse
import sys
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

# ── Ensure project root is importable when run directly ────────────────
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from pramanta.config.prompt_templates import DATA_PLACEHOLDER, QUERY_PLACEHOLDER  # noqa: E402
from pramanta.src.core.exceptions import PramantaError  # noqa: E402
from pramanta.src.core.prompt_builder import read_template  # noqa: E402
from pramanta.src.core.schemas import NAME_FIELD, PRICE_FIELD, SOCIAL_MEDIA_FIELD, WEBSITE_FIELD  # noqa: E402
from pramanta.src.database.category_store import CategoryDataStore  # noqa: E402
from pramanta.src.utils.logger import get_logger  # noqa: E402
from pramanta.src.utils.text_utils import PRICE_TIERS, is_http_url  # noqa: E402

logger = get_logger(__name__)


@dataclass
class CategoryAudit:
    """Summary of one category's sheet and template."""

    category: str
    record_count: int = 0
    price_tiers: Counter[str] = field(default_factory=Counter)
    with_website: int = 0
    with_social: int = 0
    unnamed: int = 0
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.problems


def audit_category(store: CategoryDataStore, category: str) -> CategoryAudit:
    """Load *category* without the cache and collect counts and problems."""
    audit = CategoryAudit(category=category)

    try:
        records = store.read_records(category)
    except PramantaError as exc:
        audit.problems.append(exc.message)
        records = ()

    audit.record_count = len(records)
    for record in records:
        audit.price_tiers[record[PRICE_FIELD]] += 1
        if not record.get(NAME_FIELD):
            audit.unnamed += 1
        if is_http_url(record.get(WEBSITE_FIELD)):
            audit.with_website += 1
        if is_http_url(record.get(SOCIAL_MEDIA_FIELD)):
            audit.with_social += 1

    if records and NAME_FIELD not in records[0]:
        audit.problems.append(f"Header has no '{NAME_FIELD}' column — no sources can ever be linked.")

    try:
        template = read_template(store.template_path(category), category)
    except PramantaError as exc:
        audit.problems.append(exc.message)
    else:
        for token in (DATA_PLACEHOLDER, QUERY_PLACEHOLDER):
            occurrences = template.count(token)
            if occurrences != 1:
                audit.problems.append(f"Template must contain {token} exactly once (found {occurrences}).")

    return audit


# ── CLI Argument Parsing ───────────────────────────────────────────────

def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="inspect_data", description="Pramanta — audit category sheets and prompt templates.")
    parser.add_argument("--category", default=None, help="Audit a single category (default: every <name>.csv in the data dir).")
    parser.add_argument("--data-dir", type=Path, default=None, help="Override settings.DATA_DIR.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    t_start = time.perf_counter()

    store = CategoryDataStore(data_dir=args.data_dir)
    categories = [args.category] if args.category else store.list_categories()

    if not categories:
        logger.warning("No category sheets found in %s", store.data_dir)
        return 1

    audits = [audit_category(store, name) for name in categories]
    _print_report(store.data_dir, audits, time.perf_counter() - t_start)
    return 0 if all(a.ok for a in audits) else 1


# ── Pretty-print helpers ──────────────────────────────────────────────

def _print_report(data_dir: Path, audits: list[CategoryAudit], elapsed: float) -> None:
    print()
    print("=" * 60)
    print("  PRAMANTA — Category Data Audit")
    print(f"  Data dir : {data_dir}")
    print("=" * 60)

    for audit in audits:
        status = "OK" if audit.ok else "PROBLEMS"
        print()
        print(f"  [{status}] {audit.category}")
        print("-" * 60)
        print(f"  Records              : {audit.record_count}")
        print(f"  Unnamed records      : {audit.unnamed}")
        print(f"  With website link    : {audit.with_website}")
        print(f"  With social link     : {audit.with_social}")
        for tier in PRICE_TIERS:
            print(f"  {tier:<21}: {audit.price_tiers.get(tier, 0)}")
        for problem in audit.problems:
            print(f"  ✗ {problem}")

    print()
    print("=" * 60)
    print(f"  {sum(a.ok for a in audits)}/{len(audits)} categories OK in {elapsed:.2f}s")
    print("=" * 60)
    print()


# ── Entry point ────────────────────────────────────────────────────────

if __name__ == "__main__":
    sys.exit(main())
