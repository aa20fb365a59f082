"""
Pramanta - Text Utilities
==========================
Helper functions for cell cleaning, price-tier normalisation and
link detection.

These utilities are consumed primarily by ``CategoryDataStore`` and
the source extractor, and should remain stateless and side-effect-free.
"""

from __future__ import annotations

import re
import unicodedata


# ── Non-printable character pattern ────────────────────────────────────
# Matches control characters (C0/C1) plus BOM, zero-width chars, soft
# hyphens and directional marks that spreadsheet exports leave behind.
_NON_PRINTABLE_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\ufeff\u200b\u200c\u200d\u200e\u200f\u00ad\u2060\ufffe]")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """
    Sanitise a single tabular cell or header.

    Steps:
        1. Unicode NFC normalisation, so Greek accented letters have one
           canonical representation.
        2. Strip non-printable / zero-width characters.
        3. Collapse whitespace runs (including newlines) to one space.
        4. Strip leading / trailing whitespace.
    """
    text = unicodedata.normalize("NFC", text)
    text = _NON_PRINTABLE_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def fold_text(text: str) -> str:
    """Lower-case *text* and drop accents (``"Μεσαίο"`` → ``"μεσαιο"``)."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


# ══════════════════════════════════════════════════════════════════════
#  PRICE TIER NORMALISATION
# ══════════════════════════════════════════════════════════════════════

PRICE_TIER_LOW = "€ (Οικονομικό)"
PRICE_TIER_MEDIUM = "€€ (Μεσαίο)"
PRICE_TIER_HIGH = "€€€ (Ακριβό)"
PRICE_TIER_UNSPECIFIED = "Δεν αναφέρεται"

PRICE_TIERS: tuple[str, ...] = (PRICE_TIER_LOW, PRICE_TIER_MEDIUM, PRICE_TIER_HIGH, PRICE_TIER_UNSPECIFIED)

_TIER_BY_LEVEL: dict[int, str] = {1: PRICE_TIER_LOW, 2: PRICE_TIER_MEDIUM, 3: PRICE_TIER_HIGH}

# Euro sign, Latin E, Greek capital Epsilon (legacy sheets mix all three) and dollar.
_SYMBOL_RUN_RE = re.compile(r"^([€EΕ$]{1,3})\s*(?:\(.*\))?$")

_TIER_WORDS: dict[str, int] = {
    "low": 1, "cheap": 1, "budget": 1, "οικονομικο": 1, "φθηνο": 1, "χαμηλο": 1,
    "medium": 2, "mid": 2, "moderate": 2, "μεσαιο": 2,
    "high": 3, "expensive": 3, "ακριβο": 3, "υψηλο": 3,
}


def normalize_price_tier(raw: str | None) -> str:
    """
    Map a raw price-range cell to one of ``PRICE_TIERS``.

    Recognised variants::

        "€€", "EE", "ΕΕ", "$$", "EE (Μεσαίο)"  → "€€ (Μεσαίο)"
        "1" / "2" / "3"                        → by level
        "cheap", "Ακριβό", "(μεσαίο)"          → by keyword

    Anything else, including ``None`` and empty cells, maps to
    ``PRICE_TIER_UNSPECIFIED``.  The function is idempotent on its own
    output.
    """
    if raw is None:
        return PRICE_TIER_UNSPECIFIED

    value = clean_text(str(raw))
    if not value:
        return PRICE_TIER_UNSPECIFIED

    match = _SYMBOL_RUN_RE.match(value.upper())
    if match:
        return _TIER_BY_LEVEL[len(match.group(1))]

    if value in ("1", "2", "3"):
        return _TIER_BY_LEVEL[int(value)]

    level = _TIER_WORDS.get(fold_text(value).strip("() "))
    if level is not None:
        return _TIER_BY_LEVEL[level]

    return PRICE_TIER_UNSPECIFIED


def is_http_url(value: str | None) -> bool:
    """True when *value* is a non-empty string with an http(s) scheme."""
    return isinstance(value, str) and value.lower().startswith(("http://", "https://"))
