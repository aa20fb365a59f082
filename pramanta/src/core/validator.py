"""
Pramanta - Input Validation
============================
Side-effect-free gate run before any file or model I/O.

The category becomes part of a filesystem path, so it is restricted to
identifier characters; this is what blocks ``"../etc/passwd"``.
"""

from __future__ import annotations

import re

from pramanta.config.settings import settings

_CATEGORY_RE = re.compile(r"[A-Za-z0-9_-]+")


def is_valid_category(category: object) -> bool:
    """True for a non-empty string made only of letters, digits, ``-`` and ``_``."""
    return isinstance(category, str) and _CATEGORY_RE.fullmatch(category) is not None


def validate_basic_input(category: object, query: object, max_length: int | None = None) -> bool:
    """
    Check a ``(category, query)`` pair from an untrusted client.

    Rules:
        • ``category`` — see ``is_valid_category``.
        • ``query`` — a string that is not blank once trimmed and whose
          *raw* length is at most ``max_length`` (default
          ``settings.MAX_QUERY_LENGTH``).
    """
    limit = settings.MAX_QUERY_LENGTH if max_length is None else max_length

    if not is_valid_category(category):
        return False

    if not isinstance(query, str):
        return False

    if not query.strip():
        return False

    return len(query) <= limit
