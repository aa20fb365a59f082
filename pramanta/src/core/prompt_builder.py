"""
Pramanta - Prompt Builder
==========================
Augmentation step: merges a category template, the cleaned records and
the user query into the single prompt sent to Gemini.

The query is embedded verbatim.  Nothing here escapes or filters it,
so a template should tell the model to treat the question as data.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from pramanta.config.prompt_templates import DATA_PLACEHOLDER, QUERY_PLACEHOLDER
from pramanta.src.core.exceptions import TemplateError
from pramanta.src.core.schemas import Record


def serialize_records(records: Sequence[Record]) -> str:
    """Order-preserving, human-readable JSON dump of *records*."""
    return json.dumps(list(records), ensure_ascii=False, indent=2)


def render_prompt(template: str, records: Sequence[Record], query: str) -> str:
    """
    Substitute the first data placeholder, then the first query placeholder.

    The data placeholder is filled first so that a query which happens
    to contain ``{CSV_DATA_GOES_HERE}`` is never expanded.
    """
    prompt = template.replace(DATA_PLACEHOLDER, serialize_records(records), 1)
    return prompt.replace(QUERY_PLACEHOLDER, query, 1)


def read_template(template_path: Path, category: str | None = None) -> str:
    """Read a UTF-8 template, wrapping any I/O or decode failure in ``TemplateError``."""
    name = category or template_path.stem
    try:
        return template_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise TemplateError(name, f"No prompt template found for category '{name}' ({template_path.name} does not exist)") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateError(name, f"Could not read prompt template {template_path.name}: {exc}") from exc


def build_prompt(template_path: Path, records: Sequence[Record], query: str, category: str | None = None) -> str:
    """Read the template at *template_path* and render it for *query*."""
    return render_prompt(read_template(template_path, category), records, query)
