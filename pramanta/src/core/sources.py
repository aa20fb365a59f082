"""
Pramanta - Source Extraction
=============================
Post-processing step: attach clickable links for every record the
model mentioned by name.

Heuristic
---------
A record is "mentioned" when its ``Name`` occurs anywhere in the
generated text, case-insensitively (plain substring search, so
O(records × text length)).  Each mentioned record contributes **at
most one** source: its website if usable, otherwise its social-media
page.  A record with both links still yields only the website.
"""

from __future__ import annotations

from collections.abc import Sequence

from pramanta.config.prompt_templates import SOCIAL_SOURCE_TITLE, WEBSITE_SOURCE_TITLE
from pramanta.src.core.schemas import NAME_FIELD, SOCIAL_MEDIA_FIELD, WEBSITE_FIELD, Record, Source
from pramanta.src.utils.logger import get_logger
from pramanta.src.utils.text_utils import is_http_url

logger = get_logger(__name__)


def find_sources(generated_text: str, records: Sequence[Record]) -> list[Source]:
    """Return one ``Source`` per record named in *generated_text*, in record order."""
    haystack = generated_text.casefold()
    sources: list[Source] = []
    found: set[int] = set()

    for index, record in enumerate(records):
        name = record.get(NAME_FIELD, "")
        if not name or name.casefold() not in haystack:
            continue

        website = record.get(WEBSITE_FIELD)
        if is_http_url(website) and index not in found:
            sources.append(Source(title=WEBSITE_SOURCE_TITLE.format(name=name), uri=website))
            found.add(index)

        social = record.get(SOCIAL_MEDIA_FIELD)
        if is_http_url(social) and index not in found:
            sources.append(Source(title=SOCIAL_SOURCE_TITLE.format(name=name), uri=social))
            found.add(index)

    logger.info("[SOURCES] Found %d relevant link(s).", len(sources))
    return sources
