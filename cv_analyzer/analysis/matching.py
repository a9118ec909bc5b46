from __future__ import annotations

import re
from functools import lru_cache

from .rubric import SectionSpec


def normalize_text(text: str | None) -> str:
    """Boundary between extraction and scoring. Text is passed through untouched."""
    return text or ""


@lru_cache(maxsize=512)
def keyword_pattern(keyword: str) -> re.Pattern[str]:
    # Boundaries only at the outer edges, so "UX/UI designer" or "Node.js" stay intact.
    return re.compile(rf"(?<!\w){re.escape(keyword)}(?!\w)", re.IGNORECASE)


def contains_keyword(text: str, keyword: str) -> bool:
    return keyword_pattern(keyword).search(text) is not None


def keyword_spans(text: str, keyword: str) -> list[tuple[int, int]]:
    return [match.span() for match in keyword_pattern(keyword).finditer(text)]


def section_heading_span(text: str, section: SectionSpec) -> tuple[int, int] | None:
    match = section.pattern.search(text)
    if match is None or match.start() == match.end():
        return None
    return match.span()


def has_section(text: str, section: SectionSpec) -> bool:
    return section_heading_span(text, section) is not None
