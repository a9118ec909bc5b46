"""HTML annotation of extracted resume text.

The annotator never rewrites the source string in place. It collects match
spans over the original text, resolves overlaps once, groups list lines into
blocks and renders the result in a single pass. Generated markup is never
scanned again, so a keyword that also appears inside a tag or style attribute
cannot be wrapped twice.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Literal

from .matching import keyword_spans, section_heading_span
from .rubric import Rubric, SectionSpec

WARNING_STYLE = "background-color: #fff3cd; color: #b02a37;"
SUCCESS_STYLE = "background-color: #d1e7dd; color: #0f5132;"

SpanKind = Literal["section", "keyword"]
ListKind = Literal["ul", "ol"]

_SPAN_PRIORITY: dict[str, int] = {"section": 2, "keyword": 1}
_SPAN_OPEN_TAGS: dict[str, str] = {
    "section": f'<span class="ats-success ats-section" style="{SUCCESS_STYLE}">',
    "keyword": f'<span class="ats-warning ats-keyword" style="{WARNING_STYLE}">',
}

_BULLET_LINE_RE = re.compile(r"^\s*(?:•\s*|[-*]\s+)\S")
_NUMBERED_LINE_RE = re.compile(r"^\s*\d+\.\s+\S")
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Span:
    start: int
    end: int
    kind: SpanKind


@dataclass(frozen=True)
class _Line:
    start: int
    end: int
    ending: str
    list_kind: ListKind | None


def _escape(value: str) -> str:
    return html.escape(value, quote=False)


def collect_spans(
    text: str,
    sections: Iterable[SectionSpec],
    missing_keywords: Iterable[str],
) -> list[Span]:
    """Collect heading spans for present sections and hits for missing keywords."""
    spans: list[Span] = []
    for section in sections:
        heading = section_heading_span(text, section)
        if heading is not None:
            spans.append(Span(heading[0], heading[1], "section"))

    for keyword in dict.fromkeys(missing_keywords):
        for start, end in keyword_spans(text, keyword):
            spans.append(Span(start, end, "keyword"))
    return spans


def resolve_spans(spans: Iterable[Span]) -> list[Span]:
    """Drop overlapping spans, keeping section headings over keywords, then earlier over later."""
    ranked = sorted(spans, key=lambda span: (-_SPAN_PRIORITY[span.kind], span.start, -(span.end - span.start)))
    accepted: list[Span] = []
    for span in ranked:
        if any(span.start < other.end and other.start < span.end for other in accepted):
            continue
        accepted.append(span)
    return sorted(accepted, key=lambda span: span.start)


def list_kind(line: str) -> ListKind | None:
    if _BULLET_LINE_RE.match(line):
        return "ul"
    if _NUMBERED_LINE_RE.match(line):
        return "ol"
    return None


def _split_lines(text: str) -> Iterator[_Line]:
    start = 0
    for brk in _LINE_BREAK_RE.finditer(text):
        end = brk.start()
        yield _Line(start=start, end=end, ending=brk.group(), list_kind=list_kind(text[start:end]))
        start = brk.end()
    if start < len(text):
        yield _Line(start=start, end=len(text), ending="", list_kind=list_kind(text[start:]))


def _render_inline(text: str, start: int, end: int, spans: list[Span]) -> str:
    parts: list[str] = []
    cursor = start
    for span in spans:
        lo = max(span.start, start)
        hi = min(span.end, end)
        if lo >= hi:
            continue
        parts.append(_escape(text[cursor:lo]))
        parts.append(_SPAN_OPEN_TAGS[span.kind] + _escape(text[lo:hi]) + "</span>")
        cursor = hi
    parts.append(_escape(text[cursor:end]))
    return "".join(parts)


def render_body(text: str, spans: list[Span]) -> str:
    lines = list(_split_lines(text))
    parts: list[str] = []
    for index, line in enumerate(lines):
        line_spans = [span for span in spans if span.start < line.end and line.start < span.end]
        content = _render_inline(text, line.start, line.end, line_spans)
        if line.list_kind is None:
            parts.append(content + line.ending)
            continue

        # Adjacent items of the same kind share one enclosing list.
        previous = lines[index - 1].list_kind if index > 0 else None
        following = lines[index + 1].list_kind if index + 1 < len(lines) else None
        opening = f"<{line.list_kind}>" if previous != line.list_kind else ""
        closing = f"</{line.list_kind}>" if following != line.list_kind else ""
        parts.append(f"{opening}<li>{content}</li>{closing}{line.ending}")
    return "".join(parts)


def render_missing_section(section: SectionSpec) -> str:
    return (
        f'<h3 class="ats-warning ats-missing-section" style="{WARNING_STYLE}">'
        f"{_escape(section.display_name)}</h3>"
        f'<p class="ats-warning ats-placeholder" style="{WARNING_STYLE}">'
        f"{_escape(section.placeholder)}</p>"
    )


def annotate(
    text: str,
    rubric: Rubric,
    missing_keywords: Iterable[str],
    missing_sections: Iterable[str],
) -> str:
    """Render ``text`` as HTML with problem markers.

    Present section headings get a success marker, occurrences of missing
    keywords get a warning marker, bullet and numbered lines become list
    markup, and a placeholder block is appended for each missing section in
    rubric order. Stripping the markup from the body gives back ``text``.
    """
    missing = set(missing_sections)
    present = [section for section in rubric.sections if section.id not in missing]
    spans = resolve_spans(collect_spans(text, present, missing_keywords))
    body = render_body(text, spans)
    appendix = "".join(render_missing_section(section) for section in rubric.sections if section.id in missing)
    return body + appendix
