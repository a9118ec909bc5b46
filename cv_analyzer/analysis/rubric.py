from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from cv_analyzer.core.config import settings

_DEFAULT_RUBRIC_PATH = Path(__file__).with_name("rubric.yaml")


@dataclass(frozen=True)
class SectionSpec:
    id: str
    pattern: re.Pattern[str]
    placeholder: str
    title: str = ""

    @property
    def display_name(self) -> str:
        if self.title:
            return self.title
        spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", self.id)
        return spaced[:1].upper() + spaced[1:]


@dataclass(frozen=True)
class Rubric:
    """Keyword vocabulary plus ordered section specs, shared read-only by every analysis."""

    keywords: tuple[str, ...]
    sections: tuple[SectionSpec, ...]

    @property
    def section_ids(self) -> tuple[str, ...]:
        return tuple(section.id for section in self.sections)


def build_section(
    section_id: str,
    pattern: str,
    placeholder: str = "",
    title: str = "",
) -> SectionSpec:
    try:
        compiled = re.compile(f"(?:{pattern})", re.IGNORECASE)
    except re.error as exc:
        raise RuntimeError(f"Invalid pattern for section '{section_id}': {exc}") from exc
    if compiled.fullmatch(""):
        raise RuntimeError(f"Invalid pattern for section '{section_id}': it matches the empty string.")
    return SectionSpec(id=section_id, pattern=compiled, placeholder=placeholder, title=title)


def _parse_rubric(parsed: Any, source: Path) -> Rubric:
    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid rubric '{source}': expected a top-level mapping.")

    raw_keywords = parsed.get("keywords") or []
    raw_sections = parsed.get("sections") or []
    if not isinstance(raw_keywords, list) or not isinstance(raw_sections, list):
        raise RuntimeError(f"Invalid rubric '{source}': 'keywords' and 'sections' must be lists.")

    # Duplicates are kept as authored; they count twice in the denominator.
    for index, item in enumerate(raw_keywords):
        if not isinstance(item, str) or not item.strip():
            raise RuntimeError(f"Invalid rubric '{source}': keyword #{index} must be a non-empty string.")
    keywords = tuple(raw_keywords)

    sections: list[SectionSpec] = []
    seen: set[str] = set()
    for index, item in enumerate(raw_sections):
        if not isinstance(item, dict) or not item.get("id") or not item.get("pattern"):
            raise RuntimeError(f"Invalid rubric '{source}': section #{index} needs 'id' and 'pattern'.")
        section_id = str(item["id"]).strip()
        if section_id in seen:
            raise RuntimeError(f"Invalid rubric '{source}': duplicate section id '{section_id}'.")
        seen.add(section_id)
        sections.append(
            build_section(
                section_id,
                str(item["pattern"]),
                placeholder=str(item.get("placeholder") or "").strip(),
                title=str(item.get("title") or "").strip(),
            )
        )

    return Rubric(keywords=keywords, sections=tuple(sections))


def load_rubric(path: str | Path | None = None) -> Rubric:
    source = Path(path) if path else _DEFAULT_RUBRIC_PATH
    if not source.exists():
        raise RuntimeError(f"Rubric file not found at '{source}'.")

    try:
        raw = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read rubric '{source}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in rubric '{source}': {exc}") from exc

    return _parse_rubric(parsed, source)


@lru_cache(maxsize=1)
def get_default_rubric() -> Rubric:
    return load_rubric(settings.rubric_path)
