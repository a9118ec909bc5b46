from __future__ import annotations

from dataclasses import dataclass

from .matching import has_section
from .rubric import SectionSpec


@dataclass(frozen=True)
class StructureScore:
    checks: dict[str, bool]
    missing: tuple[str, ...]
    score: float


def score_structure(text: str, sections: tuple[SectionSpec, ...] | list[SectionSpec]) -> StructureScore:
    checks = {section.id: has_section(text, section) for section in sections}
    missing = tuple(section.id for section in sections if not checks[section.id])
    present = len(sections) - len(missing)
    score = (present / len(sections)) * 100 if sections else 0.0
    return StructureScore(checks=checks, missing=missing, score=score)
