from __future__ import annotations

from dataclasses import dataclass

from .keywords import KeywordScore
from .structure import StructureScore

ATS_PASS_THRESHOLD = 70.0


def format_score(value: float) -> str:
    return f"{value:.2f}"


@dataclass(frozen=True)
class CompositeRating:
    overall: float
    is_ats_approved: bool
    failed_checks: bool


def rate(keywords: KeywordScore, structure: StructureScore) -> CompositeRating:
    overall = (keywords.score + structure.score) / 2
    approved = keywords.score >= ATS_PASS_THRESHOLD and structure.score >= ATS_PASS_THRESHOLD
    # Stricter than approval: any single missing keyword or section counts.
    failed = bool(keywords.missing or structure.missing)
    return CompositeRating(overall=overall, is_ats_approved=approved, failed_checks=failed)
