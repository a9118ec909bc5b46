from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from cv_analyzer.analysis import (
    CompositeRating,
    KeywordScore,
    Rubric,
    StructureScore,
    annotate,
    format_score,
    normalize_text,
    rate,
    score_keywords,
    score_structure,
)
from cv_analyzer.schemas.analysis import AnalysisResponse, AnalysisResults
from cv_analyzer.schemas.cv import CVRecord
from cv_analyzer.storage import CVStore

logger = logging.getLogger(__name__)

ANALYSIS_COMPLETE_MESSAGE = "CV analysis complete."
ATS_APPROVED_STATUS = "ATS Approved"
ATS_NOT_APPROVED_STATUS = "Not ATS Approved"
PASS_FEEDBACK = "Great job! Your CV includes all the expected keywords and sections."
FAIL_FEEDBACK = (
    "Your CV is missing some keywords or sections. "
    "Review the highlighted issues and add the missing content to improve your ATS score."
)


@dataclass(frozen=True)
class CVEvaluation:
    """Scores and annotation for one text, before persistence."""

    keywords: KeywordScore
    structure: StructureScore
    rating: CompositeRating
    annotated: str


def evaluate_cv(text: str, rubric: Rubric) -> CVEvaluation:
    normalized = normalize_text(text)
    keywords = score_keywords(normalized, rubric.keywords)
    structure = score_structure(normalized, rubric.sections)
    rating = rate(keywords, structure)
    annotated = annotate(normalized, rubric, keywords.missing, structure.missing)
    return CVEvaluation(keywords=keywords, structure=structure, rating=rating, annotated=annotated)


def build_response(evaluation: CVEvaluation, record: CVRecord) -> AnalysisResponse:
    rating = evaluation.rating
    results = AnalysisResults(
        total_keywords=evaluation.keywords.total,
        matched_keywords=evaluation.keywords.matched,
        missing_keywords=list(evaluation.keywords.missing),
        missing_sections=list(evaluation.structure.missing),
        structure_checks=dict(evaluation.structure.checks),
        overall_score=format_score(rating.overall),
        is_ats_approved=rating.is_ats_approved,
        cv_id=record.id,
        filename=record.filename,
    )
    return AnalysisResponse(
        message=ANALYSIS_COMPLETE_MESSAGE,
        score=format_score(evaluation.keywords.score),
        structure_score=format_score(evaluation.structure.score),
        results=results,
        issues_highlighted=evaluation.annotated,
        ats_status=ATS_APPROVED_STATUS if rating.is_ats_approved else ATS_NOT_APPROVED_STATUS,
        failed_checks=rating.failed_checks,
        feedback=FAIL_FEEDBACK if rating.failed_checks else PASS_FEEDBACK,
    )


async def analyze_cv(
    text: str,
    *,
    user_id: str,
    filename: str,
    store: CVStore,
    rubric: Rubric,
) -> AnalysisResponse:
    """Score, annotate and persist a CV.

    A store failure propagates unchanged; no response is built for a CV
    that has no durable id.
    """
    evaluation = evaluate_cv(text, rubric)
    record = await asyncio.to_thread(store.create, user_id, filename, normalize_text(text))
    response = build_response(evaluation, record)
    logger.info(
        "cv_analysis_complete cv_id=%s keyword_score=%s structure_score=%s overall=%s approved=%s",
        record.id,
        response.score,
        response.structure_score,
        response.results.overall_score,
        response.results.is_ats_approved,
    )
    return response
