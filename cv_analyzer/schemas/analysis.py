from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _PayloadModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AnalysisResults(_PayloadModel):
    total_keywords: int = Field(alias="totalKeywords", ge=0)
    matched_keywords: int = Field(alias="matchedKeywords", ge=0)
    missing_keywords: list[str] = Field(alias="missingKeywords")
    missing_sections: list[str] = Field(alias="missingSections")
    structure_checks: dict[str, bool] = Field(alias="structureChecks")
    overall_score: str = Field(alias="overallScore")
    is_ats_approved: bool = Field(alias="isATSApproved")
    cv_id: int = Field(alias="cvId")
    filename: str


class AnalysisResponse(_PayloadModel):
    message: str
    score: str
    structure_score: str = Field(alias="structureScore")
    results: AnalysisResults
    issues_highlighted: str = Field(alias="issuesHighlighted")
    ats_status: str = Field(alias="atsStatus")
    failed_checks: bool = Field(alias="failedChecks")
    feedback: str
