from __future__ import annotations

from pydantic import BaseModel, Field


class CompetencyGapOut(BaseModel):
    competency_id: str
    self_rating: float
    assessor_rating: float
    gap: float | None = Field(None, description="Assessor rating minus self rating")
    self_count: int
    assessor_count: int


class GapAnalysisResponse(BaseModel):
    subject_id: str | None = Field(None, description="None for the organization-wide view")
    average_self_rating: float
    average_assessor_rating: float
    average_gap: float | None = None
    largest_gap: float | None = None
    largest_gap_competency_id: str | None = None
    overestimating: bool
    agreement_percentage: float | None = None
    competencies: list[CompetencyGapOut]
