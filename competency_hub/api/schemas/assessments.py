from __future__ import annotations

from datetime import datetime

from competency_hub.domain.models import AssessmentKind, AssessmentStatus
from pydantic import BaseModel, Field


class RaterScoreIn(BaseModel):
    rater_id: str | None = Field(
        None, description="Defaults to the authenticated user when omitted"
    )
    competency_id: str
    score: float
    comment: str = ""


class AssessmentDraftRequest(BaseModel):
    subject_id: str | None = Field(
        None, description="Assessed employee; defaults to the caller for self assessments"
    )
    kind: AssessmentKind
    competency_ids: list[str] = Field(..., min_length=1)
    scores: list[RaterScoreIn] = Field(default_factory=list)
    consensus_comments: dict[str, str] = Field(default_factory=dict)
    status: AssessmentStatus | None = None
    overall_rating_seed: float | None = Field(
        None, description="Placeholder overall rating shown before any competency is rated"
    )


class AssessmentUpdateRequest(BaseModel):
    competency_ids: list[str] = Field(..., min_length=1)
    scores: list[RaterScoreIn] = Field(default_factory=list)
    consensus_comments: dict[str, str] = Field(default_factory=dict)
    status: AssessmentStatus | None = None


class AssessmentStatusUpdate(BaseModel):
    status: AssessmentStatus


class RaterScoreOut(BaseModel):
    rater_id: str
    competency_id: str
    score: float
    comment: str = ""


class CompetencyConsensusOut(BaseModel):
    competency_id: str
    score: float
    comment: str = ""


class AssessmentPreviewResponse(BaseModel):
    kind: AssessmentKind
    scale: str
    consensus: list[CompetencyConsensusOut]
    overall_rating: float
    progress: int


class AssessmentDetail(BaseModel):
    id: str
    subject_id: str
    kind: AssessmentKind
    status: AssessmentStatus
    overall_rating: float
    progress: int
    locked: bool
    competency_ids: list[str]
    scores: list[RaterScoreOut]
    consensus: list[CompetencyConsensusOut]
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AssessmentsResponse(BaseModel):
    assessments: list[AssessmentDetail]
