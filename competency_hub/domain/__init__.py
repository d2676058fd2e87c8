"""Domain types and services."""

from competency_hub.domain.models import (
    AssessmentDraft,
    AssessmentKind,
    AssessmentStatus,
    AssessmentSummary,
    Competency,
    CompetencyConsensus,
    RaterScore,
    RatingScale,
    Role,
    User,
)

__all__ = [
    "AssessmentDraft",
    "AssessmentKind",
    "AssessmentStatus",
    "AssessmentSummary",
    "Competency",
    "CompetencyConsensus",
    "RaterScore",
    "RatingScale",
    "Role",
    "User",
]
