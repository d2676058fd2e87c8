"""Domain services."""

from competency_hub.domain.services.aggregation import (
    AssessmentAggregator,
    ValidationError,
    ValidationErrorKind,
)
from competency_hub.domain.services.assessments import (
    AssessmentLockedError,
    AssessmentNotFoundError,
    AssessmentRecord,
    AssessmentService,
    InvalidStatusError,
)
from competency_hub.domain.services.competencies import (
    CompetencyCatalog,
    CompetencyExistsError,
)
from competency_hub.domain.services.gap_analysis import CompetencyGap, GapAnalyzer, GapSummary
from competency_hub.domain.services.role_authority import (
    accessible_prefixes,
    active_navigation,
    can_access,
    effective_role,
    is_active,
    navigation_set_for,
)

__all__ = [
    "AssessmentAggregator",
    "AssessmentLockedError",
    "AssessmentNotFoundError",
    "AssessmentRecord",
    "AssessmentService",
    "CompetencyCatalog",
    "CompetencyExistsError",
    "CompetencyGap",
    "GapAnalyzer",
    "GapSummary",
    "InvalidStatusError",
    "ValidationError",
    "ValidationErrorKind",
    "accessible_prefixes",
    "active_navigation",
    "can_access",
    "effective_role",
    "is_active",
    "navigation_set_for",
]
