from __future__ import annotations

from competency_hub.api.deps import get_current_user, get_db_session
from competency_hub.api.schemas.analytics import CompetencyGapOut, GapAnalysisResponse
from competency_hub.domain import Role, User
from competency_hub.domain.services.assessments import AssessmentService
from competency_hub.domain.services.gap_analysis import GapAnalyzer
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/gaps", response_model=GapAnalysisResponse)
async def get_gap_analysis(
    subject_id: str | None = Query(None, description="Omit for the organization-wide view"),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> GapAnalysisResponse:
    """Self ratings compared with assessor ratings, largest gap first.

    Employees always get their own analysis. The organization-wide view is HR only.
    """
    role = user.effective_role
    if role is Role.EMPLOYEE:
        subject_id = user.user_id
    elif subject_id is None and role < Role.HR:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organization gap analysis requires the hr role",
        )

    service = AssessmentService(session)
    summary = await service.gap_analysis(subject_id=subject_id)
    ranked = GapAnalyzer().ranked(summary.gaps)
    return GapAnalysisResponse(
        subject_id=subject_id,
        average_self_rating=summary.average_self_rating,
        average_assessor_rating=summary.average_assessor_rating,
        average_gap=summary.average_gap,
        largest_gap=summary.largest_gap,
        largest_gap_competency_id=summary.largest_gap_competency_id,
        overestimating=summary.overestimating,
        agreement_percentage=summary.agreement_percentage,
        competencies=[
            CompetencyGapOut(
                competency_id=entry.competency_id,
                self_rating=entry.self_rating,
                assessor_rating=entry.assessor_rating,
                gap=entry.gap,
                self_count=entry.self_count,
                assessor_count=entry.assessor_count,
            )
            for entry in ranked
        ],
    )
