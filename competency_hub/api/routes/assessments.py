from __future__ import annotations

import structlog
from competency_hub.api.deps import get_current_user, get_db_session, require_effective_role
from competency_hub.api.schemas.assessments import (
    AssessmentDetail,
    AssessmentDraftRequest,
    AssessmentPreviewResponse,
    AssessmentsResponse,
    AssessmentStatusUpdate,
    AssessmentUpdateRequest,
    CompetencyConsensusOut,
    RaterScoreIn,
    RaterScoreOut,
)
from competency_hub.domain import (
    AssessmentDraft,
    AssessmentKind,
    AssessmentStatus,
    RaterScore,
    Role,
    User,
)
from competency_hub.domain.services.assessments import (
    AssessmentLockedError,
    AssessmentNotFoundError,
    AssessmentRecord,
    AssessmentService,
    InvalidStatusError,
)
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/assessments", tags=["Assessments"])
logger = structlog.get_logger()


@router.post("/preview", response_model=AssessmentPreviewResponse)
async def preview_assessment(
    payload: AssessmentDraftRequest,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssessmentPreviewResponse:
    """Recompute consensus, overall rating and progress for an unsaved form state.

    Called on every rating change; nothing is persisted.
    """
    draft = _build_draft(payload, user)
    summary = await AssessmentService(session).preview(draft)
    return AssessmentPreviewResponse(
        kind=draft.kind,
        scale=draft.scale.value,
        consensus=[
            CompetencyConsensusOut(
                competency_id=entry.competency_id, score=entry.score, comment=entry.comment
            )
            for entry in summary.consensus
        ],
        overall_rating=summary.overall_rating,
        progress=summary.progress,
    )


@router.post("", response_model=AssessmentDetail, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    payload: AssessmentDraftRequest,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssessmentDetail:
    draft = _build_draft(payload, user)
    service = AssessmentService(session)
    try:
        record = await service.create(draft, created_by=user.user_id)
    except InvalidStatusError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_detail(record)


@router.get("", response_model=AssessmentsResponse)
async def list_assessments(
    subject_id: str | None = Query(None),
    kind: AssessmentKind | None = Query(None),
    status_filter: AssessmentStatus | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssessmentsResponse:
    """Employees only ever see their own assessments; assessors and HR may filter freely."""
    if user.effective_role is Role.EMPLOYEE:
        subject_id = user.user_id

    records = await AssessmentService(session).list_assessments(
        subject_id=subject_id, kind=kind, status=status_filter
    )
    return AssessmentsResponse(assessments=[_to_detail(record) for record in records])


@router.get("/{assessment_id}", response_model=AssessmentDetail)
async def get_assessment(
    assessment_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssessmentDetail:
    record = await _get_or_404(AssessmentService(session), assessment_id)
    if user.effective_role is Role.EMPLOYEE and record.subject_id != user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this assessment"
        )
    return _to_detail(record)


@router.put("/{assessment_id}", response_model=AssessmentDetail)
async def replace_assessment_scores(
    assessment_id: str,
    payload: AssessmentUpdateRequest,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssessmentDetail:
    """Replace the full rater-score set; aggregates are recomputed server-side."""
    service = AssessmentService(session)
    record = await _get_or_404(service, assessment_id)
    _ensure_can_edit(user, record.kind, record.subject_id)
    _ensure_can_set_status(user, record.kind, payload.status)

    try:
        updated = await service.update(
            assessment_id,
            competency_ids=payload.competency_ids,
            scores=_to_scores(payload.scores, user),
            consensus_comments=payload.consensus_comments,
            status=payload.status,
        )
    except AssessmentLockedError as exc:
        raise HTTPException(status_code=status.HTTP_423_LOCKED, detail=str(exc)) from exc
    except InvalidStatusError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_detail(updated)


@router.patch("/{assessment_id}/status", response_model=AssessmentDetail)
async def update_assessment_status(
    assessment_id: str,
    payload: AssessmentStatusUpdate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(get_current_user),
) -> AssessmentDetail:
    service = AssessmentService(session)
    record = await _get_or_404(service, assessment_id)
    _ensure_can_edit(user, record.kind, record.subject_id)
    _ensure_can_set_status(user, record.kind, payload.status)

    try:
        updated = await service.change_status(assessment_id, payload.status)
    except InvalidStatusError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _to_detail(updated)


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_assessment(
    assessment_id: str,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_effective_role(Role.HR)),
) -> None:
    """Delete an assessment together with its scores and consensus (HR only)."""
    try:
        await AssessmentService(session).delete(assessment_id)
    except AssessmentNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    logger.info("assessment_deleted_by_hr", assessment_id=assessment_id, hr_user=user.user_id)


def _build_draft(payload: AssessmentDraftRequest, user: User) -> AssessmentDraft:
    subject_id = payload.subject_id or user.user_id
    _ensure_can_edit(user, payload.kind, subject_id)
    _ensure_can_set_status(user, payload.kind, payload.status)
    return AssessmentDraft(
        subject_id=subject_id,
        kind=payload.kind,
        competency_ids=tuple(payload.competency_ids),
        scores=tuple(_to_scores(payload.scores, user)),
        status=payload.status,
        consensus_comments=dict(payload.consensus_comments),
        overall_rating_seed=payload.overall_rating_seed,
    )


def _to_scores(scores: list[RaterScoreIn], user: User) -> list[RaterScore]:
    return [
        RaterScore(
            rater_id=score.rater_id or user.user_id,
            competency_id=score.competency_id,
            score=score.score,
            comment=score.comment,
        )
        for score in scores
    ]


def _ensure_can_edit(user: User, kind: AssessmentKind, subject_id: str) -> None:
    role = user.effective_role
    if role < kind.editor_role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"{kind.value} assessments require the {kind.editor_role.value} role",
        )
    # Employees may only rate themselves
    if kind is AssessmentKind.SELF and role is Role.EMPLOYEE and subject_id != user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Self assessments can only be edited by their subject",
        )


async def _get_or_404(service: AssessmentService, assessment_id: str) -> AssessmentRecord:
    try:
        return await service.get(assessment_id)
    except AssessmentNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


def _to_detail(record: AssessmentRecord) -> AssessmentDetail:
    return AssessmentDetail(
        id=record.id,
        subject_id=record.subject_id,
        kind=record.kind,
        status=record.status,
        overall_rating=record.overall_rating,
        progress=record.progress,
        locked=record.locked,
        competency_ids=record.competency_ids,
        scores=[
            RaterScoreOut(
                rater_id=score.rater_id,
                competency_id=score.competency_id,
                score=score.score,
                comment=score.comment,
            )
            for score in record.scores
        ],
        consensus=[
            CompetencyConsensusOut(
                competency_id=entry.competency_id, score=entry.score, comment=entry.comment
            )
            for entry in record.consensus
        ],
        created_by=record.created_by,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )
