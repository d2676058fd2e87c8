"""
Assessment persistence around the aggregator.

Every write validates the draft and recomputes consensus, overall rating and
progress first; the stored rater-score and consensus sets are then replaced as
a whole. Nothing reaches the session when validation fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog
from competency_hub.core.config import get_settings
from competency_hub.domain.models import (
    AssessmentDraft,
    AssessmentKind,
    AssessmentStatus,
    AssessmentSummary,
    CompetencyConsensus,
    RaterScore,
)
from competency_hub.domain.services.aggregation import AssessmentAggregator, ValidationError
from competency_hub.domain.services.gap_analysis import GapAnalyzer, GapSummary
from competency_hub.infrastructure.db.models import (
    AssessmentModel,
    CompetencyConsensusModel,
    CompetencyModel,
    RaterScoreModel,
)
from sqlalchemy import select
from sqlalchemy.orm import selectinload

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)


class AssessmentNotFoundError(Exception):
    """Raised when an assessment id does not exist."""


class AssessmentLockedError(Exception):
    """Raised when ratings of a locked assessment are edited."""


class InvalidStatusError(Exception):
    """Raised when a status does not belong to the assessment's kind."""


@dataclass(slots=True)
class AssessmentRecord:
    id: str
    subject_id: str
    kind: AssessmentKind
    status: AssessmentStatus
    overall_rating: float
    progress: int
    competency_ids: list[str]
    created_by: str
    created_at: datetime | None
    updated_at: datetime | None
    locked: bool = False
    scores: list[RaterScore] = field(default_factory=list)
    consensus: list[CompetencyConsensus] = field(default_factory=list)


def is_locked(
    kind: AssessmentKind,
    status: AssessmentStatus,
    created_at: datetime | None,
    *,
    lock_hours: int,
    now: datetime | None = None,
) -> bool:
    """Ratings are frozen once a status is terminal, and self-assessments after ``lock_hours``."""
    if status in AssessmentStatus.terminal_statuses():
        return True
    if kind is not AssessmentKind.SELF or created_at is None:
        return False

    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    current = now or datetime.now(UTC)
    return current - created_at > timedelta(hours=lock_hours)


class AssessmentService:
    """Domain logic for assessment create/edit/status operations."""

    def __init__(self, session: AsyncSession, *, edit_lock_hours: int | None = None) -> None:
        self.session = session
        if edit_lock_hours is None:
            edit_lock_hours = get_settings().edit_lock_hours
        self.edit_lock_hours = edit_lock_hours

    async def catalog_ids(self) -> set[str]:
        stmt: Select[tuple[str]] = select(CompetencyModel.id)
        return set((await self.session.execute(stmt)).scalars().all())

    async def aggregator_for(self, kind: AssessmentKind) -> AssessmentAggregator:
        return AssessmentAggregator.for_kind(kind, await self.catalog_ids())

    async def preview(self, draft: AssessmentDraft) -> AssessmentSummary:
        """Aggregate a draft without persisting it."""
        aggregator = await self.aggregator_for(draft.kind)
        return aggregator.summarize(draft)

    async def create(self, draft: AssessmentDraft, *, created_by: str) -> AssessmentRecord:
        status = draft.status or draft.kind.initial_status
        self._ensure_status(draft.kind, status)
        summary = await self._summarize(draft)

        assessment = AssessmentModel(
            subject_id=draft.subject_id,
            kind=draft.kind,
            status=status,
            overall_rating=summary.overall_rating,
            progress=summary.progress,
            competency_ids=list(draft.competency_ids),
            created_by=created_by,
        )
        assessment.rater_scores = _score_rows(draft.scores)
        assessment.consensus = _consensus_rows(summary.consensus)
        self.session.add(assessment)
        await self.session.commit()

        logger.info(
            "assessment_created",
            assessment_id=assessment.id,
            subject_id=draft.subject_id,
            kind=draft.kind.value,
            overall_rating=summary.overall_rating,
            created_by=created_by,
        )
        return await self.get(assessment.id)

    async def update(
        self,
        assessment_id: str,
        *,
        competency_ids: list[str],
        scores: list[RaterScore],
        consensus_comments: dict[str, str] | None = None,
        status: AssessmentStatus | None = None,
    ) -> AssessmentRecord:
        """Replace the full rater-score set of an assessment and recompute its aggregates."""
        assessment = await self._load(assessment_id)
        if is_locked(
            assessment.kind,
            assessment.status,
            assessment.created_at,
            lock_hours=self.edit_lock_hours,
        ):
            raise AssessmentLockedError(f"Assessment '{assessment_id}' is locked for editing")

        new_status = status or assessment.status
        self._ensure_status(assessment.kind, new_status)
        draft = AssessmentDraft(
            subject_id=assessment.subject_id,
            kind=assessment.kind,
            competency_ids=tuple(competency_ids),
            scores=tuple(scores),
            status=new_status,
            consensus_comments=dict(consensus_comments or {}),
        )
        summary = await self._summarize(draft, assessment_id=assessment_id)

        # Delete old rows before inserting replacements; consensus is unique per competency
        assessment.rater_scores.clear()
        assessment.consensus.clear()
        await self.session.flush()

        assessment.rater_scores.extend(_score_rows(draft.scores))
        assessment.consensus.extend(_consensus_rows(summary.consensus))
        assessment.competency_ids = list(draft.competency_ids)
        assessment.overall_rating = summary.overall_rating
        assessment.progress = summary.progress
        assessment.status = new_status
        await self.session.commit()

        logger.info(
            "assessment_updated",
            assessment_id=assessment_id,
            overall_rating=summary.overall_rating,
            progress=summary.progress,
            score_count=len(draft.scores),
        )
        return await self.get(assessment_id)

    async def change_status(
        self, assessment_id: str, status: AssessmentStatus
    ) -> AssessmentRecord:
        assessment = await self._load(assessment_id)
        self._ensure_status(assessment.kind, status)
        previous = assessment.status
        assessment.status = status
        await self.session.commit()

        logger.info(
            "assessment_status_changed",
            assessment_id=assessment_id,
            previous_status=previous.value,
            status=status.value,
        )
        return await self.get(assessment_id)

    async def get(self, assessment_id: str) -> AssessmentRecord:
        return self._to_record(await self._load(assessment_id))

    async def list_assessments(
        self,
        *,
        subject_id: str | None = None,
        kind: AssessmentKind | None = None,
        status: AssessmentStatus | None = None,
    ) -> list[AssessmentRecord]:
        stmt: Select[tuple[AssessmentModel]] = (
            select(AssessmentModel)
            .options(
                selectinload(AssessmentModel.rater_scores),
                selectinload(AssessmentModel.consensus),
            )
            .order_by(AssessmentModel.created_at.desc())
        )
        if subject_id is not None:
            stmt = stmt.where(AssessmentModel.subject_id == subject_id)
        if kind is not None:
            stmt = stmt.where(AssessmentModel.kind == kind)
        if status is not None:
            stmt = stmt.where(AssessmentModel.status == status)

        rows = (await self.session.execute(stmt)).scalars().all()
        return [self._to_record(row) for row in rows]

    async def delete(self, assessment_id: str) -> None:
        assessment = await self._load(assessment_id)
        await self.session.delete(assessment)
        await self.session.commit()
        logger.info("assessment_deleted", assessment_id=assessment_id)

    async def gap_analysis(self, *, subject_id: str | None = None) -> GapSummary:
        """Self ratings against assessor ratings, for one subject or the whole organization."""
        self_records = await self.list_assessments(subject_id=subject_id, kind=AssessmentKind.SELF)
        assessor_records = await self.list_assessments(
            subject_id=subject_id, kind=AssessmentKind.ASSESSOR
        )
        summary = GapAnalyzer(AssessmentKind.SELF.scale).analyze(
            [score for record in self_records for score in record.scores],
            [score for record in assessor_records for score in record.scores],
        )

        logger.info(
            "gap_analysis_computed",
            subject_id=subject_id,
            self_assessments=len(self_records),
            assessor_assessments=len(assessor_records),
            average_gap=summary.average_gap,
        )
        return summary

    async def _summarize(
        self, draft: AssessmentDraft, *, assessment_id: str | None = None
    ) -> AssessmentSummary:
        try:
            return await self.preview(draft)
        except ValidationError as exc:
            logger.warning(
                "assessment_validation_failed",
                assessment_id=assessment_id,
                subject_id=draft.subject_id,
                kind=exc.kind.value,
                competency_id=exc.competency_id,
                rater_id=exc.rater_id,
            )
            raise

    async def _load(self, assessment_id: str) -> AssessmentModel:
        stmt: Select[tuple[AssessmentModel]] = (
            select(AssessmentModel)
            .where(AssessmentModel.id == assessment_id)
            .options(
                selectinload(AssessmentModel.rater_scores),
                selectinload(AssessmentModel.consensus),
            )
            .execution_options(populate_existing=True)
        )
        assessment = await self.session.scalar(stmt)
        if assessment is None:
            raise AssessmentNotFoundError(f"Assessment '{assessment_id}' not found")
        return assessment

    def _ensure_status(self, kind: AssessmentKind, status: AssessmentStatus) -> None:
        if status not in kind.statuses:
            allowed = ", ".join(item.value for item in kind.statuses)
            raise InvalidStatusError(
                f"Status '{status.value}' is not valid for {kind.value} assessments "
                f"(allowed: {allowed})"
            )

    def _to_record(self, assessment: AssessmentModel) -> AssessmentRecord:
        return AssessmentRecord(
            id=assessment.id,
            subject_id=assessment.subject_id,
            kind=assessment.kind,
            status=assessment.status,
            overall_rating=assessment.overall_rating,
            progress=assessment.progress,
            competency_ids=list(assessment.competency_ids or []),
            created_by=assessment.created_by,
            created_at=assessment.created_at,
            updated_at=assessment.updated_at,
            locked=is_locked(
                assessment.kind,
                assessment.status,
                assessment.created_at,
                lock_hours=self.edit_lock_hours,
            ),
            scores=[
                RaterScore(
                    rater_id=row.rater_id,
                    competency_id=row.competency_id,
                    score=row.score,
                    comment=row.comment,
                )
                for row in assessment.rater_scores
            ],
            consensus=[
                CompetencyConsensus(
                    competency_id=row.competency_id,
                    score=row.score,
                    comment=row.comment,
                )
                for row in assessment.consensus
            ],
        )


def _score_rows(scores: tuple[RaterScore, ...]) -> list[RaterScoreModel]:
    return [
        RaterScoreModel(
            rater_id=score.rater_id,
            competency_id=score.competency_id,
            score=float(score.score),
            comment=score.comment,
        )
        for score in scores
    ]


def _consensus_rows(consensus: tuple[CompetencyConsensus, ...]) -> list[CompetencyConsensusModel]:
    return [
        CompetencyConsensusModel(
            competency_id=entry.competency_id,
            score=entry.score,
            comment=entry.comment,
        )
        for entry in consensus
    ]
