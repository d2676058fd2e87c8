"""
Multi-rater assessment aggregation.

Consensus per competency is the plain arithmetic mean of every rater's score,
rounded half-up to one decimal. The overall rating is the mean of the
(rounded) consensus scores. Empty inputs aggregate to ``0`` so callers never
see a non-numeric rating.
"""

from __future__ import annotations

import enum
from collections.abc import Collection, Sequence
from decimal import ROUND_HALF_UP, Decimal

from competency_hub.domain.models import (
    AssessmentDraft,
    AssessmentKind,
    AssessmentSummary,
    CompetencyConsensus,
    RaterScore,
    RatingScale,
    round_rating,
)

UNRATED = 0.0


class ValidationErrorKind(str, enum.Enum):
    REFERENTIAL_INTEGRITY = "referential_integrity"
    DUPLICATE_RATER = "duplicate_rater"
    OUT_OF_RANGE = "out_of_range"


class ValidationError(Exception):
    """Raised when a draft cannot be persisted. Carries the rule that failed."""

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str,
        *,
        competency_id: str | None = None,
        rater_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.competency_id = competency_id
        self.rater_id = rater_id

    def to_dict(self) -> dict[str, str | None]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "competency_id": self.competency_id,
            "rater_id": self.rater_id,
        }


class AssessmentAggregator:
    """Computes consensus and overall ratings for one rating scale.

    ``catalog`` holds the valid competency ids; when given, drafts naming an
    unknown competency fail referential integrity.
    """

    def __init__(self, scale: RatingScale, catalog: Collection[str] | None = None) -> None:
        self.scale = scale
        self.catalog = frozenset(catalog) if catalog is not None else None

    @classmethod
    def for_kind(
        cls, kind: AssessmentKind, catalog: Collection[str] | None = None
    ) -> AssessmentAggregator:
        return cls(kind.scale, catalog)

    def consensus_for_competency(
        self,
        scores: Sequence[RaterScore],
        *,
        competency_id: str | None = None,
        comment: str = "",
    ) -> CompetencyConsensus:
        """Mean of the rater scores for a single competency.

        ``comment`` is the separately authored consensus comment; rater comments
        are never merged into it.
        """
        competency_ids = {score.competency_id for score in scores}
        if competency_id is not None:
            competency_ids.add(competency_id)
        if len(competency_ids) > 1:
            raise ValueError(f"Scores span several competencies: {sorted(competency_ids)}")

        resolved_id = competency_ids.pop() if competency_ids else ""
        if not scores:
            return CompetencyConsensus(competency_id=resolved_id, score=UNRATED, comment=comment)

        mean = sum(score.score for score in scores) / len(scores)
        return CompetencyConsensus(
            competency_id=resolved_id,
            score=round_rating(mean),
            comment=comment,
        )

    def overall_rating(
        self,
        consensus_entries: Sequence[CompetencyConsensus],
        *,
        seed: float | None = None,
    ) -> float:
        """Mean of consensus scores; ``seed`` (or ``0``) when there is nothing to average."""
        if not consensus_entries:
            return seed if seed is not None else UNRATED

        values = [entry.score for entry in consensus_entries]
        rounded = round_rating(sum(values) / len(values))
        # Inputs off the 0.1 grid can round past their own bounds
        return min(max(rounded, min(values)), max(values))

    def consensus_for_assessment(self, draft: AssessmentDraft) -> tuple[CompetencyConsensus, ...]:
        """One consensus entry per competency in the draft, in draft order."""
        return tuple(
            self.consensus_for_competency(
                draft.scores_for(competency_id),
                competency_id=competency_id,
                comment=draft.consensus_comments.get(competency_id, ""),
            )
            for competency_id in draft.competency_ids
        )

    def progress(self, draft: AssessmentDraft) -> int:
        """Percentage of the draft's competencies that carry at least one score."""
        if not draft.competency_ids:
            return 0
        rated = {score.competency_id for score in draft.scores}
        rated_count = sum(1 for competency_id in draft.competency_ids if competency_id in rated)
        percentage = Decimal(rated_count * 100) / Decimal(len(draft.competency_ids))
        return int(percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def check(self, draft: AssessmentDraft) -> ValidationError | None:
        """Return the first failing rule, or ``None`` when the draft may be persisted.

        Rules run in order: referential integrity (repeated competency ids,
        catalog membership, scores outside the draft's competency set),
        duplicate rater (single-rater kinds only), score range for the draft's
        scale.
        """
        if draft.scale is not self.scale:
            raise ValueError(
                f"Aggregator for {self.scale.value} scale cannot handle "
                f"{draft.kind.value} assessments ({draft.scale.value} scale)"
            )

        # Exactly one consensus entry per competency
        listed: set[str] = set()
        for competency_id in draft.competency_ids:
            if competency_id in listed:
                return ValidationError(
                    ValidationErrorKind.REFERENTIAL_INTEGRITY,
                    f"Competency '{competency_id}' is listed more than once",
                    competency_id=competency_id,
                )
            listed.add(competency_id)

        if self.catalog is not None:
            for competency_id in draft.competency_ids:
                if competency_id not in self.catalog:
                    return ValidationError(
                        ValidationErrorKind.REFERENTIAL_INTEGRITY,
                        f"Competency '{competency_id}' does not exist in the catalog",
                        competency_id=competency_id,
                    )

        known = set(draft.competency_ids)
        for score in draft.scores:
            if score.competency_id not in known:
                return ValidationError(
                    ValidationErrorKind.REFERENTIAL_INTEGRITY,
                    f"Competency '{score.competency_id}' is not part of this assessment",
                    competency_id=score.competency_id,
                    rater_id=score.rater_id,
                )

        if draft.kind.single_rater:
            seen: set[tuple[str, str]] = set()
            for score in draft.scores:
                key = (score.rater_id, score.competency_id)
                if key in seen:
                    return ValidationError(
                        ValidationErrorKind.DUPLICATE_RATER,
                        f"Rater '{score.rater_id}' scored competency "
                        f"'{score.competency_id}' more than once",
                        competency_id=score.competency_id,
                        rater_id=score.rater_id,
                    )
                seen.add(key)

        for score in draft.scores:
            if not self.scale.contains(score.score):
                bounds = f"{self.scale.minimum:g}-{self.scale.maximum:g}"
                detail = " whole-number" if self.scale.discrete else ""
                return ValidationError(
                    ValidationErrorKind.OUT_OF_RANGE,
                    f"Score {score.score!r} is outside the{detail} {bounds} "
                    f"{self.scale.value} scale",
                    competency_id=score.competency_id,
                    rater_id=score.rater_id,
                )
        return None

    def validate(self, draft: AssessmentDraft) -> None:
        """Raise :class:`ValidationError` for the first failing rule."""
        error = self.check(draft)
        if error is not None:
            raise error

    def summarize(self, draft: AssessmentDraft) -> AssessmentSummary:
        """Validate the draft, then compute every derived rating."""
        self.validate(draft)
        consensus = self.consensus_for_assessment(draft)
        if draft.scores:
            overall = self.overall_rating(consensus)
        else:
            overall = self.overall_rating((), seed=draft.overall_rating_seed)
        return AssessmentSummary(
            consensus=consensus,
            overall_rating=overall,
            progress=self.progress(draft),
        )
