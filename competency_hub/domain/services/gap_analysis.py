"""
Competency gap analysis.

A second reduction over stored rater scores: for every competency the
assessor's rating is compared with the employee's own rating. The gap is
``assessor - self``, so a negative gap means the employee rates themselves
higher than their assessor does. Scores from several subjects can be passed at
once; ratings are then averaged per competency first, which gives the
organization-wide view.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from competency_hub.domain.models import RaterScore, RatingScale, round_rating
from competency_hub.domain.services.aggregation import UNRATED


@dataclass(frozen=True, slots=True)
class CompetencyGap:
    competency_id: str
    self_rating: float
    assessor_rating: float
    # None until both sides have rated the competency
    gap: float | None
    self_count: int = 0
    assessor_count: int = 0

    @property
    def absolute_gap(self) -> float | None:
        return abs(self.gap) if self.gap is not None else None


@dataclass(frozen=True, slots=True)
class GapSummary:
    gaps: tuple[CompetencyGap, ...]
    average_self_rating: float
    average_assessor_rating: float
    average_gap: float | None
    largest_gap: float | None
    largest_gap_competency_id: str | None
    overestimating: bool
    agreement_percentage: float | None


class GapAnalyzer:
    """Compares self ratings with assessor ratings on one rating scale."""

    def __init__(self, scale: RatingScale = RatingScale.PROFICIENCY) -> None:
        self.scale = scale

    @property
    def max_gap(self) -> float:
        return self.scale.maximum - self.scale.minimum

    def competency_gaps(
        self,
        self_scores: Sequence[RaterScore],
        assessor_scores: Sequence[RaterScore],
    ) -> tuple[CompetencyGap, ...]:
        """One entry per competency, in order of first appearance (self ratings first)."""
        self_by_competency = _group(self_scores)
        assessor_by_competency = _group(assessor_scores)
        competency_ids = list(self_by_competency)
        competency_ids += [cid for cid in assessor_by_competency if cid not in self_by_competency]

        gaps = []
        for competency_id in competency_ids:
            own = self_by_competency.get(competency_id, [])
            assessed = assessor_by_competency.get(competency_id, [])
            self_rating = _mean(own)
            assessor_rating = _mean(assessed)
            gap = round_rating(assessor_rating - self_rating) if own and assessed else None
            gaps.append(
                CompetencyGap(
                    competency_id=competency_id,
                    self_rating=round_rating(self_rating),
                    assessor_rating=round_rating(assessor_rating),
                    gap=gap,
                    self_count=len(own),
                    assessor_count=len(assessed),
                )
            )
        return tuple(gaps)

    def ranked(self, gaps: Sequence[CompetencyGap]) -> list[CompetencyGap]:
        """Largest absolute gap first; competencies without a gap go last."""
        return sorted(
            gaps,
            key=lambda entry: (entry.gap is None, -(entry.absolute_gap or 0.0)),
        )

    def agreement_percentage(self, gap: float) -> float:
        """``100`` when ratings agree, ``0`` when they sit at opposite ends of the scale."""
        percentage = 100 - abs(gap) / self.max_gap * 100
        return round_rating(min(max(percentage, 0.0), 100.0))

    def summarize(self, gaps: Sequence[CompetencyGap]) -> GapSummary:
        rated_self = [entry.self_rating for entry in gaps if entry.self_count]
        rated_assessor = [entry.assessor_rating for entry in gaps if entry.assessor_count]
        average_self = _mean(rated_self)
        average_assessor = _mean(rated_assessor)

        average_gap: float | None = None
        agreement: float | None = None
        if rated_self and rated_assessor:
            average_gap = round_rating(average_assessor - average_self)
            agreement = self.agreement_percentage(average_assessor - average_self)

        # First competency wins a tie
        largest: CompetencyGap | None = None
        for entry in gaps:
            if entry.gap is None:
                continue
            if largest is None or entry.absolute_gap > largest.absolute_gap:
                largest = entry

        return GapSummary(
            gaps=tuple(gaps),
            average_self_rating=round_rating(average_self),
            average_assessor_rating=round_rating(average_assessor),
            average_gap=average_gap,
            largest_gap=largest.gap if largest is not None else None,
            largest_gap_competency_id=largest.competency_id if largest is not None else None,
            overestimating=average_gap is not None and average_gap < 0,
            agreement_percentage=agreement,
        )

    def analyze(
        self,
        self_scores: Sequence[RaterScore],
        assessor_scores: Sequence[RaterScore],
    ) -> GapSummary:
        return self.summarize(self.competency_gaps(self_scores, assessor_scores))


def _group(scores: Sequence[RaterScore]) -> dict[str, list[float]]:
    grouped: dict[str, list[float]] = {}
    for score in scores:
        grouped.setdefault(score.competency_id, []).append(float(score.score))
    return grouped


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else UNRATED
