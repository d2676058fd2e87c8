"""
Unit tests for multi-rater aggregation and draft validation.
"""

from __future__ import annotations

import pytest
from competency_hub.domain import (
    AssessmentKind,
    CompetencyConsensus,
    RaterScore,
    RatingScale,
)
from competency_hub.domain.services.aggregation import (
    UNRATED,
    AssessmentAggregator,
    ValidationError,
    ValidationErrorKind,
)

from tests.utils import make_draft

CATALOG = {"1", "2", "3", "4", "5"}


@pytest.fixture
def consensus_aggregator() -> AssessmentAggregator:
    return AssessmentAggregator(RatingScale.CONSENSUS, CATALOG)


@pytest.fixture
def proficiency_aggregator() -> AssessmentAggregator:
    return AssessmentAggregator(RatingScale.PROFICIENCY, CATALOG)


def _scores(competency_id: str, *values: float) -> list[RaterScore]:
    return [
        RaterScore(rater_id=f"rater-{index}", competency_id=competency_id, score=value)
        for index, value in enumerate(values)
    ]


class TestConsensusForCompetency:
    def test_three_rater_panel(self, consensus_aggregator: AssessmentAggregator) -> None:
        """4.5, 4.0 and 4.0 average to 4.1666..., displayed as 4.2."""
        result = consensus_aggregator.consensus_for_competency(_scores("4", 4.5, 4.0, 4.0))

        assert result.competency_id == "4"
        assert result.score == 4.2

    def test_no_scores_yields_zero(self, consensus_aggregator: AssessmentAggregator) -> None:
        result = consensus_aggregator.consensus_for_competency([], competency_id="3")

        assert result == CompetencyConsensus(competency_id="3", score=UNRATED)

    def test_half_rounds_up(self, consensus_aggregator: AssessmentAggregator) -> None:
        result = consensus_aggregator.consensus_for_competency(_scores("1", 4.0, 4.5))
        assert result.score == 4.3

    def test_order_does_not_matter(self, consensus_aggregator: AssessmentAggregator) -> None:
        scores = _scores("2", 1.5, 3.0, 4.5, 5.0)
        forward = consensus_aggregator.consensus_for_competency(scores)
        backward = consensus_aggregator.consensus_for_competency(list(reversed(scores)))
        assert forward == backward

    def test_is_idempotent(self, consensus_aggregator: AssessmentAggregator) -> None:
        scores = _scores("2", 2.5, 3.5, 3.0)
        first = consensus_aggregator.consensus_for_competency(scores)
        second = consensus_aggregator.consensus_for_competency(scores)
        assert first == second

    def test_rater_comments_are_not_merged(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        scores = [
            RaterScore(rater_id="a", competency_id="1", score=4.0, comment="Clear writer"),
            RaterScore(rater_id="b", competency_id="1", score=3.0, comment="Talks too fast"),
        ]
        result = consensus_aggregator.consensus_for_competency(scores, comment="Agreed: 3.5")

        assert result.comment == "Agreed: 3.5"

    def test_mixed_competencies_are_rejected(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        with pytest.raises(ValueError):
            consensus_aggregator.consensus_for_competency(_scores("1", 4.0) + _scores("2", 3.0))

    def test_result_stays_within_scale(self, consensus_aggregator: AssessmentAggregator) -> None:
        for values in [(1.0, 1.0), (5.0, 5.0), (1.0, 5.0), (1.5, 1.0, 1.0)]:
            result = consensus_aggregator.consensus_for_competency(_scores("1", *values))
            assert 1.0 <= result.score <= 5.0


class TestOverallRating:
    def test_mean_of_consensus(self, consensus_aggregator: AssessmentAggregator) -> None:
        entries = [
            CompetencyConsensus(competency_id="4", score=4.2),
            CompetencyConsensus(competency_id="5", score=4.2),
        ]
        assert consensus_aggregator.overall_rating(entries) == 4.2

    def test_empty_is_zero(self, consensus_aggregator: AssessmentAggregator) -> None:
        assert consensus_aggregator.overall_rating([]) == 0

    def test_empty_uses_seed(self, consensus_aggregator: AssessmentAggregator) -> None:
        assert consensus_aggregator.overall_rating([], seed=3.0) == 3.0

    def test_bounded_by_inputs(self, consensus_aggregator: AssessmentAggregator) -> None:
        """Rounding never pushes the overall rating past the smallest or largest input."""
        entries = [
            CompetencyConsensus(competency_id="1", score=4.17),
            CompetencyConsensus(competency_id="2", score=4.17),
        ]
        assert consensus_aggregator.overall_rating(entries) == 4.17

        mixed = [
            CompetencyConsensus(competency_id="1", score=2.0),
            CompetencyConsensus(competency_id="2", score=3.5),
            CompetencyConsensus(competency_id="3", score=4.0),
        ]
        overall = consensus_aggregator.overall_rating(mixed)
        assert 2.0 <= overall <= 4.0
        assert overall == 3.2


class TestSummarize:
    def test_panel_scenario(self, consensus_aggregator: AssessmentAggregator) -> None:
        draft = make_draft(
            AssessmentKind.CONSENSUS,
            ["4", "5"],
            [
                ("michael", "4", 4.5),
                ("lisa", "4", 4.0),
                ("david", "4", 4.0),
                ("michael", "5", 4.0),
                ("lisa", "5", 4.5),
                ("david", "5", 4.0),
            ],
        )
        summary = consensus_aggregator.summarize(draft)

        assert [entry.score for entry in summary.consensus] == [4.2, 4.2]
        assert summary.overall_rating == 4.2
        assert summary.progress == 100

    def test_unrated_competency_gets_zero_entry(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1", "2", "3"], [("a", "1", 4.0)])
        summary = consensus_aggregator.summarize(draft)

        assert [entry.competency_id for entry in summary.consensus] == ["1", "2", "3"]
        assert [entry.score for entry in summary.consensus] == [4.0, 0.0, 0.0]
        assert summary.progress == 33

    def test_consensus_comments_are_attached(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(
            AssessmentKind.CONSENSUS,
            ["1"],
            [("a", "1", 4.0)],
            consensus_comments={"1": "Panel agrees"},
        )
        summary = consensus_aggregator.summarize(draft)
        assert summary.consensus[0].comment == "Panel agrees"

    def test_seed_only_applies_without_scores(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        empty = make_draft(AssessmentKind.CONSENSUS, ["1"], overall_rating_seed=2.5)
        assert consensus_aggregator.summarize(empty).overall_rating == 2.5

        rated = make_draft(
            AssessmentKind.CONSENSUS, ["1"], [("a", "1", 4.0)], overall_rating_seed=2.5
        )
        assert consensus_aggregator.summarize(rated).overall_rating == 4.0

    def test_progress_rounds_half_up(self, proficiency_aggregator: AssessmentAggregator) -> None:
        draft = make_draft(
            AssessmentKind.SELF,
            ["1", "2", "3"],
            [("me", "1", 3), ("me", "2", 2)],
        )
        assert proficiency_aggregator.progress(draft) == 67
        assert proficiency_aggregator.progress(make_draft(AssessmentKind.SELF, [])) == 0

    def test_scale_mismatch_is_a_programming_error(
        self, proficiency_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1"], [("a", "1", 4.5)])
        with pytest.raises(ValueError):
            proficiency_aggregator.summarize(draft)


class TestValidation:
    def test_valid_draft_passes(self, proficiency_aggregator: AssessmentAggregator) -> None:
        draft = make_draft(AssessmentKind.SELF, ["1", "2"], [("me", "1", 3), ("me", "2", 4)])
        assert proficiency_aggregator.check(draft) is None
        proficiency_aggregator.validate(draft)

    def test_score_for_foreign_competency(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1"], [("a", "X", 4.0)])

        with pytest.raises(ValidationError) as exc_info:
            consensus_aggregator.validate(draft)

        assert exc_info.value.kind is ValidationErrorKind.REFERENTIAL_INTEGRITY
        assert exc_info.value.competency_id == "X"
        assert exc_info.value.rater_id == "a"

    def test_competency_missing_from_catalog(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1", "99"])
        error = consensus_aggregator.check(draft)

        assert error is not None
        assert error.kind is ValidationErrorKind.REFERENTIAL_INTEGRITY
        assert error.competency_id == "99"

    def test_repeated_competency_id_is_rejected(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        """A repeated id would yield two consensus entries and skew the overall rating."""
        draft = make_draft(
            AssessmentKind.CONSENSUS,
            ["4", "4", "5"],
            [("a", "4", 5.0), ("a", "5", 1.0)],
        )

        with pytest.raises(ValidationError) as exc_info:
            consensus_aggregator.summarize(draft)

        assert exc_info.value.kind is ValidationErrorKind.REFERENTIAL_INTEGRITY
        assert exc_info.value.competency_id == "4"

    def test_repeated_competency_id_is_checked_before_catalog(self) -> None:
        aggregator = AssessmentAggregator(RatingScale.PROFICIENCY, CATALOG)
        draft = make_draft(AssessmentKind.SELF, ["99", "1", "1"])

        error = aggregator.check(draft)

        assert error is not None
        assert error.competency_id == "1"

    def test_without_catalog_only_draft_set_is_checked(self) -> None:
        aggregator = AssessmentAggregator.for_kind(AssessmentKind.CONSENSUS)
        draft = make_draft(AssessmentKind.CONSENSUS, ["99"], [("a", "99", 3.0)])
        assert aggregator.check(draft) is None

    @pytest.mark.parametrize("kind", [AssessmentKind.SELF, AssessmentKind.ASSESSOR])
    def test_duplicate_rater_on_single_rater_kinds(
        self, proficiency_aggregator: AssessmentAggregator, kind: AssessmentKind
    ) -> None:
        draft = make_draft(kind, ["1"], [("me", "1", 3), ("me", "1", 4)])
        error = proficiency_aggregator.check(draft)

        assert error is not None
        assert error.kind is ValidationErrorKind.DUPLICATE_RATER
        assert (error.rater_id, error.competency_id) == ("me", "1")

    def test_repeat_rater_allowed_on_consensus(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1"], [("a", "1", 3.0), ("a", "1", 4.0)])
        assert consensus_aggregator.check(draft) is None

    @pytest.mark.parametrize("score", [0, 5, 2.5, -1])
    def test_proficiency_out_of_range(
        self, proficiency_aggregator: AssessmentAggregator, score: float
    ) -> None:
        draft = make_draft(AssessmentKind.ASSESSOR, ["1"], [("boss", "1", score)])
        error = proficiency_aggregator.check(draft)

        assert error is not None
        assert error.kind is ValidationErrorKind.OUT_OF_RANGE

    @pytest.mark.parametrize("score", [0.5, 5.5, float("nan")])
    def test_consensus_out_of_range(
        self, consensus_aggregator: AssessmentAggregator, score: float
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1"], [("a", "1", score)])
        error = consensus_aggregator.check(draft)

        assert error is not None
        assert error.kind is ValidationErrorKind.OUT_OF_RANGE

    def test_consensus_accepts_half_points(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1"], [("a", "1", 4.5), ("b", "1", 1.0)])
        assert consensus_aggregator.check(draft) is None

    def test_referential_integrity_is_checked_first(
        self, consensus_aggregator: AssessmentAggregator
    ) -> None:
        draft = make_draft(AssessmentKind.CONSENSUS, ["1"], [("a", "1", 9.0), ("a", "X", 4.0)])
        error = consensus_aggregator.check(draft)

        assert error is not None
        assert error.kind is ValidationErrorKind.REFERENTIAL_INTEGRITY

    def test_error_serialises_rule_and_location(self) -> None:
        error = ValidationError(
            ValidationErrorKind.OUT_OF_RANGE, "too high", competency_id="1", rater_id="a"
        )
        assert error.to_dict() == {
            "kind": "out_of_range",
            "message": "too high",
            "competency_id": "1",
            "rater_id": "a",
        }
