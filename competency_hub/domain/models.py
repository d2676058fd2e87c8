from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal


class Role(str, enum.Enum):
    """Navigation/authorization role, ordered by privilege (employee < assessor < hr)."""

    EMPLOYEE = "employee"
    ASSESSOR = "assessor"
    HR = "hr"

    @property
    def rank(self) -> int:
        return _ROLE_RANKS[self]

    @property
    def prefix(self) -> str:
        """URL namespace owned by this role."""
        return _ROLE_PREFIXES[self]

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in {role.value for role in cls}

    @classmethod
    def parse(cls, value: object) -> Role:
        """Normalise a raw role value; anything unrecognised is least privilege."""
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if cls.contains(normalized):
                return cls(normalized)
        return cls.EMPLOYEE

    @classmethod
    def descending(cls) -> tuple[Role, ...]:
        return (cls.HR, cls.ASSESSOR, cls.EMPLOYEE)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank >= other.rank


_ROLE_RANKS = {Role.EMPLOYEE: 0, Role.ASSESSOR: 1, Role.HR: 2}
_ROLE_PREFIXES = {Role.EMPLOYEE: "", Role.ASSESSOR: "/assessor", Role.HR: "/hr"}


class RatingScale(str, enum.Enum):
    """Rating domain in force for an assessment. The two scales never mix."""

    CONSENSUS = "consensus"  # 1.0 - 5.0, continuous
    PROFICIENCY = "proficiency"  # levels 1 - 4, whole numbers

    @property
    def minimum(self) -> float:
        return 1.0

    @property
    def maximum(self) -> float:
        return 5.0 if self is RatingScale.CONSENSUS else 4.0

    @property
    def discrete(self) -> bool:
        return self is RatingScale.PROFICIENCY

    def contains(self, score: float) -> bool:
        if isinstance(score, bool) or not isinstance(score, int | float):
            return False
        if score != score:  # NaN
            return False
        if self.discrete and float(score) != int(score):
            return False
        return self.minimum <= score <= self.maximum


class AssessmentStatus(str, enum.Enum):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    REVIEWED = "Reviewed"
    APPROVED = "Approved"
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    REJECTED = "Rejected"

    @classmethod
    def terminal_statuses(cls) -> tuple[AssessmentStatus, ...]:
        return (cls.COMPLETED, cls.REVIEWED, cls.APPROVED, cls.REJECTED)


class AssessmentKind(str, enum.Enum):
    """Who rates, and therefore which scale and statuses apply."""

    SELF = "self"
    ASSESSOR = "assessor"
    CONSENSUS = "consensus"

    @property
    def scale(self) -> RatingScale:
        if self is AssessmentKind.CONSENSUS:
            return RatingScale.CONSENSUS
        return RatingScale.PROFICIENCY

    @property
    def single_rater(self) -> bool:
        return self is not AssessmentKind.CONSENSUS

    @property
    def statuses(self) -> tuple[AssessmentStatus, ...]:
        return _KIND_STATUSES[self]

    @property
    def initial_status(self) -> AssessmentStatus:
        return _KIND_STATUSES[self][0]

    @property
    def editor_role(self) -> Role:
        """Minimum effective role allowed to author this kind of assessment."""
        if self is AssessmentKind.CONSENSUS:
            return Role.HR
        if self is AssessmentKind.ASSESSOR:
            return Role.ASSESSOR
        return Role.EMPLOYEE

    def role_for_status(self, status: AssessmentStatus) -> Role:
        """Minimum effective role allowed to move an assessment of this kind to ``status``."""
        return max(self.editor_role, _STATUS_ROLES.get(status, Role.EMPLOYEE))


# Review outcomes are decided by an assessor or above, never by the subject
_STATUS_ROLES = {
    AssessmentStatus.REVIEWED: Role.ASSESSOR,
    AssessmentStatus.APPROVED: Role.ASSESSOR,
    AssessmentStatus.REJECTED: Role.ASSESSOR,
}

_KIND_STATUSES = {
    AssessmentKind.SELF: (
        AssessmentStatus.IN_PROGRESS,
        AssessmentStatus.COMPLETED,
        AssessmentStatus.REVIEWED,
    ),
    AssessmentKind.ASSESSOR: (
        AssessmentStatus.DRAFT,
        AssessmentStatus.SUBMITTED,
        AssessmentStatus.REVIEWED,
        AssessmentStatus.APPROVED,
    ),
    AssessmentKind.CONSENSUS: (
        AssessmentStatus.PENDING,
        AssessmentStatus.IN_PROGRESS,
        AssessmentStatus.COMPLETED,
        AssessmentStatus.REJECTED,
    ),
}


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    email: str = ""
    roles: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def effective_role(self) -> Role:
        from competency_hub.domain.services.role_authority import effective_role

        return effective_role(self.roles)


@dataclass(frozen=True, slots=True)
class Competency:
    id: str
    name: str
    domain: str | None = None


@dataclass(frozen=True, slots=True)
class RaterScore:
    """One rater's score and comment for one competency."""

    rater_id: str
    competency_id: str
    score: float
    comment: str = ""


@dataclass(frozen=True, slots=True)
class CompetencyConsensus:
    """Reduction of all rater scores for a competency. Never a source of truth."""

    competency_id: str
    score: float
    comment: str = ""


@dataclass(frozen=True, slots=True)
class AssessmentDraft:
    """Unsaved assessment as edited in a form: the input to aggregation and validation."""

    subject_id: str
    kind: AssessmentKind
    competency_ids: tuple[str, ...]
    scores: tuple[RaterScore, ...] = ()
    status: AssessmentStatus | None = None
    consensus_comments: dict[str, str] = field(default_factory=dict)
    overall_rating_seed: float | None = None

    @property
    def scale(self) -> RatingScale:
        return self.kind.scale

    def scores_for(self, competency_id: str) -> list[RaterScore]:
        return [score for score in self.scores if score.competency_id == competency_id]


@dataclass(frozen=True, slots=True)
class AssessmentSummary:
    consensus: tuple[CompetencyConsensus, ...]
    overall_rating: float
    progress: int


def round_rating(value: float) -> float:
    """One-decimal display rounding, half-up on the decimal representation."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
