from __future__ import annotations

import uuid
from datetime import datetime

from competency_hub.domain.models import AssessmentKind, AssessmentStatus
from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def _enum_values(enum_cls: type) -> list[str]:
    return [member.value for member in enum_cls]


class CompetencyModel(Base):
    """Competency catalog entry. Read-only from the aggregation's point of view."""

    __tablename__ = "competencies"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    domain: Mapped[str | None] = mapped_column(String(128))
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class AssessmentModel(Base):
    """Assessment aggregate root. Owns its rater scores and consensus rows."""

    __tablename__ = "assessments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    subject_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    kind: Mapped[AssessmentKind] = mapped_column(
        Enum(AssessmentKind, name="assessment_kind", values_callable=_enum_values),
        nullable=False,
    )
    status: Mapped[AssessmentStatus] = mapped_column(
        Enum(AssessmentStatus, name="assessment_status", values_callable=_enum_values),
        nullable=False,
    )
    # Derived from consensus rows; rewritten on every save
    overall_rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Ordered competency set of the assessment
    competency_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    rater_scores: Mapped[list[RaterScoreModel]] = relationship(
        back_populates="assessment",
        cascade="all, delete-orphan",
        order_by="RaterScoreModel.id",
    )
    consensus: Mapped[list[CompetencyConsensusModel]] = relationship(
        back_populates="assessment",
        cascade="all, delete-orphan",
        order_by="CompetencyConsensusModel.id",
    )

    def __repr__(self) -> str:
        return (
            f"<AssessmentModel(id={self.id}, subject_id={self.subject_id}, "
            f"kind={self.kind.value}, status={self.status.value})>"
        )


class RaterScoreModel(Base):
    __tablename__ = "rater_scores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assessment_id: Mapped[str] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rater_id: Mapped[str] = mapped_column(String(64), nullable=False)
    competency_id: Mapped[str] = mapped_column(
        ForeignKey("competencies.id", ondelete="RESTRICT"), nullable=False
    )
    score: Mapped[float] = mapped_column(Float, nullable=False)
    comment: Mapped[str] = mapped_column(Text, default="", nullable=False)

    assessment: Mapped[AssessmentModel] = relationship(back_populates="rater_scores")


class CompetencyConsensusModel(Base):
    __tablename__ = "competency_consensus"
    __table_args__ = (
        UniqueConstraint("assessment_id", "competency_id", name="uq_consensus_competency"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    assessment_id: Mapped[str] = mapped_column(
        ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    competency_id: Mapped[str] = mapped_column(
        ForeignKey("competencies.id", ondelete="RESTRICT"), nullable=False
    )
    score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    comment: Mapped[str] = mapped_column(Text, default="", nullable=False)

    assessment: Mapped[AssessmentModel] = relationship(back_populates="consensus")
