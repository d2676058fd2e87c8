"""Initial schema for competencies, assessments, rater scores and consensus

Revision ID: 202610170001
Revises:
Create Date: 2026-10-17 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610170001"
down_revision = None
branch_labels = None
depends_on = None

assessment_kind_enum = sa.Enum(
    "self",
    "assessor",
    "consensus",
    name="assessment_kind",
)
assessment_status_enum = sa.Enum(
    "Draft",
    "Submitted",
    "Reviewed",
    "Approved",
    "Pending",
    "In Progress",
    "Completed",
    "Rejected",
    name="assessment_status",
)


def upgrade() -> None:
    op.create_table(
        "competencies",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False, unique=True),
        sa.Column("domain", sa.String(length=128), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )

    op.create_table(
        "assessments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("subject_id", sa.String(length=64), nullable=False, index=True),
        sa.Column("kind", assessment_kind_enum, nullable=False),
        sa.Column("status", assessment_status_enum, nullable=False),
        sa.Column("overall_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("progress", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("competency_ids", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )

    op.create_table(
        "rater_scores",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "assessment_id",
            sa.String(length=36),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("rater_id", sa.String(length=64), nullable=False),
        sa.Column(
            "competency_id",
            sa.String(length=36),
            sa.ForeignKey("competencies.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False, server_default=""),
    )

    op.create_table(
        "competency_consensus",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "assessment_id",
            sa.String(length=36),
            sa.ForeignKey("assessments.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "competency_id",
            sa.String(length=36),
            sa.ForeignKey("competencies.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("score", sa.Float(), nullable=False, server_default="0"),
        sa.Column("comment", sa.Text(), nullable=False, server_default=""),
        sa.UniqueConstraint("assessment_id", "competency_id", name="uq_consensus_competency"),
    )


def downgrade() -> None:
    op.drop_table("competency_consensus")
    op.drop_table("rater_scores")
    op.drop_table("assessments")
    op.drop_table("competencies")
    assessment_status_enum.drop(op.get_bind(), checkfirst=True)
    assessment_kind_enum.drop(op.get_bind(), checkfirst=True)
