from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from competency_hub.api.deps import issue_smoke_token
from competency_hub.core.auth import create_access_token
from competency_hub.domain import AssessmentDraft, AssessmentKind, RaterScore, Role


def auth_headers(user_id: str = "employee-1", role: Role = Role.EMPLOYEE) -> dict[str, str]:
    token = issue_smoke_token(user_id, role=role, email=f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


def multi_role_headers(user_id: str, roles: Sequence[str]) -> dict[str, str]:
    token = create_access_token(user_id, roles=list(roles))
    return {"Authorization": f"Bearer {token}"}


def panel_scores() -> list[dict[str, Any]]:
    """Three-rater panel: Technical Skills (4) and Teamwork (5)."""
    return [
        {"rater_id": "michael", "competency_id": "4", "score": 4.5, "comment": "Strong"},
        {"rater_id": "lisa", "competency_id": "4", "score": 4.0},
        {"rater_id": "david", "competency_id": "4", "score": 4.0},
        {"rater_id": "michael", "competency_id": "5", "score": 4.0},
        {"rater_id": "lisa", "competency_id": "5", "score": 4.5},
        {"rater_id": "david", "competency_id": "5", "score": 4.0},
    ]


def make_draft(
    kind: AssessmentKind,
    competency_ids: Sequence[str],
    scores: Sequence[tuple[str, str, float]] = (),
    **overrides: Any,
) -> AssessmentDraft:
    """Build a draft from ``(rater_id, competency_id, score)`` triples."""
    return AssessmentDraft(
        subject_id=overrides.pop("subject_id", "employee-1"),
        kind=kind,
        competency_ids=tuple(competency_ids),
        scores=tuple(
            RaterScore(rater_id=rater, competency_id=competency, score=score)
            for rater, competency, score in scores
        ),
        **overrides,
    )
