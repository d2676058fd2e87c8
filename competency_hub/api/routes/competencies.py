from __future__ import annotations

from competency_hub.api.deps import get_current_user, get_db_session, require_effective_role
from competency_hub.api.schemas.competencies import (
    CompetenciesResponse,
    CompetencyCreate,
    CompetencyItem,
)
from competency_hub.domain import Role, User
from competency_hub.domain.services.competencies import CompetencyCatalog, CompetencyExistsError
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/competencies", tags=["Competencies"])


@router.get("", response_model=CompetenciesResponse)
async def list_competencies(
    include_inactive: bool = Query(False),
    session: AsyncSession = Depends(get_db_session),
    _: User = Depends(get_current_user),
) -> CompetenciesResponse:
    """Return the competency catalog."""
    catalog = CompetencyCatalog(session)
    competencies = await catalog.list_competencies(include_inactive=include_inactive)
    return CompetenciesResponse(
        competencies=[
            CompetencyItem(id=item.id, name=item.name, domain=item.domain)
            for item in competencies
        ]
    )


@router.post("", response_model=CompetencyItem, status_code=status.HTTP_201_CREATED)
async def create_competency(
    payload: CompetencyCreate,
    session: AsyncSession = Depends(get_db_session),
    user: User = Depends(require_effective_role(Role.HR)),
) -> CompetencyItem:
    """Add a competency to the catalog (HR only)."""
    catalog = CompetencyCatalog(session)
    try:
        competency = await catalog.add(
            name=payload.name,
            domain=payload.domain,
            description=payload.description,
            competency_id=payload.id,
            created_by=user.user_id,
        )
    except CompetencyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    return CompetencyItem(id=competency.id, name=competency.name, domain=competency.domain)
