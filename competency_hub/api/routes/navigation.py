from __future__ import annotations

import structlog
from competency_hub.api.deps import get_current_user
from competency_hub.api.schemas.navigation import NavigationResponse
from competency_hub.domain import User
from competency_hub.domain.services.role_authority import (
    accessible_prefixes,
    active_navigation,
    can_access,
)
from fastapi import APIRouter, Depends, Query

router = APIRouter(prefix="/navigation", tags=["Navigation"])
logger = structlog.get_logger()


@router.get("", response_model=NavigationResponse)
async def get_navigation(
    path: str | None = Query(None, description="Route currently displayed by the client"),
    user: User = Depends(get_current_user),  # noqa: B008
) -> NavigationResponse:
    """Menu tree for the caller's effective role, with active/expanded flags for ``path``."""
    role = user.effective_role
    items = active_navigation(path or "", role)

    logger.info(
        "navigation_resolved",
        user_id=user.user_id,
        effective_role=role.value,
        current_path=path,
    )
    return NavigationResponse(
        effective_role=role.value,
        granted_roles=list(user.roles),
        accessible_prefixes=accessible_prefixes(role),
        current_path=path,
        can_access=can_access(path, role) if path is not None else None,
        items=items,
    )
