from __future__ import annotations

from pydantic import BaseModel, Field


class NavigationLink(BaseModel):
    name: str
    path: str
    active: bool = False


class NavigationItem(BaseModel):
    name: str
    path: str | None = None
    active: bool = False
    expanded: bool = False
    sub_items: list[NavigationLink] = Field(default_factory=list)


class NavigationResponse(BaseModel):
    effective_role: str
    granted_roles: list[str]
    accessible_prefixes: list[str]
    current_path: str | None = None
    can_access: bool | None = Field(
        None, description="Whether the effective role may open current_path"
    )
    items: list[NavigationItem]
