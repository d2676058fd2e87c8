"""
Role-scoped navigation authorization.

A user may hold several granted roles but every decision is made against a
single effective role, the most privileged one granted. Each role owns a URL
namespace (``""``, ``/assessor``, ``/hr``) and can reach its own namespace plus
those of every role below it.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from typing import Any

from competency_hub.domain.models import Role
from competency_hub.domain.reference_data import NAVIGATION_TREES, PUBLIC_PATHS


def effective_role(granted_roles: Iterable[object] | None) -> Role:
    """Collapse a granted-role set to the highest-privilege role (employee when empty)."""
    granted = {Role.parse(role) for role in granted_roles or ()}
    if Role.HR in granted:
        return Role.HR
    if Role.ASSESSOR in granted:
        return Role.ASSESSOR
    return Role.EMPLOYEE


def accessible_prefixes(role: Role | str) -> list[str]:
    """Prefixes of ``role`` and every role below it, most privileged first."""
    resolved = Role.parse(role)
    return [candidate.prefix for candidate in Role.descending() if candidate <= resolved]


def is_active(current_path: str, target_path: str, role: Role | str) -> bool:
    """True only when ``current_path`` equals ``target_path`` under one of the role's prefixes.

    Matching is exact: ``/hr/job`` is not active while ``/hr/job-competency-profile``
    is being viewed.
    """
    for prefix in accessible_prefixes(role):
        full_path = target_path if target_path.startswith(prefix) else f"{prefix}{target_path}"
        if current_path == full_path:
            return True
    return False


def navigation_set_for(role: Role | str) -> list[dict[str, Any]]:
    """Menu tree for a role. Returns a copy; the configured trees are never mutated."""
    return copy.deepcopy(NAVIGATION_TREES[Role.parse(role)])


def active_navigation(current_path: str, role: Role | str) -> list[dict[str, Any]]:
    """Menu tree with ``active`` flags per link and ``expanded`` per section."""
    tree = navigation_set_for(role)
    for item in tree:
        sub_items = item.get("sub_items")
        if sub_items:
            for sub_item in sub_items:
                sub_item["active"] = is_active(current_path, sub_item["path"], role)
            item["expanded"] = any(sub_item["active"] for sub_item in sub_items)
        elif item.get("path"):
            item["active"] = is_active(current_path, item["path"], role)
    return tree


def path_role(path: str) -> Role:
    """Role whose namespace owns ``path``, decided on the first path segment."""
    first_segment = path.lstrip("/").split("/", 1)[0]
    for role in Role.descending():
        if role.prefix and first_segment == role.prefix.lstrip("/"):
            return role
    return Role.EMPLOYEE


def can_access(path: str, role: Role | str) -> bool:
    """Route guard: public paths are open, everything else needs the owning role or higher."""
    normalized = path.split("?", 1)[0]
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    if normalized in PUBLIC_PATHS:
        return True
    return path_role(normalized) <= Role.parse(role)
