"""Integration tests for the navigation endpoint."""

from __future__ import annotations

from competency_hub.domain import Role
from fastapi import status
from httpx import AsyncClient

from tests.utils import auth_headers, multi_role_headers


def _section(payload: dict, name: str) -> dict:
    return next(item for item in payload["items"] if item["name"] == name)


class TestNavigationEndpoint:
    """Tests for GET /navigation."""

    async def test_requires_token(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/navigation")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    async def test_hr_menu_with_active_link(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/navigation", params={"path": "/hr/job"}, headers=auth_headers("hr-1", Role.HR)
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["effective_role"] == "hr"
        assert data["accessible_prefixes"] == ["/hr", "/assessor", ""]
        assert data["can_access"] is True

        job_profiling = _section(data, "Job Profiling")
        assert job_profiling["expanded"] is True
        assert [link["active"] for link in job_profiling["sub_items"]] == [True, False]

    async def test_multiple_roles_resolve_to_highest(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/navigation", headers=multi_role_headers("u-1", ["employee", "assessor"])
        )

        data = response.json()
        assert data["effective_role"] == "assessor"
        assert data["granted_roles"] == ["employee", "assessor"]
        assert data["items"][0]["path"] == "/assessor/page-description"
        assert data["can_access"] is None

    async def test_no_roles_means_employee(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/navigation", headers=multi_role_headers("u-2", []))

        assert response.json()["effective_role"] == "employee"

    async def test_employee_denied_hr_route(self, async_client: AsyncClient) -> None:
        response = await async_client.get(
            "/navigation", params={"path": "/hr/job"}, headers=auth_headers("emp-1")
        )

        data = response.json()
        assert data["effective_role"] == "employee"
        assert data["can_access"] is False
        assert all(not item["expanded"] for item in data["items"])
