from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog
from competency_hub.domain.models import Competency
from competency_hub.infrastructure.db.models import CompetencyModel
from sqlalchemy import select

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)


class CompetencyExistsError(Exception):
    """Raised when a competency name or id is already taken."""


class CompetencyCatalog:
    """Read access to the competency catalog plus HR-only additions."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_competencies(self, *, include_inactive: bool = False) -> list[Competency]:
        stmt: Select[tuple[CompetencyModel]] = select(CompetencyModel).order_by(
            CompetencyModel.name
        )
        if not include_inactive:
            stmt = stmt.where(CompetencyModel.is_active == True)  # noqa: E712
        rows = (await self.session.execute(stmt)).scalars().all()
        return [Competency(id=row.id, name=row.name, domain=row.domain) for row in rows]

    async def add(
        self,
        *,
        name: str,
        domain: str | None = None,
        description: str | None = None,
        competency_id: str | None = None,
        created_by: str,
    ) -> Competency:
        competency_id = competency_id or str(uuid.uuid4())
        existing = await self.session.scalar(
            select(CompetencyModel).where(
                (CompetencyModel.id == competency_id) | (CompetencyModel.name == name)
            )
        )
        if existing is not None:
            raise CompetencyExistsError(f"Competency '{name}' already exists")

        row = CompetencyModel(
            id=competency_id,
            name=name,
            domain=domain,
            description=description,
        )
        self.session.add(row)
        await self.session.commit()

        logger.info(
            "competency_created",
            competency_id=row.id,
            competency_name=row.name,
            hr_user=created_by,
        )
        return Competency(id=row.id, name=row.name, domain=row.domain)
