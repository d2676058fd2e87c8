from __future__ import annotations

import structlog
from competency_hub.domain.reference_data import COMPETENCY_DEFINITIONS
from competency_hub.infrastructure.db.models import CompetencyModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger(__name__)


async def seed_reference_data(session: AsyncSession) -> int:
    """Insert the standard competency catalog entries that are missing. Returns rows added."""
    existing = set((await session.execute(select(CompetencyModel.id))).scalars().all())

    added = 0
    for definition in COMPETENCY_DEFINITIONS:
        if definition["id"] in existing:
            continue
        session.add(CompetencyModel(**definition))
        added += 1

    await session.commit()
    logger.info("competency_catalog_seeded", added=added, existing=len(existing))
    return added
