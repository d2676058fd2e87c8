#!/usr/bin/env python3
"""
Seed the standard competency catalog.

Run with:
    python scripts/seed_reference_data.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from competency_hub.core.logging import setup_logging
from competency_hub.infrastructure.db.seed import seed_reference_data
from competency_hub.infrastructure.db.session import dispose_engine, get_session_factory


async def main() -> None:
    setup_logging()
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            added = await seed_reference_data(session)
        print(f"Added {added} competencies")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
