from fastapi import FastAPI

from . import analytics, assessments, competencies, health, navigation


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(navigation.router)
    app.include_router(competencies.router)
    app.include_router(assessments.router)
    app.include_router(analytics.router)
