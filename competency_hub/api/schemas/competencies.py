from __future__ import annotations

from pydantic import BaseModel, Field


class CompetencyItem(BaseModel):
    id: str
    name: str
    domain: str | None = None


class CompetenciesResponse(BaseModel):
    competencies: list[CompetencyItem]


class CompetencyCreate(BaseModel):
    id: str | None = Field(None, min_length=1, max_length=36)
    name: str = Field(..., min_length=1, max_length=128)
    domain: str | None = Field(None, max_length=128)
    description: str | None = None
