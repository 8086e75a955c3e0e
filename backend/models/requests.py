from typing import Literal

from pydantic import BaseModel, Field, model_validator


class ScoreInput(BaseModel):
    dimension_slug: str
    dimension_name: str = ""
    score: float | None = Field(None, ge=1, le=4, description="Rubric score 1-4, null if not evaluated")


class FitRequest(BaseModel):
    archetype_slug: str
    scores: list[ScoreInput] = Field(..., max_length=100)


class MultiFitRequest(BaseModel):
    role_family_slug: str | None = None
    archetype_slugs: list[str] = []
    scores: list[ScoreInput] = Field(..., max_length=100)

    @model_validator(mode="after")
    def _require_target(self):
        if not self.role_family_slug and not self.archetype_slugs:
            raise ValueError("Provide role_family_slug or archetype_slugs")
        return self


class LevelFitRequest(BaseModel):
    score: float = Field(..., ge=0, le=4)
    level: Literal["junior", "mid", "senior", "staff"]
