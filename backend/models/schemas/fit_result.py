"""Scoring inputs and derived fit results (never persisted)."""

from pydantic import BaseModel

from models.schemas.rubric import SeniorityLevel


class DimensionScoreInput(BaseModel):
    """A candidate's score on one dimension. None means not yet evaluated."""
    dimension_slug: str
    dimension_name: str = ""
    score: float | None = None


class WeightBreakdownItem(BaseModel):
    dimension_slug: str
    dimension_name: str = ""
    raw_score: float = 0.0  # 0 when the dimension is unscored
    weight: float
    weighted_score: float = 0.0


class GateBreakdownItem(BaseModel):
    seniority_level: SeniorityLevel
    passes: bool
    failing_dimensions: list[str] = []


class ThresholdCheckResult(BaseModel):
    seniority_level: SeniorityLevel
    meets_threshold: bool
    failing_dimensions: list[str] = []


class ArchetypeFitResult(BaseModel):
    archetype_slug: str
    archetype_name: str
    fit_score: float = 0.0  # 0-100, one decimal
    seniority_match: SeniorityLevel | None = None
    role_relevant_strengths: list[str] = []
    role_relevant_gaps: list[str] = []
    weight_breakdown: list[WeightBreakdownItem] = []
    gate_breakdown: list[GateBreakdownItem] = []
