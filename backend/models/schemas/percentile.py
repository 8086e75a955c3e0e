"""Population percentile payloads for a single assessment."""

from datetime import datetime

from pydantic import BaseModel


class DimensionPercentile(BaseModel):
    dimension: str
    score: float
    percentile: int
    rank: int  # 1 = highest score in the population
    total_candidates: int
    description: str


class PercentileResult(BaseModel):
    video_assessment_id: str
    dimensions: list[DimensionPercentile]
    overall_score: float
    overall_percentile: int
    overall_description: str
    total_candidates: int
    calculated_at: datetime
