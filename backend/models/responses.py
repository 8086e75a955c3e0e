from pydantic import BaseModel


class LevelFitResponse(BaseModel):
    level: str
    label: str
    expected_score: float
    score_fit: str  # exceeds | meets | below
    relative_strength: str


class HealthResponse(BaseModel):
    status: str = "ok"
    gemini_configured: bool = False
    embedding_provider: str = ""
    role_families: int = 0
