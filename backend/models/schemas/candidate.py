"""Candidate assessment records, embeddings and search payloads."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from models.schemas.fit_result import (
    ArchetypeFitResult,
    DimensionScoreInput,
    ThresholdCheckResult,
)
from models.schemas.rubric import SeniorityLevel

DEFAULT_SIMILARITY_THRESHOLD = 0.3
DEFAULT_RESULT_LIMIT = 20


class AssessmentStatus(str, Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class AssessmentScore(BaseModel):
    dimension_slug: str
    dimension_name: str = ""
    score: float | None = None
    observable_behaviors: str = ""


class CandidateRecord(BaseModel):
    """A video assessment with the candidate identity, scores and summary."""
    video_assessment_id: str
    candidate_id: str
    candidate_name: str | None = None
    candidate_email: str | None = None
    status: AssessmentStatus = AssessmentStatus.COMPLETED
    scores: list[AssessmentScore] = []
    overall_summary: str | None = None


class CandidateEmbedding(BaseModel):
    video_assessment_id: str
    embedding: list[float]
    observable_behaviors_text: str = ""
    overall_summary_text: str = ""
    embedding_model: str = "text-embedding-004"
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EmbeddingMetadata(BaseModel):
    video_assessment_id: str
    embedding_model: str
    created_at: datetime | None = None


class SemanticMatch(BaseModel):
    video_assessment_id: str
    similarity: float  # 1 - cosine distance


class CandidateSearchCriteria(BaseModel):
    skills: list[str] = []
    experience_domains: list[str] = []
    archetype: str = Field(..., description="Archetype slug used for fit weighting")
    seniority_level: SeniorityLevel | None = None  # hard floor when set
    additional_context: str | None = None
    similarity_threshold: float = Field(DEFAULT_SIMILARITY_THRESHOLD, ge=0.0, le=1.0)
    limit: int = Field(DEFAULT_RESULT_LIMIT, ge=1, le=200)


class CandidateSearchResult(BaseModel):
    video_assessment_id: str
    candidate_id: str
    candidate_name: str | None = None
    candidate_email: str | None = None
    semantic_similarity: float
    fit: ArchetypeFitResult
    threshold_result: ThresholdCheckResult
    combined_score: float
    dimension_scores: list[DimensionScoreInput] = []
    observable_behaviors: str = ""
    overall_summary: str = ""


class CandidateSearchResults(BaseModel):
    candidates: list[CandidateSearchResult] = []
    total_matches: int = 0  # count before the limit is applied
    criteria: CandidateSearchCriteria
    query_text: str = ""


class EmbeddingStats(BaseModel):
    total_embeddings: int = 0
    completed_assessments: int = 0
    pending_embeddings: int = 0


class EmbeddingResult(BaseModel):
    success: bool
    embedding_id: str | None = None
    error: str | None = None
