"""Embedding provider for candidate semantic search.

Two backends produce 768-dim vectors:
    gemini  - Google text-embedding-004 through google-genai
    local   - sentence-transformers all-mpnet-base-v2, loaded lazily

Assessment documents are embedded from the observable behaviors per
dimension plus the overall summary; search queries from skills, experience
domains and optional free text.
"""

import asyncio
import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from config import settings
from models.schemas.candidate import (
    AssessmentScore,
    AssessmentStatus,
    CandidateEmbedding,
    EmbeddingResult,
)
from services import gemini_client
from services.candidate_store import CandidateStore
from services.errors import EmbeddingError

logger = logging.getLogger(__name__)

# Lazy-loaded local model (loaded on first use, ~420MB)
_sbert_model = None

DIMENSION_LABELS: dict[str, str] = {
    "COMMUNICATION": "Communication Skills",
    "PROBLEM_SOLVING": "Problem Solving Ability",
    "TECHNICAL_KNOWLEDGE": "Technical Knowledge",
    "COLLABORATION": "Collaboration and Teamwork",
    "ADAPTABILITY": "Adaptability and Flexibility",
    "LEADERSHIP": "Leadership Capabilities",
    "CREATIVITY": "Creativity and Innovation",
    "TIME_MANAGEMENT": "Time Management Skills",
}

FALLBACK_QUERY_TEXT = "General software engineering candidate"

SUPPORTED_BACKENDS = ("gemini", "local")


def _get_sbert_model():
    """Load the local sentence-transformers model lazily on first call."""
    global _sbert_model
    if _sbert_model is None:
        from sentence_transformers import SentenceTransformer

        _sbert_model = SentenceTransformer(settings.local_embedding_model)
        logger.info("Local embedding model loaded: %s", settings.local_embedding_model)
    return _sbert_model


# ---------------------------------------------------------------------------
# Text preparation
# ---------------------------------------------------------------------------

def build_query_text(
    skills: Sequence[str],
    experience_domains: Sequence[str],
    additional_context: str | None = None,
) -> str:
    parts: list[str] = []
    if skills:
        parts.append(f"Required skills and technologies: {', '.join(skills)}")
    if experience_domains:
        parts.append(f"Experience domains: {', '.join(experience_domains)}")
    if additional_context:
        parts.append(f"Additional requirements: {additional_context}")
    return "\n\n".join(parts) or FALLBACK_QUERY_TEXT


def format_dimension_scores_for_embedding(scores: Sequence[AssessmentScore]) -> str:
    """Labelled observable-behavior sections, one per scored dimension."""
    sections = []
    for s in scores:
        label = DIMENSION_LABELS.get(s.dimension_slug) or s.dimension_name or s.dimension_slug
        sections.append(f"{label}:\n{s.observable_behaviors}")
    return "\n\n".join(sections)


def create_embedding_text(scores: Sequence[AssessmentScore], overall_summary: str) -> str:
    behaviors_text = format_dimension_scores_for_embedding(scores)
    return (
        "CANDIDATE ASSESSMENT PROFILE\n\n"
        f"OBSERVABLE BEHAVIORS:\n{behaviors_text}\n\n"
        f"OVERALL SUMMARY:\n{overall_summary}"
    )


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class EmbeddingProvider:
    """Generates fixed-length embeddings with retry and dimension checks."""

    def __init__(
        self,
        backend: str | None = None,
        dimensions: int | None = None,
        max_attempts: int | None = None,
        base_delay_s: float | None = None,
        max_delay_s: float | None = None,
    ) -> None:
        self.backend = backend or settings.embedding_provider
        if self.backend not in SUPPORTED_BACKENDS:
            raise EmbeddingError(f"Unknown embedding provider: {self.backend}")
        self.dimensions = dimensions or settings.embedding_dimensions
        self.max_attempts = max_attempts or settings.embedding_max_attempts
        self.base_delay_s = settings.embedding_base_delay_s if base_delay_s is None else base_delay_s
        self.max_delay_s = settings.embedding_max_delay_s if max_delay_s is None else max_delay_s

    @property
    def model_name(self) -> str:
        if self.backend == "local":
            return settings.local_embedding_model
        return settings.embedding_model

    async def _embed_once(self, text: str) -> list[float]:
        if self.backend == "gemini":
            return await gemini_client.embed_text(text)
        model = _get_sbert_model()
        vector = await asyncio.to_thread(model.encode, text, convert_to_numpy=True)
        return [float(v) for v in vector]

    async def embed(self, text: str) -> list[float]:
        """Embed text once, validating the vector length."""
        vector = await self._embed_once(text)
        if len(vector) != self.dimensions:
            raise EmbeddingError(
                f"Expected {self.dimensions}-dim embedding, got {len(vector)}"
            )
        return vector

    async def embed_with_retry(self, text: str) -> list[float]:
        """Embed with exponential backoff between failed attempts."""
        attempt = 0
        while True:
            attempt += 1
            try:
                return await self.embed(text)
            except Exception as e:
                if attempt >= self.max_attempts:
                    logger.error("Embedding failed after %d attempts: %s", attempt, e)
                    if isinstance(e, EmbeddingError):
                        raise
                    raise EmbeddingError(str(e)) from e
                delay = min(self.base_delay_s * 2 ** (attempt - 1), self.max_delay_s)
                logger.warning(
                    "Embedding attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_attempts,
                    e,
                    delay,
                )
                await asyncio.sleep(delay)

    def build_query_text(
        self,
        skills: Sequence[str],
        experience_domains: Sequence[str],
        additional_context: str | None = None,
    ) -> str:
        return build_query_text(skills, experience_domains, additional_context)

    async def generate_query_embedding(
        self,
        skills: Sequence[str],
        experience_domains: Sequence[str],
        additional_context: str | None = None,
    ) -> list[float]:
        query_text = self.build_query_text(skills, experience_domains, additional_context)
        return await self.embed_with_retry(query_text)


# ---------------------------------------------------------------------------
# Indexing
# ---------------------------------------------------------------------------

async def generate_and_store_embeddings(
    store: CandidateStore,
    provider: EmbeddingProvider,
    video_assessment_id: str,
) -> EmbeddingResult:
    """Embed a completed assessment and upsert it into the candidate store.

    Returns a failed EmbeddingResult (never raises) when the assessment is
    not ready for indexing or the provider fails.
    """
    assessment = store.get_assessment(video_assessment_id)
    if assessment is None:
        return EmbeddingResult(
            success=False, error=f"Video assessment not found: {video_assessment_id}"
        )
    if assessment.status != AssessmentStatus.COMPLETED:
        return EmbeddingResult(
            success=False,
            error=f"Video assessment is not completed (status: {assessment.status.value})",
        )
    if not assessment.scores:
        return EmbeddingResult(success=False, error="No dimension scores available for embedding")
    if not assessment.overall_summary:
        return EmbeddingResult(success=False, error="No summary available for embedding")

    behaviors_text = format_dimension_scores_for_embedding(assessment.scores)
    text = create_embedding_text(assessment.scores, assessment.overall_summary)

    try:
        vector = await provider.embed_with_retry(text)
    except EmbeddingError as e:
        logger.error("Failed to generate embeddings for %s: %s", video_assessment_id, e)
        return EmbeddingResult(success=False, error=str(e))

    now = datetime.now(timezone.utc)
    embedding_id = store.upsert_embedding(
        CandidateEmbedding(
            video_assessment_id=video_assessment_id,
            embedding=vector,
            observable_behaviors_text=behaviors_text,
            overall_summary_text=assessment.overall_summary,
            embedding_model=provider.model_name,
            created_at=now,
            updated_at=now,
        )
    )
    if embedding_id is None:
        return EmbeddingResult(
            success=False,
            error=f"Candidate store rejected {len(vector)}-dim embedding (dimension mismatch)",
        )
    logger.info("Generated and stored embedding for video assessment %s", video_assessment_id)
    return EmbeddingResult(success=True, embedding_id=embedding_id)
