from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_candidate_store, get_embedder, get_rubric_store
from config import settings
from models.requests import FitRequest, LevelFitRequest, MultiFitRequest, ScoreInput
from models.responses import HealthResponse, LevelFitResponse
from models.schemas.candidate import (
    AssessmentStatus,
    CandidateSearchCriteria,
    CandidateSearchResults,
    EmbeddingResult,
    EmbeddingStats,
)
from models.schemas.fit_result import ArchetypeFitResult, DimensionScoreInput
from models.schemas.percentile import PercentileResult
from models.schemas.rubric import Archetype, ResolvedRubric, SeniorityLevel
from services import candidate_search, embeddings, percentile
from services.candidate_store import InMemoryCandidateStore
from services.embeddings import EmbeddingProvider
from services.errors import AssessmentDataError, EmbeddingError, RubricConfigError
from services.rubric import dimension_mapping, fit_score, level_expectations
from services.rubric.load_rubric import (
    load_archetype,
    load_archetypes_for_role_family,
    load_rubric_for_role_family,
)
from services.rubric_store import RubricStore

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _to_score_inputs(scores: list[ScoreInput]) -> list[DimensionScoreInput]:
    return [
        DimensionScoreInput(
            dimension_slug=s.dimension_slug,
            dimension_name=s.dimension_name,
            score=s.score,
        )
        for s in scores
    ]


@router.get("/health", response_model=HealthResponse)
async def health(rubric_store: RubricStore = Depends(get_rubric_store)):
    return HealthResponse(
        status="ok",
        gemini_configured=bool(settings.gemini_api_key),
        embedding_provider=settings.embedding_provider,
        role_families=len(rubric_store.list_role_families()),
    )


# ---------------------------------------------------------------------------
# Rubric configuration
# ---------------------------------------------------------------------------

@router.get("/role-families/{slug}/rubric", response_model=ResolvedRubric)
async def get_rubric(slug: str, rubric_store: RubricStore = Depends(get_rubric_store)):
    try:
        return load_rubric_for_role_family(rubric_store, slug)
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/role-families/{slug}/archetypes", response_model=list[Archetype])
async def get_role_family_archetypes(
    slug: str, rubric_store: RubricStore = Depends(get_rubric_store)
):
    try:
        return load_archetypes_for_role_family(rubric_store, slug)
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/archetypes/{slug}", response_model=Archetype)
async def get_archetype(slug: str, rubric_store: RubricStore = Depends(get_rubric_store)):
    try:
        return load_archetype(rubric_store, slug)
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/archetypes/{slug}/expected-scores", response_model=dict[str, float])
async def get_expected_scores(
    slug: str,
    level: SeniorityLevel = SeniorityLevel.MID,
    rubric_store: RubricStore = Depends(get_rubric_store),
):
    """Expected assessment-dimension scores implied by the level's gates."""
    try:
        archetype = load_archetype(rubric_store, slug)
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return dimension_mapping.expected_scores_for_archetype(archetype, level)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

@router.post("/fit", response_model=ArchetypeFitResult)
async def archetype_fit(body: FitRequest, rubric_store: RubricStore = Depends(get_rubric_store)):
    try:
        archetype = load_archetype(rubric_store, body.archetype_slug)
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return fit_score.calculate_archetype_fit(_to_score_inputs(body.scores), archetype)


@router.post("/fit/multiple", response_model=list[ArchetypeFitResult])
async def archetype_fit_multiple(
    body: MultiFitRequest, rubric_store: RubricStore = Depends(get_rubric_store)
):
    try:
        if body.archetype_slugs:
            archetypes = [load_archetype(rubric_store, s) for s in body.archetype_slugs]
        else:
            archetypes = load_archetypes_for_role_family(rubric_store, body.role_family_slug)
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return fit_score.calculate_fit_for_multiple_archetypes(
        _to_score_inputs(body.scores), archetypes
    )


@router.post("/level-fit", response_model=LevelFitResponse)
async def level_fit(body: LevelFitRequest):
    expectation = level_expectations.LEVEL_EXPECTATIONS[body.level]
    return LevelFitResponse(
        level=body.level,
        label=expectation.label,
        expected_score=expectation.expected_score,
        score_fit=level_expectations.get_score_fit(body.score, body.level),
        relative_strength=level_expectations.get_relative_strength(body.score, body.level),
    )


# ---------------------------------------------------------------------------
# Search and embeddings
# ---------------------------------------------------------------------------

@router.post("/candidates/search", response_model=CandidateSearchResults)
@limiter.limit(settings.search_rate_limit)
async def search(
    request: Request,
    body: CandidateSearchCriteria,
    rubric_store: RubricStore = Depends(get_rubric_store),
    candidate_store: InMemoryCandidateStore = Depends(get_candidate_store),
    embedder: EmbeddingProvider = Depends(get_embedder),
):
    try:
        return await candidate_search.search_candidates(
            body,
            rubric_store=rubric_store,
            candidate_store=candidate_store,
            embedder=embedder,
        )
    except RubricConfigError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmbeddingError as e:
        raise HTTPException(status_code=503, detail=f"Embedding service unavailable: {e}")


@router.get("/embeddings/candidates", response_model=list[str])
async def embedded_candidates(
    status: AssessmentStatus = AssessmentStatus.COMPLETED,
    candidate_store: InMemoryCandidateStore = Depends(get_candidate_store),
):
    return candidate_search.get_candidates_with_embeddings(candidate_store, status)


@router.get("/embeddings/stats", response_model=EmbeddingStats)
async def embedding_stats(candidate_store: InMemoryCandidateStore = Depends(get_candidate_store)):
    return candidate_search.get_embedding_stats(candidate_store)


@router.post("/embeddings/{video_assessment_id}", response_model=EmbeddingResult)
@limiter.limit(settings.search_rate_limit)
async def index_assessment(
    request: Request,
    video_assessment_id: str,
    candidate_store: InMemoryCandidateStore = Depends(get_candidate_store),
    embedder: EmbeddingProvider = Depends(get_embedder),
):
    return await embeddings.generate_and_store_embeddings(
        candidate_store, embedder, video_assessment_id
    )


# ---------------------------------------------------------------------------
# Population percentiles
# ---------------------------------------------------------------------------

@router.get("/assessments/percentiles", response_model=dict[str, PercentileResult])
async def all_percentiles(candidate_store: InMemoryCandidateStore = Depends(get_candidate_store)):
    return percentile.calculate_all_percentiles(candidate_store)


@router.get("/assessments/{video_assessment_id}/percentiles", response_model=PercentileResult)
async def assessment_percentiles(
    video_assessment_id: str,
    candidate_store: InMemoryCandidateStore = Depends(get_candidate_store),
):
    try:
        return percentile.calculate_percentiles(candidate_store, video_assessment_id)
    except AssessmentDataError as e:
        raise HTTPException(status_code=404, detail=str(e))
