"""Candidate search: semantic similarity blended with archetype fit.

Flow:
    criteria
      ├─ load_archetype(criteria.archetype)            → Archetype
      ├─ embedder.generate_query_embedding(...)        → query vector
      ├─ store.search_by_embedding(vector, threshold, 2 * limit)
      │       (no matches → empty result, no bulk fetch)
      ├─ store.fetch_candidates(matched ids)
      ├─ per candidate: seniority gate floor (drop on fail) + archetype fit
      └─ combined score → sort desc → truncate to limit
"""

import logging

from models.schemas.candidate import (
    AssessmentStatus,
    CandidateSearchCriteria,
    CandidateSearchResult,
    CandidateSearchResults,
    EmbeddingStats,
)
from models.schemas.fit_result import DimensionScoreInput
from models.schemas.rubric import SeniorityLevel
from services.candidate_store import CandidateStore
from services.embeddings import EmbeddingProvider
from services.rounding import round_half_up
from services.rubric.fit_score import calculate_archetype_fit, meets_seniority_threshold
from services.rubric.load_rubric import load_archetype
from services.rubric_store import RubricStore

logger = logging.getLogger(__name__)

# Fit score outweighs semantic similarity in the combined ranking score.
SEMANTIC_WEIGHT = 0.4
FIT_SCORE_WEIGHT = 0.6

# Fetch extra semantic matches so the seniority floor can drop some.
SEARCH_HEADROOM = 2


def calculate_combined_score(semantic_similarity: float, fit_score: float) -> float:
    """Blend similarity (0-1) and fit score (0-100) into a 0-100 ranking score."""
    normalized_similarity = semantic_similarity * 100
    combined = SEMANTIC_WEIGHT * normalized_similarity + FIT_SCORE_WEIGHT * fit_score
    return round_half_up(combined)


async def search_candidates(
    criteria: CandidateSearchCriteria,
    *,
    rubric_store: RubricStore,
    candidate_store: CandidateStore,
    embedder: EmbeddingProvider,
) -> CandidateSearchResults:
    """Find and rank candidates for the given criteria."""
    archetype = load_archetype(rubric_store, criteria.archetype)

    query_text = embedder.build_query_text(
        criteria.skills, criteria.experience_domains, criteria.additional_context
    )
    query_embedding = await embedder.generate_query_embedding(
        criteria.skills, criteria.experience_domains, criteria.additional_context
    )

    semantic_matches = candidate_store.search_by_embedding(
        query_embedding,
        criteria.similarity_threshold,
        criteria.limit * SEARCH_HEADROOM,
    )
    if not semantic_matches:
        logger.info("No semantic matches above %.2f", criteria.similarity_threshold)
        return CandidateSearchResults(
            candidates=[], total_matches=0, criteria=criteria, query_text=query_text
        )

    candidate_data = candidate_store.fetch_candidates(
        [m.video_assessment_id for m in semantic_matches]
    )
    floor = criteria.seniority_level

    processed: list[CandidateSearchResult] = []
    for match in semantic_matches:
        data = candidate_data.get(match.video_assessment_id)
        if data is None:
            continue

        dimension_scores = [
            DimensionScoreInput(
                dimension_slug=s.dimension_slug,
                dimension_name=s.dimension_name,
                score=s.score,
            )
            for s in data.scores
        ]

        threshold_result = meets_seniority_threshold(
            dimension_scores, archetype, floor or SeniorityLevel.JUNIOR
        )
        if floor is not None and not threshold_result.meets_threshold:
            continue

        fit = calculate_archetype_fit(dimension_scores, archetype)
        observable_behaviors = "\n\n".join(
            f"{s.dimension_slug}: {s.observable_behaviors}" for s in data.scores
        )

        processed.append(
            CandidateSearchResult(
                video_assessment_id=match.video_assessment_id,
                candidate_id=data.candidate_id,
                candidate_name=data.candidate_name,
                candidate_email=data.candidate_email,
                semantic_similarity=match.similarity,
                fit=fit,
                threshold_result=threshold_result,
                combined_score=calculate_combined_score(match.similarity, fit.fit_score),
                dimension_scores=dimension_scores,
                observable_behaviors=observable_behaviors,
                overall_summary=data.overall_summary or "",
            )
        )

    processed.sort(key=lambda c: c.combined_score, reverse=True)
    logger.info(
        "Candidate search: %d semantic matches, %d after seniority filter",
        len(semantic_matches),
        len(processed),
    )

    return CandidateSearchResults(
        candidates=processed[: criteria.limit],
        total_matches=len(processed),
        criteria=criteria,
        query_text=query_text,
    )


def get_candidates_with_embeddings(
    store: CandidateStore,
    status: AssessmentStatus = AssessmentStatus.COMPLETED,
) -> list[str]:
    """Video assessment ids that have an embedding, for assessments in status."""
    return store.list_embedded_assessment_ids(status)


def get_embedding_stats(store: CandidateStore) -> EmbeddingStats:
    total = store.count_embeddings()
    completed = store.count_assessments(AssessmentStatus.COMPLETED)
    return EmbeddingStats(
        total_embeddings=total,
        completed_assessments=completed,
        pending_embeddings=completed - total,
    )
