"""Population percentiles for completed assessments.

Each dimension score is placed against every completed assessment that
scored the same dimension:

    percentile = candidates strictly below / candidates scored * 100
    rank       = 1 + candidates strictly above

Tied candidates therefore share a percentile and a rank. The overall
percentile compares the assessment's mean score against the mean score of
every completed assessment in the same way. The population includes the
assessment itself, so a lone candidate sits at the 0th percentile, rank 1.
"""

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from models.schemas.candidate import AssessmentStatus, CandidateRecord
from models.schemas.percentile import DimensionPercentile, PercentileResult
from services.candidate_store import CandidateStore
from services.errors import AssessmentDataError
from services.rounding import round_half_up

logger = logging.getLogger(__name__)

# Reported when no other assessment scored the dimension
DEFAULT_PERCENTILE = 50

PERCENTILE_BANDS: list[tuple[int, str]] = [
    (90, "Top 10%"),
    (75, "Top 25%"),
    (50, "Above average"),
    (25, "Below average"),
]
BOTTOM_BAND = "Bottom 25%"


def percentile_of(value: float, population: Sequence[float]) -> int:
    if not population:
        return DEFAULT_PERCENTILE
    below = sum(1 for v in population if v < value)
    return int(round_half_up(below / len(population) * 100, 0))


def rank_of(value: float, population: Sequence[float]) -> int:
    return 1 + sum(1 for v in population if v > value)


def get_percentile_description(percentile: int) -> str:
    for floor, label in PERCENTILE_BANDS:
        if percentile >= floor:
            return label
    return BOTTOM_BAND


def _scored(record: CandidateRecord) -> dict[str, float]:
    return {s.dimension_slug: s.score for s in record.scores if s.score is not None}


def _mean(values) -> float:
    values = list(values)
    return sum(values) / len(values)


def calculate_percentiles_from_population(
    target: CandidateRecord,
    population: Sequence[CandidateRecord],
) -> PercentileResult:
    """Percentiles of target's scores within population.

    Raises AssessmentDataError when the target has no scores or the
    population holds no scored assessment.
    """
    target_scores = _scored(target)
    if not target_scores:
        raise AssessmentDataError(
            f"No dimension scores for video assessment: {target.video_assessment_id}"
        )

    scored_population = [s for s in (_scored(r) for r in population) if s]
    if not scored_population:
        raise AssessmentDataError("No completed assessments to compare against")

    dimensions: list[DimensionPercentile] = []
    for slug, score in target_scores.items():
        values = [scores[slug] for scores in scored_population if slug in scores]
        percentile = percentile_of(score, values)
        dimensions.append(
            DimensionPercentile(
                dimension=slug,
                score=score,
                percentile=percentile,
                rank=rank_of(score, values),
                total_candidates=len(values),
                description=get_percentile_description(percentile),
            )
        )

    overall_score = _mean(target_scores.values())
    overall = percentile_of(overall_score, [_mean(s.values()) for s in scored_population])

    return PercentileResult(
        video_assessment_id=target.video_assessment_id,
        dimensions=dimensions,
        overall_score=round_half_up(overall_score, 2),
        overall_percentile=overall,
        overall_description=get_percentile_description(overall),
        total_candidates=len(scored_population),
        calculated_at=datetime.now(timezone.utc),
    )


def calculate_percentiles(store: CandidateStore, video_assessment_id: str) -> PercentileResult:
    """Percentiles of one completed assessment against all completed ones."""
    target = store.get_assessment(video_assessment_id)
    if target is None:
        raise AssessmentDataError(f"Video assessment not found: {video_assessment_id}")
    if target.status != AssessmentStatus.COMPLETED:
        raise AssessmentDataError(
            f"Video assessment is not completed (status: {target.status.value})"
        )

    population = store.list_assessments(AssessmentStatus.COMPLETED)
    result = calculate_percentiles_from_population(target, population)
    logger.info(
        "Percentiles for %s: overall %d against %d candidates",
        video_assessment_id,
        result.overall_percentile,
        result.total_candidates,
    )
    return result


def calculate_all_percentiles(store: CandidateStore) -> dict[str, PercentileResult]:
    """Percentiles for every completed assessment, skipping unscored ones."""
    population = store.list_assessments(AssessmentStatus.COMPLETED)
    results: dict[str, PercentileResult] = {}
    for record in population:
        try:
            results[record.video_assessment_id] = calculate_percentiles_from_population(
                record, population
            )
        except AssessmentDataError as e:
            logger.warning("Skipping percentiles for %s: %s", record.video_assessment_id, e)
    return results
