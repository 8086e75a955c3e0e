"""Archetype fit scoring and seniority gate checks.

fit_score = sum(score * weight) / sum(4 * weight) * 100

The denominator always carries the full weight of every archetype
dimension: an unscored (None) dimension adds nothing to the numerator but
still counts toward the maximum.
"""

from collections.abc import Iterable, Sequence

from models.schemas.fit_result import (
    ArchetypeFitResult,
    DimensionScoreInput,
    GateBreakdownItem,
    ThresholdCheckResult,
    WeightBreakdownItem,
)
from models.schemas.rubric import SENIORITY_ORDER, Archetype, SeniorityLevel
from services.rounding import round_half_up

MAX_RUBRIC_SCORE = 4
TOP_N_STRENGTHS = 3
TOP_N_GAPS = 3
GAP_MAX_SCORE = 2


def _index_scores(
    scores: Iterable[DimensionScoreInput],
) -> tuple[dict[str, float], dict[str, str]]:
    score_map: dict[str, float] = {}
    name_map: dict[str, str] = {}
    for s in scores:
        if s.score is not None:
            score_map[s.dimension_slug] = s.score
        name_map[s.dimension_slug] = s.dimension_name
    return score_map, name_map


def _gate_breakdown(
    score_map: dict[str, float],
    name_map: dict[str, str],
    archetype: Archetype,
) -> list[GateBreakdownItem]:
    breakdown: list[GateBreakdownItem] = []
    for level in SENIORITY_ORDER:
        failing: list[str] = []
        for gate in archetype.seniority_gates:
            if gate.seniority_level != level:
                continue
            candidate_score = score_map.get(gate.dimension_slug)
            if candidate_score is None or candidate_score < gate.min_score:
                failing.append(
                    name_map.get(gate.dimension_slug)
                    or gate.dimension_name
                    or gate.dimension_slug
                )
        breakdown.append(
            GateBreakdownItem(seniority_level=level, passes=not failing, failing_dimensions=failing)
        )
    return breakdown


def _seniority_match(breakdown: list[GateBreakdownItem]) -> SeniorityLevel | None:
    match: SeniorityLevel | None = None
    for item in breakdown:
        if item.passes:
            match = item.seniority_level
    return match


def check_seniority_gates(
    scores: Sequence[DimensionScoreInput],
    archetype: Archetype,
) -> tuple[SeniorityLevel | None, list[GateBreakdownItem]]:
    """Evaluate every seniority level's gates.

    Returns (seniority_match, gate_breakdown). The match is the last level in
    JUNIOR -> MID -> SENIOR order whose gates all pass; levels are checked
    independently, so a higher level can match while a lower one fails.
    """
    score_map, name_map = _index_scores(scores)
    breakdown = _gate_breakdown(score_map, name_map, archetype)
    return _seniority_match(breakdown), breakdown


def meets_seniority_threshold(
    scores: Sequence[DimensionScoreInput],
    archetype: Archetype,
    level: SeniorityLevel,
) -> ThresholdCheckResult:
    """Check a candidate against the gates of a single seniority level."""
    _, breakdown = check_seniority_gates(scores, archetype)
    item = next(b for b in breakdown if b.seniority_level == level)
    return ThresholdCheckResult(
        seniority_level=level,
        meets_threshold=item.passes,
        failing_dimensions=item.failing_dimensions,
    )


def filter_candidates_by_seniority(
    candidates: Iterable[tuple[str, Sequence[DimensionScoreInput]]],
    archetype: Archetype,
    level: SeniorityLevel,
) -> list[str]:
    """Return the ids of (id, scores) pairs that meet the level's gates."""
    return [
        candidate_id
        for candidate_id, scores in candidates
        if meets_seniority_threshold(scores, archetype, level).meets_threshold
    ]


def calculate_archetype_fit(
    scores: Sequence[DimensionScoreInput],
    archetype: Archetype,
) -> ArchetypeFitResult:
    """Calculate the weighted fit of a candidate against an archetype."""
    score_map, name_map = _index_scores(scores)

    weighted_sum = 0.0
    max_possible = 0.0
    weight_breakdown: list[WeightBreakdownItem] = []
    scored: list[WeightBreakdownItem] = []

    for w in archetype.weights:
        max_possible += MAX_RUBRIC_SCORE * w.weight
        raw_score = score_map.get(w.dimension_slug)

        if raw_score is not None:
            weighted_score = raw_score * w.weight
            weighted_sum += weighted_score
            item = WeightBreakdownItem(
                dimension_slug=w.dimension_slug,
                dimension_name=w.dimension_name,
                raw_score=raw_score,
                weight=w.weight,
                weighted_score=weighted_score,
            )
            scored.append(item)
        else:
            item = WeightBreakdownItem(
                dimension_slug=w.dimension_slug,
                dimension_name=w.dimension_name,
                raw_score=0,
                weight=w.weight,
                weighted_score=0,
            )
        weight_breakdown.append(item)

    fit_score = round_half_up(weighted_sum / max_possible * 100) if max_possible > 0 else 0.0

    gate_breakdown = _gate_breakdown(score_map, name_map, archetype)

    strengths = sorted(scored, key=lambda w: w.weighted_score, reverse=True)[:TOP_N_STRENGTHS]
    gaps = [
        w for w in sorted(scored, key=lambda w: w.raw_score) if w.raw_score <= GAP_MAX_SCORE
    ][:TOP_N_GAPS]

    return ArchetypeFitResult(
        archetype_slug=archetype.slug,
        archetype_name=archetype.name,
        fit_score=fit_score,
        seniority_match=_seniority_match(gate_breakdown),
        role_relevant_strengths=[w.dimension_name for w in strengths],
        role_relevant_gaps=[w.dimension_name for w in gaps],
        weight_breakdown=weight_breakdown,
        gate_breakdown=gate_breakdown,
    )


def calculate_fit_for_multiple_archetypes(
    scores: Sequence[DimensionScoreInput],
    archetypes: Iterable[Archetype],
) -> list[ArchetypeFitResult]:
    """Fit against several archetypes, best fit first."""
    results = [calculate_archetype_fit(scores, arch) for arch in archetypes]
    results.sort(key=lambda r: r.fit_score, reverse=True)
    return results
