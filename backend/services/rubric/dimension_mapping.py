"""Map rubric dimensions onto the eight fixed assessment dimensions.

Video assessment scores are stored under a fixed set of assessment
dimensions, while rubrics are role-family specific. A seniority gate's
minimum score on a rubric dimension becomes the expected score for the
assessment dimension it maps to. When several rubric dimensions map to the
same assessment dimension, the one the archetype weighs highest wins.
"""

from collections.abc import Mapping

from models.schemas.rubric import Archetype, SeniorityLevel

ASSESSMENT_DIMENSIONS = (
    "COMMUNICATION",
    "PROBLEM_SOLVING",
    "TECHNICAL_KNOWLEDGE",
    "COLLABORATION",
    "ADAPTABILITY",
    "LEADERSHIP",
    "CREATIVITY",
    "TIME_MANAGEMENT",
)

RUBRIC_TO_ASSESSMENT_DIMENSION: dict[str, str] = {
    # Universal
    "communication": "COMMUNICATION",
    "practical_maturity": "ADAPTABILITY",
    "collaboration_coachability": "COLLABORATION",
    # Engineering
    "problem_decomposition_design": "PROBLEM_SOLVING",
    "technical_execution": "TECHNICAL_KNOWLEDGE",
    "learning_velocity": "ADAPTABILITY",
    "work_process": "TIME_MANAGEMENT",
    # Product management
    "problem_structuring": "PROBLEM_SOLVING",
    "prioritization_tradeoffs": "LEADERSHIP",
    "data_reasoning": "TECHNICAL_KNOWLEDGE",
    "stakeholder_influence": "COMMUNICATION",
    # Data science
    "analytical_reasoning": "PROBLEM_SOLVING",
    "technical_proficiency_ds": "TECHNICAL_KNOWLEDGE",
    "insight_communication": "COMMUNICATION",
    "methodology_rigor": "TECHNICAL_KNOWLEDGE",
    # Program management
    "program_structuring": "PROBLEM_SOLVING",
    "risk_identification": "ADAPTABILITY",
    "cross_team_coordination": "COLLABORATION",
    "execution_tracking": "TIME_MANAGEMENT",
    # Sales
    "discovery_qualification": "PROBLEM_SOLVING",
    "value_articulation": "COMMUNICATION",
    "objection_handling": "ADAPTABILITY",
    "closing_next_steps": "LEADERSHIP",
    # Customer success
    "onboarding_enablement": "COMMUNICATION",
    "escalation_handling": "ADAPTABILITY",
    "value_realization": "TECHNICAL_KNOWLEDGE",
    "relationship_management": "COLLABORATION",
}


def compute_expected_scores(
    seniority_gates: Mapping[str, float],
    archetype_weights: Mapping[str, float],
) -> dict[str, float]:
    """Expected score per assessment dimension from rubric gates.

    seniority_gates maps rubric dimension slug -> min score; archetype_weights
    maps rubric dimension slug -> weight (missing weights count as 1.0).
    Unmapped rubric dimensions are ignored.
    """
    chosen: dict[str, tuple[float, float]] = {}  # assessment dim -> (score, weight)

    for rubric_dim, min_score in seniority_gates.items():
        assessment_dim = RUBRIC_TO_ASSESSMENT_DIMENSION.get(rubric_dim)
        if assessment_dim is None:
            continue
        weight = archetype_weights.get(rubric_dim, 1.0)
        existing = chosen.get(assessment_dim)
        if existing is None or weight > existing[1]:
            chosen[assessment_dim] = (min_score, weight)

    return {dim: score for dim, (score, _) in chosen.items()}


def expected_scores_for_archetype(archetype: Archetype, level: SeniorityLevel) -> dict[str, float]:
    gates = {
        g.dimension_slug: g.min_score
        for g in archetype.seniority_gates
        if g.seniority_level == level
    }
    weights = {w.dimension_slug: w.weight for w in archetype.weights}
    return compute_expected_scores(gates, weights)
