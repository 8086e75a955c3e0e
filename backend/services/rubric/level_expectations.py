"""Expected rubric scores per target hiring level.

Scores use the 1-4 rubric scale (1 Foundational, 2 Competent, 3 Advanced,
4 Expert). The same raw score reads differently per level: a 3 exceeds
expectations for a junior hire and only meets them for staff.
"""

from typing import Literal

from pydantic import BaseModel

TargetLevel = Literal["junior", "mid", "senior", "staff"]
FitLevel = Literal["exceeds", "meets", "below"]
RelativeStrength = Literal[
    "Exceptional",
    "Strong",
    "Meets expectations",
    "Below expectations",
]


class LevelExpectation(BaseModel):
    label: str
    years_range: str
    expected_score: float


LEVEL_EXPECTATIONS: dict[str, LevelExpectation] = {
    "junior": LevelExpectation(label="Junior", years_range="0-2 years", expected_score=2.0),
    "mid": LevelExpectation(label="Mid-Level", years_range="2-5 years", expected_score=2.5),
    "senior": LevelExpectation(label="Senior", years_range="5-8 years", expected_score=3.0),
    "staff": LevelExpectation(label="Staff", years_range="8+ years", expected_score=3.5),
}


def get_expected_score(target_level: TargetLevel) -> float:
    return LEVEL_EXPECTATIONS[target_level].expected_score


def get_score_fit(score: float, target_level: TargetLevel) -> FitLevel:
    """Classify a dimension score against the level's expected score (+/- 0.5 band)."""
    diff = score - get_expected_score(target_level)
    if diff >= 0.5:
        return "exceeds"
    if diff >= -0.5:
        return "meets"
    return "below"


def get_relative_strength(overall_score: float, target_level: TargetLevel) -> RelativeStrength:
    diff = overall_score - get_expected_score(target_level)
    if diff >= 1.0:
        return "Exceptional"
    if diff >= 0.5:
        return "Strong"
    if diff >= -0.5:
        return "Meets expectations"
    return "Below expectations"
