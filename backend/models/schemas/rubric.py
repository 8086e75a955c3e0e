"""Rubric configuration records: dimensions, levels, role families, archetypes."""

from enum import Enum

from pydantic import BaseModel, Field


class SeniorityLevel(str, Enum):
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"


# Gate evaluation order. The reported match is the last level that passes.
SENIORITY_ORDER: list[SeniorityLevel] = [
    SeniorityLevel.JUNIOR,
    SeniorityLevel.MID,
    SeniorityLevel.SENIOR,
]


class RubricLevel(BaseModel):
    """Behavioral anchor for one dimension at one score level.

    role_family_slug is None for the default (role-family-agnostic) level,
    otherwise the level is an override for that family.
    """
    dimension_slug: str
    role_family_slug: str | None = None
    level: int = Field(..., ge=1, le=4)
    label: str
    pattern: str = ""
    evidence: list[str] = []


class Dimension(BaseModel):
    slug: str
    name: str
    description: str = ""
    is_universal: bool = False
    rubric_levels: list[RubricLevel] = []


class RoleFamilyDimension(BaseModel):
    """Ordered join between a role family and a dimension."""
    dimension_slug: str
    sort_order: int = 0


class RedFlag(BaseModel):
    slug: str
    name: str
    description: str = ""


class RoleFamily(BaseModel):
    slug: str
    name: str
    description: str = ""
    dimensions: list[RoleFamilyDimension] = []
    red_flags: list[RedFlag] = []


class ArchetypeWeight(BaseModel):
    dimension_slug: str
    dimension_name: str = ""
    weight: float


class SeniorityGate(BaseModel):
    dimension_slug: str
    dimension_name: str = ""
    seniority_level: SeniorityLevel
    min_score: float


class Archetype(BaseModel):
    slug: str
    name: str
    description: str = ""
    role_family_slug: str = ""
    weights: list[ArchetypeWeight] = []
    seniority_gates: list[SeniorityGate] = []


# ---------------------------------------------------------------------------
# Resolved rubric (output of the resolver)
# ---------------------------------------------------------------------------

class RubricLevelData(BaseModel):
    level: int
    label: str
    pattern: str = ""
    evidence: list[str] = []


class DimensionWithRubric(BaseModel):
    slug: str
    name: str
    description: str = ""
    is_universal: bool = False
    levels: list[RubricLevelData] = []


class ResolvedRubric(BaseModel):
    role_family_name: str
    role_family_slug: str
    dimensions: list[DimensionWithRubric] = []
    red_flags: list[RedFlag] = []
