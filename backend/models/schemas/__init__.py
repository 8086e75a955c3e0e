"""Pydantic records shared by the rubric, scoring and search services."""

from models.schemas.rubric import (
    Archetype,
    ArchetypeWeight,
    Dimension,
    ResolvedRubric,
    RoleFamily,
    RubricLevel,
    SeniorityGate,
    SeniorityLevel,
)
from models.schemas.fit_result import ArchetypeFitResult, DimensionScoreInput
from models.schemas.candidate import (
    CandidateEmbedding,
    CandidateRecord,
    CandidateSearchCriteria,
    CandidateSearchResults,
)

__all__ = [
    "Archetype",
    "ArchetypeWeight",
    "Dimension",
    "ResolvedRubric",
    "RoleFamily",
    "RubricLevel",
    "SeniorityGate",
    "SeniorityLevel",
    "ArchetypeFitResult",
    "DimensionScoreInput",
    "CandidateEmbedding",
    "CandidateRecord",
    "CandidateSearchCriteria",
    "CandidateSearchResults",
]
