"""Rubric resolver: role-family rubric with override-over-default levels.

For every dimension linked to a role family, each of the four levels is
taken from the family's override when one exists, otherwise from the
dimension's default level. A level with neither is a configuration error.
"""

import logging

from models.schemas.rubric import (
    Archetype,
    DimensionWithRubric,
    ResolvedRubric,
    RubricLevel,
    RubricLevelData,
)
from services.errors import RubricConfigError
from services.rubric_store import RubricStore

logger = logging.getLogger(__name__)

RUBRIC_LEVELS = (1, 2, 3, 4)


def load_rubric_for_role_family(store: RubricStore, role_family_slug: str) -> ResolvedRubric:
    """Load the complete rubric for a role family.

    Raises RubricConfigError if the family is unknown, a linked dimension is
    missing, or any level 1-4 of a dimension cannot be resolved.
    """
    role_family = store.get_role_family(role_family_slug)
    if role_family is None:
        raise RubricConfigError(f"Unknown role family: {role_family_slug}")

    dimensions: list[DimensionWithRubric] = []
    for link in sorted(role_family.dimensions, key=lambda d: d.sort_order):
        dim = store.get_dimension(link.dimension_slug)
        if dim is None:
            raise RubricConfigError(
                f"Dimension {link.dimension_slug} linked to role family "
                f"{role_family_slug} does not exist"
            )

        overrides = [rl for rl in dim.rubric_levels if rl.role_family_slug == role_family.slug]
        defaults = [rl for rl in dim.rubric_levels if rl.role_family_slug is None]

        levels = [
            _resolve_level(level, overrides, defaults, dim.slug, role_family_slug)
            for level in RUBRIC_LEVELS
        ]
        dimensions.append(
            DimensionWithRubric(
                slug=dim.slug,
                name=dim.name,
                description=dim.description,
                is_universal=dim.is_universal,
                levels=levels,
            )
        )

    logger.debug("Resolved rubric for %s (%d dimensions)", role_family_slug, len(dimensions))
    return ResolvedRubric(
        role_family_name=role_family.name,
        role_family_slug=role_family.slug,
        dimensions=dimensions,
        red_flags=[rf.model_copy() for rf in role_family.red_flags],
    )


def _resolve_level(
    level: int,
    overrides: list[RubricLevel],
    defaults: list[RubricLevel],
    dimension_slug: str,
    role_family_slug: str,
) -> RubricLevelData:
    source = next((rl for rl in overrides if rl.level == level), None)
    if source is None:
        source = next((rl for rl in defaults if rl.level == level), None)
    if source is None:
        raise RubricConfigError(
            f"Missing rubric level {level} for dimension {dimension_slug} "
            f"in role family {role_family_slug}"
        )
    return RubricLevelData(
        level=source.level,
        label=source.label,
        pattern=source.pattern,
        evidence=list(source.evidence),
    )


def load_archetype(store: RubricStore, archetype_slug: str) -> Archetype:
    """Load an archetype with its weights and seniority gates."""
    archetype = store.get_archetype(archetype_slug)
    if archetype is None:
        raise RubricConfigError(f"Unknown archetype: {archetype_slug}")
    return archetype


def load_archetypes_for_role_family(store: RubricStore, role_family_slug: str) -> list[Archetype]:
    """Load all archetypes belonging to a role family."""
    if store.get_role_family(role_family_slug) is None:
        raise RubricConfigError(f"Unknown role family: {role_family_slug}")
    return store.list_archetypes(role_family_slug)
