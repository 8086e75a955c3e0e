"""Read-only rubric configuration snapshot.

Holds role families, dimensions (with default and override rubric levels),
archetypes with their weights and seniority gates, and red flags. The
snapshot is built from the seed layout:

    universal_dimensions:      # linked to every role family
      - slug, name, description, default_rubric: [{level, label, pattern, evidence}]
    role_families:
      - slug, name, description
        dimensions:            # role-specific, default rubric under `rubric`
        universal_overrides:   # {dimension_slug: [levels]} scoped to the family
        archetypes:            # weights {slug: w}, seniority_gates {LEVEL: {slug: min}}
        red_flags:
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from models.schemas.rubric import (
    Archetype,
    ArchetypeWeight,
    Dimension,
    RedFlag,
    RoleFamily,
    RoleFamilyDimension,
    RubricLevel,
    SeniorityGate,
    SeniorityLevel,
)

logger = logging.getLogger(__name__)


class RubricStore:
    def __init__(
        self,
        role_families: list[RoleFamily],
        dimensions: list[Dimension],
        archetypes: list[Archetype],
    ) -> None:
        self._role_families = {rf.slug: rf for rf in role_families}
        self._dimensions = {d.slug: d for d in dimensions}
        self._archetypes = {a.slug: a for a in archetypes}

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RubricStore":
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        store = cls.from_dict(data)
        logger.info(
            "Rubric snapshot loaded from %s: %d role families, %d dimensions, %d archetypes",
            path,
            len(store._role_families),
            len(store._dimensions),
            len(store._archetypes),
        )
        return store

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RubricStore":
        dimensions: dict[str, Dimension] = {}

        universal = data.get("universal_dimensions") or []
        for dim in universal:
            dimensions[dim["slug"]] = Dimension(
                slug=dim["slug"],
                name=dim["name"],
                description=dim.get("description", ""),
                is_universal=True,
                rubric_levels=_build_levels(dim["slug"], None, dim.get("default_rubric")),
            )
        universal_slugs = [d["slug"] for d in universal]

        role_families: list[RoleFamily] = []
        archetypes: list[Archetype] = []

        for family in data.get("role_families") or []:
            family_slug = family["slug"]
            links: list[RoleFamilyDimension] = []

            own = family.get("dimensions") or []
            for i, dim in enumerate(own):
                existing = dimensions.get(dim["slug"])
                levels = _build_levels(dim["slug"], None, dim.get("rubric"))
                if existing is None:
                    dimensions[dim["slug"]] = Dimension(
                        slug=dim["slug"],
                        name=dim["name"],
                        description=dim.get("description", ""),
                        is_universal=False,
                        rubric_levels=levels,
                    )
                else:
                    # Shared role-specific dimension: later seeds replace default levels
                    kept = [rl for rl in existing.rubric_levels if rl.role_family_slug is not None]
                    existing.rubric_levels = kept + levels
                links.append(RoleFamilyDimension(dimension_slug=dim["slug"], sort_order=i))

            for i, slug in enumerate(universal_slugs):
                links.append(RoleFamilyDimension(dimension_slug=slug, sort_order=len(own) + i))

            for dim_slug, levels in (family.get("universal_overrides") or {}).items():
                dim = dimensions.get(dim_slug)
                if dim is None:
                    logger.warning(
                        "Override for unknown dimension %s in role family %s skipped",
                        dim_slug,
                        family_slug,
                    )
                    continue
                dim.rubric_levels.extend(_build_levels(dim_slug, family_slug, levels))

            for arch in family.get("archetypes") or []:
                archetypes.append(_build_archetype(arch, family_slug, dimensions))

            role_families.append(
                RoleFamily(
                    slug=family_slug,
                    name=family["name"],
                    description=family.get("description", ""),
                    dimensions=links,
                    red_flags=[RedFlag(**rf) for rf in family.get("red_flags") or []],
                )
            )

        return cls(role_families, list(dimensions.values()), archetypes)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_role_family(self, slug: str) -> RoleFamily | None:
        return self._role_families.get(slug)

    def list_role_families(self) -> list[RoleFamily]:
        return list(self._role_families.values())

    def get_dimension(self, slug: str) -> Dimension | None:
        return self._dimensions.get(slug)

    def get_archetype(self, slug: str) -> Archetype | None:
        return self._archetypes.get(slug)

    def list_archetypes(self, role_family_slug: str) -> list[Archetype]:
        return [a for a in self._archetypes.values() if a.role_family_slug == role_family_slug]


def _build_levels(
    dimension_slug: str,
    role_family_slug: str | None,
    raw_levels: list[dict[str, Any]] | None,
) -> list[RubricLevel]:
    return [
        RubricLevel(
            dimension_slug=dimension_slug,
            role_family_slug=role_family_slug,
            level=lvl["level"],
            label=lvl["label"],
            pattern=lvl.get("pattern", ""),
            evidence=list(lvl.get("evidence") or []),
        )
        for lvl in raw_levels or []
    ]


def _build_archetype(
    raw: dict[str, Any],
    role_family_slug: str,
    dimensions: dict[str, Dimension],
) -> Archetype:
    weights: list[ArchetypeWeight] = []
    for dim_slug, weight in (raw.get("weights") or {}).items():
        dim = dimensions.get(dim_slug)
        if dim is None:
            logger.warning("Dimension %s not found for archetype %s", dim_slug, raw["slug"])
            continue
        weights.append(
            ArchetypeWeight(dimension_slug=dim_slug, dimension_name=dim.name, weight=float(weight))
        )

    gates: list[SeniorityGate] = []
    for level, level_gates in (raw.get("seniority_gates") or {}).items():
        for dim_slug, min_score in (level_gates or {}).items():
            dim = dimensions.get(dim_slug)
            if dim is None:
                continue
            gates.append(
                SeniorityGate(
                    dimension_slug=dim_slug,
                    dimension_name=dim.name,
                    seniority_level=SeniorityLevel(level),
                    min_score=float(min_score),
                )
            )

    return Archetype(
        slug=raw["slug"],
        name=raw["name"],
        description=raw.get("description", ""),
        role_family_slug=role_family_slug,
        weights=weights,
        seniority_gates=gates,
    )
