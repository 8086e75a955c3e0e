"""Tests for archetype fit scoring and seniority gates."""

import random

import pytest

from models.schemas.fit_result import DimensionScoreInput
from models.schemas.rubric import Archetype, ArchetypeWeight, SeniorityGate, SeniorityLevel
from services.rubric.fit_score import (
    calculate_archetype_fit,
    calculate_fit_for_multiple_archetypes,
    check_seniority_gates,
    filter_candidates_by_seniority,
    meets_seniority_threshold,
)


def _scores(**by_slug) -> list[DimensionScoreInput]:
    return [
        DimensionScoreInput(dimension_slug=slug, dimension_name=slug.title(), score=score)
        for slug, score in by_slug.items()
    ]


def _archetype(weights: dict[str, float], gates=None, slug="arch") -> Archetype:
    return Archetype(
        slug=slug,
        name=slug.replace("_", " ").title(),
        weights=[
            ArchetypeWeight(dimension_slug=s, dimension_name=s.title(), weight=w)
            for s, w in weights.items()
        ],
        seniority_gates=[
            SeniorityGate(
                dimension_slug=s,
                dimension_name=s.title(),
                seniority_level=SeniorityLevel(level),
                min_score=m,
            )
            for level, level_gates in (gates or {}).items()
            for s, m in level_gates.items()
        ],
    )


class TestCalculateArchetypeFit:
    def test_weighted_fit_end_to_end(self):
        arch = _archetype({"technical": 0.5, "communication": 0.5})
        result = calculate_archetype_fit(_scores(technical=4, communication=2), arch)
        assert result.fit_score == 75.0
        assert result.archetype_slug == "arch"

    def test_all_max_scores_is_100(self):
        arch = _archetype({"a": 1.0, "b": 2.5, "c": 0.3})
        result = calculate_archetype_fit(_scores(a=4, b=4, c=4), arch)
        assert result.fit_score == 100.0

    def test_all_min_scores(self):
        arch = _archetype({"a": 1.0, "b": 1.0})
        result = calculate_archetype_fit(_scores(a=1, b=1), arch)
        assert result.fit_score == 25.0

    def test_fit_score_in_range(self):
        arch = _archetype({"a": 1.4, "b": 0.8, "c": 1.2})
        rng = random.Random(7)
        for _ in range(50):
            scores = _scores(a=rng.randint(1, 4), b=rng.randint(1, 4), c=rng.randint(1, 4))
            result = calculate_archetype_fit(scores, arch)
            assert 0 <= result.fit_score <= 100

    def test_no_weights_gives_zero(self):
        arch = _archetype({})
        result = calculate_archetype_fit(_scores(a=4), arch)
        assert result.fit_score == 0.0
        assert result.weight_breakdown == []

    def test_null_score_counts_in_denominator_only(self):
        arch = _archetype({"a": 1.0, "b": 1.0})
        result = calculate_archetype_fit(_scores(a=4, b=None), arch)
        assert result.fit_score == 50.0
        unscored = next(w for w in result.weight_breakdown if w.dimension_slug == "b")
        assert unscored.raw_score == 0
        assert unscored.weighted_score == 0

    def test_missing_score_counts_in_denominator_only(self):
        arch = _archetype({"a": 1.0, "b": 1.0})
        result = calculate_archetype_fit(_scores(a=4), arch)
        assert result.fit_score == 50.0

    def test_null_score_lowers_fit_versus_any_score(self):
        arch = _archetype({"a": 1.0, "b": 1.0})
        unscored = calculate_archetype_fit(_scores(a=3, b=None), arch).fit_score
        for score in (1, 2, 3, 4):
            assert unscored < calculate_archetype_fit(_scores(a=3, b=score), arch).fit_score

    def test_order_of_scores_does_not_matter(self):
        arch = _archetype({"a": 1.0, "b": 1.5, "c": 0.5, "d": 2.0})
        scores = _scores(a=2, b=4, c=1, d=3)
        expected = calculate_archetype_fit(scores, arch)
        rng = random.Random(3)
        for _ in range(10):
            shuffled = list(scores)
            rng.shuffle(shuffled)
            assert calculate_archetype_fit(shuffled, arch) == expected

    def test_scores_outside_archetype_ignored(self):
        arch = _archetype({"a": 1.0})
        result = calculate_archetype_fit(_scores(a=2, unrelated=4), arch)
        assert result.fit_score == 50.0
        assert [w.dimension_slug for w in result.weight_breakdown] == ["a"]

    def test_rounding_to_one_decimal(self):
        arch = _archetype({"a": 1.0, "b": 1.0, "c": 1.0})
        result = calculate_archetype_fit(_scores(a=3, b=3, c=2), arch)
        assert result.fit_score == 66.7

    def test_half_values_round_up(self):
        arch = _archetype({"a": 1.0, "b": 1.0, "c": 1.0, "d": 1.0})
        # 13 / 16 * 100 == 81.25
        result = calculate_archetype_fit(_scores(a=4, b=4, c=4, d=1), arch)
        assert result.fit_score == 81.3

    def test_weight_breakdown(self):
        arch = _archetype({"a": 1.5, "b": 0.5})
        result = calculate_archetype_fit(_scores(a=3, b=2), arch)
        a = result.weight_breakdown[0]
        assert a.raw_score == 3
        assert a.weight == 1.5
        assert a.weighted_score == pytest.approx(4.5)


class TestStrengthsAndGaps:
    def test_top_three_strengths_by_weighted_score(self):
        arch = _archetype({"a": 1.0, "b": 2.0, "c": 1.0, "d": 0.5})
        result = calculate_archetype_fit(_scores(a=3, b=3, c=4, d=4), arch)
        # weighted: a=3, b=6, c=4, d=2
        assert result.role_relevant_strengths == ["B", "C", "A"]

    def test_gaps_only_scores_at_most_two(self):
        arch = _archetype({"a": 1.0, "b": 1.0, "c": 1.0, "d": 1.0, "e": 1.0})
        result = calculate_archetype_fit(_scores(a=2, b=1, c=3, d=2, e=1), arch)
        assert result.role_relevant_gaps == ["B", "E", "A"]

    def test_no_gaps_for_strong_candidate(self):
        arch = _archetype({"a": 1.0, "b": 1.0})
        result = calculate_archetype_fit(_scores(a=3, b=4), arch)
        assert result.role_relevant_gaps == []

    def test_unscored_dimensions_excluded(self):
        arch = _archetype({"a": 1.0, "b": 3.0})
        result = calculate_archetype_fit(_scores(a=1, b=None), arch)
        assert result.role_relevant_strengths == ["A"]
        assert result.role_relevant_gaps == ["A"]


class TestSeniorityGates:
    GATES = {
        "JUNIOR": {"tech": 2},
        "MID": {"tech": 3, "design": 2},
        "SENIOR": {"tech": 4, "design": 3, "comm": 3},
    }

    def _arch(self, gates=None):
        return _archetype({"tech": 1.0, "design": 1.0, "comm": 1.0}, gates or self.GATES)

    def test_senior_candidate(self):
        match, breakdown = check_seniority_gates(_scores(tech=4, design=3, comm=3), self._arch())
        assert match == SeniorityLevel.SENIOR
        assert [b.passes for b in breakdown] == [True, True, True]

    def test_mid_candidate(self):
        match, breakdown = check_seniority_gates(_scores(tech=3, design=2, comm=2), self._arch())
        assert match == SeniorityLevel.MID
        assert breakdown[2].failing_dimensions == ["Tech", "Design", "Comm"]

    def test_below_junior(self):
        match, breakdown = check_seniority_gates(_scores(tech=1, design=4, comm=4), self._arch())
        assert match is None
        assert breakdown[0].failing_dimensions == ["Tech"]

    def test_null_score_fails_gate(self):
        match, _ = check_seniority_gates(_scores(tech=None), self._arch())
        assert match is None

    def test_breakdown_order(self):
        _, breakdown = check_seniority_gates(_scores(tech=4), self._arch())
        assert [b.seniority_level for b in breakdown] == [
            SeniorityLevel.JUNIOR,
            SeniorityLevel.MID,
            SeniorityLevel.SENIOR,
        ]

    def test_non_monotonic_gates_report_last_passing_level(self):
        arch = self._arch({"JUNIOR": {"tech": 2}, "MID": {"comm": 3}, "SENIOR": {"tech": 4}})
        match, breakdown = check_seniority_gates(_scores(tech=4, comm=2), arch)
        assert breakdown[1].passes is False
        assert match == SeniorityLevel.SENIOR

    def test_level_without_gates_passes(self):
        arch = self._arch({"MID": {"tech": 3}})
        match, breakdown = check_seniority_gates(_scores(tech=1), arch)
        assert breakdown[0].passes is True
        assert breakdown[1].passes is False
        # SENIOR has no gates defined either
        assert match == SeniorityLevel.SENIOR

    def test_failing_name_falls_back_to_gate_name(self):
        arch = self._arch()
        scores = [DimensionScoreInput(dimension_slug="tech", score=1)]
        _, breakdown = check_seniority_gates(scores, arch)
        assert breakdown[0].failing_dimensions == ["Tech"]

    def test_fit_result_carries_gate_breakdown(self):
        result = calculate_archetype_fit(_scores(tech=3, design=2, comm=2), self._arch())
        assert result.seniority_match == SeniorityLevel.MID
        assert len(result.gate_breakdown) == 3


class TestThresholdChecks:
    def _arch(self):
        return _archetype(
            {"tech": 1.0, "design": 1.0},
            {"JUNIOR": {"tech": 2}, "MID": {"tech": 3, "design": 2}},
        )

    def test_meets_threshold(self):
        result = meets_seniority_threshold(_scores(tech=3, design=2), self._arch(), SeniorityLevel.MID)
        assert result.meets_threshold is True
        assert result.failing_dimensions == []

    def test_fails_threshold(self):
        result = meets_seniority_threshold(_scores(tech=2, design=1), self._arch(), SeniorityLevel.MID)
        assert result.meets_threshold is False
        assert result.seniority_level == SeniorityLevel.MID
        assert result.failing_dimensions == ["Tech", "Design"]

    def test_filter_candidates(self):
        candidates = [
            ("c1", _scores(tech=3, design=3)),
            ("c2", _scores(tech=2, design=3)),
            ("c3", _scores(tech=4, design=2)),
        ]
        assert filter_candidates_by_seniority(candidates, self._arch(), SeniorityLevel.MID) == [
            "c1",
            "c3",
        ]


class TestMultipleArchetypes:
    def test_sorted_by_fit_descending(self):
        tech_heavy = _archetype({"tech": 3.0, "comm": 1.0}, slug="tech_heavy")
        comm_heavy = _archetype({"tech": 1.0, "comm": 3.0}, slug="comm_heavy")
        results = calculate_fit_for_multiple_archetypes(
            _scores(tech=4, comm=1), [comm_heavy, tech_heavy]
        )
        assert [r.archetype_slug for r in results] == ["tech_heavy", "comm_heavy"]
        assert results[0].fit_score > results[1].fit_score

    def test_empty_archetypes(self):
        assert calculate_fit_for_multiple_archetypes(_scores(tech=4), []) == []
