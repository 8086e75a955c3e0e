"""Shared test configuration, pytest markers and fixtures."""

import pytest

from models.schemas.candidate import AssessmentScore, CandidateEmbedding, CandidateRecord
from services.candidate_store import InMemoryCandidateStore
from services.embeddings import EmbeddingProvider
from services.rubric_store import RubricStore

EMBEDDING_DIMS = 3


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: loads real embedding models or calls external APIs"
    )


def make_levels(prefix: str) -> list[dict]:
    return [
        {
            "level": lvl,
            "label": f"{prefix} L{lvl}",
            "pattern": f"{prefix} pattern {lvl}",
            "evidence": [f"{prefix} evidence {lvl}"],
        }
        for lvl in (1, 2, 3, 4)
    ]


def make_rubric_data() -> dict:
    """A small two-family rubric snapshot in seed layout."""
    return {
        "universal_dimensions": [
            {
                "slug": "communication",
                "name": "Communication",
                "description": "Clarity and listening",
                "default_rubric": make_levels("comm default"),
            },
        ],
        "role_families": [
            {
                "slug": "engineering",
                "name": "Software Engineering",
                "description": "Build software",
                "dimensions": [
                    {
                        "slug": "technical_execution",
                        "name": "Technical Execution",
                        "rubric": make_levels("tech"),
                    },
                    {
                        "slug": "problem_decomposition_design",
                        "name": "Problem Decomposition & Design",
                        "rubric": make_levels("design"),
                    },
                ],
                "universal_overrides": {
                    "communication": [
                        {
                            "level": 2,
                            "label": "comm eng L2",
                            "pattern": "engineering override",
                            "evidence": ["explains code when asked"],
                        },
                    ],
                },
                "archetypes": [
                    {
                        "slug": "backend_engineer",
                        "name": "Backend Engineer",
                        "description": "Build services",
                        "weights": {
                            "technical_execution": 2.0,
                            "problem_decomposition_design": 1.0,
                            "communication": 1.0,
                        },
                        "seniority_gates": {
                            "JUNIOR": {"technical_execution": 2},
                            "MID": {"technical_execution": 3, "problem_decomposition_design": 2},
                            "SENIOR": {
                                "technical_execution": 4,
                                "problem_decomposition_design": 3,
                                "communication": 3,
                            },
                        },
                    },
                    {
                        "slug": "tech_lead",
                        "name": "Tech Lead",
                        "weights": {
                            "problem_decomposition_design": 1.5,
                            "communication": 1.5,
                        },
                        "seniority_gates": {"JUNIOR": {}},
                    },
                ],
                "red_flags": [
                    {
                        "slug": "misrepresentation",
                        "name": "Misrepresentation",
                        "description": "Overstates what they built",
                    },
                ],
            },
            {
                "slug": "product_management",
                "name": "Product Management",
                "dimensions": [
                    {
                        "slug": "data_reasoning",
                        "name": "Data Reasoning",
                        "rubric": make_levels("data"),
                    },
                ],
                "archetypes": [
                    {
                        "slug": "growth_pm",
                        "name": "Growth PM",
                        "weights": {"data_reasoning": 1.5, "communication": 1.0},
                        "seniority_gates": {"JUNIOR": {"data_reasoning": 2}},
                    },
                ],
            },
        ],
    }


@pytest.fixture
def rubric_data() -> dict:
    return make_rubric_data()


@pytest.fixture
def rubric_store(rubric_data) -> RubricStore:
    return RubricStore.from_dict(rubric_data)


def make_record(
    va_id: str,
    tech: float | None = 3,
    design: float | None = 3,
    comm: float | None = 3,
    **kwargs,
) -> CandidateRecord:
    scores = [
        AssessmentScore(
            dimension_slug="technical_execution",
            dimension_name="Technical Execution",
            score=tech,
            observable_behaviors="Wrote tested handlers",
        ),
        AssessmentScore(
            dimension_slug="problem_decomposition_design",
            dimension_name="Problem Decomposition & Design",
            score=design,
            observable_behaviors="Sketched components first",
        ),
        AssessmentScore(
            dimension_slug="communication",
            dimension_name="Communication",
            score=comm,
            observable_behaviors="Explained trade-offs",
        ),
    ]
    defaults = {
        "candidate_id": f"cand-{va_id}",
        "candidate_name": f"Candidate {va_id}",
        "candidate_email": f"{va_id}@example.com",
        "scores": scores,
        "overall_summary": f"Summary for {va_id}",
    }
    defaults.update(kwargs)
    return CandidateRecord(video_assessment_id=va_id, **defaults)


def make_embedding(va_id: str, vector: list[float]) -> CandidateEmbedding:
    return CandidateEmbedding(video_assessment_id=va_id, embedding=vector)


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic provider returning a fixed vector, optionally failing first."""

    def __init__(self, vector=None, failures: int = 0, **kwargs):
        kwargs.setdefault("backend", "local")
        kwargs.setdefault("dimensions", EMBEDDING_DIMS)
        kwargs.setdefault("base_delay_s", 0.0)
        kwargs.setdefault("max_delay_s", 0.0)
        super().__init__(**kwargs)
        self.vector = list(vector or [1.0, 0.0, 0.0])
        self.failures = failures
        self.calls: list[str] = []

    @property
    def model_name(self) -> str:
        return "fake-embedding"

    async def _embed_once(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("embedding backend unavailable")
        return list(self.vector)


@pytest.fixture
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def candidate_store() -> InMemoryCandidateStore:
    return InMemoryCandidateStore(
        records=[
            make_record("va-strong", tech=4, design=4, comm=4),
            make_record("va-mid", tech=3, design=2, comm=2),
            make_record("va-junior", tech=2, design=1, comm=2),
        ],
        embeddings=[
            make_embedding("va-strong", [0.9, 0.1, 0.0]),
            make_embedding("va-mid", [1.0, 0.0, 0.0]),
            make_embedding("va-junior", [0.7, 0.7, 0.0]),
        ],
    )
