"""Shared dependencies for API routes.

Stores and the embedding provider are created once per process on first
use; tests swap them through app.dependency_overrides.
"""

import logging

from config import settings
from services.candidate_store import InMemoryCandidateStore
from services.embeddings import EmbeddingProvider
from services.rubric_store import RubricStore

logger = logging.getLogger(__name__)

_rubric_store: RubricStore | None = None
_candidate_store: InMemoryCandidateStore | None = None
_embedder: EmbeddingProvider | None = None


def get_rubric_store() -> RubricStore:
    global _rubric_store
    if _rubric_store is None:
        _rubric_store = RubricStore.from_yaml(settings.rubric_config_path)
    return _rubric_store


def get_candidate_store() -> InMemoryCandidateStore:
    global _candidate_store
    if _candidate_store is None:
        if settings.candidate_data_path:
            _candidate_store = InMemoryCandidateStore.from_yaml(
                settings.candidate_data_path, dimensions=settings.embedding_dimensions
            )
        else:
            logger.info("No CANDIDATE_DATA_PATH set - starting with an empty candidate store")
            _candidate_store = InMemoryCandidateStore(dimensions=settings.embedding_dimensions)
    return _candidate_store


def get_embedder() -> EmbeddingProvider:
    global _embedder
    if _embedder is None:
        _embedder = EmbeddingProvider()
    return _embedder
