"""Candidate assessment store with cosine-similarity vector search.

CandidateStore is the contract the search service relies on; the in-memory
implementation backs the API and the tests. A database-backed store only
has to implement the same methods (vector query ordered by cosine distance,
bulk fetch by assessment id, and the count queries).
"""

import logging
import uuid
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

import numpy as np
import yaml

from models.schemas.candidate import (
    AssessmentStatus,
    CandidateEmbedding,
    CandidateRecord,
    EmbeddingMetadata,
    SemanticMatch,
)
from services.errors import EmbeddingError
from services.similarity import cosine_similarities

logger = logging.getLogger(__name__)


class CandidateStore(Protocol):
    def search_by_embedding(
        self, query_embedding: Sequence[float], threshold: float, limit: int
    ) -> list[SemanticMatch]: ...

    def fetch_candidates(self, video_assessment_ids: Sequence[str]) -> dict[str, CandidateRecord]: ...

    def get_assessment(self, video_assessment_id: str) -> CandidateRecord | None: ...

    def upsert_embedding(self, embedding: CandidateEmbedding) -> str | None: ...

    def has_embedding(self, video_assessment_id: str) -> bool: ...

    def get_embedding_metadata(self, video_assessment_id: str) -> EmbeddingMetadata | None: ...

    def list_embedded_assessment_ids(self, status: AssessmentStatus) -> list[str]: ...

    def count_embeddings(self) -> int: ...

    def list_assessments(self, status: AssessmentStatus) -> list[CandidateRecord]: ...

    def count_assessments(self, status: AssessmentStatus) -> int: ...


class InMemoryCandidateStore:
    def __init__(
        self,
        records: Iterable[CandidateRecord] = (),
        embeddings: Iterable[CandidateEmbedding] = (),
        dimensions: int | None = None,
    ) -> None:
        # Fixed by the first accepted vector when not given
        self.dimensions = dimensions
        self._records: dict[str, CandidateRecord] = {r.video_assessment_id: r for r in records}
        self._embeddings: dict[str, CandidateEmbedding] = {}
        self._embedding_ids: dict[str, str] = {}
        for e in embeddings:
            self.upsert_embedding(e)

    @classmethod
    def from_yaml(cls, path: str | Path, dimensions: int | None = None) -> "InMemoryCandidateStore":
        """Load `assessments:` and `embeddings:` lists from a YAML fixture.

        Embeddings whose length differs from `dimensions` are skipped.
        """
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        store = cls(
            records=[CandidateRecord(**r) for r in data.get("assessments") or []],
            embeddings=[CandidateEmbedding(**e) for e in data.get("embeddings") or []],
            dimensions=dimensions,
        )
        logger.info(
            "Candidate store loaded from %s: %d assessments, %d embeddings",
            path,
            len(store._records),
            len(store._embeddings),
        )
        return store

    def add_assessment(self, record: CandidateRecord) -> None:
        self._records[record.video_assessment_id] = record

    # ------------------------------------------------------------------
    # Vector search
    # ------------------------------------------------------------------

    def search_by_embedding(
        self,
        query_embedding: Sequence[float],
        threshold: float,
        limit: int,
    ) -> list[SemanticMatch]:
        """Completed assessments with similarity > threshold, nearest first."""
        if self.dimensions is not None and len(query_embedding) != self.dimensions:
            raise EmbeddingError(
                f"Query embedding has {len(query_embedding)} dimensions, store expects {self.dimensions}"
            )
        ids = self.list_embedded_assessment_ids(AssessmentStatus.COMPLETED)
        if not ids or limit <= 0:
            return []

        matrix = np.asarray([self._embeddings[va_id].embedding for va_id in ids], dtype=float)
        sims = cosine_similarities(query_embedding, matrix)

        # Ascending cosine distance == descending similarity
        order = np.argsort(-sims, kind="stable")
        matches: list[SemanticMatch] = []
        for idx in order:
            similarity = float(sims[idx])
            if similarity <= threshold:
                break
            matches.append(SemanticMatch(video_assessment_id=ids[idx], similarity=similarity))
            if len(matches) >= limit:
                break
        return matches

    # ------------------------------------------------------------------
    # Relational reads
    # ------------------------------------------------------------------

    def fetch_candidates(self, video_assessment_ids: Sequence[str]) -> dict[str, CandidateRecord]:
        """Completed assessments with a summary, restricted to the given ids."""
        result: dict[str, CandidateRecord] = {}
        for va_id in video_assessment_ids:
            rec = self._records.get(va_id)
            if rec is None or rec.status != AssessmentStatus.COMPLETED:
                continue
            if not rec.overall_summary:
                continue
            result[va_id] = rec
        return result

    def get_assessment(self, video_assessment_id: str) -> CandidateRecord | None:
        return self._records.get(video_assessment_id)

    def list_assessments(self, status: AssessmentStatus) -> list[CandidateRecord]:
        return [r for r in self._records.values() if r.status == status]

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------

    def upsert_embedding(self, embedding: CandidateEmbedding) -> str | None:
        """Store one embedding per assessment and return its id.

        A vector whose length differs from the store dimension is rejected
        with a warning and None is returned.
        """
        va_id = embedding.video_assessment_id
        size = len(embedding.embedding)
        if self.dimensions is None and size:
            self.dimensions = size
        if size != self.dimensions:
            logger.warning(
                "Skipping embedding for %s: expected %s dimensions, got %d",
                va_id,
                self.dimensions,
                size,
            )
            return None
        existing = self._embeddings.get(va_id)
        if existing is not None and existing.created_at is not None:
            embedding = embedding.model_copy(update={"created_at": existing.created_at})
        self._embeddings[va_id] = embedding
        return self._embedding_ids.setdefault(va_id, uuid.uuid4().hex)

    def has_embedding(self, video_assessment_id: str) -> bool:
        return video_assessment_id in self._embeddings

    def get_embedding_metadata(self, video_assessment_id: str) -> EmbeddingMetadata | None:
        e = self._embeddings.get(video_assessment_id)
        if e is None:
            return None
        return EmbeddingMetadata(
            video_assessment_id=video_assessment_id,
            embedding_model=e.embedding_model,
            created_at=e.created_at,
        )

    def list_embedded_assessment_ids(self, status: AssessmentStatus) -> list[str]:
        return [va_id for va_id in self._embeddings if self._has_status(va_id, status)]

    def _has_status(self, video_assessment_id: str, status: AssessmentStatus) -> bool:
        rec = self._records.get(video_assessment_id)
        return rec is not None and rec.status == status

    def count_embeddings(self) -> int:
        return len(self._embeddings)

    def count_assessments(self, status: AssessmentStatus) -> int:
        return sum(1 for r in self._records.values() if r.status == status)
