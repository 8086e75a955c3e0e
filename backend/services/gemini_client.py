"""Google Gemini API wrapper for text embeddings."""

import logging

from google import genai
from google.genai import types

from config import settings
from services.errors import EmbeddingError

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini embeddings disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


async def embed_text(text: str) -> list[float]:
    """Embed a text with the configured Gemini embedding model."""
    client = get_client()
    if client is None:
        raise EmbeddingError("Gemini client not configured (GEMINI_API_KEY missing)")

    response = await client.aio.models.embed_content(
        model=settings.embedding_model,
        contents=text,
        config=types.EmbedContentConfig(output_dimensionality=settings.embedding_dimensions),
    )
    if not response.embeddings or not response.embeddings[0].values:
        raise EmbeddingError("Failed to generate embedding: no embedding values returned")
    return list(response.embeddings[0].values)
