import os
from pathlib import Path

from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parent


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    gemini_api_key: str = ""
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False

    # Embedding provider settings
    embedding_provider: str = "gemini"  # "gemini" | "local"
    embedding_model: str = "text-embedding-004"
    local_embedding_model: str = "sentence-transformers/all-mpnet-base-v2"
    embedding_dimensions: int = 768
    embedding_max_attempts: int = 3
    embedding_base_delay_s: float = 1.0
    embedding_max_delay_s: float = 30.0

    # Configuration snapshots
    rubric_config_path: str = str(_BACKEND_DIR / "data" / "rubrics.yaml")
    candidate_data_path: str = ""  # optional YAML fixture for the in-memory store

    search_rate_limit: str = "30/minute"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
