from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator


def _project_root() -> Path:
    """
    Resolve project root assuming this file lives in: <root>/src/kb_assistant/config.py
    """
    return Path(__file__).resolve().parents[2]


class Settings(BaseModel):
    # --- Required ---
    openai_api_key: str = Field(..., min_length=10, description="OpenAI API key")

    # --- Optional / defaults ---
    openai_model: str = Field(default="gpt-4o-mini")
    openai_embedding_model: str = Field(default="text-embedding-3-small")
    openai_temperature: float = Field(default=0.2, ge=0.0, le=2.0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Per-URL chunk cache and the URL list read at startup
    data_dir: Path = Field(default_factory=lambda: _project_root() / "data")
    urls_file: Path = Field(default_factory=lambda: _project_root() / "urls.txt")

    chunk_size: int = Field(default=500, gt=0)
    chunk_overlap: int = Field(default=0, ge=0)
    top_k: int = Field(default=4, ge=1)

    http_timeout_s: float = Field(default=20.0, gt=0)

    @model_validator(mode="after")
    def overlap_below_chunk_size(self) -> "Settings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Loads environment variables (optionally from .env) and validates Settings.

    IMPORTANT:
    - Do NOT hardcode secrets here.
    - Only fill variables in .env.
    """
    if env_file is None:
        env_file = _project_root() / ".env"

    # Load .env if present; environment variables override .env by default
    if env_file.exists():
        load_dotenv(env_file, override=False)

    # Map environment variables -> Settings fields
    data = {
        "openai_api_key": os.getenv("OPENAI_API_KEY", ""),
        "openai_model": os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        "openai_embedding_model": os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
        "openai_temperature": os.getenv("OPENAI_TEMPERATURE", "0.2"),
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "data_dir": os.getenv("KB_DATA_DIR", str(_project_root() / "data")),
        "urls_file": os.getenv("KB_URLS_FILE", str(_project_root() / "urls.txt")),
        "chunk_size": os.getenv("KB_CHUNK_SIZE", "500"),
        "chunk_overlap": os.getenv("KB_CHUNK_OVERLAP", "0"),
        "top_k": os.getenv("KB_TOP_K", "4"),
        "http_timeout_s": os.getenv("HTTP_TIMEOUT_S", "20"),
    }

    try:
        settings = Settings(**data)
    except ValidationError as e:
        # Provide a clean error message for missing required vars
        raise RuntimeError(
            "Invalid configuration. Ensure required environment variables are set.\n"
            "Required: OPENAI_API_KEY\n"
            f"Details:\n{e}"
        ) from e

    # Cache directory must exist before the first save (safe, idempotent)
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    return settings
