"""Centralized configuration for tfidf-search using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tfidf_search.search.analyzers import available_analyzers


class Settings(BaseSettings):
    """Strictly typed configuration loaded from ``TFIDF_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TFIDF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    index_backend: Literal["memory", "sqlite"] = Field(
        default="memory", description="Storage backend: memory (volatile) or sqlite (persisted)"
    )
    sqlite_path: Path = Field(default=Path("index.db"), description="SQLite database file for the sqlite backend")
    sqlite_busy_timeout_ms: int = Field(default=30000, ge=0, description="SQLite busy timeout in milliseconds")
    snapshot_path: Path | None = Field(
        default=None, description="Snapshot restored by the memory backend when the file exists"
    )
    analyzer: str = Field(default="default", description="Analyzer used for both documents and queries")

    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    @field_validator("analyzer")
    @classmethod
    def _check_analyzer(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in available_analyzers():
            raise ValueError(f"Unknown analyzer '{value}'. Available: {available_analyzers()}")
        return normalized

    def is_persistent(self) -> bool:
        return self.index_backend == "sqlite"
