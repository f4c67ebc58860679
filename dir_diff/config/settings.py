"""
dir-diff - CLI settings via Pydantic Settings.

Values come from DIRDIFF_* environment variables and are only read by the
CLI layer, which turns them into ScanConfig / DedupConfig for the core.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DirDiffSettings(BaseSettings):
    """CLI defaults loaded from environment variables."""

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # Walk
    max_workers: int = Field(default=8, ge=1)
    chunk_size: int = Field(default=65536, ge=1)

    # Dedup
    use_trash: bool = False

    model_config = SettingsConfigDict(env_prefix="DIRDIFF_", case_sensitive=False)


@lru_cache
def get_settings() -> DirDiffSettings:
    """Factory for settings (cached singleton)."""
    return DirDiffSettings()
