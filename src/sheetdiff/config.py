"""Engine configuration using pydantic-settings.

Every setting can be overridden with a ``SHEETDIFF_``-prefixed environment
variable or a ``.env`` file. Explicit arguments to DiffEngine win over
settings.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sheetdiff.models import Tier


class DiffEngineSettings(BaseSettings):
    """Settings for the tiered diff engine.

    Environment variables:
    - SHEETDIFF_DEFAULT_TIER: METADATA, SAMPLE or FULL
    - SHEETDIFF_CONCURRENCY: maximum simultaneous sheet operations
    - SHEETDIFF_ACCESS_TOKEN: OAuth token used by the CLI
    """

    model_config = SettingsConfigDict(
        env_prefix="SHEETDIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_tier: Tier = Tier.SAMPLE
    sample_size: int = 10
    cell_budget: int = 5000
    block_size: int = 1000
    concurrency: int = 10

    # Google Sheets access (CLI only)
    access_token: str = ""
    request_timeout: int = 60

    log_level: str = "WARNING"

    @field_validator("sample_size", "cell_budget", "block_size", "concurrency")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("default_tier", mode="before")
    @classmethod
    def normalize_tier(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v


@lru_cache
def get_settings() -> DiffEngineSettings:
    """Get cached settings instance."""
    return DiffEngineSettings()
