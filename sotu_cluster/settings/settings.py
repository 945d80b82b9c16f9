"""
Environment-driven configuration for SOTU Cluster.

Uses pydantic-settings for type-safe environment variable management.
Paths and logging are configured via SOTU_* environment variables or a
.env file; analysis parameters live in sotu_cluster.config.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Run settings loaded from environment variables.

    Environment variable names are the field names, uppercased, with the
    SOTU_ prefix (e.g. SOTU_DATA_DIR).
    """

    model_config = SettingsConfigDict(
        env_prefix="SOTU_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Paths ===
    data_dir: Path = Path("./data/sotu")
    output_dir: Path = Path("./output")
    snapshot_path: Optional[Path] = Path("./data/sotu_df.pkl")
    config_path: Optional[Path] = None

    # === Logging ===
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {value!r}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached for the lifetime of the process.

    Returns:
        Settings instance with values from environment
    """
    return Settings()
