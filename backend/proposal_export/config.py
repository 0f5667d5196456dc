# backend/proposal_export/config.py
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Export engine settings from environment variables"""

    # Environment
    environment: str = "development"  # development, production

    # Logging
    log_level: str = "INFO"
    log_to_file: bool = False
    log_dir: Path = Path("logs")

    # ===== EXPORT SETTINGS =====
    # Where export_proposal() writes finished artifacts ("save as file")
    export_dir: Path = Path("exports")

    # Filenames are derived from the proposal title
    filename_max_length: int = 80
    default_filename: str = "proposal"

    # Tokens longer than this get spaces inserted before line wrapping
    long_token_max_len: int = 24

    model_config = SettingsConfigDict(
        # backend/.env, so scripts run from repo root still load variables
        env_file=Path(__file__).resolve().parent.parent / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("long_token_max_len", "filename_max_length")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be a positive integer")
        return v


# Global settings instance
settings = Settings()
