"""
Configuration settings for the DevSecOps tutor.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a DEVSECOPS_TUTOR_ prefixed variable.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_HOME = Path.home() / ".devsecops_tutor"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DEVSECOPS_TUTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    db_path: str = Field(
        default=str(APP_HOME / "tutor.db"),
        description="SQLite file holding learner progress",
    )
    playground_dir: str = Field(
        default=str(APP_HOME / "playground"),
        description="Directory where playground exercise files are written",
    )

    # AI Integration
    gemini_api_key: str | None = Field(
        default=None,
        description="Google Generative AI (Gemini) API key",
    )
    text_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used for explanations, quizzes and scans",
    )
    glossary_file: str | None = Field(
        default=None,
        description="Optional local glossary (.json/.yaml/.md) used instead of generating one",
    )

    # Learning
    default_learning_rate: int = Field(
        default=5,
        gt=0,
        description="Topics per week assumed until the learner picks a pace",
    )
    certification_pass_score: int = Field(
        default=85,
        description="Minimum certification score counted as a pass",
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Minimum level for the stderr sink")
    log_file: str | None = Field(default=None, description="Optional log file path")

    def has_ai_configured(self) -> bool:
        """Check if the Gemini API key is available."""
        return bool(self.gemini_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
