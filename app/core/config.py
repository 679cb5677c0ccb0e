"""Configuration management for the Assessment Engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.quadrant import scale_midpoint

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")
    SUPABASE_SCHEMA: str = Field(default="public", description="Postgres schema holding the tables")
    SUPABASE_TIMEOUT_SECONDS: int = Field(
        default=10, ge=1, description="PostgREST request timeout"
    )

    # Environment
    ASSESSMENT_ENGINE_ENV: str = Field(
        default="dev", description="Environment: dev, staging, prod, test"
    )

    # Scoring scale and quadrant classification
    SCORE_MIN: float = Field(default=1.0, description="Lowest maturity/impact/effort score")
    SCORE_MAX: float = Field(default=5.0, description="Highest maturity/impact/effort score")
    QUADRANT_THRESHOLD: float | None = Field(
        default=None,
        description="Impact/effort midpoint; defaults to the middle of the score scale",
    )

    # Maturity gap analysis
    MATURITY_GAP_THRESHOLD: float = Field(
        default=3.0, description="Pillar scores below this are maturity gaps"
    )

    # Recommendation matching
    RECOMMENDATION_ACCEPTANCE_THRESHOLD: float = Field(
        default=0.6, description="Fit score a use case must exceed to be recommended"
    )
    RECOMMENDATION_LIMIT: int = Field(
        default=10, ge=0, description="Max recommended use cases per assessment"
    )
    RECOMMENDATIONS_ACTIVE_ONLY: bool = Field(
        default=False, description="Only match catalog entries flagged active"
    )

    @property
    def quadrant_threshold(self) -> float:
        if self.QUADRANT_THRESHOLD is not None:
            return self.QUADRANT_THRESHOLD
        return scale_midpoint(self.SCORE_MIN, self.SCORE_MAX)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
