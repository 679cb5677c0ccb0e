"""Pydantic schemas for the use case catalog and assessment recommendations."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Pillar id -> maturity score (1-5 scale)
MaturityScores = dict[str, float]


class GapSeverity(str, Enum):
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class MaturityGap(BaseModel):
    pillar: str
    score: float
    severity: GapSeverity


class MaturityAnalysis(BaseModel):
    """Pillar scores summarised into an overall average and a list of gaps."""

    overall_average: float = Field(0.0, description="Mean of all pillar scores")
    pillar_scores: MaturityScores = Field(default_factory=dict)
    gaps: list[MaturityGap] = Field(default_factory=list)
    gap_count: int = 0


class UseCase(BaseModel):
    """A candidate initiative in the catalog. Only read by the engine."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    id: str
    title: str = ""
    description: str = ""
    impact_score: float = Field(0.0, ge=0, le=5)
    effort_score: float = Field(0.0, ge=0, le=5)
    quadrant: str | None = None

    # Manual overrides win over calculated values
    manual_impact_score: float | None = Field(None, ge=1, le=5)
    manual_effort_score: float | None = Field(None, ge=1, le=5)
    manual_quadrant: str | None = None

    # Raw lever scores (1-5) the impact/effort scores are derived from
    impact_levers: dict[str, float] = Field(default_factory=dict)
    effort_levers: dict[str, float] = Field(default_factory=dict)

    pillars: list[str] = Field(
        default_factory=list, description="Maturity pillars this use case improves"
    )
    required_pillar_levels: dict[str, float] = Field(
        default_factory=dict, description="Minimum pillar maturity needed to take this on"
    )

    is_active: bool = False


class CriteriaWeights(BaseModel):
    """Weights of the three fit factors. Defaults sum to 1.0."""

    maturity_gaps: float = Field(0.4, ge=0, le=1)
    strategic_alignment: float = Field(0.3, ge=0, le=1)
    implementation_readiness: float = Field(0.3, ge=0, le=1)


class RecommendationPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RecommendationState(str, Enum):
    NO_RECOMMENDATION = "no_recommendation"
    GENERATED = "generated"
    APPLIED = "applied"


class RecommendedUseCase(BaseModel):
    use_case_id: str
    title: str = ""
    fit_score: float = Field(..., description="Rounded fit score (0-1)")
    priority: RecommendationPriority
    quadrant: str | None = None
    reasoning: list[str] = Field(default_factory=list)


class RecommendationResult(BaseModel):
    """Output of generate; persisted by apply, removed by clear."""

    assessment_id: UUID
    recommended_use_cases: list[RecommendedUseCase] = Field(default_factory=list)
    count: int = 0
    focus_areas: list[str] = Field(
        default_factory=list, description="Pillars with maturity gaps"
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_count(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data["count"] = len(data.get("recommended_use_cases") or [])
        return data

    @property
    def use_case_ids(self) -> list[str]:
        return [r.use_case_id for r in self.recommended_use_cases]


class RecommendationResponse(BaseModel):
    """Persisted recommendations for an assessment, resolved to catalog rows."""

    assessment_id: UUID
    recommended_use_cases: list[UseCase] = Field(default_factory=list)
    count: int = 0


class GenerateRecommendationsRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    scores: MaturityScores = Field(default_factory=dict)
    use_cases: list[UseCase] | None = Field(
        None, description="Catalog to match against; defaults to the stored catalog"
    )
    criteria_weights: CriteriaWeights | None = None
