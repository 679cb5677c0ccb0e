"""API endpoints for quadrant classification and pillar maturity scoring."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from app.core.config import get_settings
from app.core.maturity import analyze_maturity_gaps, compute_pillar_scores
from app.core.quadrant import Quadrant, classify_quadrant
from app.core.schemas_questions import Answers, Section
from app.core.schemas_recommendations import MaturityAnalysis
from app.core.score_formatting import format_score

router = APIRouter()


class QuadrantRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    impact: float = Field(..., description="Impact score")
    effort: float = Field(..., description="Effort score")
    threshold: float | None = Field(
        None, description="Midpoint; defaults to the configured threshold"
    )


class QuadrantResponse(BaseModel):
    quadrant: Quadrant
    impact: str
    effort: str
    threshold: str


class MaturityRequest(BaseModel):
    sections: list[Section]
    answers: Answers = Field(default_factory=dict)


@router.post("/quadrant", response_model=QuadrantResponse)
async def classify(request: QuadrantRequest) -> QuadrantResponse:
    """Classify an impact/effort pair; scores come back formatted as displayed."""
    threshold = (
        request.threshold if request.threshold is not None else get_settings().quadrant_threshold
    )
    try:
        return QuadrantResponse(
            quadrant=classify_quadrant(request.impact, request.effort, threshold),
            impact=format_score(request.impact),
            effort=format_score(request.effort),
            threshold=format_score(threshold),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@router.post("/maturity", response_model=MaturityAnalysis)
async def compute_maturity(request: MaturityRequest) -> MaturityAnalysis:
    """Pillar maturity scores and gaps from a set of answers."""
    scores = compute_pillar_scores(request.sections, request.answers)
    try:
        return analyze_maturity_gaps(scores, get_settings().MATURITY_GAP_THRESHOLD)
    except ValueError as e:
        # Pillar means can overflow to infinity on extreme answers
        raise HTTPException(status_code=422, detail=str(e)) from e
