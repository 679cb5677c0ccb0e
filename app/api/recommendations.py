"""API endpoints for assessment use case recommendations."""

from uuid import UUID

from fastapi import APIRouter, HTTPException, Response

from app.core.errors import ConflictError, NotFoundError
from app.core.logging import get_logger
from app.core.schemas_recommendations import (
    GenerateRecommendationsRequest,
    RecommendationResponse,
    RecommendationResult,
)
from app.services import recommendation_service

logger = get_logger(__name__)

router = APIRouter(prefix="/assessments/{assessment_id}/recommendations")


@router.post("", response_model=RecommendationResult)
async def generate_assessment_recommendations(
    assessment_id: UUID, request: GenerateRecommendationsRequest
) -> RecommendationResult:
    """
    Generate recommendations from pillar scores and apply them to the assessment.

    Raises:
        HTTPException 404: Assessment not found
        HTTPException 409: Concurrent apply/clear; re-fetch and retry
        HTTPException 500: Persistence failure
    """
    try:
        return recommendation_service.generate_and_apply(
            assessment_id,
            request.scores,
            use_cases=request.use_cases,
            criteria_weights=request.criteria_weights,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ValueError as e:
        # Scores that overflow to infinity when averaged
        raise HTTPException(status_code=422, detail=str(e)) from e
    except Exception as e:
        logger.exception(f"Failed to generate recommendations for assessment {assessment_id}")
        raise HTTPException(status_code=500, detail="Failed to generate recommendations") from e


@router.get("", response_model=RecommendationResponse)
async def get_assessment_recommendations(assessment_id: UUID) -> RecommendationResponse:
    """Get the recommendations currently applied to an assessment."""
    try:
        return recommendation_service.fetch_recommendations(assessment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:
        logger.exception(f"Failed to fetch recommendations for assessment {assessment_id}")
        raise HTTPException(status_code=500, detail="Failed to fetch recommendations") from e


@router.delete("", status_code=204)
async def clear_assessment_recommendations(assessment_id: UUID) -> Response:
    """Clear the recommendations applied to an assessment. Safe to repeat."""
    try:
        recommendation_service.clear_recommendations(assessment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except Exception as e:
        logger.exception(f"Failed to clear recommendations for assessment {assessment_id}")
        raise HTTPException(status_code=500, detail="Failed to clear recommendations") from e
    return Response(status_code=204)
