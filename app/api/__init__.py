"""API router for v1 endpoints."""

from fastapi import APIRouter

from app.api import questions, recommendations, scoring

router = APIRouter()

# Question type registry and answer validation
router.include_router(questions.router, tags=["questions"])

# Score formatting and quadrant classification
router.include_router(scoring.router, tags=["scoring"])

# Assessment recommendations (generate/apply, fetch, clear)
router.include_router(recommendations.router, tags=["recommendations"])
