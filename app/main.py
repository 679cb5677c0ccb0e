"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.config import get_settings
from app.core.question_types import QUESTION_TYPE_METADATA

app = FastAPI(
    title="Assessment Engine",
    description="Assessment answer validation, maturity scoring and use case recommendations",
    version="0.1.0",
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint; also reports the environment and registry size."""
    return JSONResponse(
        content={
            "status": "ok",
            "environment": get_settings().ASSESSMENT_ENGINE_ENV,
            "question_types": len(QUESTION_TYPE_METADATA),
        },
        status_code=200,
    )


# Question, scoring and recommendation endpoints
app.include_router(api_router, prefix="/v1", tags=["v1"])
