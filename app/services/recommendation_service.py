"""Recommendation orchestration: generate, apply, fetch and clear.

Generation is pure. Apply and clear are the only writes. Each first claims
the next ``assessments.recommendation_version`` with a compare-and-swap, then
writes the recommendation row only where it still has the version read
before the claim. Whichever side finds the claim or the row changed gets a
ConflictError instead of silently overwriting the winner.
Persistence errors propagate as-is; nothing here retries.
"""

import logging
from typing import Any
from uuid import UUID

from app.core.config import get_settings
from app.core.errors import ConflictError, NotFoundError
from app.core.logging import get_logger, log_with_context
from app.core.recommendation_engine import generate_recommendations
from app.core.schemas_recommendations import (
    CriteriaWeights,
    MaturityScores,
    RecommendationResponse,
    RecommendationResult,
    RecommendationState,
    UseCase,
)
from app.core.view_invalidation import (
    RECOMMENDATIONS_VIEW,
    USE_CASES_VIEW,
    invalidate_views,
)
from app.db import assessments as assessments_db
from app.db import recommendations as recommendations_db
from app.db import use_cases as use_cases_db

logger = get_logger(__name__)


def _require_assessment(assessment_id: UUID) -> dict[str, Any]:
    assessment = assessments_db.get_assessment(assessment_id)
    if assessment is None:
        raise NotFoundError("Assessment", assessment_id)
    return assessment


def _claim(assessment_id: UUID, assessment: dict[str, Any]) -> int:
    """Claim the next recommendation version or raise ConflictError."""
    version = int(assessment.get("recommendation_version") or 0)
    if not assessments_db.claim_recommendation_version(assessment_id, version):
        raise ConflictError(assessment_id)
    return version + 1


def load_catalog(active_only: bool | None = None) -> list[UseCase]:
    """Load the stored use case catalog."""
    settings = get_settings()
    if active_only is None:
        active_only = settings.RECOMMENDATIONS_ACTIVE_ONLY
    return [UseCase.model_validate(row) for row in use_cases_db.list_use_cases(active_only)]


def generate_recommendations_for_assessment(
    assessment_id: UUID,
    scores: MaturityScores,
    use_cases: list[UseCase],
    criteria_weights: CriteriaWeights | None = None,
) -> RecommendationResult:
    """Generate recommendations with the configured thresholds. No side effects."""
    settings = get_settings()
    result = generate_recommendations(
        assessment_id,
        scores,
        use_cases,
        criteria_weights=criteria_weights,
        acceptance_threshold=settings.RECOMMENDATION_ACCEPTANCE_THRESHOLD,
        limit=settings.RECOMMENDATION_LIMIT,
        quadrant_threshold=settings.quadrant_threshold,
        gap_threshold=settings.MATURITY_GAP_THRESHOLD,
        active_only=settings.RECOMMENDATIONS_ACTIVE_ONLY,
    )
    logger.info(
        f"Generated {result.count} recommendations for assessment {assessment_id} "
        f"from {len(use_cases)} catalog entries",
        extra={"assessment_id": str(assessment_id)},
    )
    return result


def _state(
    existing: dict[str, Any] | None, payload: dict[str, Any] | None
) -> RecommendationState:
    if payload is None:
        if existing is None:
            return RecommendationState.NO_RECOMMENDATION
        return RecommendationState.APPLIED
    if existing is not None and existing.get("payload") == payload:
        return RecommendationState.APPLIED
    return RecommendationState.GENERATED


def apply_recommendations(assessment_id: UUID, result: RecommendationResult) -> dict[str, Any]:
    """
    Persist a recommendation result as the assessment's live set.

    Re-applying the set that is already persisted writes nothing. A different
    set replaces the previous one, but only if the row still carries the
    version read here; a concurrent clear or apply in between means conflict.

    Args:
        assessment_id: Assessment UUID
        result: Result from generate

    Returns:
        The persisted recommendation row

    Raises:
        NotFoundError: If the assessment does not exist
        ConflictError: If a concurrent apply/clear won the version claim or
            changed the row before it was written
    """
    if result.assessment_id != assessment_id:
        raise ValueError(
            f"Result belongs to assessment {result.assessment_id}, not {assessment_id}"
        )

    assessment = _require_assessment(assessment_id)
    payload = result.model_dump(mode="json")

    existing = recommendations_db.get_recommendation_set(assessment_id)
    if _state(existing, payload) == RecommendationState.APPLIED:
        logger.info(
            f"Recommendations for assessment {assessment_id} already applied",
            extra={"assessment_id": str(assessment_id)},
        )
        return existing

    version = _claim(assessment_id, assessment)
    if existing is None:
        row = recommendations_db.insert_recommendation_set(
            assessment_id, result.use_case_ids, payload, version
        )
    else:
        row = recommendations_db.replace_recommendation_set(
            assessment_id,
            result.use_case_ids,
            payload,
            version,
            expected_version=existing["version"],
        )
    if row is None:
        logger.warning(
            f"Recommendation set for assessment {assessment_id} changed before apply wrote",
            extra={"assessment_id": str(assessment_id), "version": version},
        )
        raise ConflictError(assessment_id)

    invalidate_views([USE_CASES_VIEW], assessment_id)
    log_with_context(
        logger,
        logging.INFO,
        f"Applied {result.count} recommendations",
        assessment_id=assessment_id,
        version=version,
    )
    return row


def clear_recommendations(assessment_id: UUID) -> None:
    """
    Remove the assessment's live recommendation set.

    Clearing when nothing is persisted succeeds without writing. The delete
    only matches the row version read here.

    Raises:
        NotFoundError: If the assessment does not exist
        ConflictError: If a concurrent apply/clear won the version claim or
            changed the row before it was deleted
    """
    assessment = _require_assessment(assessment_id)

    existing = recommendations_db.get_recommendation_set(assessment_id)
    if existing is not None:
        version = _claim(assessment_id, assessment)
        if not recommendations_db.delete_recommendation_set(
            assessment_id, expected_version=existing["version"]
        ):
            logger.warning(
                f"Recommendation set for assessment {assessment_id} changed before clear deleted",
                extra={"assessment_id": str(assessment_id), "version": version},
            )
            raise ConflictError(assessment_id)
        log_with_context(
            logger,
            logging.INFO,
            "Cleared recommendations",
            assessment_id=assessment_id,
            version=version,
        )
    else:
        logger.info(f"No recommendations to clear for assessment {assessment_id}")

    invalidate_views([USE_CASES_VIEW, RECOMMENDATIONS_VIEW], assessment_id)


def fetch_recommendations(assessment_id: UUID) -> RecommendationResponse:
    """
    Read the persisted recommendations, resolved to catalog rows in fit order.

    Raises:
        NotFoundError: If the assessment does not exist
    """
    _require_assessment(assessment_id)

    row = recommendations_db.get_recommendation_set(assessment_id)
    if row is None:
        return RecommendationResponse(assessment_id=assessment_id)

    use_cases = [
        UseCase.model_validate(uc)
        for uc in use_cases_db.list_use_cases_by_ids(row.get("use_case_ids") or [])
    ]
    return RecommendationResponse(
        assessment_id=assessment_id,
        recommended_use_cases=use_cases,
        count=len(use_cases),
    )


def get_recommendation_state(
    assessment_id: UUID, result: RecommendationResult | None = None
) -> RecommendationState:
    """
    Where the assessment stands in the recommendation lifecycle.

    Without a result: APPLIED if a set is persisted, else NO_RECOMMENDATION.
    With a freshly generated result: APPLIED if it is the persisted set,
    GENERATED if it has not been applied.
    """
    _require_assessment(assessment_id)
    existing = recommendations_db.get_recommendation_set(assessment_id)
    payload = result.model_dump(mode="json") if result is not None else None
    return _state(existing, payload)


def generate_and_apply(
    assessment_id: UUID,
    scores: MaturityScores,
    use_cases: list[UseCase] | None = None,
    criteria_weights: CriteriaWeights | None = None,
) -> RecommendationResult:
    """
    Generate recommendations and make them the assessment's live set.

    Regenerating replaces the previous set. Nothing is written if generation
    or the existence check fails.

    Args:
        assessment_id: Assessment UUID
        scores: Pillar maturity scores
        use_cases: Catalog to match; the stored catalog when None
        criteria_weights: Optional fit factor weights

    Returns:
        The applied RecommendationResult
    """
    _require_assessment(assessment_id)
    catalog = load_catalog() if use_cases is None else use_cases

    result = generate_recommendations_for_assessment(
        assessment_id, scores, catalog, criteria_weights
    )
    apply_recommendations(assessment_id, result)
    return result
