"""Assessment recommendation set database operations.

One row per assessment in ``assessment_recommendations``. Every write is
conditional on the row state the caller read: an insert only succeeds when
no row exists, and replace/delete only match the row ``version`` the caller
expects. A write that matches nothing means a concurrent apply/clear got
there first.
"""

from typing import Any
from uuid import UUID

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)

# Postgres unique_violation
_UNIQUE_VIOLATION = "23505"


def get_recommendation_set(assessment_id: UUID) -> dict[str, Any] | None:
    """
    Get the persisted recommendation set for an assessment.

    Args:
        assessment_id: Assessment UUID

    Returns:
        Row with ``use_case_ids``, ``payload`` and ``version``, or None
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_recommendations")
            .select("*")
            .eq("assessment_id", str(assessment_id))
            .execute()
        )

        return response.data[0] if response.data else None

    except Exception as e:
        logger.error(f"Failed to get recommendations for {assessment_id}: {e}")
        raise RuntimeError(
            f"Supabase error reading assessment_recommendations: {str(e)}"
        ) from e


def insert_recommendation_set(
    assessment_id: UUID,
    use_case_ids: list[str],
    payload: dict[str, Any],
    version: int,
) -> dict[str, Any] | None:
    """
    Create the recommendation set for an assessment that has none.

    Args:
        assessment_id: Assessment UUID
        use_case_ids: Recommended use case ids, best fit first
        payload: Serialized RecommendationResult
        version: Claimed assessment recommendation version

    Returns:
        The persisted row, or None if a set already exists
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_recommendations")
            .insert({
                "assessment_id": str(assessment_id),
                "use_case_ids": use_case_ids,
                "payload": payload,
                "version": version,
            })
            .execute()
        )

    except Exception as e:
        if _UNIQUE_VIOLATION in str(e):
            logger.warning(f"Recommendation set for {assessment_id} was created concurrently")
            return None
        logger.error(f"Failed to insert recommendations for {assessment_id}: {e}")
        raise RuntimeError(
            f"Supabase error inserting assessment_recommendations: {str(e)}"
        ) from e

    if not response.data:
        raise RuntimeError("Failed to insert recommendation set")

    logger.info(f"Persisted {len(use_case_ids)} recommendations for assessment {assessment_id}")
    return response.data[0]


def replace_recommendation_set(
    assessment_id: UUID,
    use_case_ids: list[str],
    payload: dict[str, Any],
    version: int,
    expected_version: int,
) -> dict[str, Any] | None:
    """
    Replace the recommendation set, only if its version is still ``expected_version``.

    Args:
        assessment_id: Assessment UUID
        use_case_ids: Recommended use case ids, best fit first
        payload: Serialized RecommendationResult
        version: Claimed assessment recommendation version
        expected_version: Row version read before the claim

    Returns:
        The updated row, or None if the row changed or was deleted meanwhile
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_recommendations")
            .update({
                "use_case_ids": use_case_ids,
                "payload": payload,
                "version": version,
                "updated_at": "now()",
            })
            .eq("assessment_id", str(assessment_id))
            .eq("version", expected_version)
            .execute()
        )

    except Exception as e:
        logger.error(f"Failed to replace recommendations for {assessment_id}: {e}")
        raise RuntimeError(
            f"Supabase error updating assessment_recommendations: {str(e)}"
        ) from e

    if not response.data:
        logger.warning(
            f"Recommendation set for {assessment_id} moved past version {expected_version}"
        )
        return None

    logger.info(f"Replaced recommendations for assessment {assessment_id} (version {version})")
    return response.data[0]


def delete_recommendation_set(assessment_id: UUID, expected_version: int) -> bool:
    """
    Delete the recommendation set, only if its version is still ``expected_version``.

    Args:
        assessment_id: Assessment UUID
        expected_version: Row version read before the claim

    Returns:
        True if the row was deleted, False if it changed or was already gone
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessment_recommendations")
            .delete()
            .eq("assessment_id", str(assessment_id))
            .eq("version", expected_version)
            .execute()
        )

    except Exception as e:
        logger.error(f"Failed to delete recommendations for {assessment_id}: {e}")
        raise RuntimeError(
            f"Supabase error deleting assessment_recommendations: {str(e)}"
        ) from e

    deleted = bool(response.data)
    if deleted:
        logger.info(f"Deleted recommendations for assessment {assessment_id}")
    else:
        logger.warning(
            f"Recommendation set for {assessment_id} moved past version {expected_version}"
        )
    return deleted
