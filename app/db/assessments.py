"""Assessments database operations.

Only the fields the recommendation workflow needs: existence, and the
``recommendation_version`` counter used to serialize apply/clear.
"""

from typing import Any
from uuid import UUID

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def get_assessment(assessment_id: UUID) -> dict[str, Any] | None:
    """
    Get an assessment record.

    Args:
        assessment_id: Assessment UUID

    Returns:
        Assessment record as dict or None if not found
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessments")
            .select("id, status, recommendation_version")
            .eq("id", str(assessment_id))
            .execute()
        )

        return response.data[0] if response.data else None

    except Exception as e:
        logger.error(f"Failed to get assessment {assessment_id}: {e}")
        raise RuntimeError(f"Supabase error reading assessments: {str(e)}") from e


def claim_recommendation_version(assessment_id: UUID, expected_version: int) -> bool:
    """
    Compare-and-swap the assessment's recommendation version.

    Bumps ``recommendation_version`` to ``expected_version + 1`` only if it
    still equals ``expected_version``.

    Args:
        assessment_id: Assessment UUID
        expected_version: Version read before the write

    Returns:
        True if this caller won the claim, False if the version had moved
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table("assessments")
            .update({
                "recommendation_version": expected_version + 1,
                "updated_at": "now()",
            })
            .eq("id", str(assessment_id))
            .eq("recommendation_version", expected_version)
            .execute()
        )

    except Exception as e:
        logger.error(f"Failed to claim recommendation version for {assessment_id}: {e}")
        raise RuntimeError(f"Supabase error updating assessments: {str(e)}") from e

    claimed = bool(response.data)
    if not claimed:
        logger.warning(
            f"Recommendation version claim lost for assessment {assessment_id} "
            f"(expected {expected_version})"
        )
    return claimed
