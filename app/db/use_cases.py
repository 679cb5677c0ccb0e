"""Use case catalog read operations."""

from typing import Any

from app.core.logging import get_logger
from app.db.supabase_client import get_supabase

logger = get_logger(__name__)


def list_use_cases(active_only: bool = False) -> list[dict[str, Any]]:
    """
    List catalog use cases in catalog (creation) order.

    Args:
        active_only: Only return use cases flagged active

    Returns:
        List of use case rows
    """
    supabase = get_supabase()

    try:
        query = supabase.table("use_cases").select("*")
        if active_only:
            query = query.eq("is_active", True)
        response = query.order("created_at").execute()
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to list use cases: {e}")
        raise RuntimeError(f"Supabase error reading use_cases: {str(e)}") from e


def list_use_cases_by_ids(use_case_ids: list[str]) -> list[dict[str, Any]]:
    """
    Get use cases by id, in the order the ids were given.

    Ids with no matching row are skipped.
    """
    if not use_case_ids:
        return []

    supabase = get_supabase()

    try:
        response = (
            supabase.table("use_cases")
            .select("*")
            .in_("id", use_case_ids)
            .execute()
        )

    except Exception as e:
        logger.error(f"Failed to get use cases {use_case_ids}: {e}")
        raise RuntimeError(f"Supabase error reading use_cases: {str(e)}") from e

    by_id = {row["id"]: row for row in response.data or []}
    return [by_id[i] for i in use_case_ids if i in by_id]
