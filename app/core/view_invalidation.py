"""Stale-view signalling for recommendation-derived data.

Applying or clearing recommendations changes what the use case catalog view
and the recommendations view should show. Subscribers (view caches, push
channels) register a callback and re-fetch when their key is invalidated.
"""

from collections.abc import Callable, Iterable
from uuid import UUID

from app.core.logging import get_logger

logger = get_logger(__name__)

USE_CASES_VIEW = "use-cases"
RECOMMENDATIONS_VIEW = "recommendations"

InvalidationCallback = Callable[[str, UUID | None], None]

_subscribers: list[InvalidationCallback] = []


def subscribe(callback: InvalidationCallback) -> Callable[[], None]:
    """
    Register a callback invoked with (view_key, assessment_id) on invalidation.

    Returns:
        A function that unsubscribes the callback
    """
    _subscribers.append(callback)

    def unsubscribe() -> None:
        if callback in _subscribers:
            _subscribers.remove(callback)

    return unsubscribe


def invalidate_views(keys: Iterable[str], assessment_id: UUID | None = None) -> None:
    """
    Tell every subscriber that the given views are stale.

    A failing subscriber is logged and skipped; the write that triggered the
    invalidation has already happened and must not be reported as failed.
    """
    for key in keys:
        logger.debug(
            f"Invalidating view '{key}'",
            extra={"assessment_id": str(assessment_id) if assessment_id else None},
        )
        for callback in list(_subscribers):
            try:
                callback(key, assessment_id)
            except Exception as e:
                logger.error(f"View invalidation subscriber failed for '{key}': {e}")
