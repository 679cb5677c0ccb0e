"""Tests for app.core.view_invalidation."""

from uuid import uuid4

import pytest

from app.core.view_invalidation import (
    RECOMMENDATIONS_VIEW,
    USE_CASES_VIEW,
    invalidate_views,
    subscribe,
)


@pytest.fixture
def received():
    calls = []
    unsubscribe = subscribe(lambda key, assessment_id: calls.append((key, assessment_id)))
    yield calls
    unsubscribe()


def test_subscribers_receive_each_key(received):
    assessment_id = uuid4()

    invalidate_views([USE_CASES_VIEW, RECOMMENDATIONS_VIEW], assessment_id)

    assert received == [
        (USE_CASES_VIEW, assessment_id),
        (RECOMMENDATIONS_VIEW, assessment_id),
    ]


def test_failing_subscriber_does_not_break_others(received):
    def broken(key, assessment_id):
        raise RuntimeError("cache offline")

    unsubscribe = subscribe(broken)
    try:
        invalidate_views([USE_CASES_VIEW])
    finally:
        unsubscribe()

    assert received == [(USE_CASES_VIEW, None)]


def test_unsubscribe():
    calls = []
    unsubscribe = subscribe(lambda key, assessment_id: calls.append(key))
    unsubscribe()
    unsubscribe()

    invalidate_views([USE_CASES_VIEW])

    assert calls == []
