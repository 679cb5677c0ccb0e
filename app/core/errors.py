"""Error taxonomy for the assessment engine.

An empty catalog is not an error; it yields an empty recommendation result.
"""

from typing import Any


class AssessmentEngineError(Exception):
    """Base class for engine failures callers are expected to handle."""


class AnswerValidationError(AssessmentEngineError):
    """Raised when an answer does not match its question's declared format or rules."""

    def __init__(self, message: str, question_id: str | None = None):
        self.question_id = question_id
        if question_id:
            message = f"Invalid answer for question {question_id}: {message}"
        super().__init__(message)


class NotFoundError(AssessmentEngineError):
    """Raised when an assessment, section or question type does not exist."""

    def __init__(self, resource: str, resource_id: Any):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found: {resource_id}")


class ConflictError(AssessmentEngineError):
    """Raised when an apply/clear loses a race on the recommendation version."""

    def __init__(self, assessment_id: Any, message: str | None = None):
        self.assessment_id = assessment_id
        super().__init__(
            message
            or f"Recommendations for assessment {assessment_id} were modified concurrently"
        )
