"""Answer format and rule validation against the question type registry.

This is the write path: an unknown question type is an error here, never a
silent string default. Values are expected to be already deserialized
(str / int / float / bool / dict / list), not raw request payloads.
"""

import re
from typing import Any

from app.core.errors import AnswerValidationError
from app.core.question_types import CURRENCY_CODES, get_question_type_metadata
from app.core.schemas_questions import (
    Answers,
    DataFormat,
    Question,
    QuestionTypeMetadata,
    ValidationRules,
)

_PRIMITIVES = (str, int, float, bool)

# Types whose single answer must be one of the question's options
_SINGLE_OPTION_TYPES = {"select", "multiChoice"}
_PERCENTAGE_TYPES = {"percentage_allocation", "percentage_target", "allocation"}


def is_answered(value: Any) -> bool:
    """None, empty strings, empty arrays and empty objects count as unanswered."""
    if value is None:
        return False
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        return False
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_data_format(value: Any, data_format: DataFormat) -> bool:
    """Whether a deserialized value has the runtime shape of a data format."""
    if data_format == DataFormat.STRING:
        return isinstance(value, str)
    if data_format == DataFormat.NUMBER:
        return _is_number(value)
    if data_format == DataFormat.BOOLEAN:
        return isinstance(value, bool)
    if data_format == DataFormat.JSON:
        return isinstance(value, (dict, list))
    if data_format == DataFormat.ARRAY:
        return isinstance(value, list) and all(isinstance(v, _PRIMITIVES) for v in value)
    return False


def _effective_bounds(
    question: Question, rules: ValidationRules | None
) -> tuple[float | None, float | None]:
    min_value = rules.min_value if rules else None
    max_value = rules.max_value if rules else None
    if question.min_value is not None:
        min_value = question.min_value
    if question.max_value is not None:
        max_value = question.max_value
    return min_value, max_value


def _check_range(value: float, min_value: float | None, max_value: float | None, what: str) -> None:
    if min_value is not None and value < min_value:
        raise AnswerValidationError(f"{what} must be at least {min_value}")
    if max_value is not None and value > max_value:
        raise AnswerValidationError(f"{what} must be at most {max_value}")


def _check_string(value: str, rules: ValidationRules | None) -> None:
    if rules is None:
        return
    if rules.min_length is not None and len(value) < rules.min_length:
        raise AnswerValidationError(f"Text must be at least {rules.min_length} characters")
    if rules.max_length is not None and len(value) > rules.max_length:
        raise AnswerValidationError(f"Text answer too long (max {rules.max_length} characters)")
    if rules.pattern is not None and not re.match(rules.pattern, value):
        raise AnswerValidationError(f"Value does not match required format {rules.pattern}")
    if rules.allowed_values is not None and value not in rules.allowed_values:
        raise AnswerValidationError(
            f"Value must be one of: {', '.join(rules.allowed_values)}"
        )


def _option_keys(question: Question) -> set[Any]:
    keys: set[Any] = set()
    for option in question.options:
        keys.add(option.id)
        if option.value is not None:
            keys.add(option.value)
    return keys


def _check_options(question: Question, metadata: QuestionTypeMetadata, value: Any) -> None:
    if not question.options:
        return
    keys = _option_keys(question)
    if metadata.data_format == DataFormat.ARRAY:
        unknown = [v for v in value if v not in keys]
        if unknown:
            raise AnswerValidationError(f"Unknown option(s): {unknown}")
    elif metadata.type in _SINGLE_OPTION_TYPES and value not in keys:
        raise AnswerValidationError(f"Unknown option: {value}")


def _check_currency(value: Any, rules: ValidationRules | None) -> None:
    if not isinstance(value, dict):
        raise AnswerValidationError("Currency answer must be an object")
    amount = value.get("value")
    if not _is_number(amount) or amount < 0:
        raise AnswerValidationError("Currency value must be a positive number")
    allowed = rules.allowed_values if rules and rules.allowed_values else CURRENCY_CODES
    if value.get("currency") not in allowed:
        raise AnswerValidationError(f"Currency must be one of: {', '.join(allowed)}")


def _check_smart_rating(value: Any, min_value: float | None, max_value: float | None) -> None:
    if not isinstance(value, dict):
        raise AnswerValidationError("Smart rating answer must be an object")
    rating = value.get("value")
    if not _is_number(rating):
        raise AnswerValidationError("Smart rating value must be a number")
    _check_range(rating, min_value, max_value, "Smart rating value")


def _check_ranking(value: Any) -> None:
    if not isinstance(value, list):
        raise AnswerValidationError("Ranking answer must be an array")
    for item in value:
        if (
            not isinstance(item, dict)
            or item.get("id") in (None, "")
            or not _is_number(item.get("rank"))
        ):
            raise AnswerValidationError("Invalid ranking item format")


def _check_percentages(
    value: Any, question_type: str, min_value: float | None, max_value: float | None
) -> None:
    if not isinstance(value, dict):
        raise AnswerValidationError("Percentage answer must be an object")
    low = 0 if min_value is None else min_value
    high = 100 if max_value is None else max_value
    total = 0.0
    for category, pct in value.items():
        if not _is_number(pct):
            raise AnswerValidationError(f"Allocation for '{category}' must be a number")
        _check_range(pct, low, high, f"Allocation for '{category}'")
        total += pct
    # Targets are independent goals; only allocations share a 100% budget
    if question_type != "percentage_target" and total > 100:
        raise AnswerValidationError("Total allocation cannot exceed 100%")


def validate_answer(question: Question, value: Any) -> Any:
    """
    Validate one answer against its question's type metadata.

    Args:
        question: Question definition (its type must be registered)
        value: Deserialized answer value

    Returns:
        The value, unchanged, when valid

    Raises:
        AnswerValidationError: Unknown type, wrong data format, or a rule violation
    """
    metadata = get_question_type_metadata(question.question_type)
    if metadata is None:
        raise AnswerValidationError(
            f"Unknown question type '{question.question_type}'", question.id
        )

    if not is_answered(value):
        if question.is_required:
            raise AnswerValidationError("An answer is required", question.id)
        return value

    if not check_data_format(value, metadata.data_format):
        raise AnswerValidationError(
            f"Expected {metadata.data_format.value} answer for type "
            f"'{metadata.type}', got {type(value).__name__}",
            question.id,
        )

    rules = metadata.validation_rules
    min_value, max_value = _effective_bounds(question, rules)

    try:
        if metadata.data_format == DataFormat.STRING:
            _check_string(value, rules)
        elif metadata.data_format == DataFormat.NUMBER:
            _check_range(value, min_value, max_value, "Value")
        elif metadata.type == "currency":
            _check_currency(value, rules)
        elif metadata.type == "smart_rating":
            _check_smart_rating(value, min_value, max_value)
        elif metadata.type == "ranking":
            _check_ranking(value)
        elif metadata.type in _PERCENTAGE_TYPES:
            _check_percentages(value, metadata.type, min_value, max_value)

        if metadata.requires_options:
            _check_options(question, metadata, value)
    except AnswerValidationError as e:
        raise AnswerValidationError(str(e), question.id) from None

    return value


def validate_answers(questions: list[Question], answers: Answers) -> dict[str, str]:
    """
    Validate a batch of answers.

    Every question is checked, so missing required answers are reported too.

    Returns:
        Mapping of question id to error message; empty when everything is valid
    """
    by_id = {q.id: q for q in questions}
    errors: dict[str, str] = {}

    for question_id in answers:
        if question_id not in by_id:
            errors[question_id] = f"Unknown question: {question_id}"

    for question in questions:
        try:
            validate_answer(question, answers.get(question.id))
        except AnswerValidationError as e:
            errors[question.id] = str(e)

    return errors
