"""Question type registry.

Static metadata for every supported question type: whether it needs options,
whether it takes multiple answers, the answer data format and its validation
rules. The registry is a read-only mapping of frozen models; adding a type is
a new entry here, not a branch anywhere else.

Lookups that feed rendering are permissive: an unknown (legacy) type reads as
a single-answer string question without options. Validation is strict; see
``app.core.answer_validation``.
"""

from types import MappingProxyType

from app.core.logging import get_logger
from app.core.schemas_questions import DataFormat, QuestionTypeMetadata, ValidationRules

logger = get_logger(__name__)

CURRENCY_CODES = ("GBP", "USD", "EUR", "CAD")


def _meta(
    type_: str,
    label: str,
    description: str,
    data_format: DataFormat,
    requires_options: bool = False,
    allows_multiple_answers: bool = False,
    **rules,
) -> QuestionTypeMetadata:
    return QuestionTypeMetadata(
        type=type_,
        label=label,
        description=description,
        requires_options=requires_options,
        allows_multiple_answers=allows_multiple_answers,
        data_format=data_format,
        validation_rules=ValidationRules(**rules) if rules else None,
    )


_REGISTRY = [
    # Standard types
    _meta("text", "Text Input", "Single-line text input field",
          DataFormat.STRING, max_length=1000),
    _meta("number", "Number Input", "Numeric input field with validation",
          DataFormat.NUMBER),
    _meta("select", "Dropdown Selection", "Single choice from dropdown options",
          DataFormat.STRING, requires_options=True),
    _meta("multiselect", "Multiple Selection", "Multiple choices from available options",
          DataFormat.ARRAY, requires_options=True, allows_multiple_answers=True),
    _meta("scale", "Rating Scale", "Numeric scale rating (1-5, 1-7, etc.)",
          DataFormat.NUMBER, min_value=1, max_value=10),
    _meta("boolean", "Yes/No Question", "Simple true/false or yes/no choice",
          DataFormat.BOOLEAN),
    _meta("smart_rating", "Smart Rating", "Rating with descriptive labels and variants",
          DataFormat.JSON, min_value=1, max_value=5),
    _meta("ranking", "Ranking/Prioritization", "Drag-and-drop ranking of items",
          DataFormat.JSON, requires_options=True),
    _meta("currency", "Currency Input", "Monetary input with multi-currency support",
          DataFormat.JSON, min_value=0, allowed_values=CURRENCY_CODES),
    _meta("percentage_allocation", "Percentage Allocation",
          "Allocate percentages across multiple categories",
          DataFormat.JSON, requires_options=True, min_value=0, max_value=100),
    _meta("percentage_target", "Percentage Targets",
          "Set percentage targets for different categories",
          DataFormat.JSON, requires_options=True, min_value=0, max_value=100),
    # Dynamic question types
    _meta("multiChoice", "Multiple Choice", "Multiple choice question with radio buttons",
          DataFormat.STRING, requires_options=True),
    _meta("allocation", "Resource Allocation", "Allocate resources or percentages",
          DataFormat.JSON, requires_options=True),
    _meta("checkbox", "Checkbox Selection", "Multiple selection with checkboxes",
          DataFormat.ARRAY, requires_options=True, allows_multiple_answers=True),
    _meta("textarea", "Long Text", "Multi-line text input area",
          DataFormat.STRING, max_length=5000),
    _meta("email", "Email Address", "Email input with validation",
          DataFormat.STRING, pattern=r"^[^@]+@[^@]+\.[^@]+$"),
    _meta("url", "URL/Website", "URL input with validation",
          DataFormat.STRING, pattern=r"^https?://.+"),
    _meta("date", "Date Selection", "Date picker input",
          DataFormat.STRING),
    _meta("score", "Score Input", "Numeric score with range validation",
          DataFormat.NUMBER),
    _meta("matrix", "Matrix Question", "Grid of questions with multiple dimensions",
          DataFormat.JSON, requires_options=True, allows_multiple_answers=True),
    _meta("compound", "Compound Question", "Multiple related questions grouped together",
          DataFormat.JSON, requires_options=True, allows_multiple_answers=True),
]

QUESTION_TYPE_METADATA: MappingProxyType[str, QuestionTypeMetadata] = MappingProxyType(
    {m.type: m for m in _REGISTRY}
)


def get_question_type_metadata(question_type: str) -> QuestionTypeMetadata | None:
    """Look up metadata for a question type. None means the type is unknown."""
    return QUESTION_TYPE_METADATA.get(question_type)


def question_type_requires_options(question_type: str) -> bool:
    """Whether a question type requires options (False if unknown)."""
    metadata = get_question_type_metadata(question_type)
    return metadata.requires_options if metadata else False


def question_type_allows_multiple_answers(question_type: str) -> bool:
    """Whether a question type allows multiple answers (False if unknown)."""
    metadata = get_question_type_metadata(question_type)
    return metadata.allows_multiple_answers if metadata else False


def get_question_type_data_format(question_type: str) -> DataFormat:
    """
    Get the expected answer data format for a question type.

    Unknown types read as strings so legacy data still renders.
    """
    metadata = get_question_type_metadata(question_type)
    if metadata is None:
        logger.debug(f"Unknown question type '{question_type}', reading as string")
        return DataFormat.STRING
    return metadata.data_format


def is_valid_question_type(question_type: str) -> bool:
    """Whether a question type is registered."""
    return question_type in QUESTION_TYPE_METADATA


def list_question_types() -> list[QuestionTypeMetadata]:
    """All registered question types in registration order."""
    return list(QUESTION_TYPE_METADATA.values())
