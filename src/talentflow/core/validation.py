"""Per-question response validation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog

from ..coercion import format_number, is_truthy, stringify, to_number
from ..schemas import (
    AssessmentDocument,
    LongTextQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    Question,
    ShortTextQuestion,
    UnsupportedQuestion,
)
from .conditions import is_visible


@dataclass
class ValidationMessages:
    """Message templates for validation failures."""

    required: str = "This question is required"
    not_a_number: str = "Must be a number"
    minimum: str = "Min {min}"
    maximum: str = "Max {max}"
    max_length: str = "Max length {max_length}"


@dataclass(slots=True)
class DocumentValidation:
    """Outcome of validating a whole document at submit time."""

    errors: dict[str, str] = field(default_factory=dict)
    visibility: dict[str, bool] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class ResponseValidator:
    """Check responses against required, numeric and length rules."""

    def __init__(self, *, messages: ValidationMessages | None = None) -> None:
        self._messages = messages or ValidationMessages()
        self._logger = structlog.get_logger(__name__)

    def validate(self, question: Question, value: Any) -> str | None:
        """Return the first failing rule's message, or ``None``."""
        if isinstance(question, UnsupportedQuestion):
            return None

        if question.required and not self._has_answer(question, value):
            return self._messages.required

        if isinstance(question, NumericQuestion):
            return self._check_numeric(question, value)

        if isinstance(question, (ShortTextQuestion, LongTextQuestion)):
            return self._check_length(question, value)

        return None

    def validate_document(
        self,
        document: AssessmentDocument,
        responses: Mapping[str, Any],
    ) -> DocumentValidation:
        result = DocumentValidation()
        for section in document.sections:
            for question in section.questions:
                if isinstance(question, UnsupportedQuestion):
                    result.visibility[question.id] = False
                    continue
                visible = is_visible(question, responses)
                result.visibility[question.id] = visible
                if not visible:
                    continue
                error = self.validate(question, responses.get(question.id))
                if error is not None:
                    result.errors[question.id] = error

        self._logger.debug(
            "validation.document",
            error_count=len(result.errors),
            hidden=[qid for qid, shown in result.visibility.items() if not shown],
        )
        return result

    @staticmethod
    def _has_answer(question: Question, value: Any) -> bool:
        if isinstance(question, MultiChoiceQuestion):
            return isinstance(value, (list, tuple)) and len(value) > 0
        if value is None:
            return False
        return stringify(value).strip() != ""

    def _check_numeric(self, question: NumericQuestion, value: Any) -> str | None:
        if value is None or value == "":
            return None

        number = to_number(value)
        if not math.isfinite(number):
            return self._messages.not_a_number

        # both bounds are checked; when both fail the max message wins
        error: str | None = None
        bounds = question.validation
        if bounds.min is not None and number < bounds.min:
            error = self._messages.minimum.format(min=format_number(bounds.min))
        if bounds.max is not None and number > bounds.max:
            error = self._messages.maximum.format(max=format_number(bounds.max))
        return error

    def _check_length(
        self,
        question: ShortTextQuestion | LongTextQuestion,
        value: Any,
    ) -> str | None:
        max_length = question.validation.max_length
        if not max_length or not is_truthy(value):
            return None
        if len(stringify(value)) > max_length:
            return self._messages.max_length.format(max_length=max_length)
        return None


__all__ = ["DocumentValidation", "ResponseValidator", "ValidationMessages"]
