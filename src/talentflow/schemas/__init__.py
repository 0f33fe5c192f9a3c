"""Pydantic schema definitions for assessment documents and submissions."""

from __future__ import annotations

from .assessment import (
    AssessmentDocument,
    ErrorMap,
    ResponseMap,
    Section,
    Submission,
    SubmissionRequest,
)
from .question import (
    QUESTION_TYPES,
    ChoiceOption,
    FileUploadQuestion,
    LongTextQuestion,
    MultiChoiceQuestion,
    NumericQuestion,
    NumericValidation,
    Question,
    QuestionType,
    ShortTextQuestion,
    SingleChoiceQuestion,
    TextValidation,
    UnsupportedQuestion,
    VisibilityCondition,
    parse_question,
)

__all__ = [
    "AssessmentDocument",
    "ChoiceOption",
    "ErrorMap",
    "FileUploadQuestion",
    "LongTextQuestion",
    "MultiChoiceQuestion",
    "NumericQuestion",
    "NumericValidation",
    "QUESTION_TYPES",
    "Question",
    "QuestionType",
    "ResponseMap",
    "Section",
    "ShortTextQuestion",
    "SingleChoiceQuestion",
    "Submission",
    "SubmissionRequest",
    "TextValidation",
    "UnsupportedQuestion",
    "VisibilityCondition",
    "parse_question",
]
