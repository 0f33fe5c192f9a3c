"""Assessment engine components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .builder import AssessmentBuilder, BuilderError
from .conditions import is_visible, parse_expected_values, visibility_map
from .document import (
    ConditionIssue,
    DocumentFormatError,
    lint_conditions,
    normalize_document,
)
from .runner import (
    AssessmentRunner,
    RunnerSession,
    RunnerState,
    RunnerStateError,
)
from .validation import DocumentValidation, ResponseValidator, ValidationMessages

__all__ = [
    "AssessmentBuilder",
    "AssessmentRunner",
    "BuilderError",
    "ConditionIssue",
    "DocumentFormatError",
    "DocumentValidation",
    "ResponseValidator",
    "RunnerSession",
    "RunnerState",
    "RunnerStateError",
    "ValidationMessages",
    "is_visible",
    "lint_conditions",
    "normalize_document",
    "parse_expected_values",
    "visibility_map",
]
