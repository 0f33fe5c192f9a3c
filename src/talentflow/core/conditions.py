"""Conditional visibility evaluation."""

from __future__ import annotations

from typing import Any, Mapping

from ..coercion import is_truthy, stringify
from ..schemas import AssessmentDocument, Question, UnsupportedQuestion


def parse_expected_values(equals: str | None) -> list[str]:
    """Split a comma-separated ``equals`` into trimmed, non-empty tokens."""
    if not equals:
        return []
    return [token.strip() for token in equals.split(",") if token.strip()]


def is_visible(question: Question, responses: Mapping[str, Any]) -> bool:
    """Return whether ``question`` is shown given the current responses.

    Only the raw answer of the referenced question is consulted; whether
    that question is itself visible is not taken into account.
    """
    condition = question.show_if
    if condition is None or not condition.question_id:
        return True

    target = responses.get(condition.question_id)
    expected = parse_expected_values(condition.equals)

    if isinstance(target, (list, tuple)):
        if not expected:
            return len(target) > 0
        return any(value in target for value in expected)

    if not condition.equals:
        return is_truthy(target)

    actual = stringify(target)
    if len(expected) > 1:
        return actual in expected
    return actual == condition.equals


def visibility_map(
    document: AssessmentDocument,
    responses: Mapping[str, Any],
) -> dict[str, bool]:
    """Visibility of every question in the document, keyed by question id."""
    visibility: dict[str, bool] = {}
    for question in document.iter_questions():
        if isinstance(question, UnsupportedQuestion):
            visibility[question.id] = False
            continue
        visibility[question.id] = is_visible(question, responses)
    return visibility


__all__ = ["is_visible", "parse_expected_values", "visibility_map"]
