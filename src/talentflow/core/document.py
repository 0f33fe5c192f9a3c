"""Document normalization and condition checks."""

from __future__ import annotations

import uuid
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Literal, Mapping

from ..schemas import AssessmentDocument
from .conditions import parse_expected_values

IssueSeverity = Literal["error", "warning"]


class DocumentFormatError(ValueError):
    """Raised when a stored document is not a mapping."""


def new_section_id() -> str:
    return f"section-{uuid.uuid4().hex[:12]}"


def normalize_document(
    raw: Mapping[str, Any] | AssessmentDocument | None,
    *,
    section_id_factory: Callable[[], str] = new_section_id,
) -> AssessmentDocument:
    """Coerce a stored document into the sectioned shape.

    Documents saved before sections existed carry a flat ``questions``
    list; those are wrapped into one section titled after the document.
    """
    if isinstance(raw, AssessmentDocument):
        return raw
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise DocumentFormatError(
            f"Assessment document must be a mapping, got {type(raw).__name__}"
        )

    title = raw.get("title") or ""
    description = raw.get("description") or ""

    if isinstance(raw.get("sections"), list):
        payload = dict(raw)
        payload["title"] = title
        payload["description"] = description
        return AssessmentDocument.model_validate(payload)

    questions = raw.get("questions")
    if isinstance(questions, list):
        section = {
            "id": section_id_factory(),
            "title": raw.get("title") or "Section",
            "description": description,
            "questions": questions,
        }
        return AssessmentDocument.model_validate(
            {"title": title, "description": description, "sections": [section]}
        )

    return AssessmentDocument(title=title, description=description, sections=[])


@dataclass(slots=True, frozen=True)
class ConditionIssue:
    """Problem found in a document's question ids or visibility rules."""

    question_id: str
    kind: str
    severity: IssueSeverity
    message: str


def lint_conditions(document: AssessmentDocument) -> list[ConditionIssue]:
    """Report visibility rules that cannot behave as authored.

    Chained conditions are reported as warnings: a question whose target
    is itself conditional stays visible while the target holds a matching
    answer, even after the target has been hidden.
    """
    questions = list(document.iter_questions())
    by_id = {question.id: question for question in questions}
    issues: list[ConditionIssue] = []

    for question_id, count in Counter(q.id for q in questions).items():
        if count > 1:
            issues.append(
                ConditionIssue(
                    question_id=question_id,
                    kind="duplicate_id",
                    severity="error",
                    message=f"Question id {question_id!r} is used {count} times",
                )
            )

    for question in questions:
        condition = question.show_if
        if condition is None or not condition.question_id:
            continue
        target_id = condition.question_id

        if target_id == question.id:
            issues.append(
                ConditionIssue(
                    question_id=question.id,
                    kind="self_reference",
                    severity="error",
                    message="Visibility condition references the question itself",
                )
            )
            continue

        target = by_id.get(target_id)
        if target is None:
            issues.append(
                ConditionIssue(
                    question_id=question.id,
                    kind="unknown_target",
                    severity="error",
                    message=f"Visibility condition references unknown question {target_id!r}",
                )
            )
            continue

        if target.show_if is not None and target.show_if.question_id:
            issues.append(
                ConditionIssue(
                    question_id=question.id,
                    kind="chained_condition",
                    severity="warning",
                    message=(
                        f"Depends on {target_id!r}, which is itself conditional; "
                        "hiding it does not hide this question"
                    ),
                )
            )

        options = getattr(target, "options", None)
        expected = parse_expected_values(condition.equals)
        if options and expected:
            known = {option.value for option in options}
            unknown = [value for value in expected if value not in known]
            if unknown:
                issues.append(
                    ConditionIssue(
                        question_id=question.id,
                        kind="unknown_value",
                        severity="warning",
                        message=f"Expected values {unknown} are not options of {target_id!r}",
                    )
                )

    return issues


__all__ = [
    "ConditionIssue",
    "DocumentFormatError",
    "lint_conditions",
    "new_section_id",
    "normalize_document",
]
