"""Authoring operations on an assessment document."""

from __future__ import annotations

import uuid
from typing import Any

import structlog

from ..schemas import (
    AssessmentDocument,
    ChoiceOption,
    Question,
    QuestionType,
    Section,
    parse_question,
)
from ..stores import AssessmentStore
from .document import ConditionIssue, lint_conditions, new_section_id, normalize_document


class BuilderError(ValueError):
    """Raised for unknown ids or when a document is not fit to save."""

    def __init__(self, message: str, issues: list[ConditionIssue] | None = None):
        super().__init__(message)
        self.issues = issues or []


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class AssessmentBuilder:
    """Edit a document in memory and save it through an assessment store.

    Every edit replaces the affected question through the question union,
    so changing ``type`` yields the matching variant.
    """

    def __init__(self, document: AssessmentDocument | None = None) -> None:
        self._document = document or AssessmentDocument()
        self._logger = structlog.get_logger(__name__)

    @classmethod
    async def load(cls, store: AssessmentStore, job_id: str) -> "AssessmentBuilder":
        raw = await store.fetch_assessment(job_id)
        return cls(normalize_document(raw) if raw is not None else None)

    @property
    def document(self) -> AssessmentDocument:
        return self._document

    def set_details(self, *, title: str | None = None, description: str | None = None) -> None:
        if title is not None:
            self._document.title = title
        if description is not None:
            self._document.description = description

    def add_section(self, title: str = "New Section", description: str = "") -> Section:
        section = Section(id=new_section_id(), title=title, description=description)
        self._document.sections.append(section)
        return section

    def update_section(self, section_id: str, **updates: Any) -> Section:
        section = self._section(section_id)
        for name in ("title", "description"):
            if name in updates:
                setattr(section, name, updates[name] or "")
        return section

    def remove_section(self, section_id: str) -> None:
        self._section(section_id)
        self._document.sections = [s for s in self._document.sections if s.id != section_id]

    def add_question(
        self,
        section_id: str,
        *,
        question_type: QuestionType = "short-text",
        label: str = "New Question",
        required: bool = False,
        **fields: Any,
    ) -> Question:
        section = self._section(section_id)
        question = parse_question(
            {
                "id": _new_id("question"),
                "type": question_type,
                "label": label,
                "required": required,
                **fields,
            }
        )
        section.questions.append(question)
        return question

    def update_question(self, section_id: str, question_id: str, **updates: Any) -> Question:
        section = self._section(section_id)
        index = self._question_index(section, question_id)
        current = section.questions[index].model_dump(by_alias=True, exclude_none=True)
        merged = {**current, **updates, "id": question_id}
        if "show_if" in merged:
            merged["showIf"] = merged.pop("show_if")
        if "showIf" in updates or "show_if" in updates:
            merged.pop("condition", None)
        if merged.get("showIf") is None:
            merged.pop("showIf", None)
        question = parse_question(merged)
        section.questions[index] = question
        return question

    def remove_question(self, section_id: str, question_id: str) -> None:
        section = self._section(section_id)
        index = self._question_index(section, question_id)
        del section.questions[index]

    def set_condition(
        self,
        section_id: str,
        question_id: str,
        *,
        target_id: str,
        equals: str | None = None,
    ) -> Question:
        if target_id == question_id:
            raise BuilderError("A question cannot depend on itself")
        if self._document.find_question(target_id) is None:
            raise BuilderError(f"Unknown question {target_id!r}")
        condition: dict[str, Any] = {"questionId": target_id}
        if equals is not None:
            condition["equals"] = equals
        return self.update_question(section_id, question_id, showIf=condition)

    def clear_condition(self, section_id: str, question_id: str) -> Question:
        return self.update_question(section_id, question_id, showIf=None)

    def add_option(
        self,
        section_id: str,
        question_id: str,
        *,
        label: str = "New Option",
        value: str = "",
    ) -> ChoiceOption:
        question = self._choice_question(section_id, question_id)
        option = ChoiceOption(id=_new_id("option"), label=label, value=value)
        options = [*question.options, option]
        self.update_question(
            section_id, question_id, options=[o.model_dump() for o in options]
        )
        return option

    def update_option(
        self,
        section_id: str,
        question_id: str,
        option_id: str,
        **updates: Any,
    ) -> None:
        question = self._choice_question(section_id, question_id)
        if option_id not in {option.id for option in question.options}:
            raise BuilderError(f"Unknown option {option_id!r}")
        options = [
            {**option.model_dump(), **updates} if option.id == option_id else option.model_dump()
            for option in question.options
        ]
        self.update_question(section_id, question_id, options=options)

    def remove_option(self, section_id: str, question_id: str, option_id: str) -> None:
        question = self._choice_question(section_id, question_id)
        options = [option.model_dump() for option in question.options if option.id != option_id]
        self.update_question(section_id, question_id, options=options)

    def issues(self) -> list[ConditionIssue]:
        return lint_conditions(self._document)

    async def save(self, store: AssessmentStore, job_id: str) -> dict[str, Any]:
        """Persist the document; refuses when condition errors are present."""
        issues = self.issues()
        errors = [issue for issue in issues if issue.severity == "error"]
        if errors:
            raise BuilderError(
                f"Assessment has {len(errors)} invalid question(s)", issues=errors
            )
        for issue in issues:
            self._logger.warning(
                "builder.condition_warning",
                job_id=job_id,
                question_id=issue.question_id,
                kind=issue.kind,
            )
        saved = await store.save_assessment(job_id, self._document.to_payload())
        self._logger.info("builder.saved", job_id=job_id, section_count=len(self._document.sections))
        return saved

    def _section(self, section_id: str) -> Section:
        section = self._document.find_section(section_id)
        if section is None:
            raise BuilderError(f"Unknown section {section_id!r}")
        return section

    @staticmethod
    def _question_index(section: Section, question_id: str) -> int:
        for index, question in enumerate(section.questions):
            if question.id == question_id:
                return index
        raise BuilderError(f"Unknown question {question_id!r} in section {section.id!r}")

    def _choice_question(self, section_id: str, question_id: str) -> Any:
        section = self._section(section_id)
        question = section.questions[self._question_index(section, question_id)]
        if not hasattr(question, "options"):
            raise BuilderError(f"Question {question_id!r} has no options")
        return question


__all__ = ["AssessmentBuilder", "BuilderError"]
