"""Question schema: a tagged union keyed by the ``type`` field."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
    model_validator,
)

from ..coercion import stringify

QuestionType = Literal[
    "single-choice",
    "multi-choice",
    "short-text",
    "long-text",
    "numeric",
    "file-upload",
]

QUESTION_TYPES: tuple[str, ...] = (
    "single-choice",
    "multi-choice",
    "short-text",
    "long-text",
    "numeric",
    "file-upload",
)

UNSUPPORTED_TAG = "unsupported"


def _number_to_text(value: Any) -> Any:
    # ids, labels and option values are sometimes authored as numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return stringify(value)
    return value


def _text_or_blank(value: Any) -> Any:
    return "" if value is None else _number_to_text(value)


class ChoiceOption(BaseModel):
    """Selectable option of a choice question."""

    id: str = ""
    label: str = ""
    value: str = ""

    model_config = ConfigDict(extra="allow")

    _coerce_text = field_validator("id", "label", "value", mode="before")(_text_or_blank)


class VisibilityCondition(BaseModel):
    """``showIf`` rule: show the question when another answer matches."""

    question_id: str | None = Field(default=None, alias="questionId")
    equals: str | None = None

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _coerce_question_id = field_validator("question_id", mode="before")(_number_to_text)

    @field_validator("equals", mode="before")
    @classmethod
    def _stringify_equals(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return stringify(value)


class NumericValidation(BaseModel):
    min: float | None = None
    max: float | None = None

    model_config = ConfigDict(extra="allow")


class TextValidation(BaseModel):
    max_length: int | None = Field(default=None, alias="maxLength")

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class QuestionBase(BaseModel):
    """Fields shared by every question variant."""

    id: str
    label: str = ""
    required: bool = False
    show_if: VisibilityCondition | None = Field(default=None, alias="showIf")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _lift_legacy_condition(cls, data: Any) -> Any:
        # older documents carry {"condition": {"if": {...}}}
        if not isinstance(data, dict):
            return data
        if data.get("showIf") is not None or data.get("show_if") is not None:
            return data
        condition = data.get("condition")
        if isinstance(condition, dict) and isinstance(condition.get("if"), dict):
            return {**data, "showIf": condition["if"]}
        return data

    _coerce_id = field_validator("id", mode="before")(_number_to_text)
    _coerce_label = field_validator("label", mode="before")(_text_or_blank)


class _ChoiceQuestion(QuestionBase):
    options: list[ChoiceOption] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def _default_options(cls, value: Any) -> Any:
        return [] if value is None else value

    def option_values(self) -> list[str]:
        return [option.value for option in self.options]


class SingleChoiceQuestion(_ChoiceQuestion):
    type: Literal["single-choice"] = "single-choice"


class MultiChoiceQuestion(_ChoiceQuestion):
    type: Literal["multi-choice"] = "multi-choice"


class _TextQuestion(QuestionBase):
    validation: TextValidation = Field(default_factory=TextValidation)

    @field_validator("validation", mode="before")
    @classmethod
    def _default_validation(cls, value: Any) -> Any:
        return {} if value is None else value


class ShortTextQuestion(_TextQuestion):
    type: Literal["short-text"] = "short-text"


class LongTextQuestion(_TextQuestion):
    type: Literal["long-text"] = "long-text"


class NumericQuestion(QuestionBase):
    type: Literal["numeric"] = "numeric"
    validation: NumericValidation = Field(default_factory=NumericValidation)

    @field_validator("validation", mode="before")
    @classmethod
    def _default_validation(cls, value: Any) -> Any:
        return {} if value is None else value


class FileUploadQuestion(QuestionBase):
    """Answer is the uploaded file's name only."""

    type: Literal["file-upload"] = "file-upload"


class UnsupportedQuestion(QuestionBase):
    """Question whose ``type`` this engine does not know; carried, never run."""

    type: str = ""


def _question_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    if kind in QUESTION_TYPES:
        return kind
    return UNSUPPORTED_TAG


Question = Annotated[
    Union[
        Annotated[SingleChoiceQuestion, Tag("single-choice")],
        Annotated[MultiChoiceQuestion, Tag("multi-choice")],
        Annotated[ShortTextQuestion, Tag("short-text")],
        Annotated[LongTextQuestion, Tag("long-text")],
        Annotated[NumericQuestion, Tag("numeric")],
        Annotated[FileUploadQuestion, Tag("file-upload")],
        Annotated[UnsupportedQuestion, Tag(UNSUPPORTED_TAG)],
    ],
    Discriminator(_question_tag),
]

ChoiceQuestion = Union[SingleChoiceQuestion, MultiChoiceQuestion]
TextQuestion = Union[ShortTextQuestion, LongTextQuestion]

question_adapter: TypeAdapter[Question] = TypeAdapter(Question)


def parse_question(raw: Any) -> Question:
    """Validate a raw mapping into the matching question variant."""
    return question_adapter.validate_python(raw)


__all__ = [
    "ChoiceOption",
    "ChoiceQuestion",
    "FileUploadQuestion",
    "LongTextQuestion",
    "MultiChoiceQuestion",
    "NumericQuestion",
    "NumericValidation",
    "QUESTION_TYPES",
    "Question",
    "QuestionBase",
    "QuestionType",
    "ShortTextQuestion",
    "SingleChoiceQuestion",
    "TextQuestion",
    "TextValidation",
    "UnsupportedQuestion",
    "VisibilityCondition",
    "parse_question",
    "question_adapter",
]
