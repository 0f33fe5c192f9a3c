"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class StoreConfig(BaseModel):
    path: str | None = None


class SessionConfig(BaseModel):
    path: str | None = None
    candidate_id: str | None = None


class MessagesConfig(BaseModel):
    required: str | None = None
    not_a_number: str | None = None
    minimum: str | None = None
    maximum: str | None = None
    max_length: str | None = None

    model_config = ConfigDict(extra="forbid")


class ValidatorConfig(BaseModel):
    messages: MessagesConfig = Field(default_factory=MessagesConfig)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    renderer: Literal["json", "console"] = "json"


class AppConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for name in ("store", "session", "validator"):
            section = getattr(self, name).model_dump(exclude_none=True)
            if any(section.values()):
                settings[name] = section
        settings["logging"] = self.logging.model_dump()
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
