"""File loaders and writers used by the CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

_YAML_SUFFIXES = {".yaml", ".yml"}


def _read_structured(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        if path.suffix.lower() in _YAML_SUFFIXES:
            try:
                return yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
        try:
            return json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {path}: {exc}") from exc


class DocumentLoader:
    """Load a raw assessment document (JSON or YAML)."""

    def load(self, path: Path) -> dict[str, Any]:
        data = _read_structured(path)
        if not isinstance(data, dict):
            raise ValueError(f"Assessment document in {path} must be an object")
        # accept the store's {"assessment": {...}} envelope as well
        if set(data) == {"assessment"} and isinstance(data["assessment"], dict):
            return data["assessment"]
        return data


class ResponseLoader:
    """Load a response map keyed by question id."""

    def load(self, path: Path) -> dict[str, Any]:
        data = _read_structured(path)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Responses in {path} must be an object keyed by question id")
        return {str(key): value for key, value in data.items()}


class OutputWriter:
    """Persist command results."""

    def write(self, path: Path, payload: dict | list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )


__all__ = ["DocumentLoader", "OutputWriter", "ResponseLoader"]
