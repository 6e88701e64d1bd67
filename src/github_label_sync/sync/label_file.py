"""Load and write label definition files.

Accepted JSON shapes:
- a plain list of labels
- a registry object `{"version": ..., "labels": [...]}` where `labels` is either
  a flat list or a list of `{"category": ..., "labels": [...]}` groups

Colors may be given with or without '#', as 3 or 6 hex digits; they are
normalized to 6 lowercase digits.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from github_label_sync.labels import LabelSpec, normalize_color

REGISTRY_VERSION = "1.0.0"


class LabelFileError(ValueError):
    """Raised when a label file cannot be read or fails validation."""


class LabelModel(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    color: str
    description: str = Field(default="", max_length=200)
    category: str | None = None
    memo: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Label name is required")
        return stripped

    @field_validator("color")
    @classmethod
    def _normalize_color(cls, value: str) -> str:
        return normalize_color(value)

    def to_spec(self, *, category: str | None = None) -> LabelSpec:
        return LabelSpec(
            name=self.name,
            color=self.color,
            description=self.description,
            category=self.category or category,
            memo=self.memo,
        )


class LabelCategoryModel(BaseModel):
    category: str = Field(min_length=1, max_length=50)
    labels: list[LabelModel]


class LabelRegistryModel(BaseModel):
    version: str
    timestamp: str | None = None
    labels: list[LabelModel] | list[LabelCategoryModel]
    metadata: dict[str, Any] | None = None

    def flatten(self) -> list[LabelSpec]:
        specs: list[LabelSpec] = []
        for entry in self.labels:
            if isinstance(entry, LabelCategoryModel):
                specs.extend(label.to_spec(category=entry.category) for label in entry.labels)
            else:
                specs.append(entry.to_spec())
        return specs


def check_duplicate_names(labels: Sequence[LabelSpec]) -> None:
    seen: dict[str, str] = {}
    for label in labels:
        if label.key in seen:
            raise LabelFileError(
                f"Duplicate label name: {label.name!r} (already defined as {seen[label.key]!r})"
            )
        seen[label.key] = label.name


def parse_labels(raw: object) -> list[LabelSpec]:
    """Validate decoded JSON into label specs.

    Raises:
        LabelFileError: on schema errors or duplicate names.
    """

    try:
        if isinstance(raw, list):
            specs = [LabelModel.model_validate(item).to_spec() for item in raw]
        elif isinstance(raw, dict):
            specs = LabelRegistryModel.model_validate(raw).flatten()
        else:
            raise LabelFileError("Label file must contain a list or a registry object")
    except ValidationError as e:
        raise LabelFileError(f"Invalid label definitions: {e}") from e

    check_duplicate_names(specs)
    return specs


def load_label_file(path: Path) -> list[LabelSpec]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise LabelFileError(f"Cannot read label file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise LabelFileError(f"Label file {path} is not valid JSON: {e}") from e
    return parse_labels(raw)


def dump_label_file(
    path: Path, labels: Sequence[LabelSpec], *, source: str | None = None
) -> None:
    """Write labels as a registry file."""

    registry: dict[str, Any] = {
        "version": REGISTRY_VERSION,
        "timestamp": datetime.now(tz=UTC).isoformat(),
        "labels": [
            {"name": label.name, "color": label.color, "description": label.description}
            for label in labels
        ],
    }
    if source:
        registry["metadata"] = {"source": source}

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(registry, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
