"""Unit tests for label file loading and export."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from github_label_sync.labels import LabelSpec, normalize_color
from github_label_sync.sync.label_file import (
    LabelFileError,
    dump_label_file,
    load_label_file,
    parse_labels,
)


def test_load_categorized_registry(labels_file: Path) -> None:
    labels = load_label_file(labels_file)

    assert labels == [
        LabelSpec("bug", "d73a4a", "Something isn't working", category="type"),
        LabelSpec("feature", "00ee88", "New functionality", category="type"),
    ]


def test_plain_list_is_accepted() -> None:
    labels = parse_labels([{"name": " docs ", "color": "0075CA", "description": "Docs"}])

    assert labels == [LabelSpec("docs", "0075ca", "Docs")]


def test_duplicate_names_are_rejected_case_insensitively() -> None:
    raw = [
        {"name": "Bug", "color": "ff0000", "description": ""},
        {"name": "bug", "color": "00ff00", "description": ""},
    ]

    with pytest.raises(LabelFileError, match="Duplicate"):
        parse_labels(raw)


@pytest.mark.parametrize(
    "label",
    [
        {"name": "", "color": "ff0000"},
        {"name": "x" * 51, "color": "ff0000"},
        {"name": "bug", "color": "red"},
        {"name": "bug", "color": "ff0000", "description": "d" * 201},
    ],
)
def test_invalid_labels_are_rejected(label: dict[str, str]) -> None:
    with pytest.raises(LabelFileError):
        parse_labels([label])


def test_non_json_file(tmp_path: Path) -> None:
    path = tmp_path / "labels.json"
    path.write_text("labels: [", encoding="utf-8")

    with pytest.raises(LabelFileError, match="not valid JSON"):
        load_label_file(path)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(LabelFileError, match="Cannot read"):
        load_label_file(tmp_path / "missing.json")


def test_scalar_document_is_rejected() -> None:
    with pytest.raises(LabelFileError):
        parse_labels("bug")


def test_dump_then_load(tmp_path: Path) -> None:
    path = tmp_path / "out" / "labels.json"
    labels = [LabelSpec("bug", "d73a4a", "Broken"), LabelSpec("docs", "0075ca", "")]

    dump_label_file(path, labels, source="octo/repo")

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["version"] == "1.0.0"
    assert raw["metadata"] == {"source": "octo/repo"}
    assert load_label_file(path) == labels


def test_normalize_color() -> None:
    assert normalize_color("#ABC") == "aabbcc"
    assert normalize_color("D73A4A") == "d73a4a"
    with pytest.raises(ValueError):
        normalize_color("12345")
