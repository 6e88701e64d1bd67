"""Test configuration and fixtures."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest

from github_label_sync.labels import LabelSpec
from github_label_sync.sync.models import RemoteLabel, RepositoryInfo
from github_label_sync.sync.provider import ProviderError, RepositoryScope


class FakeLabelProvider:
    """In-memory provider that applies mutations to its own label list.

    `fail_on` maps (action, label name) to the error raised for that call.
    """

    def __init__(
        self,
        repository: str = "octo-org/octo-repo",
        labels: list[RemoteLabel] | None = None,
        *,
        fail_on: dict[tuple[str, str], Exception] | None = None,
        fetch_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._repository = repository
        self.labels: list[RemoteLabel] = list(labels or [])
        self.fail_on = fail_on or {}
        self.fetch_error = fetch_error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []
        self.closed = False
        self.max_in_flight = 0
        self._in_flight = 0
        self._lock = threading.Lock()

    @property
    def repository(self) -> str:
        return self._repository

    def _enter(self, action: str, name: str) -> None:
        with self._lock:
            self.calls.append((action, name))
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
        if self.delay:
            time.sleep(self.delay)

    def _exit(self) -> None:
        with self._lock:
            self._in_flight -= 1

    def _index(self, name: str) -> int:
        for i, label in enumerate(self.labels):
            if label.name.lower() == name.lower():
                return i
        raise ProviderError(f"Label not found: {name}")

    def fetch_labels(self) -> list[RemoteLabel]:
        with self._lock:
            self.calls.append(("fetch", ""))
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.labels)

    def create_label(self, label: LabelSpec) -> RemoteLabel:
        self._enter("create", label.name)
        try:
            if ("create", label.name) in self.fail_on:
                raise self.fail_on[("create", label.name)]
            created = RemoteLabel(label.name, label.color, label.description)
            with self._lock:
                self.labels.append(created)
            return created
        finally:
            self._exit()

    def update_label(self, current_name: str, label: LabelSpec) -> RemoteLabel:
        self._enter("update", current_name)
        try:
            if ("update", current_name) in self.fail_on:
                raise self.fail_on[("update", current_name)]
            updated = RemoteLabel(label.name, label.color, label.description)
            with self._lock:
                self.labels[self._index(current_name)] = updated
            return updated
        finally:
            self._exit()

    def delete_label(self, name: str) -> None:
        self._enter("delete", name)
        try:
            if ("delete", name) in self.fail_on:
                raise self.fail_on[("delete", name)]
            with self._lock:
                del self.labels[self._index(name)]
        finally:
            self._exit()

    def has_label(self, name: str) -> bool:
        return any(label.name.lower() == name.lower() for label in self.labels)

    def close(self) -> None:
        self.closed = True

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [c for c in self.calls if c[0] != "fetch"]


class FakeRepositoryLister:
    def __init__(self, repositories: list[RepositoryInfo] | None = None) -> None:
        self.repositories = list(repositories or [])
        self.calls: list[tuple[RepositoryScope, str]] = []

    def list_repositories(self, *, scope: RepositoryScope, name: str) -> list[RepositoryInfo]:
        self.calls.append((scope, name))
        return list(self.repositories)


@pytest.fixture
def make_provider() -> Callable[..., FakeLabelProvider]:
    """Build fake providers: `make_provider(labels=[...], fail_on={...})`."""
    return FakeLabelProvider


@pytest.fixture
def lister() -> FakeRepositoryLister:
    return FakeRepositoryLister()


@pytest.fixture
def bug_label() -> LabelSpec:
    return LabelSpec(name="bug", color="d73a4a", description="Something isn't working")


@pytest.fixture
def labels_file(tmp_path: Path) -> Path:
    """Provide a small registry-style label file."""
    path = tmp_path / "labels.json"
    path.write_text(
        """{
  "version": "1.0.0",
  "labels": [
    {"category": "type", "labels": [
      {"name": "bug", "color": "#D73A4A", "description": "Something isn't working"},
      {"name": "feature", "color": "0e8", "description": "New functionality"}
    ]}
  ]
}
""",
        encoding="utf-8",
    )
    return path
