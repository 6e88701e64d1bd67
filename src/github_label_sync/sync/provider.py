"""Capability interfaces for remote label storage.

The engine and the batch runner only depend on these protocols. Two
implementations exist: the REST/API client in `sync.github.client` and the
`gh` subprocess client in `sync.github.gh_cli`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal, Protocol

from github_label_sync.labels import LabelSpec
from github_label_sync.sync.models import RemoteLabel, RepositoryInfo

RepositoryScope = Literal["organization", "user"]


class ProviderError(RuntimeError):
    """Transport, auth, HTTP or subprocess failure talking to the remote."""


class InvalidRepositoryError(ValueError):
    """Raised for repository identifiers that are not of the form 'owner/repo'."""


def parse_repository(identifier: str) -> tuple[str, str]:
    """Split an 'owner/repo' identifier.

    Raises:
        InvalidRepositoryError: if either part is missing.
    """

    parts = identifier.strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidRepositoryError(
            f"Invalid repository format: {identifier!r}. Expected format: owner/repo"
        )
    return parts[0], parts[1]


class RemoteLabelProvider(Protocol):
    """Label operations bound to a single repository."""

    @property
    def repository(self) -> str: ...

    def fetch_labels(self) -> list[RemoteLabel]: ...

    def create_label(self, label: LabelSpec) -> RemoteLabel: ...

    def update_label(self, current_name: str, label: LabelSpec) -> RemoteLabel: ...

    def delete_label(self, name: str) -> None: ...

    def has_label(self, name: str) -> bool: ...

    def close(self) -> None: ...


class RepositoryLister(Protocol):
    """Repository listing for an organization or a user."""

    def list_repositories(
        self, *, scope: RepositoryScope, name: str
    ) -> list[RepositoryInfo]: ...


ProviderFactory = Callable[[str], RemoteLabelProvider]
