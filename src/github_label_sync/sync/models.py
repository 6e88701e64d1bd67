"""Result and option types for label reconciliation.

Everything here is created fresh per run and discarded once the summary has
been produced. Nothing is persisted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from github_label_sync.labels import LabelSpec


class SyncMode(str, Enum):
    """How remote labels absent from the local set are treated."""

    APPEND = "append"
    REPLACE = "replace"


class BatchStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class RemoteLabel:
    """A label as currently stored on the remote repository."""

    name: str
    color: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class RepositoryInfo:
    """One entry of an organization/user repository listing."""

    full_name: str
    visibility: str
    language: str | None
    archived: bool


@dataclass(frozen=True, slots=True)
class LabelFailure:
    name: str
    error: str


@dataclass(slots=True)
class SyncResult:
    """Per-repository outcome of one reconciliation.

    Every local label ends up in exactly one of `created`, `updated`,
    `unchanged` or `errors`. `deleted` only lists remote label names.
    """

    created: list[LabelSpec] = field(default_factory=list)
    updated: list[LabelSpec] = field(default_factory=list)
    unchanged: list[LabelSpec] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    errors: list[LabelFailure] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.created or self.updated or self.deleted)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(frozen=True, slots=True)
class BatchSyncResult:
    repository: str
    status: BatchStatus
    result: SyncResult | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RepositoryFilter:
    """Optional filters applied to organization/user repository listings.

    `None` means "do not filter on this field"; a visibility of "all" is the
    same as no visibility filter.
    """

    visibility: str | None = None
    language: str | None = None
    archived: bool | None = None


DEFAULT_PARALLEL = 3


@dataclass(frozen=True, slots=True)
class BatchOptions:
    """Options for a multi-repository run.

    Exactly one of `repositories`, `organization` or `user` is expected. When
    several are given the explicit list wins, then organization, then user.
    """

    repositories: Sequence[str] = ()
    organization: str | None = None
    user: str | None = None
    mode: SyncMode = SyncMode.APPEND
    dry_run: bool = False
    parallel: int = DEFAULT_PARALLEL
    filter: RepositoryFilter | None = None

    def __post_init__(self) -> None:
        if self.parallel < 1:
            raise ValueError("parallel must be at least 1")


@dataclass(frozen=True, slots=True)
class SyncEvent:
    """Notification emitted by the engine for each classified or executed label.

    `action` is one of: create, update, delete, unchanged.
    """

    action: str
    name: str
    dry_run: bool
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
