"""Label reconciliation for a single repository.

The engine compares the local label set with the remote one and partitions it
into create / update / unchanged (and delete in replace mode). Mutating calls
run in small concurrent groups: all creates first, then updates, then deletes.
Each group fully settles before the next one starts, and one failing label
never blocks its siblings.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TypeVar

from github_label_sync.labels import LabelSpec, colors_equal, label_key
from github_label_sync.sync.models import (
    LabelFailure,
    RemoteLabel,
    SyncEvent,
    SyncMode,
    SyncResult,
)
from github_label_sync.sync.provider import RemoteLabelProvider

logger = logging.getLogger(__name__)

LABEL_BATCH_SIZE = 5

SyncObserver = Callable[[SyncEvent], None]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class LabelUpdate:
    """An update aimed at the remote label's original name."""

    remote_name: str
    label: LabelSpec


@dataclass(slots=True)
class SyncPlan:
    creates: list[LabelSpec] = field(default_factory=list)
    updates: list[LabelUpdate] = field(default_factory=list)
    unchanged: list[LabelSpec] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)


def has_changes(local: LabelSpec, remote: RemoteLabel) -> bool:
    """Only color (case-insensitive) and description (exact) are compared."""

    return not colors_equal(local.color, remote.color) or local.description != (
        remote.description or ""
    )


def plan_sync(
    local: Sequence[LabelSpec],
    remote: Sequence[RemoteLabel],
    *,
    mode: SyncMode,
) -> SyncPlan:
    """Classify local labels against the remote set without touching the remote."""

    remote_by_key: dict[str, RemoteLabel] = {}
    for label in remote:
        remote_by_key.setdefault(label_key(label.name), label)
    local_by_key: dict[str, LabelSpec] = {}
    for spec in local:
        local_by_key.setdefault(spec.key, spec)

    plan = SyncPlan()
    for spec in local:
        match = remote_by_key.get(spec.key)
        if match is None:
            plan.creates.append(spec)
        elif has_changes(spec, match):
            plan.updates.append(LabelUpdate(remote_name=match.name, label=spec))
        else:
            plan.unchanged.append(spec)

    if mode is SyncMode.REPLACE:
        plan.deletes = [r.name for r in remote if label_key(r.name) not in local_by_key]

    return plan


def _chunks(items: Sequence[T], size: int) -> Iterable[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _settle(futures: Sequence[Future[object]]) -> list[Exception | None]:
    """Wait for every future; return the exception (or None) per slot."""

    outcomes: list[Exception | None] = []
    for future in futures:
        try:
            future.result()
        except Exception as e:
            outcomes.append(e)
        else:
            outcomes.append(None)
    return outcomes


def _run_in_batches(
    executor: ThreadPoolExecutor,
    items: Sequence[T],
    operation: Callable[[T], object],
    *,
    batch_size: int,
) -> list[tuple[T, Exception | None]]:
    results: list[tuple[T, Exception | None]] = []
    for batch in _chunks(items, batch_size):
        futures = [executor.submit(operation, item) for item in batch]
        results.extend(zip(batch, _settle(futures), strict=True))
    return results


def reconcile(
    local: Sequence[LabelSpec],
    provider: RemoteLabelProvider,
    *,
    mode: SyncMode = SyncMode.APPEND,
    dry_run: bool = False,
    observer: SyncObserver | None = None,
    batch_size: int = LABEL_BATCH_SIZE,
) -> SyncResult:
    """Bring the provider's label set in line with `local`.

    The initial fetch is the only call whose failure propagates; every create,
    update or delete failure is recorded in `SyncResult.errors`.

    Args:
        local: Desired labels, already validated.
        provider: Label operations for one repository.
        mode: `replace` also deletes remote labels absent locally.
        dry_run: Classify only; no mutating provider calls are made.
        observer: Called once per classified or executed label.
        batch_size: Number of concurrent mutating calls per group.

    Returns:
        The full outcome for this repository.
    """

    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    def notify(action: str, name: str, error: str | None = None) -> None:
        if observer is not None:
            observer(SyncEvent(action=action, name=name, dry_run=dry_run, error=error))

    remote = provider.fetch_labels()
    plan = plan_sync(local, remote, mode=mode)
    logger.debug(
        "Planned label sync",
        extra={
            "repo": provider.repository,
            "creates": len(plan.creates),
            "updates": len(plan.updates),
            "unchanged": len(plan.unchanged),
            "deletes": len(plan.deletes),
            "dry_run": dry_run,
        },
    )

    result = SyncResult()
    for spec in plan.unchanged:
        result.unchanged.append(spec)
        notify("unchanged", spec.name)

    if dry_run:
        for spec in plan.creates:
            result.created.append(spec)
            notify("create", spec.name)
        for update in plan.updates:
            result.updated.append(update.label)
            notify("update", update.label.name)
        for name in plan.deletes:
            result.deleted.append(name)
            notify("delete", name)
        return result

    with ThreadPoolExecutor(
        max_workers=batch_size, thread_name_prefix="label-sync"
    ) as executor:
        for spec, error in _run_in_batches(
            executor, plan.creates, provider.create_label, batch_size=batch_size
        ):
            if error is None:
                result.created.append(spec)
                notify("create", spec.name)
            else:
                result.errors.append(LabelFailure(name=spec.name, error=str(error)))
                notify("create", spec.name, str(error))

        for update, error in _run_in_batches(
            executor,
            plan.updates,
            lambda u: provider.update_label(u.remote_name, u.label),
            batch_size=batch_size,
        ):
            if error is None:
                result.updated.append(update.label)
                notify("update", update.label.name)
            else:
                result.errors.append(LabelFailure(name=update.label.name, error=str(error)))
                notify("update", update.label.name, str(error))

        for name, error in _run_in_batches(
            executor, plan.deletes, provider.delete_label, batch_size=batch_size
        ):
            if error is None:
                result.deleted.append(name)
                notify("delete", name)
            else:
                result.errors.append(LabelFailure(name=name, error=str(error)))
                notify("delete", name, str(error))

    return result
