"""Turn sync results into counts and plain-text reports."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from github_label_sync.sync.models import BatchStatus, BatchSyncResult, SyncResult


@dataclass(frozen=True, slots=True)
class FailedRepository:
    repository: str
    error: str


@dataclass(frozen=True, slots=True)
class Summary:
    successful: int
    failed: int
    skipped: int
    failed_detail: list[FailedRepository] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class LabelTotals:
    """Per-label counts summed over the successful repositories of a batch."""

    created: int = 0
    updated: int = 0
    unchanged: int = 0
    deleted: int = 0
    errors: int = 0


def summarize(results: Sequence[BatchSyncResult]) -> Summary:
    return Summary(
        successful=sum(1 for r in results if r.status is BatchStatus.SUCCESS),
        failed=sum(1 for r in results if r.status is BatchStatus.FAILED),
        skipped=sum(1 for r in results if r.status is BatchStatus.SKIPPED),
        failed_detail=[
            FailedRepository(repository=r.repository, error=r.error or "Unknown error")
            for r in results
            if r.status is BatchStatus.FAILED
        ],
    )


def totals(results: Sequence[BatchSyncResult]) -> LabelTotals:
    synced = [r.result for r in results if r.result is not None]
    return LabelTotals(
        created=sum(len(r.created) for r in synced),
        updated=sum(len(r.updated) for r in synced),
        unchanged=sum(len(r.unchanged) for r in synced),
        deleted=sum(len(r.deleted) for r in synced),
        errors=sum(len(r.errors) for r in synced),
    )


def format_summary(summary: Summary) -> str:
    lines = ["Batch sync summary:", f"  Successful: {summary.successful}"]
    if summary.failed:
        lines.append(f"  Failed: {summary.failed}")
    if summary.skipped:
        lines.append(f"  Skipped: {summary.skipped}")
    if summary.failed_detail:
        lines.append("")
        lines.append("Failed repositories:")
        lines.extend(f"  - {f.repository}: {f.error}" for f in summary.failed_detail)
    return "\n".join(lines)


def format_sync_result(result: SyncResult, *, dry_run: bool = False) -> str:
    """Render a single repository result.

    Dry runs use the same layout, prefixed so readers know nothing was changed.
    """

    lines = ["Dry run - no changes were made." if dry_run else "Sync complete."]
    lines.append(f"  Created: {len(result.created)}")
    lines.append(f"  Updated: {len(result.updated)}")
    lines.append(f"  Deleted: {len(result.deleted)}")
    lines.append(f"  Unchanged: {len(result.unchanged)}")
    for label in result.created:
        lines.append(f"  + {label.name}")
    for label in result.updated:
        lines.append(f"  ~ {label.name}")
    for name in result.deleted:
        lines.append(f"  - {name}")
    if result.errors:
        lines.append(f"  Errors: {len(result.errors)}")
        lines.extend(f"  ! {e.name}: {e.error}" for e in result.errors)
    return "\n".join(lines)
