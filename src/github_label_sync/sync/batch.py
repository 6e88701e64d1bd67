"""Fan label reconciliation out across many repositories.

Repositories are processed in consecutive chunks of `BatchOptions.parallel`.
Every repository in a chunk runs concurrently against its own provider; the
next chunk starts only after the whole chunk has settled. A failing repository
is recorded as `failed` and never affects any other repository.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from github_label_sync.labels import LabelSpec
from github_label_sync.sync.engine import SyncObserver, reconcile
from github_label_sync.sync.models import BatchOptions, BatchStatus, BatchSyncResult
from github_label_sync.sync.provider import (
    ProviderFactory,
    RemoteLabelProvider,
    RepositoryLister,
    parse_repository,
)
from github_label_sync.sync.targets import resolve_targets

logger = logging.getLogger(__name__)

# (completed, total, result)
ProgressCallback = Callable[[int, int, BatchSyncResult], None]


class BatchLabelSync:
    """Run the reconciliation engine over a resolved set of repositories."""

    def __init__(
        self,
        *,
        provider_factory: ProviderFactory,
        lister: RepositoryLister,
        observer: Callable[[str], SyncObserver] | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the batch runner.

        Args:
            provider_factory: Builds a provider bound to one 'owner/repo'.
            lister: Used to list organization/user repositories.
            observer: Optional per-repository observer factory forwarded to the engine.
            on_progress: Called after each repository completes.
        """

        self._provider_factory = provider_factory
        self._lister = lister
        self._observer = observer
        self._on_progress = on_progress

    def run(self, local: Sequence[LabelSpec], options: BatchOptions) -> list[BatchSyncResult]:
        """Sync `local` to every target repository.

        Raises:
            NoTargetError: if the options name no target scope.
            ProviderError: if the organization/user listing fails.
        """

        repositories = resolve_targets(options, self._lister)
        total = len(repositories)
        logger.info(
            "Starting batch label sync",
            extra={
                "repositories": total,
                "parallel": options.parallel,
                "mode": options.mode.value,
                "dry_run": options.dry_run,
            },
        )

        results: list[BatchSyncResult | None] = [None] * total
        completed = 0
        with ThreadPoolExecutor(
            max_workers=options.parallel, thread_name_prefix="batch-sync"
        ) as executor:
            for start in range(0, total, options.parallel):
                chunk = range(start, min(start + options.parallel, total))
                futures = {
                    index: executor.submit(self._sync_one, repositories[index], local, options)
                    for index in chunk
                }
                for index, future in futures.items():
                    try:
                        outcome = future.result()
                    except Exception as e:
                        outcome = BatchSyncResult(
                            repository=repositories[index],
                            status=BatchStatus.FAILED,
                            error=str(e) or type(e).__name__,
                        )
                    results[index] = outcome
                    completed += 1
                    self._notify_progress(completed, total, outcome)

        return [r for r in results if r is not None]

    def _notify_progress(self, completed: int, total: int, outcome: BatchSyncResult) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(completed, total, outcome)
        except Exception:
            logger.exception("Progress callback failed", extra={"repo": outcome.repository})

    def _sync_one(
        self, repository: str, local: Sequence[LabelSpec], options: BatchOptions
    ) -> BatchSyncResult:
        try:
            parse_repository(repository)
            provider = self._provider_factory(repository)
        except Exception as e:
            return _failed(repository, e)

        try:
            result = reconcile(
                local,
                provider,
                mode=options.mode,
                dry_run=options.dry_run,
                observer=self._observer(repository) if self._observer else None,
            )
        except Exception as e:
            return _failed(repository, e)
        finally:
            _close_quietly(provider, repository)

        logger.info(
            "Repository label sync finished",
            extra={
                "repo": repository,
                "created": len(result.created),
                "updated": len(result.updated),
                "deleted": len(result.deleted),
                "errors": len(result.errors),
            },
        )
        return BatchSyncResult(repository=repository, status=BatchStatus.SUCCESS, result=result)


def _failed(repository: str, error: Exception) -> BatchSyncResult:
    logger.warning(
        "Repository label sync failed",
        extra={"repo": repository, "error": str(error)},
    )
    return BatchSyncResult(
        repository=repository,
        status=BatchStatus.FAILED,
        error=str(error) or type(error).__name__,
    )


def _close_quietly(provider: RemoteLabelProvider, repository: str) -> None:
    # The sync outcome stands even when releasing the client fails.
    try:
        provider.close()
    except Exception as e:
        logger.warning(
            "Failed to close label provider",
            extra={"repo": repository, "error": str(e)},
        )
