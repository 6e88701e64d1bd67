"""Label reconciliation components.

- `engine`: diff and apply labels for one repository
- `targets`: resolve repositories for a batch run
- `batch`: run the engine across repositories with bounded concurrency
- `report`: summarize results
"""

from github_label_sync.sync.batch import BatchLabelSync
from github_label_sync.sync.engine import plan_sync, reconcile
from github_label_sync.sync.models import (
    BatchOptions,
    BatchStatus,
    BatchSyncResult,
    RemoteLabel,
    RepositoryFilter,
    SyncMode,
    SyncResult,
)
from github_label_sync.sync.provider import ProviderError, RemoteLabelProvider
from github_label_sync.sync.report import Summary, summarize
from github_label_sync.sync.targets import NoTargetError, resolve_targets

__all__ = [
    "BatchLabelSync",
    "BatchOptions",
    "BatchStatus",
    "BatchSyncResult",
    "NoTargetError",
    "ProviderError",
    "RemoteLabel",
    "RemoteLabelProvider",
    "RepositoryFilter",
    "Summary",
    "SyncMode",
    "SyncResult",
    "plan_sync",
    "reconcile",
    "resolve_targets",
    "summarize",
]
