"""GitHub label sync.

Reconciles a declared set of labels with the live labels of one or many
GitHub repositories:
- settings loaded from `.env`
- structured logging
- single-repository and batch reconciliation with bounded concurrency
"""

__version__ = "0.1.0"

from github_label_sync.labels import LabelSpec
from github_label_sync.sync.config import LabelSyncSettings

__all__ = ["__version__", "LabelSpec", "LabelSyncSettings"]
