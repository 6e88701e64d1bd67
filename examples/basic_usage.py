#!/usr/bin/env python3
"""Programmatic batch label sync example.

This demonstrates using the sync components directly:

* load settings from `.env`
* load a label file
* sync it to every non-archived repository of an organization
* print a summary

The organization and label file are passed as arguments (not read from `.env`).
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from github_label_sync.sync.batch import BatchLabelSync
from github_label_sync.sync.config import LabelSyncSettings
from github_label_sync.sync.github.client import GitHubLabelClient
from github_label_sync.sync.label_file import load_label_file
from github_label_sync.sync.logging import configure_logging
from github_label_sync.sync.models import BatchOptions, RepositoryFilter, SyncMode
from github_label_sync.sync.report import format_summary, summarize


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync labels across an organization.")
    parser.add_argument("--org", required=True, help="GitHub organization")
    parser.add_argument("--labels-file", type=Path, required=True, help="JSON label file")
    parser.add_argument("--apply", action="store_true", help="Apply changes (default: dry run)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = LabelSyncSettings()
    configure_logging(settings.log_level)

    def client(repository: str | None = None) -> GitHubLabelClient:
        return GitHubLabelClient(
            token=settings.github_token,
            repository=repository,
            base_url=settings.github_base_url,
            timeout=settings.request_timeout,
        )

    labels = load_label_file(args.labels_file)
    lister = client()
    try:
        results = BatchLabelSync(provider_factory=client, lister=lister).run(
            labels,
            BatchOptions(
                organization=args.org,
                mode=SyncMode.APPEND,
                dry_run=not args.apply,
                parallel=settings.parallel,
                filter=RepositoryFilter(archived=False),
            ),
        )
    finally:
        lister.close()

    summary = summarize(results)
    print(format_summary(summary))
    return 1 if summary.failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
