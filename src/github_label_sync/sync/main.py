"""CLI entrypoint for github-label-sync.

Commands:
- sync:     reconcile one repository with a label file
- batch:    reconcile many repositories (explicit list, organization or user)
- export:   write a repository's current labels to a label file
- validate: check a label file without contacting GitHub
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from github_label_sync import __version__
from github_label_sync.labels import LabelSpec
from github_label_sync.sync.batch import BatchLabelSync
from github_label_sync.sync.config import LabelSyncSettings
from github_label_sync.sync.engine import reconcile
from github_label_sync.sync.github.client import GitHubLabelClient
from github_label_sync.sync.github.gh_cli import GhCliLabelClient
from github_label_sync.sync.label_file import LabelFileError, dump_label_file, load_label_file
from github_label_sync.sync.logging import configure_logging, logging_observer
from github_label_sync.sync.models import (
    BatchOptions,
    BatchStatus,
    BatchSyncResult,
    RepositoryFilter,
    SyncMode,
)
from github_label_sync.sync.provider import (
    InvalidRepositoryError,
    ProviderError,
    RemoteLabelProvider,
    parse_repository,
)
from github_label_sync.sync.report import format_summary, format_sync_result, summarize, totals
from github_label_sync.sync.targets import NoTargetError

logger = logging.getLogger(__name__)


def _parse_repositories(value: str | None) -> list[str]:
    if value is None:
        return []
    return [p.strip() for p in value.split(",") if p.strip()]


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _add_sync_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--labels-file",
        "--file",
        dest="labels_file",
        type=Path,
        required=True,
        help="JSON label file (list or registry)",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in SyncMode],
        default=SyncMode.APPEND.value,
        help="'append' only creates/updates; 'replace' also deletes labels not in the file",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Show what would change without changing it"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Log every label operation"
    )
    parser.add_argument(
        "--provider",
        choices=["api", "gh"],
        default=None,
        help="Override LABEL_SYNC_PROVIDER (REST API or gh CLI)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="label-sync",
        description="Reconcile GitHub repository labels with a label file",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-label-sync {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Sync labels to one repository")
    sync.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Target repository in the form 'owner/repo'",
    )
    _add_sync_options(sync)

    batch = subparsers.add_parser("batch", help="Sync labels to many repositories")
    target = batch.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--repos",
        "--repositories",
        dest="repositories",
        default=None,
        help="Comma-separated repositories, e.g. 'octo/a,octo/b'",
    )
    target.add_argument("--org", "--organization", dest="organization", default=None)
    target.add_argument("--user", default=None)
    _add_sync_options(batch)
    batch.add_argument(
        "--parallel",
        type=_positive_int,
        default=None,
        help="Repositories synced concurrently (defaults to LABEL_SYNC_PARALLEL)",
    )
    batch.add_argument(
        "--visibility",
        choices=["public", "private", "internal", "all"],
        default=None,
        help="Only sync repositories with this visibility",
    )
    batch.add_argument("--language", default=None, help="Only sync repositories in this language")
    archived = batch.add_mutually_exclusive_group()
    archived.add_argument(
        "--archived", dest="archived", action="store_const", const=True, default=None
    )
    archived.add_argument("--no-archived", dest="archived", action="store_const", const=False)

    export = subparsers.add_parser("export", help="Export a repository's labels to a file")
    export.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Source repository in the form 'owner/repo'",
    )
    export.add_argument("--output", type=Path, required=True, help="Destination JSON file")
    export.add_argument(
        "--provider",
        choices=["api", "gh"],
        default=None,
        help="Override LABEL_SYNC_PROVIDER (REST API or gh CLI)",
    )

    validate = subparsers.add_parser("validate", help="Validate a label file")
    validate.add_argument("labels_file", type=Path, help="JSON label file")

    return parser


def _provider_kind(args: argparse.Namespace, settings: LabelSyncSettings) -> str:
    return getattr(args, "provider", None) or settings.provider


def make_client(
    settings: LabelSyncSettings, *, provider: str, repository: str | None = None
) -> GitHubLabelClient | GhCliLabelClient:
    if provider == "gh":
        return GhCliLabelClient(
            repository=repository,
            executable=settings.gh_executable,
            timeout=settings.request_timeout,
        )
    return GitHubLabelClient(
        token=settings.github_token,
        repository=repository,
        base_url=settings.github_base_url,
        timeout=settings.request_timeout,
    )


def _print_progress(completed: int, total: int, outcome: BatchSyncResult) -> None:
    if outcome.status is BatchStatus.SUCCESS:
        print(f"[{completed}/{total}] ok     {outcome.repository}")
    else:
        print(
            f"[{completed}/{total}] {outcome.status.value:<6} {outcome.repository}: {outcome.error}"
        )


def _run_sync(
    args: argparse.Namespace, settings: LabelSyncSettings, labels: list[LabelSpec]
) -> int:
    parse_repository(args.repository)
    provider: RemoteLabelProvider = make_client(
        settings, provider=_provider_kind(args, settings), repository=args.repository
    )
    try:
        result = reconcile(
            labels,
            provider,
            mode=SyncMode(args.mode),
            dry_run=args.dry_run,
            observer=logging_observer(args.repository) if args.verbose else None,
        )
    finally:
        provider.close()

    print(format_sync_result(result, dry_run=args.dry_run))
    return 1 if result.has_errors else 0


def _run_batch(
    args: argparse.Namespace, settings: LabelSyncSettings, labels: list[LabelSpec]
) -> int:
    kind = _provider_kind(args, settings)
    options = BatchOptions(
        repositories=_parse_repositories(args.repositories),
        organization=args.organization,
        user=args.user,
        mode=SyncMode(args.mode),
        dry_run=args.dry_run,
        parallel=args.parallel if args.parallel is not None else settings.parallel,
        filter=RepositoryFilter(
            visibility=args.visibility, language=args.language, archived=args.archived
        ),
    )

    lister = make_client(settings, provider=kind)
    try:
        runner = BatchLabelSync(
            provider_factory=lambda repo: make_client(settings, provider=kind, repository=repo),
            lister=lister,
            observer=logging_observer if args.verbose else None,
            on_progress=_print_progress,
        )
        results = runner.run(labels, options)
    finally:
        lister.close()

    summary = summarize(results)
    label_totals = totals(results)
    print(format_summary(summary))
    print(
        f"Labels: {label_totals.created} created, {label_totals.updated} updated, "
        f"{label_totals.deleted} deleted, {label_totals.unchanged} unchanged, "
        f"{label_totals.errors} errors"
    )
    if args.dry_run:
        print("Dry run - no changes were made.")
    return 1 if summary.failed or label_totals.errors else 0


def _run_export(args: argparse.Namespace, settings: LabelSyncSettings) -> int:
    parse_repository(args.repository)
    client = make_client(
        settings, provider=_provider_kind(args, settings), repository=args.repository
    )
    try:
        remote = client.fetch_labels()
    finally:
        client.close()

    labels = [
        LabelSpec(name=r.name, color=r.color, description=r.description) for r in remote
    ]
    dump_label_file(args.output, labels, source=args.repository)
    logger.info("Labels exported", extra={"path": str(args.output), "count": len(labels)})
    print(f"Exported {len(labels)} labels from {args.repository} to {args.output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "validate":
        try:
            labels = load_label_file(args.labels_file)
        except LabelFileError as e:
            print(str(e), file=sys.stderr)
            return 2
        print(f"{args.labels_file}: {len(labels)} labels OK")
        return 0

    try:
        provider = getattr(args, "provider", None)
        overrides = {"LABEL_SYNC_PROVIDER": provider} if provider else {}
        settings = LabelSyncSettings(**overrides)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "export":
            return _run_export(args, settings)

        labels = load_label_file(args.labels_file)

        if args.command == "sync":
            return _run_sync(args, settings, labels)

        if args.command == "batch":
            return _run_batch(args, settings, labels)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (LabelFileError, InvalidRepositoryError, NoTargetError) as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 2

    except ProviderError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
