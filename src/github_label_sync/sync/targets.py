"""Resolve a batch request into the concrete list of repositories to sync."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from github_label_sync.sync.models import BatchOptions, RepositoryFilter, RepositoryInfo
from github_label_sync.sync.provider import RepositoryLister

logger = logging.getLogger(__name__)


class NoTargetError(ValueError):
    """Raised when a batch request names no repositories, organization or user."""


def filter_repositories(
    repositories: Iterable[RepositoryInfo], repo_filter: RepositoryFilter | None
) -> list[str]:
    """Apply visibility, language and archived filters, in that order.

    Pure function of the listing; repositories that do not match are dropped.
    """

    selected: list[str] = []
    for repo in repositories:
        if repo_filter is not None:
            visibility = repo_filter.visibility
            if visibility and visibility != "all" and repo.visibility != visibility:
                continue
            if repo_filter.language and repo.language != repo_filter.language:
                continue
            if repo_filter.archived is not None and repo.archived != repo_filter.archived:
                continue
        selected.append(repo.full_name)
    return selected


def resolve_targets(options: BatchOptions, lister: RepositoryLister) -> list[str]:
    """Return the ordered repository identifiers for a batch run.

    An explicit repository list is returned verbatim (no de-duplication, no
    format validation). Otherwise the organization, then the user, is listed
    and filtered.

    Raises:
        NoTargetError: if no scope is set at all.
        ProviderError: if the repository listing fails.
    """

    scopes = [
        s
        for s, v in (
            ("repositories", bool(options.repositories)),
            ("organization", bool(options.organization)),
            ("user", bool(options.user)),
        )
        if v
    ]
    if len(scopes) > 1:
        logger.warning(
            "Multiple target scopes given; using the first by precedence",
            extra={"scopes": scopes, "selected": scopes[0]},
        )

    if options.repositories:
        return list(options.repositories)

    if options.organization:
        listing = lister.list_repositories(scope="organization", name=options.organization)
    elif options.user:
        listing = lister.list_repositories(scope="user", name=options.user)
    else:
        raise NoTargetError("No target repositories specified")

    targets = filter_repositories(listing, options.filter)
    logger.info(
        "Resolved target repositories",
        extra={"listed": len(listing), "selected": len(targets)},
    )
    return targets
