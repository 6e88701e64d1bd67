"""Unit tests for batch target resolution."""

from __future__ import annotations

import logging

import pytest

from github_label_sync.sync.models import BatchOptions, RepositoryFilter, RepositoryInfo
from github_label_sync.sync.targets import NoTargetError, filter_repositories, resolve_targets

LISTING = [
    RepositoryInfo("octo/api", "public", "Python", False),
    RepositoryInfo("octo/web", "private", "TypeScript", False),
    RepositoryInfo("octo/legacy", "public", "Python", True),
    RepositoryInfo("octo/notes", "public", None, False),
]


def test_explicit_repositories_are_returned_verbatim(lister) -> None:
    repos = ["b/two", "a/one", "b/two", "malformed"]

    assert resolve_targets(BatchOptions(repositories=repos), lister) == repos
    assert lister.calls == []


def test_explicit_list_wins_over_organization(lister, caplog) -> None:
    options = BatchOptions(repositories=["a/one"], organization="octo", user="someone")

    with caplog.at_level(logging.WARNING):
        assert resolve_targets(options, lister) == ["a/one"]

    assert lister.calls == []
    assert "Multiple target scopes" in caplog.text


def test_organization_wins_over_user(lister) -> None:
    lister.repositories = LISTING

    resolve_targets(BatchOptions(organization="octo", user="someone"), lister)

    assert lister.calls == [("organization", "octo")]


def test_user_listing(lister) -> None:
    lister.repositories = LISTING

    assert resolve_targets(BatchOptions(user="octo"), lister) == [r.full_name for r in LISTING]
    assert lister.calls == [("user", "octo")]


def test_no_scope_raises(lister) -> None:
    with pytest.raises(NoTargetError):
        resolve_targets(BatchOptions(), lister)


def test_visibility_all_keeps_everything() -> None:
    assert filter_repositories(LISTING, RepositoryFilter(visibility="all")) == [
        r.full_name for r in LISTING
    ]


def test_filters_combine() -> None:
    selected = filter_repositories(
        LISTING, RepositoryFilter(visibility="public", language="Python", archived=False)
    )

    assert selected == ["octo/api"]


def test_archived_filter_matches_exact_boolean() -> None:
    assert filter_repositories(LISTING, RepositoryFilter(archived=True)) == ["octo/legacy"]


def test_language_filter_drops_repositories_without_language() -> None:
    assert filter_repositories(LISTING, RepositoryFilter(language="TypeScript")) == ["octo/web"]


def test_filters_apply_to_organization_listing(lister) -> None:
    lister.repositories = LISTING
    options = BatchOptions(organization="octo", filter=RepositoryFilter(visibility="private"))

    assert resolve_targets(options, lister) == ["octo/web"]
