"""Unit tests for the gh CLI label client (subprocess runner is faked)."""

from __future__ import annotations

import json
import subprocess
from unittest.mock import Mock

import pytest

from github_label_sync.labels import LabelSpec
from github_label_sync.sync.github.gh_cli import GhCliLabelClient
from github_label_sync.sync.models import RemoteLabel, RepositoryInfo
from github_label_sync.sync.provider import ProviderError


def _completed(
    stdout: str = "", returncode: int = 0, stderr: str = ""
) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(
        args=[], returncode=returncode, stdout=stdout, stderr=stderr
    )


def _client(runner: Mock) -> GhCliLabelClient:
    return GhCliLabelClient(repository="octo-org/octo-repo", timeout=7.0, runner=runner)


def test_fetch_labels_parses_json() -> None:
    runner = Mock(
        return_value=_completed(
            json.dumps(
                [
                    {"name": "bug", "color": "d73a4a", "description": "Broken"},
                    {"name": "docs", "color": "0075ca", "description": None},
                ]
            )
        )
    )

    labels = _client(runner).fetch_labels()

    assert labels == [RemoteLabel("bug", "d73a4a", "Broken"), RemoteLabel("docs", "0075ca", "")]
    cmd = runner.call_args.args[0]
    assert cmd[:3] == ["gh", "label", "list"]
    assert ["--repo", "octo-org/octo-repo"] == cmd[3:5]
    assert runner.call_args.kwargs["timeout"] == 7.0
    assert runner.call_args.kwargs["check"] is False


def test_create_label_command() -> None:
    runner = Mock(return_value=_completed())

    created = _client(runner).create_label(LabelSpec("bug", "d73a4a", "Broken"))

    assert created == RemoteLabel("bug", "d73a4a", "Broken")
    assert runner.call_args.args[0] == [
        "gh",
        "label",
        "create",
        "bug",
        "--repo",
        "octo-org/octo-repo",
        "--color",
        "d73a4a",
        "--description",
        "Broken",
    ]


def test_update_label_renames_only_when_name_differs() -> None:
    runner = Mock(return_value=_completed())
    client = _client(runner)

    client.update_label("bug", LabelSpec("bug", "ff0000", "x"))
    assert "--name" not in runner.call_args.args[0]

    client.update_label("BUG", LabelSpec("bug", "ff0000", "x"))
    cmd = runner.call_args.args[0]
    assert cmd[:4] == ["gh", "label", "edit", "BUG"]
    assert cmd[cmd.index("--name") + 1] == "bug"


def test_delete_label_skips_confirmation() -> None:
    runner = Mock(return_value=_completed())

    _client(runner).delete_label("wontfix")

    assert runner.call_args.args[0][-1] == "--yes"


def test_non_zero_exit_raises_with_stderr() -> None:
    runner = Mock(return_value=_completed(returncode=1, stderr="label already exists\n"))

    with pytest.raises(ProviderError, match="label already exists"):
        _client(runner).create_label(LabelSpec("bug", "d73a4a", ""))


def test_missing_executable_raises() -> None:
    runner = Mock(side_effect=FileNotFoundError("gh"))

    with pytest.raises(ProviderError, match="not found"):
        _client(runner).fetch_labels()


def test_timeout_raises() -> None:
    runner = Mock(side_effect=subprocess.TimeoutExpired(cmd="gh", timeout=7.0))

    with pytest.raises(ProviderError, match="Timed out"):
        _client(runner).delete_label("bug")


def test_invalid_json_raises() -> None:
    runner = Mock(return_value=_completed("not json"))

    with pytest.raises(ProviderError):
        _client(runner).fetch_labels()


def test_has_label_is_case_insensitive() -> None:
    runner = Mock(return_value=_completed(json.dumps([{"name": "Bug", "color": "d73a4a"}])))

    assert _client(runner).has_label("bug") is True


def test_list_repositories() -> None:
    payload = [
        {
            "nameWithOwner": "octo/api",
            "visibility": "PUBLIC",
            "primaryLanguage": {"name": "Python"},
            "isArchived": False,
        },
        {
            "nameWithOwner": "octo/empty",
            "visibility": "PRIVATE",
            "primaryLanguage": None,
            "isArchived": True,
        },
    ]
    runner = Mock(return_value=_completed(json.dumps(payload)))
    client = GhCliLabelClient(runner=runner)

    repos = client.list_repositories(scope="organization", name="octo")

    assert repos == [
        RepositoryInfo("octo/api", "public", "Python", False),
        RepositoryInfo("octo/empty", "private", None, True),
    ]
    assert runner.call_args.args[0][:4] == ["gh", "repo", "list", "octo"]
