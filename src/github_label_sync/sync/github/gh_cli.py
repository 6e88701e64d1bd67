"""Label client driven by the GitHub CLI (`gh`).

Useful where `gh auth login` already holds credentials and no token is
configured. Each call runs one `gh` subprocess with a timeout.
"""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Callable, Sequence
from typing import Any

from github_label_sync.labels import LabelSpec, label_key
from github_label_sync.sync.models import RemoteLabel, RepositoryInfo
from github_label_sync.sync.provider import ProviderError, RepositoryScope

logger = logging.getLogger(__name__)

LIST_LIMIT = 1000

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class GhCliLabelClient:
    """Same capabilities as `GitHubLabelClient`, backed by `gh` subprocesses."""

    def __init__(
        self,
        *,
        repository: str | None = None,
        executable: str = "gh",
        timeout: float = 30.0,
        runner: Runner = subprocess.run,
    ) -> None:
        self._repository_name = (repository or "").strip().strip("/")
        self._executable = executable
        self._timeout = timeout
        self._runner = runner

    @property
    def repository(self) -> str:
        return self._repository_name

    def _repo_args(self) -> list[str]:
        if not self._repository_name:
            raise ValueError("GitHub repository is required for label operations")
        return ["--repo", self._repository_name]

    def _run(self, args: Sequence[str], *, action: str) -> str:
        cmd = [self._executable, *args]
        logger.debug("Running gh", extra={"args": list(args)})
        try:
            proc = self._runner(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ProviderError(f"GitHub CLI not found: {self._executable!r}") from e
        except subprocess.TimeoutExpired as e:
            raise ProviderError(f"Timed out after {self._timeout}s trying to {action}") from e

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise ProviderError(f"Failed to {action}: {stderr or f'exit code {proc.returncode}'}")
        return proc.stdout or ""

    def _run_json(self, args: Sequence[str], *, action: str) -> list[dict[str, Any]]:
        out = self._run(args, action=action)
        try:
            payload = json.loads(out or "[]")
        except json.JSONDecodeError as e:
            raise ProviderError(f"Failed to {action}: unexpected gh output") from e
        if not isinstance(payload, list):
            raise ProviderError(f"Failed to {action}: expected a JSON list")
        return [p for p in payload if isinstance(p, dict)]

    def fetch_labels(self) -> list[RemoteLabel]:
        items = self._run_json(
            [
                "label",
                "list",
                *self._repo_args(),
                "--json",
                "name,color,description",
                "--limit",
                str(LIST_LIMIT),
            ],
            action=f"fetch labels from {self._repository_name}",
        )
        labels: list[RemoteLabel] = []
        for item in items:
            name = item.get("name")
            if not isinstance(name, str) or not name:
                continue
            color = item.get("color")
            description = item.get("description")
            labels.append(
                RemoteLabel(
                    name=name,
                    color=color if isinstance(color, str) else "",
                    description=description if isinstance(description, str) else "",
                )
            )
        return labels

    def create_label(self, label: LabelSpec) -> RemoteLabel:
        self._run(
            [
                "label",
                "create",
                label.name,
                *self._repo_args(),
                "--color",
                label.color,
                "--description",
                label.description,
            ],
            action=f"create label {label.name!r}",
        )
        return RemoteLabel(name=label.name, color=label.color, description=label.description)

    def update_label(self, current_name: str, label: LabelSpec) -> RemoteLabel:
        args = ["label", "edit", current_name, *self._repo_args()]
        if label.name != current_name:
            args += ["--name", label.name]
        args += ["--color", label.color, "--description", label.description]
        self._run(args, action=f"update label {current_name!r}")
        return RemoteLabel(name=label.name, color=label.color, description=label.description)

    def delete_label(self, name: str) -> None:
        self._run(
            ["label", "delete", name, *self._repo_args(), "--yes"],
            action=f"delete label {name!r}",
        )

    def has_label(self, name: str) -> bool:
        wanted = label_key(name)
        return any(label_key(label.name) == wanted for label in self.fetch_labels())

    def list_repositories(self, *, scope: RepositoryScope, name: str) -> list[RepositoryInfo]:
        # `gh repo list` takes organizations and users alike.
        items = self._run_json(
            [
                "repo",
                "list",
                name,
                "--json",
                "nameWithOwner,visibility,primaryLanguage,isArchived",
                "--limit",
                str(LIST_LIMIT),
            ],
            action=f"list repositories for {scope} {name!r}",
        )
        repos: list[RepositoryInfo] = []
        for item in items:
            full_name = item.get("nameWithOwner")
            if not isinstance(full_name, str) or not full_name:
                continue
            visibility = item.get("visibility")
            language = item.get("primaryLanguage")
            if isinstance(language, dict):
                language = language.get("name")
            repos.append(
                RepositoryInfo(
                    full_name=full_name,
                    visibility=visibility.lower() if isinstance(visibility, str) else "",
                    language=language if isinstance(language, str) and language else None,
                    archived=bool(item.get("isArchived")),
                )
            )
        return repos

    def close(self) -> None:
        """Nothing to release; present for interface parity."""
