"""GitHub API label client.

Label operations use the REST API directly over a `requests.Session`; repository
listings go through PyGithub. Every failure surfaces as `ProviderError` so the
engine and the batch runner never see transport-specific exceptions.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any
from urllib.parse import quote

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from github_label_sync.labels import LabelSpec
from github_label_sync.sync.models import RemoteLabel, RepositoryInfo
from github_label_sync.sync.provider import ProviderError, RepositoryScope

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


class GitHubLabelClient:
    """Label operations for one repository plus organization/user listings.

    `repository` may be omitted when the client is only used for listings.
    """

    def __init__(
        self,
        *,
        token: str,
        repository: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._token = token
        self._repository_name = (repository or "").strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-label-sync",
            }
        )
        self._base_url = base_url
        self._github = github_api

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _require_repository(self) -> str:
        if not self._repository_name:
            raise ValueError("GitHub repository is required for label operations")
        return self._repository_name

    def _labels_url(self, name: str | None = None) -> str:
        repo = self._require_repository()
        url = f"{self._rest_base_url}/repos/{repo}/labels"
        if name is not None:
            url += "/" + quote(name, safe="")
        return url

    def _request(self, method: str, url: str, *, action: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self._session.request(method, url, timeout=self._timeout, **kwargs)
            resp.raise_for_status()
        except requests.HTTPError as e:
            detail = ""
            if e.response is not None:
                detail = f" (HTTP {e.response.status_code}: {e.response.text.strip()[:200]})"
            raise ProviderError(f"Failed to {action} in {self._repository_name}{detail}") from e
        except requests.RequestException as e:
            raise ProviderError(f"Failed to {action} in {self._repository_name}: {e}") from e
        return resp

    @staticmethod
    def _parse_label(data: object) -> RemoteLabel:
        if not isinstance(data, dict):
            raise ProviderError("Unexpected label response: not an object")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ProviderError("Unexpected label response: missing name")
        color = data.get("color")
        description = data.get("description")
        return RemoteLabel(
            name=name,
            color=color if isinstance(color, str) else "",
            description=description if isinstance(description, str) else "",
        )

    def _get_paginated_json_list(self, url: str, *, action: str) -> list[dict[str, Any]]:
        """Fetch a REST endpoint that returns a JSON list.

        Notes:
            Reads pages of 100 items until a short or empty page.
        """

        items: list[dict[str, Any]] = []
        per_page = 100
        for page in itertools.count(1):
            resp = self._request(
                "GET", url, action=action, params={"per_page": per_page, "page": page}
            )
            payload = resp.json()
            if not isinstance(payload, list):
                break

            items.extend(p for p in payload if isinstance(p, dict))

            if len(payload) < per_page:
                break
        return items

    def fetch_labels(self) -> list[RemoteLabel]:
        logger.debug("Fetching labels", extra={"repo": self._repository_name})
        raw = self._get_paginated_json_list(self._labels_url(), action="fetch labels")
        return [self._parse_label(item) for item in raw]

    def create_label(self, label: LabelSpec) -> RemoteLabel:
        payload = {"name": label.name, "color": label.color, "description": label.description}
        resp = self._request(
            "POST", self._labels_url(), action=f"create label {label.name!r}", json=payload
        )
        logger.debug("Label created", extra={"repo": self._repository_name, "label": label.name})
        return self._parse_label(resp.json())

    def update_label(self, current_name: str, label: LabelSpec) -> RemoteLabel:
        payload = {
            "new_name": label.name,
            "color": label.color,
            "description": label.description,
        }
        resp = self._request(
            "PATCH",
            self._labels_url(current_name),
            action=f"update label {current_name!r}",
            json=payload,
        )
        logger.debug(
            "Label updated", extra={"repo": self._repository_name, "label": current_name}
        )
        return self._parse_label(resp.json())

    def delete_label(self, name: str) -> None:
        self._request("DELETE", self._labels_url(name), action=f"delete label {name!r}")
        logger.debug("Label deleted", extra={"repo": self._repository_name, "label": name})

    def has_label(self, name: str) -> bool:
        try:
            resp = self._session.get(self._labels_url(name), timeout=self._timeout)
        except requests.RequestException as e:
            raise ProviderError(f"Failed to look up label {name!r}: {e}") from e
        if resp.status_code == 404:
            return False
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise ProviderError(f"Failed to look up label {name!r}: {e}") from e
        return True

    def _github_api(self) -> Github:
        if self._github is None:
            self._github = Github(auth=Auth.Token(self._token), base_url=self._base_url)
        return self._github

    @staticmethod
    def _repository_info(repo: Repository) -> RepositoryInfo:
        visibility = getattr(repo, "visibility", None)
        if not isinstance(visibility, str) or not visibility:
            visibility = "private" if repo.private else "public"
        return RepositoryInfo(
            full_name=repo.full_name,
            visibility=visibility.lower(),
            language=repo.language,
            archived=bool(repo.archived),
        )

    def list_repositories(self, *, scope: RepositoryScope, name: str) -> list[RepositoryInfo]:
        """List repositories of an organization or a user.

        For the authenticated user, private repositories are included; the
        public `/users/{name}/repos` endpoint only returns public ones.
        """

        logger.debug("Listing repositories", extra={"scope": scope, "name": name})
        try:
            gh = self._github_api()
            if scope == "organization":
                repos = gh.get_organization(name).get_repos(type="all")
            else:
                me = gh.get_user()
                if me.login.lower() == name.lower():
                    repos = me.get_repos(affiliation="owner")
                else:
                    repos = gh.get_user(name).get_repos(type="owner")
            return [self._repository_info(r) for r in repos]
        except GithubException as e:
            raise ProviderError(f"Failed to list repositories for {scope} {name!r}: {e}") from e
        except requests.RequestException as e:
            raise ProviderError(f"Failed to list repositories for {scope} {name!r}: {e}") from e

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
