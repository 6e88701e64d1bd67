"""Settings for github-label-sync.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

To avoid collisions with other tools that may also use `GITHUB_TOKEN`, this
project uses a dedicated token variable: `LABEL_SYNC_GITHUB_TOKEN`.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_label_sync.sync.models import DEFAULT_PARALLEL

ProviderKind = Literal["api", "gh"]


class LabelSyncSettings(BaseSettings):
    """Settings for label sync runs.

    Environment variables:
    - LABEL_SYNC_GITHUB_TOKEN   (required for the "api" provider)
    - GITHUB_BASE_URL           (optional)
    - LOG_LEVEL                 (optional)
    - LABEL_SYNC_PROVIDER       (optional, "api" or "gh")
    - LABEL_SYNC_GH_EXECUTABLE  (optional)
    - LABEL_SYNC_REQUEST_TIMEOUT (optional, seconds)
    - LABEL_SYNC_PARALLEL       (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `LabelSyncSettings(_env_file=path_to_env)`.
    """

    github_token: str = Field(
        default="",
        validation_alias="LABEL_SYNC_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    provider: ProviderKind = Field(
        default="api",
        validation_alias="LABEL_SYNC_PROVIDER",
        description="Backend used for label operations: REST API or the gh CLI",
    )
    gh_executable: str = Field(
        default="gh",
        validation_alias="LABEL_SYNC_GH_EXECUTABLE",
        description="Path or name of the GitHub CLI executable",
    )

    request_timeout: float = Field(
        default=30.0,
        gt=0,
        validation_alias="LABEL_SYNC_REQUEST_TIMEOUT",
        description="Per-call timeout in seconds for API requests and gh subprocesses",
    )
    parallel: int = Field(
        default=DEFAULT_PARALLEL,
        ge=1,
        validation_alias="LABEL_SYNC_PARALLEL",
        description="Default number of repositories synced concurrently in batch runs",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_github_auth(self) -> LabelSyncSettings:
        if self.provider == "api" and not self.github_token.strip():
            raise ValueError("LABEL_SYNC_GITHUB_TOKEN is required when LABEL_SYNC_PROVIDER=api")
        return self
