"""Configuration for a label sync run.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Command-line flags take precedence over both. To avoid collisions with other
tools that may also use `GITHUB_TOKEN`, this project uses a dedicated token
variable: `LABEL_SYNC_GITHUB_TOKEN`.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LabelSyncSettings(BaseSettings):
    """Settings for a single label sync run.

    Environment variables:
    - LABEL_SYNC_GITHUB_TOKEN
    - GITHUB_OWNER
    - GITHUB_REPO
    - GITHUB_BASE_URL   (optional)
    - LOG_LEVEL         (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `LabelSyncSettings(_env_file=path_to_env)`. CLI flags are passed as keyword
        arguments under their environment variable names, which take precedence
        over the environment.
    """

    # Defaults are empty so `LabelSyncSettings()` type-checks; the validator below
    # enforces that the values are provided by env, `.env` or CLI flags.
    github_token: str = Field(
        default="",
        validation_alias="LABEL_SYNC_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_owner: str = Field(
        default="",
        validation_alias="GITHUB_OWNER",
        description="GitHub user or organization that owns the repository",
    )
    github_repo: str = Field(
        default="",
        validation_alias="GITHUB_REPO",
        description="Repository whose labels are synchronized",
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

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_target(self) -> LabelSyncSettings:
        missing = [
            name
            for name, value in (
                ("LABEL_SYNC_GITHUB_TOKEN (--authtoken)", self.github_token),
                ("GITHUB_OWNER (--owner)", self.github_owner),
                ("GITHUB_REPO (--repo)", self.github_repo),
            )
            if not value.strip()
        ]
        if missing:
            raise ValueError(f"Missing required settings: {', '.join(missing)}")
        return self

    @property
    def repository(self) -> str:
        """Target repository in the form "owner/repo"."""

        return f"{self.github_owner.strip()}/{self.github_repo.strip().strip('/')}"
