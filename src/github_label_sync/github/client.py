"""GitHub API client wrapper for label management.

This wraps PyGithub (listing and creation) and the REST API (edit and delete)
to keep GitHub calls out of the sync logic and make tests easy. Errors are not
caught here: `github.GithubException` and `requests.RequestException`
propagate to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests
from github import Auth, Github
from github.Repository import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemoteLabel:
    """Label name and color as reported by GitHub."""

    name: str
    color: str


class GitHubLabelClient:
    """Small wrapper around PyGithub for the label operations a sync run needs."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        repo: Repository | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")

        self._repository_name = repository.strip().strip("/")
        self._rest_base_url = base_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-label-sync",
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=self._rest_base_url)

        # Lazy: no request until the first label call, so auth and "repo not
        # found" errors surface from `list_labels` as load failures.
        self._repo = self._github.get_repo(self._repository_name, lazy=True)
        logger.debug("GitHub client ready", extra={"repo": self._repository_name})

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _label_url(self, name: str) -> str:
        if not name:
            raise ValueError("Label name is required")
        # Names such as "review/triage" must stay a single path segment.
        return f"{self._rest_base_url}/repos/{self._repository_name}/labels/{quote(name, safe='')}"

    @staticmethod
    def _parse_label_json(data: dict[str, Any]) -> RemoteLabel:
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Invalid label response: missing name")
        color = data.get("color")
        return RemoteLabel(name=name, color=color if isinstance(color, str) else "")

    def list_labels(self) -> list[RemoteLabel]:
        """Return every label in the repository (all pages)."""

        labels = [
            RemoteLabel(name=label.name, color=label.color or "")
            for label in self._repo.get_labels()
        ]
        logger.debug(
            "Repository labels fetched",
            extra={"repo": self._repository_name, "count": len(labels)},
        )
        return labels

    def create_label(self, *, name: str, color: str) -> RemoteLabel:
        if not name.strip():
            raise ValueError("Label name is required")

        label = self._repo.create_label(name=name, color=color)
        logger.info(
            "Label created",
            extra={"repo": self._repository_name, "label": label.name, "color": label.color},
        )
        return RemoteLabel(name=label.name, color=label.color or "")

    def edit_label(self, *, name: str, color: str) -> RemoteLabel:
        """Change the color of an existing label in a single REST call."""

        url = self._label_url(name)
        resp = self._session.patch(url, json={"color": color}, timeout=30)
        resp.raise_for_status()
        label = self._parse_label_json(resp.json())
        logger.info(
            "Label updated",
            extra={"repo": self._repository_name, "label": label.name, "color": label.color},
        )
        return label

    def delete_label(self, *, name: str) -> None:
        url = self._label_url(name)
        resp = self._session.delete(url, timeout=30)
        resp.raise_for_status()
        logger.info("Label deleted", extra={"repo": self._repository_name, "label": name})

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
