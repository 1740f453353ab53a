"""Snapshot of the labels currently defined on the remote repository."""

from __future__ import annotations

import logging

import requests
from github import GithubException

from github_label_sync.errors import RemoteLoadError
from github_label_sync.github.client import GitHubLabelClient

logger = logging.getLogger(__name__)


def load_remote_labels(client: GitHubLabelClient) -> dict[str, str]:
    """Fetch all labels once and fold them into a name -> color mapping.

    Duplicate names in the listing are resolved last-seen-wins. The snapshot is
    taken once per run and is not refreshed after mutations.

    Raises:
        RemoteLoadError: The list call failed.
    """

    try:
        labels = client.list_labels()
    except (GithubException, requests.RequestException) as e:
        logger.error(
            "Failed to list repository labels",
            extra={"repo": client.repository, "error": str(e)},
        )
        raise RemoteLoadError(client.repository, e) from e

    remote: dict[str, str] = {}
    for label in labels:
        if label.name in remote:
            logger.warning(
                "Duplicate label name in listing; keeping the last one",
                extra={"label": label.name},
            )
        remote[label.name] = label.color

    logger.info(
        "Remote label inventory loaded",
        extra={"repo": client.repository, "count": len(remote)},
    )
    return remote
