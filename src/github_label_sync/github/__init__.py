"""GitHub collaborators for label sync."""

from github_label_sync.github.client import GitHubLabelClient, RemoteLabel

__all__ = ["GitHubLabelClient", "RemoteLabel"]
