"""Test configuration and fixtures."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from github_label_sync.github.client import GitHubLabelClient, RemoteLabel

SETTINGS_ENV_VARS = (
    "LABEL_SYNC_GITHUB_TOKEN",
    "GITHUB_OWNER",
    "GITHUB_REPO",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no settings in the environment."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def mock_github() -> Mock:
    """Provide a GitHub label client double with no network access."""
    github = Mock(spec=GitHubLabelClient)
    github.repository = "octo-org/octo-repo"
    github.create_label.side_effect = lambda *, name, color: RemoteLabel(name=name, color=color)
    github.edit_label.side_effect = lambda *, name, color: RemoteLabel(name=name, color=color)
    return github
