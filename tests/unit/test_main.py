"""Unit tests for the CLI entrypoint (mocked GitHub)."""

from __future__ import annotations

import signal
from pathlib import Path
from unittest.mock import Mock

import pytest
import requests
from github import GithubException

from github_label_sync import main as cli
from github_label_sync.github.client import RemoteLabel
from github_label_sync.labels import DEFAULT_LABEL_COLORS

TARGET_ARGS = ["--authtoken", "test-token", "--owner", "octo-org", "--repo", "octo-repo"]


@pytest.fixture
def patched_cli(clean_env: Path, monkeypatch: pytest.MonkeyPatch, mock_github: Mock) -> Mock:
    factory = Mock(return_value=mock_github)
    monkeypatch.setattr(cli, "GitHubLabelClient", factory)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    mock_github.list_labels.return_value = [
        RemoteLabel(name=name, color=color.lower()) for name, color in DEFAULT_LABEL_COLORS.items()
    ]
    return factory


def test_missing_configuration_exits_before_any_client_is_built(
    patched_cli: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["sync", "--owner", "octo-org"]) == cli.EXIT_CONFIG

    patched_cli.assert_not_called()
    assert "Configuration error" in capsys.readouterr().err


def test_flags_are_passed_to_the_client(patched_cli: Mock, mock_github: Mock) -> None:
    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_OK

    patched_cli.assert_called_once_with(
        token="test-token",
        repository="octo-org/octo-repo",
        base_url="https://api.github.com",
    )
    mock_github.close.assert_called_once_with()


def test_converged_repository_is_verified_without_writes(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_OK

    out = capsys.readouterr().out
    assert "P0: verified (b60205)" in out
    assert "Orphans: none" in out
    mock_github.create_label.assert_not_called()
    mock_github.edit_label.assert_not_called()
    mock_github.delete_label.assert_not_called()


def test_sync_reports_created_updated_and_orphans(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.return_value = [
        RemoteLabel(name="P0", color="ffffff"),
        RemoteLabel(name="stale", color="000000"),
    ]

    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_OK

    out = capsys.readouterr().out
    assert "P0: updated (ffffff -> b60205)" in out
    assert "Task: created (1d76db)" in out
    assert "Orphans: stale" in out
    assert mock_github.create_label.call_count == len(DEFAULT_LABEL_COLORS) - 1
    mock_github.delete_label.assert_not_called()


def test_any_failed_label_exits_nonzero(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.return_value = [RemoteLabel(name="P0", color="ffffff")]
    mock_github.edit_label.side_effect = requests.HTTPError("403 Forbidden")

    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_FAILED

    captured = capsys.readouterr()
    assert "P0: failed" in captured.out
    assert "1 label(s) failed" in captured.err
    assert mock_github.create_label.call_count == len(DEFAULT_LABEL_COLORS) - 1


def test_fail_fast_stops_after_first_failure(patched_cli: Mock, mock_github: Mock) -> None:
    mock_github.list_labels.return_value = []
    mock_github.create_label.side_effect = requests.HTTPError("500 Server Error")

    assert cli.main(["sync", "--fail-fast", *TARGET_ARGS]) == cli.EXIT_FAILED

    assert mock_github.create_label.call_count == 1


def test_load_failure_exits_without_reconciling(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.side_effect = requests.ConnectionError("unreachable")

    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_LOAD

    assert "Failed to list labels for octo-org/octo-repo" in capsys.readouterr().err
    mock_github.create_label.assert_not_called()
    mock_github.edit_label.assert_not_called()
    mock_github.close.assert_called_once_with()


def test_dry_run_plans_without_writes(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.return_value = [RemoteLabel(name="P0", color="ffffff")]

    assert cli.main(["sync", "--dry-run", *TARGET_ARGS]) == cli.EXIT_OK

    out = capsys.readouterr().out
    assert "[dry-run] P0: updated (ffffff -> b60205)" in out
    assert "[dry-run] Task: created (1d76db)" in out
    mock_github.create_label.assert_not_called()
    mock_github.edit_label.assert_not_called()


def test_delete_orphans_only_lists_without_confirm(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.return_value = [
        RemoteLabel(name="P0", color="b60205"),
        RemoteLabel(name="stale", color="000000"),
    ]

    assert cli.main(["delete-orphans", *TARGET_ARGS]) == cli.EXIT_OK

    assert "Orphans: stale" in capsys.readouterr().out
    mock_github.delete_label.assert_not_called()


def test_delete_orphans_with_confirm_deletes_only_orphans(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.return_value = [
        RemoteLabel(name="P0", color="b60205"),
        RemoteLabel(name="wontfix", color="ffffff"),
        RemoteLabel(name="stale", color="000000"),
    ]

    assert cli.main(["delete-orphans", "--confirm", *TARGET_ARGS]) == cli.EXIT_OK

    assert [c.kwargs["name"] for c in mock_github.delete_label.call_args_list] == [
        "stale",
        "wontfix",
    ]
    assert "Deleted: stale" in capsys.readouterr().out
    mock_github.create_label.assert_not_called()


@pytest.fixture
def offline_github(clean_env: Path, monkeypatch: pytest.MonkeyPatch) -> Mock:
    """Patch PyGithub itself so the real label client is built without network."""
    github_cls = Mock()
    monkeypatch.setattr("github_label_sync.github.client.Github", github_cls)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)
    return github_cls


def test_bad_credentials_on_first_call_exit_as_load_failure(
    offline_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    repo = offline_github.return_value.get_repo.return_value
    repo.get_labels.side_effect = GithubException(401, {"message": "Bad credentials"}, None)

    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_LOAD

    offline_github.return_value.get_repo.assert_called_once_with("octo-org/octo-repo", lazy=True)
    repo.create_label.assert_not_called()
    assert "Failed to list labels for octo-org/octo-repo" in capsys.readouterr().err


def test_repository_lookup_failure_exits_as_load_failure(
    offline_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    offline_github.return_value.get_repo.side_effect = GithubException(
        401, {"message": "Bad credentials"}, None
    )

    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_LOAD

    assert "Failed to list labels for octo-org/octo-repo" in capsys.readouterr().err


def test_interrupt_prints_applied_labels_and_stops(
    patched_cli: Mock, mock_github: Mock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_github.list_labels.return_value = []

    def create_then_interrupt(*, name: str, color: str) -> RemoteLabel:
        signal.raise_signal(signal.SIGINT)
        return RemoteLabel(name=name, color=color)

    mock_github.create_label.side_effect = create_then_interrupt
    handler_before = signal.getsignal(signal.SIGINT)

    assert cli.main(["sync", *TARGET_ARGS]) == cli.EXIT_INTERRUPTED

    captured = capsys.readouterr()
    assert "1: created (fef2c0)" in captured.out
    assert "Orphans: none" in captured.out
    assert "cancelled after 1 label(s)" in captured.err
    assert mock_github.create_label.call_count == 1
    assert signal.getsignal(signal.SIGINT) is handler_before
