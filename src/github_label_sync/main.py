"""CLI entrypoint for GitHub label sync."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from collections.abc import Iterable, Mapping
from types import FrameType
from typing import Any

import requests
from github import GithubException
from pydantic import ValidationError

from github_label_sync import __version__
from github_label_sync.config import LabelSyncSettings
from github_label_sync.errors import (
    ReconciliationAborted,
    ReconciliationCancelled,
    RemoteLoadError,
)
from github_label_sync.github.client import GitHubLabelClient
from github_label_sync.labels import desired_label_set
from github_label_sync.logging import configure_logging
from github_label_sync.sync.inventory import load_remote_labels
from github_label_sync.sync.reconciler import (
    LabelAction,
    LabelOutcome,
    LabelReconciler,
    ReconciliationReport,
    delete_orphans,
    find_orphans,
    plan_label_actions,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_LOAD = 3
EXIT_INTERRUPTED = 130


def _add_target_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--authtoken",
        default=None,
        help="OAuth2 token for the GitHub API (defaults to LABEL_SYNC_GITHUB_TOKEN)",
    )
    parser.add_argument(
        "--owner",
        default=None,
        help="GitHub user or organization name (defaults to GITHUB_OWNER)",
    )
    parser.add_argument(
        "--repo",
        default=None,
        help="Repository whose labels are synchronized (defaults to GITHUB_REPO)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="github-label-sync",
        description="Create or recolor GitHub labels to match a fixed label table",
    )
    parser.add_argument("--version", action="version", version=f"github-label-sync {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser(
        "sync",
        help="Create missing labels, recolor drifted ones and report orphans",
    )
    _add_target_arguments(sync)
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned actions without calling the create/update APIs",
    )
    sync.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first failed label instead of continuing with the rest",
    )
    sync.add_argument(
        "--timeout-seconds",
        type=float,
        default=0.0,
        help="Stop issuing API calls after this many seconds (0 means no timeout)",
    )

    prune = subparsers.add_parser(
        "delete-orphans",
        help="Delete labels that are not in the label table (requires --confirm)",
    )
    _add_target_arguments(prune)
    prune.add_argument(
        "--confirm",
        action="store_true",
        help="Actually delete; without it the orphan labels are only listed",
    )

    return parser


def _load_settings(args: argparse.Namespace) -> LabelSyncSettings:
    overrides: dict[str, Any] = {
        key: value
        for key, value in (
            ("LABEL_SYNC_GITHUB_TOKEN", args.authtoken),
            ("GITHUB_OWNER", args.owner),
            ("GITHUB_REPO", args.repo),
        )
        if value is not None
    }
    return LabelSyncSettings(**overrides)


def _format_result_line(name: str, outcome: LabelOutcome, color: str, previous: str | None) -> str:
    if outcome is LabelOutcome.UPDATED and previous is not None:
        return f"{name}: {outcome.value} ({previous} -> {color})"
    return f"{name}: {outcome.value} ({color})"


def _print_orphans(orphans: Iterable[str]) -> None:
    names = sorted(orphans)
    print(f"Orphans: {', '.join(names) if names else 'none'}")


def print_report(report: ReconciliationReport) -> None:
    for name in sorted(report.results):
        result = report.results[name]
        if result.outcome is LabelOutcome.FAILED:
            print(f"{name}: failed ({result.error})")
        else:
            print(_format_result_line(name, result.outcome, result.color, result.previous_color))
    _print_orphans(report.orphans)


def print_plan(actions: list[LabelAction], orphans: Iterable[str]) -> None:
    for action in actions:
        line = _format_result_line(action.name, action.outcome, action.color, action.previous_color)
        prefix = "[dry-run] " if action.requires_call else ""
        print(prefix + line)
    _print_orphans(orphans)


def _run_sync(
    args: argparse.Namespace, github: GitHubLabelClient, desired: Mapping[str, str]
) -> int:
    remote = load_remote_labels(github)

    if args.dry_run:
        print_plan(plan_label_actions(remote, desired), find_orphans(remote, desired))
        return EXIT_OK

    cancel_event = threading.Event()
    interrupted = threading.Event()

    def _on_interrupt(signum: int, frame: FrameType | None) -> None:
        # First Ctrl-C lets the in-flight call finish; a second one aborts outright.
        interrupted.set()
        cancel_event.set()
        signal.signal(signal.SIGINT, signal.default_int_handler)

    previous_handler = signal.signal(signal.SIGINT, _on_interrupt)
    timer: threading.Timer | None = None
    if args.timeout_seconds > 0:
        timer = threading.Timer(args.timeout_seconds, cancel_event.set)
        timer.daemon = True
        timer.start()

    reconciler = LabelReconciler(github, fail_fast=args.fail_fast)
    try:
        report = reconciler.reconcile(remote, desired, cancel_event=cancel_event)
    except (ReconciliationAborted, ReconciliationCancelled) as e:
        print_report(e.report)
        print(str(e), file=sys.stderr)
        if isinstance(e, ReconciliationCancelled) and interrupted.is_set():
            return EXIT_INTERRUPTED
        return EXIT_FAILED
    finally:
        if timer is not None:
            timer.cancel()
        signal.signal(signal.SIGINT, previous_handler)

    print_report(report)
    if not report.ok:
        print(f"{len(report.failures)} label(s) failed", file=sys.stderr)
        return EXIT_FAILED
    return EXIT_OK


def _run_delete_orphans(
    args: argparse.Namespace, github: GitHubLabelClient, desired: Mapping[str, str]
) -> int:
    remote = load_remote_labels(github)
    orphans = find_orphans(remote, desired)

    if not orphans:
        print("No orphan labels")
        return EXIT_OK

    if not args.confirm:
        _print_orphans(orphans)
        print("Re-run with --confirm to delete these labels", file=sys.stderr)
        return EXIT_OK

    for name in delete_orphans(github, orphans):
        print(f"Deleted: {name}")
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _load_settings(args)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check flags or .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(settings.log_level)
    desired = desired_label_set()

    try:
        try:
            github = GitHubLabelClient(
                token=settings.github_token,
                repository=settings.repository,
                base_url=settings.github_base_url,
            )
        except (GithubException, requests.RequestException) as e:
            raise RemoteLoadError(settings.repository, e) from e

        try:
            if args.command == "sync":
                return _run_sync(args, github, desired)
            if args.command == "delete-orphans":
                return _run_delete_orphans(args, github, desired)

            logger.error("Unknown command", extra={"command": args.command})
            return EXIT_CONFIG
        finally:
            github.close()

    except RemoteLoadError as e:
        print(str(e), file=sys.stderr)
        return EXIT_LOAD

    except KeyboardInterrupt:
        logger.warning("Interrupted; API calls already applied are kept")
        return EXIT_INTERRUPTED

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
