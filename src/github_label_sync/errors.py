"""Exceptions raised by a label sync run.

Configuration problems surface earlier, as `pydantic.ValidationError` from
`LabelSyncSettings`, before any network activity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from github_label_sync.sync.reconciler import ReconciliationReport


class LabelSyncError(Exception):
    """Base class for label sync failures."""


class RemoteLoadError(LabelSyncError):
    """Listing the repository's labels failed; no baseline, nothing is reconciled."""

    def __init__(self, repository: str, cause: BaseException) -> None:
        super().__init__(f"Failed to list labels for {repository}: {cause}")
        self.repository = repository
        self.cause = cause


class LabelOperationError(LabelSyncError):
    """A single create or update call for one label failed."""

    def __init__(self, name: str, action: str, cause: BaseException) -> None:
        super().__init__(f"Failed to {action} label {name!r}: {cause}")
        self.name = name
        self.action = action
        self.cause = cause


class ReconciliationAborted(LabelSyncError):
    """Fail-fast mode stopped the run at the first failed label."""

    def __init__(self, report: ReconciliationReport, error: LabelOperationError) -> None:
        super().__init__(f"Reconciliation aborted: {error}")
        self.report = report
        self.error = error


class ReconciliationCancelled(LabelSyncError):
    """The run was cancelled before all labels were processed.

    Calls already applied are not rolled back; re-running converges.
    """

    def __init__(self, report: ReconciliationReport) -> None:
        super().__init__(
            f"Reconciliation cancelled after {len(report.results)} label(s)"
        )
        self.report = report
