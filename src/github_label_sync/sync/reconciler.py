"""Label reconciliation.

For every desired label exactly one action is chosen from the remote snapshot:

- missing on the remote        -> create (one API call)
- present with the same color  -> verified (no API call)
- present with another color   -> update (one API call)

"Same color" ignores case and a leading `#` (see `labels.colors_match`): GitHub
reports lowercase hex, and a strict comparison would re-update mixed-case table
entries such as "3E4B9E" on every run.

Labels present remotely but absent from the desired set are reported as
orphans. They are never deleted here; `delete_orphans` is a separate call the
caller must opt into.

Failure policy: by default a failed create/update is recorded on that label and
the run continues, so the report always has one result per desired label. With
`fail_fast=True` the run stops at the first failure and `ReconciliationAborted`
carries the partial report.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import requests
from github import GithubException

from github_label_sync.errors import (
    LabelOperationError,
    ReconciliationAborted,
    ReconciliationCancelled,
)
from github_label_sync.github.client import GitHubLabelClient
from github_label_sync.labels import colors_match

logger = logging.getLogger(__name__)


class LabelOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LabelAction:
    """Planned decision for one desired label."""

    name: str
    color: str
    outcome: LabelOutcome
    previous_color: str | None = None

    @property
    def requires_call(self) -> bool:
        return self.outcome is not LabelOutcome.VERIFIED


@dataclass(frozen=True, slots=True)
class LabelResult:
    """Terminal state of one desired label after a run."""

    name: str
    outcome: LabelOutcome
    color: str
    previous_color: str | None = None
    error: LabelOperationError | None = None


@dataclass(slots=True)
class ReconciliationReport:
    repository: str
    results: dict[str, LabelResult] = field(default_factory=dict)
    orphans: frozenset[str] = frozenset()

    @property
    def failures(self) -> list[LabelResult]:
        return [r for r in self.results.values() if r.outcome is LabelOutcome.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failures

    def counts(self) -> dict[str, int]:
        totals = {outcome.value: 0 for outcome in LabelOutcome}
        for result in self.results.values():
            totals[result.outcome.value] += 1
        return totals


def plan_label_actions(
    remote: Mapping[str, str], desired: Mapping[str, str]
) -> list[LabelAction]:
    """Classify each desired label against the remote snapshot (no API calls)."""

    actions: list[LabelAction] = []
    for name in sorted(desired):
        color = desired[name]
        if name not in remote:
            actions.append(LabelAction(name=name, color=color, outcome=LabelOutcome.CREATED))
        elif colors_match(remote[name], color):
            actions.append(
                LabelAction(
                    name=name,
                    color=color,
                    outcome=LabelOutcome.VERIFIED,
                    previous_color=remote[name],
                )
            )
        else:
            actions.append(
                LabelAction(
                    name=name,
                    color=color,
                    outcome=LabelOutcome.UPDATED,
                    previous_color=remote[name],
                )
            )
    return actions


def find_orphans(remote: Mapping[str, str], desired: Mapping[str, str]) -> frozenset[str]:
    """Labels present on the remote but absent from the desired set."""

    return frozenset(remote.keys() - desired.keys())


class LabelReconciler:
    """Apply planned label actions against one repository, sequentially."""

    def __init__(self, client: GitHubLabelClient, *, fail_fast: bool = False) -> None:
        self._client = client
        self._fail_fast = fail_fast

    def reconcile(
        self,
        remote: Mapping[str, str],
        desired: Mapping[str, str],
        *,
        cancel_event: threading.Event | None = None,
    ) -> ReconciliationReport:
        """Converge the repository's labels on `desired`.

        `remote` is the snapshot from `load_remote_labels`; it is neither
        modified nor re-read.

        Raises:
            ReconciliationAborted: `fail_fast` is set and a label failed.
            ReconciliationCancelled: `cancel_event` was set mid-run.
        """

        report = ReconciliationReport(
            repository=self._client.repository,
            orphans=find_orphans(remote, desired),
        )

        for action in plan_label_actions(remote, desired):
            if action.requires_call and cancel_event is not None and cancel_event.is_set():
                logger.warning(
                    "Reconciliation cancelled; remaining labels not processed",
                    extra={"processed": len(report.results), "total": len(desired)},
                )
                raise ReconciliationCancelled(report)

            result = self._apply(action)
            report.results[action.name] = result

            if result.error is not None and self._fail_fast:
                raise ReconciliationAborted(report, result.error)

        for name in sorted(report.orphans):
            logger.info(
                "Orphan label (not in desired set, left in place)",
                extra={"label": name, "color": remote[name]},
            )

        logger.info("Reconciliation finished", extra={"repo": report.repository, **report.counts()})
        return report

    def _apply(self, action: LabelAction) -> LabelResult:
        if action.outcome is LabelOutcome.VERIFIED:
            logger.info("Label verified", extra={"label": action.name, "color": action.color})
            return LabelResult(
                name=action.name,
                outcome=LabelOutcome.VERIFIED,
                color=action.color,
                previous_color=action.previous_color,
            )

        verb = "create" if action.outcome is LabelOutcome.CREATED else "update"
        try:
            if action.outcome is LabelOutcome.CREATED:
                self._client.create_label(name=action.name, color=action.color)
            else:
                self._client.edit_label(name=action.name, color=action.color)
        # ValueError: the client rejected a blank name or a malformed response body.
        except (GithubException, requests.RequestException, ValueError) as e:
            error = LabelOperationError(action.name, verb, e)
            logger.error(
                "Label operation failed",
                extra={"label": action.name, "action": verb, "error": str(e)},
            )
            return LabelResult(
                name=action.name,
                outcome=LabelOutcome.FAILED,
                color=action.color,
                previous_color=action.previous_color,
                error=error,
            )

        return LabelResult(
            name=action.name,
            outcome=action.outcome,
            color=action.color,
            previous_color=action.previous_color,
        )


def delete_orphans(client: GitHubLabelClient, orphans: Iterable[str]) -> list[str]:
    """Delete the given labels. Only ever invoked on explicit operator request.

    Stops at the first failed call; the error propagates.
    """

    deleted: list[str] = []
    for name in sorted(orphans):
        client.delete_label(name=name)
        deleted.append(name)
    return deleted
