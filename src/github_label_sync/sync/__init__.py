"""Remote inventory loading and label reconciliation."""

from github_label_sync.sync.inventory import load_remote_labels
from github_label_sync.sync.reconciler import (
    LabelAction,
    LabelOutcome,
    LabelReconciler,
    LabelResult,
    ReconciliationReport,
    delete_orphans,
    find_orphans,
    plan_label_actions,
)

__all__ = [
    "LabelAction",
    "LabelOutcome",
    "LabelReconciler",
    "LabelResult",
    "ReconciliationReport",
    "delete_orphans",
    "find_orphans",
    "load_remote_labels",
    "plan_label_actions",
]
