"""Desired label set.

The label table is plain configuration: it is handed to the reconciler as an
argument rather than read from module state inside the sync logic. Colors are
6-digit hex strings without a leading `#`; they are passed to GitHub as written.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType


DEFAULT_LABEL_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "review/triage": "924cb2",
        # Priority
        "P0": "b60205",
        "P1": "d93f0b",
        "P2": "e99695",
        "P3": "c2e0c6",
        "P4": "c5def5",
        # Size points
        "1": "fef2c0",
        "2": "f9d0c4",
        "4": "e99695",
        "8": "d93f0b",
        "16": "b60205",
        # Planning
        "backlog": "f7d74a",
        "Task": "1d76db",
        "Story": "1c8300",
        "Epic": "3E4B9E",
        "S": "0c508c",
    }
)


def desired_label_set(colors: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Return an immutable name -> color mapping for a sync run."""

    source = DEFAULT_LABEL_COLORS if colors is None else colors
    return MappingProxyType(dict(source))


def normalize_color(color: str) -> str:
    """Comparison form of a color: lowercase, no leading `#`.

    GitHub reports colors in lowercase, so "3E4B9E" in the table must match
    "3e4b9e" on the remote.
    """

    return color.strip().lstrip("#").lower()


def colors_match(remote_color: str, desired_color: str) -> bool:
    return normalize_color(remote_color) == normalize_color(desired_color)
