"""JSON log output for sync runs.

Each record becomes one JSON line on stderr. Label decisions carry their
context in `extra` (label, color, action, repo), which lands under the
"extra" key. Stdout stays free for the per-label report printed by the CLI.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord has; anything else on a record came from `extra=`.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

# Chatty HTTP loggers are capped at INFO even when the run logs at DEBUG.
_HTTP_LOGGERS: tuple[str, ...] = ("github", "urllib3")


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, extra."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = _extra_fields(record)
        if extra:
            entry["extra"] = extra

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Errors attached to label failures are not JSON-native.
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Route all logging through a single JSON handler on stderr."""

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.INFO))
