"""GitHub label sync.

Reconciles a repository's issue labels against a fixed name -> color table:
- configuration loaded from the environment and `.env`
- structured logging
- create/update of drifted labels, orphan labels reported but never deleted
"""

__version__ = "0.1.0"

from github_label_sync.config import LabelSyncSettings

__all__ = ["__version__", "LabelSyncSettings"]
