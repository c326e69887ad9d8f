"""Issue Ledger.

A distributed, file-based issue tracker:
- projects split into components and releases
- issues with a status state machine and an append-only change log
- configuration loaded from `.env`
- structured logging
- local JSON persistence
"""

__version__ = "0.1.0"

from issue_ledger.model import Config, Issue, Project, Release

__all__ = ["__version__", "Config", "Issue", "Project", "Release"]
