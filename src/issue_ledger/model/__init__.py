"""Record types for the issue ledger.

This package holds the entities and their invariants:
- Component, Release, Issue grouped under a Project aggregate
- the append-only ChangeLog owned by issues and releases
- the local user's Config

Reading and writing these records, and building them with defaults, lives in
``issue_ledger.store`` and ``issue_ledger.builders``.
"""

from issue_ledger.model.changelog import ChangeLog, LogEntry
from issue_ledger.model.component import Component
from issue_ledger.model.config import Config
from issue_ledger.model.issue import Disposition, Issue, IssueStatus, IssueType
from issue_ledger.model.project import Project
from issue_ledger.model.release import Release, ReleaseStatus

__all__ = [
    "ChangeLog",
    "Component",
    "Config",
    "Disposition",
    "Issue",
    "IssueStatus",
    "IssueType",
    "LogEntry",
    "Project",
    "Release",
    "ReleaseStatus",
]
