"""Error kinds raised by the issue ledger.

Every failure is raised at the point where a precondition is violated and
before any state is changed. Nothing in the core catches these; the CLI turns
them into a message and an exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from issue_ledger.model.issue import Issue


class IssueLedgerError(Exception):
    """Base class for all ledger errors."""


class AlreadyReleasedError(IssueLedgerError):
    pass


class OpenIssueError(IssueLedgerError):
    """Raised when a release still has an issue that is not closed."""

    def __init__(self, issue: Issue) -> None:
        self.issue = issue
        label = issue.name or issue.title
        super().__init__(f"open issue {label} must be reassigned")


class UnknownStatusError(IssueLedgerError):
    pass


class AlreadySetError(IssueLedgerError):
    pass


class IllegalTransitionError(IssueLedgerError):
    pass


class NotInProgressError(IssueLedgerError):
    pass


class UnknownDispositionError(IssueLedgerError):
    pass


class NotAssignedError(IssueLedgerError):
    pass


class DuplicateNameError(IssueLedgerError):
    pass


class NotFoundError(IssueLedgerError):
    pass


class StoreError(IssueLedgerError):
    """Raised when a persisted project cannot be read."""
