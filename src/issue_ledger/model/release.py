"""Releases and their one-way unreleased -> released lifecycle."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from issue_ledger.errors import AlreadyReleasedError, OpenIssueError
from issue_ledger.model.changelog import ChangeLog, LogEntry

if TYPE_CHECKING:
    from issue_ledger.model.issue import Issue
    from issue_ledger.model.project import Project

logger = logging.getLogger(__name__)


class ReleaseStatus(str, Enum):
    UNRELEASED = "unreleased"
    RELEASED = "released"


class Release(BaseModel):
    """A named milestone that issues can be assigned to.

    ``release_time`` is set if and only if the release has been released.
    """

    name: str
    status: ReleaseStatus = Field(default=ReleaseStatus.UNRELEASED)
    release_time: AwareDatetime | None = Field(default=None)
    changelog: ChangeLog = Field(default_factory=ChangeLog)

    @model_validator(mode="after")
    def _release_time_matches_status(self) -> Release:
        if (self.status is ReleaseStatus.RELEASED) != (self.release_time is not None):
            raise ValueError(
                f"release {self.name!r}: release_time must be set exactly when released"
            )
        return self

    @property
    def is_released(self) -> bool:
        return self.status is ReleaseStatus.RELEASED

    @property
    def is_unreleased(self) -> bool:
        return not self.is_released

    def log(self, description: str, actor: str, comment: str = "") -> LogEntry:
        return self.changelog.record(description, actor, comment)

    def issues_from(self, project: Project) -> list[Issue]:
        return [issue for issue in project.issues if issue.release == self.name]

    def release(self, project: Project, actor: str, comment: str = "") -> None:
        """Mark this release as released.

        Raises:
            AlreadyReleasedError: The release was already released.
            OpenIssueError: An issue assigned to this release is not closed.
        """
        if self.is_released:
            raise AlreadyReleasedError(f"release {self.name} is already released")

        bad = next((issue for issue in self.issues_from(project) if issue.is_open), None)
        if bad is not None:
            raise OpenIssueError(bad)

        self.release_time = datetime.now(UTC)
        self.status = ReleaseStatus.RELEASED
        self.log("released", actor, comment)
        logger.debug("Release released", extra={"release": self.name, "actor": actor})
