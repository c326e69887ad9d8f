"""Issues, their status state machine and cross-reference placeholders.

Status transitions::

    unstarted --start_work--> in_progress --stop_work--> paused
        ^                         |   ^                     |
        +------change_status------+   +----change_status----+

    any status --close(disposition)--> closed   (terminal)

``change_status`` is the only mutator of ``status`` apart from ``close``. It
never moves an issue into or out of ``closed`` so that ``disposition`` is set
exactly when an issue is closed.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from issue_ledger.errors import (
    AlreadySetError,
    IllegalTransitionError,
    NotAssignedError,
    NotInProgressError,
    UnknownDispositionError,
    UnknownStatusError,
)
from issue_ledger.model.changelog import ChangeLog, LogEntry
from issue_ledger.model.identity import make_issue_id
from issue_ledger.model.release import Release

if TYPE_CHECKING:
    from issue_ledger.model.config import Config
    from issue_ledger.model.project import Project

logger = logging.getLogger(__name__)


class IssueStatus(str, Enum):
    UNSTARTED = "unstarted"
    PAUSED = "paused"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"


class Disposition(str, Enum):
    FIXED = "fixed"
    WONTFIX = "wontfix"
    REORG = "reorg"


class IssueType(str, Enum):
    BUGFIX = "bugfix"
    FEATURE = "feature"


# Active work first, closed last.
STATUS_SORT_ORDER: dict[IssueStatus, int] = {
    IssueStatus.IN_PROGRESS: 0,
    IssueStatus.PAUSED: 1,
    IssueStatus.UNSTARTED: 2,
    IssueStatus.CLOSED: 3,
}

STATUS_WIDGET: dict[IssueStatus, str] = {
    IssueStatus.UNSTARTED: "_",
    IssueStatus.IN_PROGRESS: ">",
    IssueStatus.PAUSED: "=",
    IssueStatus.CLOSED: "x",
}

STATUS_STRINGS: dict[IssueStatus, str] = {IssueStatus.IN_PROGRESS: "in progress"}

DISPOSITION_STRINGS: dict[Disposition, str] = {
    Disposition.WONTFIX: "won't fix",
    Disposition.REORG: "reorganized",
}

UNKNOWN_ISSUE = "[unknown issue]"

_PLACEHOLDER = re.compile(r"\{issue (\w+)\}")

_E = TypeVar("_E", bound=Enum)


def placeholder_for(issue_id: str) -> str:
    return f"{{issue {issue_id}}}"


def _coerce(enum_cls: type[_E], value: object, error_cls: type[Exception], label: str) -> _E:
    try:
        return enum_cls(value)
    except ValueError:
        raise error_cls(f"unknown {label} {value}") from None


def _name_pattern(name: str) -> re.Pattern[str]:
    # Whole display-name tokens only: "core-1" must not match inside "core-10".
    return re.compile(rf"(?<![\w-]){re.escape(name)}(?![\w-])")


class Issue(BaseModel):
    """A unit of tracked work.

    ``id`` is permanent and used for stable cross-references. ``name`` is a
    display label that is never persisted; only
    :meth:`Project.assign_issue_names` writes it.
    """

    title: str
    desc: str = Field(default="")
    type: IssueType
    component: str
    release: str | None = Field(default=None)
    reporter: str
    status: IssueStatus = Field(default=IssueStatus.UNSTARTED)
    disposition: Disposition | None = Field(default=None)
    creation_time: AwareDatetime
    references: list[str] = Field(default_factory=list)
    id: str = Field(min_length=1, pattern=r"^\w+$", frozen=True)
    changelog: ChangeLog = Field(default_factory=ChangeLog)

    name: str | None = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _disposition_matches_status(self) -> Issue:
        if (self.status is IssueStatus.CLOSED) != (self.disposition is not None):
            raise ValueError(
                f"issue {self.title!r}: disposition must be set exactly when closed"
            )
        return self

    # Queries

    @property
    def is_closed(self) -> bool:
        return self.status is IssueStatus.CLOSED

    @property
    def is_open(self) -> bool:
        return not self.is_closed

    @property
    def is_in_progress(self) -> bool:
        return self.status is IssueStatus.IN_PROGRESS

    @property
    def is_bug(self) -> bool:
        return self.type is IssueType.BUGFIX

    @property
    def is_feature(self) -> bool:
        return self.type is IssueType.FEATURE

    @property
    def sort_order(self) -> tuple[int, datetime]:
        return (STATUS_SORT_ORDER[self.status], self.creation_time)

    @property
    def status_widget(self) -> str:
        return STATUS_WIDGET[self.status]

    @property
    def status_string(self) -> str:
        return STATUS_STRINGS.get(self.status, self.status.value)

    @property
    def disposition_string(self) -> str:
        if self.disposition is None:
            return ""
        return DISPOSITION_STRINGS.get(self.disposition, self.disposition.value)

    def make_id(self, config: Config, project: Project) -> str:
        return make_issue_id(self.creation_time, self.reporter, self.title, self.desc)

    def log(self, description: str, actor: str, comment: str = "") -> LogEntry:
        return self.changelog.record(description, actor, comment)

    def _label(self) -> str:
        return self.name or self.title

    # Status

    def start_work(self, actor: str, comment: str = "") -> None:
        self.change_status(IssueStatus.IN_PROGRESS, actor, comment)

    def stop_work(self, actor: str, comment: str = "") -> None:
        if self.status is not IssueStatus.IN_PROGRESS:
            raise NotInProgressError(f"issue {self._label()} is not in progress")
        self.change_status(IssueStatus.PAUSED, actor, comment)

    def change_status(self, to: IssueStatus | str, actor: str, comment: str = "") -> None:
        target = _coerce(IssueStatus, to, UnknownStatusError, "status")
        if self.status is target:
            raise AlreadySetError(f"already marked as {target.value}")
        if target is IssueStatus.CLOSED:
            raise IllegalTransitionError("issues are closed with a disposition via close()")
        if self.is_closed:
            raise IllegalTransitionError(f"issue {self._label()} is closed")

        old = self.status
        self.log(f"changed status from {old.value} to {target.value}", actor, comment)
        self.status = target
        logger.debug(
            "Issue status changed",
            extra={"issue": self.id, "from": old.value, "to": target.value},
        )

    def close(self, disposition: Disposition | str, actor: str, comment: str = "") -> None:
        disp = _coerce(Disposition, disposition, UnknownDispositionError, "disposition")
        self.log(f"closed issue with disposition {disp.value}", actor, comment)
        self.status = IssueStatus.CLOSED
        self.disposition = disp
        logger.debug("Issue closed", extra={"issue": self.id, "disposition": disp.value})

    # Field edits

    def change(self, fields: Mapping[str, str], actor: str, comment: str = "") -> bool:
        """Apply new title/description/reporter values.

        Keys missing from ``fields`` are left alone. Returns True and writes a
        single log entry when anything changed; returns False and logs nothing
        otherwise.
        """
        what: list[str] = []
        for key, attr in (("title", "title"), ("description", "desc"), ("reporter", "reporter")):
            if key not in fields:
                continue
            if getattr(self, attr) != fields[key]:
                what.append(f"changed {key}")
                setattr(self, attr, fields[key])

        if not what:
            return False
        self.log(", ".join(what), actor, comment)
        return True

    def add_reference(self, reference: str, actor: str, comment: str = "") -> None:
        self.references.append(reference)
        self.log(f"added reference {len(self.references)}", actor, comment)

    # Releases

    def assign_to_release(self, release: Release, actor: str, comment: str = "") -> None:
        # No guard against reassigning to the current release.
        self.log(
            f"assigned to release {release.name} from {self.release or 'unassigned'}",
            actor,
            comment,
        )
        self.release = release.name

    def unassign(self, actor: str, comment: str = "") -> None:
        if self.release is None:
            raise NotAssignedError(f"issue {self._label()} is not assigned to a release")
        self.log(f"unassigned from release {self.release}", actor, comment)
        self.release = None

    # Cross-references

    def before_serialize(self, project: Project) -> None:
        """Replace other issues' display names in ``desc`` with ``{issue <id>}``."""
        self.desc = self.with_placeholders(self.desc, project.issues)

    def with_placeholders(self, text: str, issues: Iterable[Issue]) -> str:
        """Return ``text`` with other issues' display names as ``{issue <id>}``.

        This is the stored form of a description, so candidate descriptions are
        compared against ``desc`` only after this rewrite.
        """
        for other in issues:
            if other is self or not other.name:
                continue
            placeholder = placeholder_for(other.id)
            text = _name_pattern(other.name).sub(lambda _m: placeholder, text)
        return text

    def interpolated_desc(
        self,
        issues: Iterable[Issue],
        renderer: Callable[[Issue], str] | None = None,
    ) -> str:
        """Render ``{issue <id>}`` placeholders as display names.

        ``renderer`` replaces the default of using the issue's name. Placeholders
        that match none of ``issues`` become ``[unknown issue]``.
        """
        by_id = {issue.id: issue for issue in issues}

        def _render(match: re.Match[str]) -> str:
            issue = by_id.get(match.group(1))
            if issue is None:
                return UNKNOWN_ISSUE
            if renderer is not None:
                return renderer(issue)
            return issue.name or issue.id

        return _PLACEHOLDER.sub(_render, self.desc)
