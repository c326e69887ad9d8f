"""The project aggregate: components, releases and issues."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pydantic import BaseModel, Field

from issue_ledger import __version__
from issue_ledger.errors import DuplicateNameError, NotFoundError
from issue_ledger.model.component import Component
from issue_ledger.model.issue import Issue
from issue_ledger.model.release import Release

logger = logging.getLogger(__name__)


def _first_duplicate(names: Iterable[str]) -> str | None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            return name
        seen.add(name)
    return None


class Project(BaseModel):
    """Aggregate root for a project's backlog.

    Component and release names are unique within a project, and every issue's
    ``component`` (and ``release``, when set) names one of them. Issue display
    names are derived here and nowhere else.
    """

    name: str
    version: str = Field(default=__version__)
    issues: list[Issue] = Field(default_factory=list)
    components: list[Component] = Field(default_factory=list)
    releases: list[Release] = Field(default_factory=list)

    # Lookups

    def issue_for(self, issue_name: str) -> Issue:
        for issue in self.issues:
            if issue.name == issue_name:
                return issue
        raise NotFoundError(f"has no issue with name {issue_name!r}")

    def component_for(self, component_name: str) -> Component:
        for component in self.components:
            if component.name == component_name:
                return component
        raise NotFoundError(f"has no component with name {component_name!r}")

    def release_for(self, release_name: str) -> Release:
        for release in self.releases:
            if release.name == release_name:
                return release
        raise NotFoundError(f"has no release with name {release_name!r}")

    def issues_for_release(self, release: Release) -> list[Issue]:
        return [issue for issue in self.issues if issue.release == release.name]

    def issues_for_component(self, component: Component) -> list[Issue]:
        return [issue for issue in self.issues if issue.component == component.name]

    def unassigned_issues(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.release is None]

    def open_issues(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.is_open]

    def unreleased_releases(self) -> list[Release]:
        return [release for release in self.releases if release.is_unreleased]

    def issues_sorted(self, issues: Iterable[Issue] | None = None) -> list[Issue]:
        return sorted(self.issues if issues is None else issues, key=lambda i: i.sort_order)

    # Mutation

    def add_component(self, component: Component) -> None:
        if any(c.name == component.name for c in self.components):
            raise DuplicateNameError(f"more than one component named {component.name!r}")
        self.components.append(component)

    def add_release(self, release: Release) -> None:
        if any(r.name == release.name for r in self.releases):
            raise DuplicateNameError(f"more than one release named {release.name!r}")
        self.releases.append(release)

    def add_issue(self, issue: Issue) -> None:
        self.component_for(issue.component)
        if issue.release is not None:
            self.release_for(issue.release)
        self.issues.append(issue)
        logger.debug("Issue added", extra={"issue": issue.id, "component": issue.component})

    def assign_issue_names(self) -> None:
        """Number issues per component in stored order: ``core-1``, ``core-2``, ...

        Deterministic for a fixed issue order and component set.
        """
        prefixes = {c.name: c.name_prefix() for c in self.components}
        counters = {c.name: 0 for c in self.components}
        for issue in self.issues:
            if issue.component not in prefixes:
                raise NotFoundError(f"has no component with name {issue.component!r}")
            counters[issue.component] += 1
            issue.name = f"{prefixes[issue.component]}-{counters[issue.component]}"

    def ensure_valid(self) -> None:
        """Check name uniqueness, then that issues only reference known entities."""
        dup = _first_duplicate(c.name for c in self.components)
        if dup is not None:
            raise DuplicateNameError(f"more than one component named {dup!r}")
        dup = _first_duplicate(r.name for r in self.releases)
        if dup is not None:
            raise DuplicateNameError(f"more than one release named {dup!r}")

        component_names = {c.name for c in self.components}
        release_names = {r.name for r in self.releases}
        for issue in self.issues:
            if issue.component not in component_names:
                raise NotFoundError(f"has no component with name {issue.component!r}")
            if issue.release is not None and issue.release not in release_names:
                raise NotFoundError(f"has no release with name {issue.release!r}")
