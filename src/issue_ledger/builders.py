"""Create new records with their defaults filled in.

The record types in ``issue_ledger.model`` only declare fields. Deciding what a
new project, release or issue starts with (the creation time, the issue id,
the reporter, the component when there is only one) happens here, so that
callers supplying values from a prompt or from command-line flags share the
same rules.
"""

from __future__ import annotations

import getpass
import logging
import socket
from collections.abc import Iterable
from datetime import UTC, datetime

from issue_ledger.errors import AlreadyReleasedError, NotFoundError
from issue_ledger.model import (
    Component,
    Config,
    Issue,
    IssueType,
    Project,
    Release,
)
from issue_ledger.model.identity import make_issue_id
from issue_ledger.settings import LedgerSettings

logger = logging.getLogger(__name__)


def create_project(name: str, component_names: Iterable[str] = ()) -> Project:
    """Create a project whose components are its own name plus ``component_names``.

    Duplicate names are dropped, keeping the first occurrence.
    """

    project = Project(name=name)
    for component_name in dict.fromkeys([name, *component_names]):
        project.add_component(Component(name=component_name))
    logger.info(
        "Project created",
        extra={"project": name, "components": [c.name for c in project.components]},
    )
    return project


def create_component(project: Project, name: str) -> Component:
    component = Component(name=name)
    project.add_component(component)
    return component


def create_release(project: Project, name: str) -> Release:
    release = Release(name=name)
    project.add_release(release)
    return release


def create_issue(
    project: Project,
    config: Config,
    *,
    title: str,
    desc: str = "",
    type: IssueType | str,
    component: str | None = None,
    release: str | None = None,
    reporter: str | None = None,
) -> Issue:
    """Create an issue, add it to ``project`` and renumber display names.

    Raises:
        NotFoundError: No component was given and the project does not have
            exactly one, or a named component/release does not exist.
        AlreadyReleasedError: ``release`` names a release that is already out.
    """

    if component is None:
        if len(project.components) != 1:
            raise NotFoundError("a component is required when a project has several")
        component = project.components[0].name
    else:
        project.component_for(component)

    if release is not None and project.release_for(release).is_released:
        raise AlreadyReleasedError(f"release {release} is already released")

    reporter = reporter or config.user()
    creation_time = datetime.now(UTC)
    issue = Issue(
        title=title,
        desc=desc,
        type=IssueType(type),
        component=component,
        release=release,
        reporter=reporter,
        creation_time=creation_time,
        id=make_issue_id(creation_time, reporter, title, desc),
    )

    project.add_issue(issue)
    project.assign_issue_names()
    logger.info("Issue created", extra={"issue": issue.id, "issue_name": issue.name})
    return issue


def _host_user_name() -> str:
    login = getpass.getuser()
    try:
        import pwd

        gecos = pwd.getpwnam(login).pw_gecos.split(",")[0].strip()
    except (ImportError, KeyError):
        return login
    return gecos or login


def default_config(settings: LedgerSettings) -> Config:
    """Build a Config from settings, falling back to the host's user details."""

    name = settings.user_name or _host_user_name()
    email = settings.user_email or f"{getpass.getuser()}@{socket.getfqdn()}"
    return Config(name=name, email=email)
