"""CLI entrypoint for the issue ledger.

Every command loads the project, calls one operation on the model, and saves
the project again when something changed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

from pydantic import ValidationError

from issue_ledger import __version__
from issue_ledger.builders import (
    create_component,
    create_issue,
    create_project,
    create_release,
    default_config,
)
from issue_ledger.errors import IssueLedgerError, StoreError
from issue_ledger.logging import configure_logging
from issue_ledger.model import Config, Disposition, Issue, IssueType, LogEntry, Project
from issue_ledger.settings import LedgerSettings
from issue_ledger.store import ConfigStore, ProjectStore

logger = logging.getLogger(__name__)

Command = Callable[[argparse.Namespace, Project, Config], bool]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledger",
        description="File-based issue tracker",
    )
    parser.add_argument("--version", action="version", version=f"issue-ledger {__version__}")

    # Shared by every command that changes something.
    commented = argparse.ArgumentParser(add_help=False)
    commented.add_argument("--comment", default="", help="Comment recorded in the change log")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser("init", help="Create a new project")
    init.add_argument("--name", required=True, help="Project name (also its first component)")
    init.add_argument(
        "--component",
        dest="components",
        action="append",
        default=[],
        help="Additional component name (repeatable)",
    )
    init.add_argument("--user-name", default=None, help="Your name, stored in the config file")
    init.add_argument("--user-email", default=None, help="Your email, stored in the config file")

    add_component = subparsers.add_parser("add-component", help="Add a component")
    add_component.add_argument("name", help="Component name")

    add_release = subparsers.add_parser("add-release", help="Add a release")
    add_release.add_argument("name", help="Release name")

    add = subparsers.add_parser("add", help="Add an issue")
    add.add_argument("--title", required=True, help="Issue title")
    add.add_argument("--desc", default="", help="Issue description")
    add.add_argument(
        "--type",
        required=True,
        choices=[t.value for t in IssueType],
        help="Issue type",
    )
    add.add_argument(
        "--component",
        default=None,
        help="Component name (defaults to the only component when there is one)",
    )
    add.add_argument("--release", default=None, help="Unreleased release to assign to")
    add.add_argument("--reporter", default=None, help="Issue creator (defaults to you)")

    todo = subparsers.add_parser("todo", help="List open issues grouped by release")
    todo.add_argument("--release", default=None, help="Only list issues for this release")
    todo.add_argument("--all", action="store_true", help="Include closed issues")

    show = subparsers.add_parser("show", help="Describe an issue")
    show.add_argument("issue", help="Issue name, e.g. 'core-1'")

    start = subparsers.add_parser("start", parents=[commented], help="Start work on an issue")
    start.add_argument("issue", help="Issue name")

    stop = subparsers.add_parser("stop", parents=[commented], help="Pause work on an issue")
    stop.add_argument("issue", help="Issue name")

    close = subparsers.add_parser("close", parents=[commented], help="Close an issue")
    close.add_argument("issue", help="Issue name")
    close.add_argument(
        "--disposition",
        required=True,
        choices=[d.value for d in Disposition],
        help="Why the issue is being closed",
    )

    edit = subparsers.add_parser("edit", parents=[commented], help="Edit an issue's fields")
    edit.add_argument("issue", help="Issue name")
    edit.add_argument("--title", default=None, help="New title")
    edit.add_argument("--desc", default=None, help="New description")
    edit.add_argument("--reporter", default=None, help="New issue creator")

    assign = subparsers.add_parser("assign", parents=[commented], help="Assign to a release")
    assign.add_argument("issue", help="Issue name")
    assign.add_argument("release", help="Release name")

    unassign = subparsers.add_parser(
        "unassign", parents=[commented], help="Remove an issue from its release"
    )
    unassign.add_argument("issue", help="Issue name")

    add_reference = subparsers.add_parser(
        "add-reference", parents=[commented], help="Attach a reference (URL, commit, ...)"
    )
    add_reference.add_argument("issue", help="Issue name")
    add_reference.add_argument("reference", help="Free-form reference text")

    release = subparsers.add_parser("release", parents=[commented], help="Release a release")
    release.add_argument("release", help="Release name")

    log = subparsers.add_parser("log", help="Show recent changes")
    log.add_argument("--limit", type=int, default=10, help="Number of entries to show")

    return parser


def _cmd_add_component(args: argparse.Namespace, project: Project, config: Config) -> bool:
    create_component(project, args.name)
    print(f"Added component {args.name}.")
    return True


def _cmd_add_release(args: argparse.Namespace, project: Project, config: Config) -> bool:
    create_release(project, args.name)
    print(f"Added release {args.name}.")
    return True


def _cmd_add(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = create_issue(
        project,
        config,
        title=args.title,
        desc=args.desc,
        type=args.type,
        component=args.component,
        release=args.release,
        reporter=args.reporter,
    )
    print(f"Added issue {issue.name}.")
    return True


def _issue_line(issue: Issue) -> str:
    return f"{issue.status_widget} {issue.name}: {issue.title}"


def _cmd_todo(args: argparse.Namespace, project: Project, config: Config) -> bool:
    if args.release:
        release = project.release_for(args.release)
        groups = [(release.name, project.issues_for_release(release))]
    else:
        groups = [(r.name, project.issues_for_release(r)) for r in project.unreleased_releases()]
        groups.append(("Unassigned", project.unassigned_issues()))

    printed = False
    for label, issues in groups:
        if not args.all:
            issues = [issue for issue in issues if issue.is_open]
        if not issues:
            continue
        print(f"{label}:")
        for issue in project.issues_sorted(issues):
            print(f"  {_issue_line(issue)}")
        printed = True

    if not printed:
        print("No matching issues.")
    return False


def _format_entry(entry: LogEntry, subject: str | None = None) -> str:
    when = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S %Z")
    line = f"- {when} {entry.actor}: "
    if subject:
        line += f"{subject}: "
    line += entry.description
    if entry.comment:
        line += f"\n    > {entry.comment}"
    return line


def _cmd_show(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    status = issue.status_string
    if issue.is_closed:
        status += f": {issue.disposition_string}"

    print(f"Issue {issue.name}")
    print(f"  Title: {issue.title}")
    print(f"  Description: {issue.interpolated_desc(project.issues)}")
    print(f"  Type: {issue.type.value}")
    print(f"  Status: {status}")
    print(f"  Creator: {issue.reporter}")
    print(f"  Created: {issue.creation_time.isoformat()}")
    print(f"  Release: {issue.release or 'unassigned'}")
    for i, reference in enumerate(issue.references, start=1):
        print(f"  Reference {i}: {reference}")
    print(f"  Identifier: {issue.id}")
    print("Event log:")
    for entry in issue.changelog.entries():
        print(_format_entry(entry))
    return False


def _cmd_start(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    issue.start_work(config.user(), args.comment)
    print(f"Recorded start of work for {issue.name}.")
    return True


def _cmd_stop(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    issue.stop_work(config.user(), args.comment)
    print(f"Recorded work stop for {issue.name}.")
    return True


def _cmd_close(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    issue.close(args.disposition, config.user(), args.comment)
    print(f"Closed issue {issue.name} with disposition {issue.disposition_string}.")
    return True


def _cmd_edit(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    fields = {
        key: value
        for key, value in (
            ("title", args.title),
            ("description", args.desc),
            ("reporter", args.reporter),
        )
        if value is not None
    }
    if "description" in fields:
        fields["description"] = issue.with_placeholders(fields["description"], project.issues)
    if issue.change(fields, config.user(), args.comment):
        print(f"Issue {issue.name} updated.")
        return True
    print("Nothing changed.")
    return False


def _cmd_assign(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    release = project.release_for(args.release)
    issue.assign_to_release(release, config.user(), args.comment)
    print(f"Assigned {issue.name} to {release.name}.")
    return True


def _cmd_unassign(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    issue.unassign(config.user(), args.comment)
    print(f"Unassigned {issue.name}.")
    return True


def _cmd_add_reference(args: argparse.Namespace, project: Project, config: Config) -> bool:
    issue = project.issue_for(args.issue)
    issue.add_reference(args.reference, config.user(), args.comment)
    print(f"Added reference to {issue.name}.")
    return True


def _cmd_release(args: argparse.Namespace, project: Project, config: Config) -> bool:
    release = project.release_for(args.release)
    release.release(project, config.user(), args.comment)
    print(f"Release {release.name} released!")
    return True


def _cmd_log(args: argparse.Namespace, project: Project, config: Config) -> bool:
    events: list[tuple[LogEntry, str]] = []
    for issue in project.issues:
        subject = f"{issue.name} ({issue.title})"
        events.extend((entry, subject) for entry in issue.changelog.entries())
    for release in project.releases:
        subject = f"release {release.name}"
        events.extend((entry, subject) for entry in release.changelog.entries())

    events.sort(key=lambda event: event[0].timestamp, reverse=True)
    for entry, subject in events[: max(args.limit, 0)]:
        print(_format_entry(entry, subject))
    return False


_COMMANDS: dict[str, Command] = {
    "add-component": _cmd_add_component,
    "add-release": _cmd_add_release,
    "add": _cmd_add,
    "todo": _cmd_todo,
    "show": _cmd_show,
    "start": _cmd_start,
    "stop": _cmd_stop,
    "close": _cmd_close,
    "edit": _cmd_edit,
    "assign": _cmd_assign,
    "unassign": _cmd_unassign,
    "add-reference": _cmd_add_reference,
    "release": _cmd_release,
    "log": _cmd_log,
}


def _init(
    args: argparse.Namespace,
    settings: LedgerSettings,
    project_store: ProjectStore,
    config_store: ConfigStore,
) -> int:
    if project_store.exists():
        raise StoreError(f"a project already exists at {project_store.path}")

    config = config_store.load()
    if config is None:
        config = default_config(settings)
        if args.user_name or args.user_email:
            config = config.model_copy(
                update={
                    "name": args.user_name or config.name,
                    "email": args.user_email or config.email,
                }
            )
        config_store.save(config)

    project = create_project(args.name, args.components)
    project_store.save(project)
    print(f"Created project {project.name} at {project_store.path}.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = LedgerSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    project_store = ProjectStore(settings.project_file)
    config_store = ConfigStore(settings.config_file)

    try:
        if args.command == "init":
            return _init(args, settings, project_store, config_store)

        handler = _COMMANDS.get(args.command)
        if handler is None:
            logger.error("Unknown command", extra={"command": args.command})
            return 2

        config = config_store.load() or default_config(settings)
        project = project_store.load()
        if handler(args, project, config):
            project_store.save(project)
        return 0

    except IssueLedgerError as e:
        logger.warning(str(e), extra={"command": args.command})
        print(f"Error: {e}", file=sys.stderr)
        return 3

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
