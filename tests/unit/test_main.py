"""Command-line tests running `main()` against a temporary project."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from issue_ledger.main import main
from issue_ledger.model import Disposition, IssueStatus, Project
from issue_ledger.store import ConfigStore, ProjectStore


@pytest.fixture(autouse=True)
def restore_root_logging() -> Iterator[None]:
    """`main()` reconfigures the root logger; put pytest's handlers back."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workdir(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> Path:
    clean_env.chdir(tmp_path)
    assert (
        main(
            [
                "init",
                "--name",
                "core",
                "--user-name",
                "Ada Lovelace",
                "--user-email",
                "ada@example.com",
            ]
        )
        == 0
    )
    return tmp_path


def _load(workdir: Path) -> Project:
    return ProjectStore(workdir / ".ledger" / "project.json").load()


def test_init_writes_project_and_config(workdir: Path) -> None:
    project = _load(workdir)
    config = ConfigStore(workdir / ".ledger" / "config.json").load()

    assert project.name == "core"
    assert [c.name for c in project.components] == ["core"]
    assert config is not None
    assert config.user() == "Ada Lovelace <ada@example.com>"


def test_init_refuses_to_overwrite(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["init", "--name", "other"]) == 3
    assert "already exists" in capsys.readouterr().err
    assert _load(workdir).name == "core"


def test_issue_lifecycle_and_release(workdir: Path) -> None:
    assert main(["add-release", "1.0"]) == 0
    assert main(["add", "--title", "Crash", "--type", "bugfix", "--release", "1.0"]) == 0
    assert main(["start", "core-1", "--comment", "on it"]) == 0

    # Open issue blocks the release.
    assert main(["release", "1.0"]) == 3
    assert _load(workdir).release_for("1.0").is_unreleased

    assert main(["close", "core-1", "--disposition", "fixed"]) == 0
    assert main(["release", "1.0"]) == 0

    project = _load(workdir)
    issue = project.issue_for("core-1")
    assert issue.status is IssueStatus.CLOSED
    assert issue.disposition is Disposition.FIXED
    assert issue.reporter == "Ada Lovelace <ada@example.com>"
    assert issue.changelog.entries()[0].comment == "on it"
    release = project.release_for("1.0")
    assert release.is_released
    assert release.changelog.latest().actor == "Ada Lovelace <ada@example.com>"


def test_show_renders_cross_references(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["add", "--title", "Crash", "--type", "bugfix"]) == 0
    assert main(["add", "--title", "Docs", "--type", "feature", "--desc", "after core-1"]) == 0
    capsys.readouterr()

    assert main(["show", "core-2"]) == 0

    out = capsys.readouterr().out
    assert "Description: after core-1" in out
    assert "Status: unstarted" in out


def test_todo_groups_by_release(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["add-release", "1.0"])
    main(["add", "--title", "Planned", "--type", "feature", "--release", "1.0"])
    main(["add", "--title", "Someday", "--type", "feature"])
    main(["start", "core-2"])
    capsys.readouterr()

    assert main(["todo"]) == 0

    out = capsys.readouterr().out
    assert "1.0:\n  _ core-1: Planned" in out
    assert "Unassigned:\n  > core-2: Someday" in out


def test_edit_and_unassign(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["add-release", "1.0"])
    main(["add", "--title", "Old", "--type", "bugfix"])
    assert main(["assign", "core-1", "1.0"]) == 0
    assert main(["edit", "core-1", "--title", "New"]) == 0
    assert main(["edit", "core-1", "--title", "New"]) == 0
    assert "Nothing changed." in capsys.readouterr().out
    assert main(["unassign", "core-1"]) == 0
    assert main(["unassign", "core-1"]) == 3

    issue = _load(workdir).issue_for("core-1")
    assert issue.title == "New"
    assert issue.release is None
    assert [e.description for e in issue.changelog.entries()] == [
        "assigned to release 1.0 from unassigned",
        "changed title",
        "unassigned from release 1.0",
    ]


def test_edit_with_same_description_changes_nothing(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    main(["add", "--title", "Crash", "--type", "bugfix"])
    main(["add", "--title", "Docs", "--type", "feature", "--desc", "see core-1"])
    capsys.readouterr()

    assert main(["edit", "core-2", "--desc", "see core-1"]) == 0
    assert "Nothing changed." in capsys.readouterr().out

    assert main(["edit", "core-2", "--desc", "see core-1 first"]) == 0
    assert "Issue core-2 updated." in capsys.readouterr().out

    project = _load(workdir)
    issue = project.issue_for("core-2")
    assert [e.description for e in issue.changelog.entries()] == ["changed description"]
    assert issue.interpolated_desc(project.issues) == "see core-1 first"


def test_add_reference_and_log(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    main(["add", "--title", "Crash", "--type", "bugfix"])
    assert main(["add-reference", "core-1", "https://example.com/report"]) == 0
    capsys.readouterr()

    assert main(["log", "--limit", "5"]) == 0

    out = capsys.readouterr().out
    assert "core-1 (Crash): added reference 1" in out
    assert _load(workdir).issue_for("core-1").references == ["https://example.com/report"]


def test_add_requires_component_when_several(
    workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["add-component", "docs"]) == 0
    assert main(["add", "--title", "Where", "--type", "bugfix"]) == 3
    assert main(["add", "--title", "Here", "--type", "bugfix", "--component", "docs"]) == 0

    assert [i.name for i in _load(workdir).issues] == ["docs-1"]


def test_unknown_issue(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["start", "core-9"]) == 3
    assert "has no issue with name 'core-9'" in capsys.readouterr().err


def test_commands_require_a_project(
    tmp_path: Path, clean_env: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    clean_env.chdir(tmp_path)
    clean_env.setenv("ISSUE_LEDGER_USER_NAME", "Ada")
    clean_env.setenv("ISSUE_LEDGER_USER_EMAIL", "ada@example.com")

    assert main(["todo"]) == 3
    assert "ledger init" in capsys.readouterr().err
