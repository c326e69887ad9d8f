"""Test configuration and fixtures."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from issue_ledger.builders import create_project, create_release
from issue_ledger.model import Config, Issue, Project

LEDGER_ENV_VARS = (
    "LOG_LEVEL",
    "ISSUE_LEDGER_PROJECT_FILE",
    "ISSUE_LEDGER_CONFIG_FILE",
    "ISSUE_LEDGER_USER_NAME",
    "ISSUE_LEDGER_USER_EMAIL",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove ledger variables inherited from the calling shell."""
    for var in LEDGER_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def config() -> Config:
    """Provide a test user identity."""
    return Config(name="Ada Lovelace", email="ada@example.com")


@pytest.fixture
def actor(config: Config) -> str:
    return config.user()


@pytest.fixture
def project() -> Project:
    """Provide a project with a single 'core' component and an unreleased '1.0'."""
    project = create_project("core")
    create_release(project, "1.0")
    return project


@pytest.fixture
def make_issue(project: Project) -> Callable[..., Issue]:
    """Add issues to ``project`` with fixed, increasing creation times."""
    base = datetime(2024, 1, 1, tzinfo=UTC)

    def _make(title: str = "Issue", **fields: object) -> Issue:
        values: dict[str, object] = {
            "title": title,
            "type": "bugfix",
            "component": "core",
            "reporter": "Ada Lovelace <ada@example.com>",
            "creation_time": base + timedelta(minutes=len(project.issues)),
            "id": f"{len(project.issues) + 1:040x}",
        }
        values.update(fields)
        issue = Issue.model_validate(values)
        project.add_issue(issue)
        project.assign_issue_names()
        return issue

    return _make
