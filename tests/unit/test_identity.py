"""Unit tests for issue ids, name prefixes and the change log."""

from __future__ import annotations

import re
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from issue_ledger.model import ChangeLog, LogEntry
from issue_ledger.model.identity import make_issue_id, name_prefix

_HEX40 = re.compile(r"^[0-9a-f]{40}$")


def test_name_prefix_collapses_whitespace() -> None:
    assert name_prefix("Core") == "core"
    assert name_prefix("User  Interface\tLayer") == "user-interface-layer"


def test_make_issue_id_is_sha1_hex() -> None:
    created = datetime(2024, 1, 1, tzinfo=UTC)

    issue_id = make_issue_id(created, "Ada <ada@example.com>", "Title", "Body")

    assert _HEX40.match(issue_id)


def test_make_issue_id_differs_for_identical_fields() -> None:
    created = datetime(2024, 1, 1, tzinfo=UTC)

    ids = {make_issue_id(created, "r", "t", "d") for _ in range(50)}

    assert len(ids) == 50


def test_changelog_appends_in_order() -> None:
    log = ChangeLog()

    first = log.record("created", "Ada <ada@example.com>", "")
    second = log.record("changed title", "Bob <bob@example.com>", "typo")

    assert log.entries() == (first, second)
    assert log.latest() is second
    assert len(log) == 2
    assert second.comment == "typo"
    assert second.timestamp.tzinfo is not None


def test_changelog_entries_are_read_only() -> None:
    log = ChangeLog()
    entry = log.record("created", "Ada", "")

    assert isinstance(log.entries(), tuple)
    with pytest.raises(ValidationError):
        entry.description = "rewritten"  # type: ignore[misc]


def test_changelog_entries_cannot_be_removed() -> None:
    log = ChangeLog()
    first = log.record("created", "Ada", "")
    log.record("changed title", "Ada", "")

    with pytest.raises(AttributeError):
        log.records = (first,)
    with pytest.raises(AttributeError):
        log.records = ()

    assert len(log) == 2
    assert not hasattr(log.records, "remove")


def test_changelog_rejects_naive_timestamps() -> None:
    with pytest.raises(ValidationError):
        LogEntry(timestamp=datetime(2024, 1, 1), actor="Ada", description="created")


def test_empty_changelog_has_no_latest() -> None:
    assert ChangeLog().latest() is None


def test_append_accepts_prebuilt_entry() -> None:
    log = ChangeLog()
    entry = LogEntry(
        timestamp=datetime(2024, 1, 1, tzinfo=UTC),
        actor="Ada",
        comment="",
        description="imported",
    )

    log.append(entry)

    assert log.entries() == (entry,)
