"""Append-only change history owned by issues and releases."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import AwareDatetime, BaseModel, ConfigDict


class LogEntry(BaseModel):
    """A single attributed change. Entries are immutable once logged."""

    model_config = ConfigDict(frozen=True)

    timestamp: AwareDatetime
    actor: str
    comment: str = ""
    description: str


class ChangeLog(BaseModel):
    """Ordered list of log entries.

    ``records`` is a tuple of frozen entries, so the only way to change a log
    is to append to it.
    """

    records: tuple[LogEntry, ...] = ()

    def __setattr__(self, name: str, value: object) -> None:
        if name == "records":
            kept = value[: len(self.records)] if isinstance(value, tuple) else None
            if kept != self.records:
                raise AttributeError("change log entries cannot be removed or rewritten")
        super().__setattr__(name, value)

    def append(self, entry: LogEntry) -> None:
        self.records = (*self.records, entry)

    def entries(self) -> tuple[LogEntry, ...]:
        return self.records

    def record(self, description: str, actor: str, comment: str = "") -> LogEntry:
        entry = LogEntry(
            timestamp=datetime.now(UTC),
            actor=actor,
            comment=comment or "",
            description=description,
        )
        self.append(entry)
        return entry

    def latest(self) -> LogEntry | None:
        return self.records[-1] if self.records else None

    def __len__(self) -> int:
        return len(self.records)
