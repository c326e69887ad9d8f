"""Display-name prefixes and opaque issue ids."""

from __future__ import annotations

import hashlib
import random
import re
from datetime import UTC, datetime

_WHITESPACE_RUN = re.compile(r"\s+")


def name_prefix(name: str) -> str:
    """Return the issue-name prefix for a component name.

    ``"Core Engine"`` becomes ``"core-engine"``.
    """

    return _WHITESPACE_RUN.sub("-", name).lower()


def make_issue_id(creation_time: datetime, reporter: str, title: str, desc: str) -> str:
    """Hash the issue's identifying fields with the current time and a random value.

    The result is a 40 character lowercase hex SHA-1 digest. It is computed once
    when an issue is created and never again.
    """

    parts = [
        datetime.now(UTC).isoformat(),
        repr(random.random()),
        creation_time.isoformat(),
        reporter,
        title,
        desc,
    ]
    return hashlib.sha1("\n".join(parts).encode("utf-8")).hexdigest()
