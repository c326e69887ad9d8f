#!/usr/bin/env python3
"""Programmatic use of the ledger model.

This demonstrates using the components directly:

* build a project with a component and a release
* walk an issue through its lifecycle
* release and persist to a JSON file
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from issue_ledger.builders import create_issue, create_project, create_release
from issue_ledger.logging import configure_logging
from issue_ledger.model import Config
from issue_ledger.store import ProjectStore


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build and release a small project.")
    parser.add_argument("--path", default="ledger-example.json", help="Where to write the project")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging("INFO")

    config = Config(name="Example User", email="user@example.com")
    actor = config.user()

    project = create_project("core")
    release = create_release(project, "1.0")

    crash = create_issue(project, config, title="Crash on start", type="bugfix")
    docs = create_issue(
        project, config, title="Document startup", desc=f"Follows {crash.name}.", type="feature"
    )

    crash.start_work(actor, "reproduced")
    crash.assign_to_release(release, actor, "")
    crash.close("fixed", actor, "patched")
    release.release(project, actor, "first cut")

    ProjectStore(Path(args.path)).save(project)
    print(docs.interpolated_desc(project.issues))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
