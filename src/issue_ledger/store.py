"""JSON-file persistence for the project and the local user config.

Stored issue descriptions refer to other issues by ``{issue <id>}`` rather
than by display name, so renumbering never breaks a cross-reference. Display
names are assigned again after every load.

There is no locking: two processes saving the same project concurrently will
overwrite each other.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from issue_ledger.errors import StoreError
from issue_ledger.model import Config, Project

logger = logging.getLogger(__name__)


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


class ProjectStore:
    """JSON-file backed store for a single project."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> Project:
        if not self._path.exists():
            raise StoreError(f"no project found at {self._path}; run 'ledger init' first")

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            project = Project.model_validate(raw)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error("Project file is invalid", extra={"path": str(self._path)})
            raise StoreError(f"project file {self._path} is invalid: {e}") from e

        project.assign_issue_names()
        logger.info(
            "Project loaded",
            extra={
                "path": str(self._path),
                "issues": len(project.issues),
                "releases": len(project.releases),
            },
        )
        return project

    def save(self, project: Project) -> None:
        project.ensure_valid()
        project.assign_issue_names()
        for issue in project.issues:
            issue.before_serialize(project)

        _write_json(self._path, project.model_dump(mode="json"))
        logger.info("Project saved", extra={"path": str(self._path)})


class ConfigStore:
    """JSON-file backed store for the local user's identity."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> Config | None:
        if not self._path.exists():
            return None

        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return Config.model_validate(raw)
        except (json.JSONDecodeError, ValidationError):
            logger.warning(
                "Config file is invalid; treating as absent",
                extra={"path": str(self._path)},
            )
            return None

    def save(self, config: Config) -> None:
        _write_json(self._path, config.model_dump(mode="json"))
        logger.info("Config saved", extra={"path": str(self._path)})
