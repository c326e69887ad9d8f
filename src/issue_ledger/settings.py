"""Configuration for the issue ledger CLI.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

The user's identity is normally read from the ledger config file. The
`ISSUE_LEDGER_USER_NAME` / `ISSUE_LEDGER_USER_EMAIL` variables provide the
defaults used when that file is created.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Settings for the ledger.

    Environment variables:
    - LOG_LEVEL                  (optional)
    - ISSUE_LEDGER_PROJECT_FILE  (optional)
    - ISSUE_LEDGER_CONFIG_FILE   (optional)
    - ISSUE_LEDGER_USER_NAME     (optional)
    - ISSUE_LEDGER_USER_EMAIL    (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `LedgerSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    project_file: Path = Field(
        default=Path(".ledger/project.json"),
        validation_alias="ISSUE_LEDGER_PROJECT_FILE",
        description="Path where the project (components, releases, issues) is persisted",
    )

    config_file: Path = Field(
        default=Path(".ledger/config.json"),
        validation_alias="ISSUE_LEDGER_CONFIG_FILE",
        description="Path where the local user's name and email are persisted",
    )

    user_name: str | None = Field(
        default=None,
        validation_alias="ISSUE_LEDGER_USER_NAME",
        description="Default name recorded as the actor for changes",
    )
    user_email: str | None = Field(
        default=None,
        validation_alias="ISSUE_LEDGER_USER_EMAIL",
        description="Default email recorded as the actor for changes",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )
