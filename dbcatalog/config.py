# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Catalog Configuration - Immutable configuration data structures.

All configuration is frozen (immutable) after creation so the catalog
directory and tool settings cannot change underneath a running operation.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from dbcatalog.errors import explain_missing_artifact_placeholder


class DatabaseEngine(str, Enum):
    """Database engine served by the default dump/restore commands."""

    MYSQL = "mysql"
    POSTGRES = "postgres"


# Default shell commands per engine: (dump, restore)
DEFAULT_COMMANDS = {
    DatabaseEngine.MYSQL: (
        "mysqldump --single-transaction {database} | gzip -c > {artifact}",
        "gunzip -c {artifact} | mysql {database}",
    ),
    DatabaseEngine.POSTGRES: (
        "pg_dump {database} | gzip -c > {artifact}",
        "gunzip -c {artifact} | psql --quiet -v ON_ERROR_STOP=1 {database}",
    ),
}


def _validate_database_name(database: str) -> bool:
    """Database identifiers must be non-empty and free of control characters."""
    if not database or not database.strip():
        return False
    return all(ch.isprintable() for ch in database)


@dataclass(frozen=True)
class CatalogConfig:
    """
    Immutable configuration for the backup catalog.

    The catalog directory is passed explicitly to every operation through
    this object; nothing is read from process-wide state.
    """

    # Required: logical database the dump/restore tool targets
    database: str

    # Directory holding backup artifacts
    catalog_dir: Path = field(default_factory=lambda: Path("./storage/backup"))

    # Engine used to pick default commands
    engine: DatabaseEngine = DatabaseEngine.MYSQL

    # Upper bound for a single dump/restore invocation
    tool_timeout_seconds: float = 3600.0

    # Optional command template overrides
    dump_command: str | None = None
    restore_command: str | None = None

    # Shell used to run commands (must understand `-o pipefail`)
    shell: str = "/bin/bash"

    def __post_init__(self) -> None:
        """Validate configuration after creation."""
        errors: List[str] = []

        if not _validate_database_name(self.database):
            errors.append(f"Invalid database identifier: {self.database!r}")

        if not isinstance(self.engine, DatabaseEngine):
            errors.append(f"Unsupported engine: {self.engine!r}")

        if self.tool_timeout_seconds <= 0:
            errors.append(
                f"tool_timeout_seconds must be > 0, got {self.tool_timeout_seconds}"
            )

        for setting, template in (
            ("dump_command", self.dump_command),
            ("restore_command", self.restore_command),
        ):
            if template is not None and "{artifact}" not in template:
                errors.append(explain_missing_artifact_placeholder(setting, template))

        if not self.shell:
            errors.append("shell must not be empty")

        if errors:
            from dbcatalog.exceptions import ConfigurationError

            raise ConfigurationError(
                "Configuration validation failed",
                details={"errors": errors},
            )

    @property
    def effective_dump_command(self) -> str:
        """Dump command template after applying engine defaults."""
        return self.dump_command or DEFAULT_COMMANDS[self.engine][0]

    @property
    def effective_restore_command(self) -> str:
        """Restore command template after applying engine defaults."""
        return self.restore_command or DEFAULT_COMMANDS[self.engine][1]

    def with_updates(self, **kwargs) -> "CatalogConfig":
        """
        Create a new config with updated values.

        Since the config is frozen, this creates a new instance.
        """
        from dataclasses import asdict

        current = asdict(self)
        current.update(kwargs)
        return CatalogConfig(**current)
