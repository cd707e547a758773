# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
External Tool Layer - Dump/restore collaborators used by the catalog.

The catalog never touches database bytes itself. It hands a ToolRequest
to a BackupTool and only looks at whether the call succeeded.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from dbcatalog.naming import artifact_filename
from dbcatalog.config import CatalogConfig
from dbcatalog.exceptions import ToolError


@dataclass(frozen=True)
class ToolRequest:
    """Parameters passed to the external dump/restore tool."""

    database: str
    path: str  # filename relative to catalog_dir
    catalog_dir: Path
    location: str = "local"
    compression: str = "gzip"

    @property
    def artifact_path(self) -> Path:
        """File the tool writes (dump) or reads (restore)."""
        return self.catalog_dir / artifact_filename(self.path)


class BackupTool(Protocol):
    """Protocol for the external dump/restore collaborator."""

    async def dump(self, request: ToolRequest) -> None:
        """
        Write a compressed dump of request.database to request.artifact_path.

        Raises:
            ToolError: If the dump fails
        """
        ...

    async def restore(self, request: ToolRequest) -> None:
        """
        Load request.artifact_path into request.database.

        Raises:
            ToolError: If the restore fails
        """
        ...


def create_backup_tool(config: CatalogConfig) -> BackupTool:
    """
    Create the default tool for a configuration.

    Args:
        config: Catalog configuration

    Returns:
        A ShellBackupTool running the configured (or engine default) commands
    """
    from dbcatalog.tools.shell import ShellBackupTool

    return ShellBackupTool(
        dump_command=config.effective_dump_command,
        restore_command=config.effective_restore_command,
        timeout_seconds=config.tool_timeout_seconds,
        shell=config.shell,
    )


__all__ = [
    "BackupTool",
    "ToolError",
    "ToolRequest",
    "create_backup_tool",
]
