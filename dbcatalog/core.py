# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Catalog Core - Results, runtime state and metrics.

Catalog operations report their outcome as an OperationResult instead of
raising: callers branch on `ok` and `error`.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TypedDict

import aiofiles.os
import structlog

from dbcatalog.config import CatalogConfig
from dbcatalog.exceptions import CatalogError
from dbcatalog.tools import BackupTool, create_backup_tool

logger = structlog.get_logger()


class ErrorKind(str, Enum):
    """Failure kinds a catalog operation can report."""

    NOT_FOUND = "not_found"
    BACKUP_FAILED = "backup_failed"
    RESTORE_FAILED = "restore_failed"


@dataclass
class OperationResult:
    """Result of a create, restore or delete operation."""

    operation: str
    ok: bool
    filename: str | None = None
    error: ErrorKind | None = None
    message: str | None = None
    duration_seconds: float = 0.0

    @classmethod
    def success(cls, operation: str, filename: str, started: datetime) -> "OperationResult":
        return cls(
            operation=operation,
            ok=True,
            filename=filename,
            duration_seconds=(datetime.now() - started).total_seconds(),
        )

    @classmethod
    def failure(
        cls,
        operation: str,
        error: ErrorKind,
        message: str,
        filename: str | None,
        started: datetime,
    ) -> "OperationResult":
        return cls(
            operation=operation,
            ok=False,
            filename=filename,
            error=error,
            message=message,
            duration_seconds=(datetime.now() - started).total_seconds(),
        )


@dataclass
class CatalogMetrics:
    """Metrics for catalog operations."""

    total_created: int
    total_restored: int
    total_deleted: int
    total_failed: int
    last_backup_at: datetime | None
    last_error: str | None
    backup_count: int
    catalog_size_bytes: int


class CatalogState(TypedDict):
    """Runtime state for catalog operations."""

    catalog_dir: Path
    tool: BackupTool
    last_backup_at: datetime | None
    total_created: int
    total_restored: int
    total_deleted: int
    total_failed: int
    last_error: str | None


async def initialize_catalog_state(
    config: CatalogConfig,
    tool: BackupTool | None = None,
) -> CatalogState:
    """
    Initialize runtime state for catalog operations.

    Creates the catalog directory if needed and builds the default
    shell tool unless one is supplied.

    Args:
        config: Catalog configuration
        tool: Optional dump/restore collaborator

    Returns:
        Initialized CatalogState dictionary

    Raises:
        CatalogError: If the catalog directory cannot be created
    """
    try:
        await aiofiles.os.makedirs(config.catalog_dir, exist_ok=True)
    except OSError as e:
        raise CatalogError(
            f"Cannot prepare catalog directory: {e}",
            details={"catalog_dir": str(config.catalog_dir)},
        )

    logger.info(
        "catalog_initialized",
        catalog_dir=str(config.catalog_dir),
        database=config.database,
        engine=config.engine.value,
    )

    return CatalogState(
        catalog_dir=config.catalog_dir,
        tool=tool if tool is not None else create_backup_tool(config),
        last_backup_at=None,
        total_created=0,
        total_restored=0,
        total_deleted=0,
        total_failed=0,
        last_error=None,
    )


def record_failure(state: CatalogState, result: OperationResult) -> OperationResult:
    """Count a failed result against the state and return it."""
    state["total_failed"] += 1
    state["last_error"] = result.message
    return result


async def get_metrics(config: CatalogConfig, state: CatalogState) -> CatalogMetrics:
    """
    Get catalog metrics.

    Args:
        config: Catalog configuration
        state: Runtime state

    Returns:
        CatalogMetrics with counters and current catalog size
    """
    from dbcatalog.backup.manager import list_backups

    entries = await list_backups(config)

    return CatalogMetrics(
        total_created=state["total_created"],
        total_restored=state["total_restored"],
        total_deleted=state["total_deleted"],
        total_failed=state["total_failed"],
        last_backup_at=state["last_backup_at"],
        last_error=state["last_error"],
        backup_count=len(entries),
        catalog_size_bytes=sum(e.size_bytes for e in entries),
    )
