# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Restore - Load a catalog artifact back into the database.

The artifact is handed to the external restore tool unchanged. A failed
restore is reported, not rolled back: the database is left as the tool
left it.
"""

from datetime import datetime

import structlog

from dbcatalog.backup.manager import not_found, resolve_backup
from dbcatalog.config import CatalogConfig
from dbcatalog.core import CatalogState, ErrorKind, OperationResult, record_failure
from dbcatalog.exceptions import ToolError
from dbcatalog.tools import ToolRequest

logger = structlog.get_logger()


async def restore_backup(
    config: CatalogConfig,
    state: CatalogState,
    filename: str,
) -> OperationResult:
    """
    Restore the database from a catalog backup.

    The tool is only invoked when filename names an existing catalog
    entry.

    Args:
        config: Catalog configuration
        state: Runtime state
        filename: Artifact filename, e.g. backup_01-02-2023_10-00-00.gz

    Returns:
        OperationResult; error is NOT_FOUND or RESTORE_FAILED on failure
    """
    started = datetime.now()

    if await resolve_backup(config, filename) is None:
        return not_found(state, "restore", filename, started)

    request = ToolRequest(
        database=config.database,
        path=filename,
        catalog_dir=config.catalog_dir,
    )

    logger.info("restore_started", filename=filename, database=config.database)

    try:
        await state["tool"].restore(request)
    except ToolError as e:
        logger.error(
            "restore_failed",
            filename=filename,
            database=config.database,
            error=str(e),
        )
        return record_failure(
            state,
            OperationResult.failure(
                "restore",
                ErrorKind.RESTORE_FAILED,
                f"Backup restoration failed: {e.message}",
                filename,
                started,
            ),
        )

    state["total_restored"] += 1

    result = OperationResult.success("restore", filename, started)

    logger.info(
        "backup_restored",
        filename=filename,
        database=config.database,
        duration=result.duration_seconds,
    )

    return result
