# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Catalog Manager - Backup lifecycle management.

This module lists the artifacts in the catalog directory, creates new
dumps through the external tool, deletes artifacts and prunes old ones.
The directory itself is the catalog: nothing else is persisted.
"""

import asyncio
import stat
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Tuple

import aiofiles
import aiofiles.os
import structlog

from dbcatalog.config import CatalogConfig
from dbcatalog.core import CatalogState, ErrorKind, OperationResult, record_failure
from dbcatalog.exceptions import InvalidBackupName, ToolError
from dbcatalog.naming import (
    BackupEntry,
    artifact_filename,
    generate_backup_name,
    is_safe_filename,
    parse_backup_filename,
)
from dbcatalog.tools import ToolRequest

logger = structlog.get_logger()


async def _scan_catalog(catalog_dir: Path) -> Tuple[List[BackupEntry], List[str]]:
    """
    Read the catalog directory.

    Returns:
        Tuple of (entries in directory order, names of skipped files)
    """
    try:
        names = await aiofiles.os.listdir(catalog_dir)
    except FileNotFoundError:
        return ([], [])

    entries: List[BackupEntry] = []
    skipped: List[str] = []

    for name in names:
        try:
            file_stat = await aiofiles.os.stat(catalog_dir / name)
        except FileNotFoundError:
            # Removed since listdir
            continue

        if not stat.S_ISREG(file_stat.st_mode):
            continue

        try:
            created_at = parse_backup_filename(name)
        except InvalidBackupName as e:
            skipped.append(name)
            logger.warning(
                "backup_entry_skipped",
                filename=name,
                reason=e.message,
            )
            continue

        entries.append(
            BackupEntry(
                filename=name,
                created_at=created_at,
                size_bytes=file_stat.st_size,
            )
        )

    return (entries, skipped)


async def list_backups(config: CatalogConfig) -> List[BackupEntry]:
    """
    List backups in the catalog, oldest first.

    Entries whose filename does not follow the backup naming convention
    are skipped with a warning.

    Args:
        config: Catalog configuration

    Returns:
        BackupEntry list sorted ascending by created_at
    """
    entries, _ = await _scan_catalog(config.catalog_dir)
    return sorted(entries, key=lambda e: e.created_at)


async def resolve_backup(config: CatalogConfig, filename: str) -> Path | None:
    """
    Resolve a filename to an existing catalog artifact.

    Returns:
        Path of the artifact, or None when no such catalog entry exists
    """
    if not is_safe_filename(filename):
        return None

    try:
        parse_backup_filename(filename)
    except InvalidBackupName:
        return None

    path = config.catalog_dir / filename
    if not await aiofiles.os.path.isfile(path):
        return None
    return path


def not_found(
    state: CatalogState, operation: str, filename: str, started: datetime
) -> OperationResult:
    logger.warning("backup_not_found", operation=operation, filename=filename)
    return record_failure(
        state,
        OperationResult.failure(
            operation,
            ErrorKind.NOT_FOUND,
            f"Backup file not found: {filename}",
            filename,
            started,
        ),
    )


async def _remove_partial_artifact(request: ToolRequest) -> None:
    """Remove whatever a failed dump may have left at the expected path."""
    path = request.artifact_path
    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.warning("backup_cleanup_failed", path=str(path), error=str(e))
        return
    logger.info("backup_cleanup_removed", path=str(path))


async def _has_content(path: Path) -> bool:
    try:
        file_stat = await aiofiles.os.stat(path)
    except FileNotFoundError:
        return False
    return stat.S_ISREG(file_stat.st_mode) and file_stat.st_size > 0


async def create_backup(
    config: CatalogConfig,
    state: CatalogState,
    now: datetime | None = None,
) -> OperationResult:
    """
    Create a new database backup in the catalog.

    The dump is named from the current wall-clock time. The name is
    reserved with an exclusive create before the tool runs, so a second
    Create in the same second fails without touching the first one's
    artifact. If the tool fails or the call is cancelled, the reserved
    path is removed.

    Args:
        config: Catalog configuration
        state: Runtime state
        now: Timestamp to name the backup after (default: current time)

    Returns:
        OperationResult; error is BACKUP_FAILED on failure
    """
    started = datetime.now()
    name = generate_backup_name(now or started)
    filename = artifact_filename(name)
    request = ToolRequest(
        database=config.database,
        path=name,
        catalog_dir=config.catalog_dir,
    )

    # Reserve the name; the tool's `>` redirect truncates the empty file
    try:
        async with aiofiles.open(request.artifact_path, "xb"):
            pass
    except FileExistsError:
        logger.error("backup_failed", filename=filename, error="artifact already exists")
        return record_failure(
            state,
            OperationResult.failure(
                "create",
                ErrorKind.BACKUP_FAILED,
                f"Backup {filename} already exists",
                filename,
                started,
            ),
        )

    try:
        await state["tool"].dump(request)
        if not await _has_content(request.artifact_path):
            raise ToolError(
                "dump reported success but produced no artifact",
                details={"artifact": str(request.artifact_path)},
            )
    except asyncio.CancelledError:
        await _remove_partial_artifact(request)
        logger.warning("backup_cancelled", filename=filename)
        raise
    except ToolError as e:
        await _remove_partial_artifact(request)
        logger.error("backup_failed", filename=filename, error=str(e))
        return record_failure(
            state,
            OperationResult.failure(
                "create",
                ErrorKind.BACKUP_FAILED,
                f"Backup failed: {e.message}",
                filename,
                started,
            ),
        )

    state["total_created"] += 1
    state["last_backup_at"] = parse_backup_filename(filename)

    logger.info("backup_created", filename=filename, database=config.database)

    return OperationResult.success("create", filename, started)


async def delete_backup(
    config: CatalogConfig,
    state: CatalogState,
    filename: str,
) -> OperationResult:
    """
    Delete a backup from the catalog.

    Args:
        config: Catalog configuration
        state: Runtime state
        filename: Artifact filename

    Returns:
        OperationResult; error is NOT_FOUND if no such backup exists
    """
    started = datetime.now()
    path = await resolve_backup(config, filename)
    if path is None:
        return not_found(state, "delete", filename, started)

    try:
        await aiofiles.os.remove(path)
    except FileNotFoundError:
        return not_found(state, "delete", filename, started)

    state["total_deleted"] += 1
    logger.info("backup_deleted", filename=filename)

    return OperationResult.success("delete", filename, started)


async def prune_backups(
    config: CatalogConfig,
    state: CatalogState,
    keep_last: int | None = None,
    max_age_days: int | None = None,
    dry_run: bool = False,
    now: datetime | None = None,
) -> Tuple[int, int]:
    """
    Delete old backups from the catalog.

    Ages are computed from the timestamp in each filename. With both
    limits set, a backup is deleted only if it is older than max_age_days
    and not among the keep_last newest.

    Args:
        config: Catalog configuration
        state: Runtime state
        keep_last: Always keep this many of the newest backups
        max_age_days: Delete backups older than this many days
        dry_run: If True, only report what would be deleted
        now: Reference time for age computation (default: current time)

    Returns:
        Tuple of (files_deleted, bytes_freed)
    """
    if keep_last is not None and keep_last < 0:
        raise ValueError(f"keep_last must be >= 0, got {keep_last}")
    if max_age_days is not None and max_age_days < 0:
        raise ValueError(f"max_age_days must be >= 0, got {max_age_days}")

    entries = await list_backups(config)

    # The newest keep_last entries are never candidates
    cut = len(entries) if keep_last is None else max(len(entries) - keep_last, 0)
    doomed: List[BackupEntry] = entries[:cut]

    if max_age_days is not None:
        cutoff = (now or datetime.now()) - timedelta(days=max_age_days)
        doomed = [e for e in doomed if e.created_at < cutoff]
    elif keep_last is None:
        doomed = []

    files_deleted = 0
    bytes_freed = 0

    for entry in doomed:
        if not dry_run:
            try:
                await aiofiles.os.remove(config.catalog_dir / entry.filename)
            except FileNotFoundError:
                continue
            state["total_deleted"] += 1

        files_deleted += 1
        bytes_freed += entry.size_bytes

        logger.debug(
            "backup_pruned" if not dry_run else "backup_would_prune",
            filename=entry.filename,
        )

    logger.info(
        "backup_pruning_complete",
        files_deleted=files_deleted,
        bytes_freed=bytes_freed,
        dry_run=dry_run,
    )

    return (files_deleted, bytes_freed)


async def get_backup_stats(config: CatalogConfig) -> dict:
    """
    Get statistics about the catalog.

    Args:
        config: Catalog configuration

    Returns:
        Dict with backup statistics
    """
    entries, skipped = await _scan_catalog(config.catalog_dir)
    entries.sort(key=lambda e: e.created_at)

    return {
        "backup_files": len(entries),
        "backup_bytes": sum(e.size_bytes for e in entries),
        "oldest_backup": entries[0].created_at.isoformat() if entries else None,
        "newest_backup": entries[-1].created_at.isoformat() if entries else None,
        "skipped_files": len(skipped),
    }
