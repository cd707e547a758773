# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Example nightly backup job.

Creates a new dump, keeps the 14 newest backups and prints the catalog.

Run with:
    BACKUP_DATABASE=monitoring BACKUP_CATALOG_DIR=/var/backups/monitoring \
        python examples/nightly_backup.py

Environment variables:
    BACKUP_DATABASE: Database to dump (required)
    BACKUP_CATALOG_DIR: Backup directory (default: ./storage/backup)
    BACKUP_ENGINE: 'mysql' or 'postgres'
    MYSQL_PWD / PGPASSWORD: Read by the dump tools themselves
"""

import asyncio
import sys

from dbcatalog import (
    create_backup,
    create_config_from_env,
    get_metrics,
    initialize_catalog_state,
    list_backups,
    prune_backups,
)


async def main() -> int:
    config = create_config_from_env()
    state = await initialize_catalog_state(config)

    result = await create_backup(config, state)
    if not result.ok:
        print(f"{result.error.value}: {result.message}", file=sys.stderr)
        return 1

    await prune_backups(config, state, keep_last=14)

    for entry in await list_backups(config):
        print(f"{entry.created_at.isoformat()}  {entry.size_bytes:>12}  {entry.filename}")

    metrics = await get_metrics(config, state)
    print(f"{metrics.backup_count} backups, {metrics.catalog_size_bytes} bytes")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
