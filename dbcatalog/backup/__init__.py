# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Engine - Catalog lifecycle and restore operations.
"""

from dbcatalog.backup.manager import (
    list_backups,
    create_backup,
    delete_backup,
    prune_backups,
    get_backup_stats,
)

from dbcatalog.backup.restore import restore_backup

__all__ = [
    # Manager
    "list_backups",
    "create_backup",
    "delete_backup",
    "prune_backups",
    "get_backup_stats",
    # Restore
    "restore_backup",
]
