# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Database Backup Catalog - Manage a directory of compressed database dumps.

Lists, creates, restores and deletes backup artifacts named
backup_<DD-MM-YYYY>_<HH-MM-SS>.gz. Dump and restore are delegated to an
external tool; this package only manages the resulting files.
Package name: dbcatalog.
"""

__version__ = "0.1.0"

# Configuration creation (user-facing API)
from dbcatalog.builder import create_config
from dbcatalog.env import create_config_from_env

# Core types and state
from dbcatalog.core import (
    CatalogMetrics,
    CatalogState,
    ErrorKind,
    OperationResult,
    get_metrics,
    initialize_catalog_state,
)

# Catalog operations
from dbcatalog.backup import (
    create_backup,
    delete_backup,
    get_backup_stats,
    list_backups,
    prune_backups,
    restore_backup,
)
from dbcatalog.naming import BackupEntry

__all__ = [
    # Version
    "__version__",
    # Configuration
    "create_config",
    "create_config_from_env",
    # Core
    "CatalogMetrics",
    "CatalogState",
    "ErrorKind",
    "OperationResult",
    "get_metrics",
    "initialize_catalog_state",
    # Operations
    "BackupEntry",
    "list_backups",
    "create_backup",
    "restore_backup",
    "delete_backup",
    "prune_backups",
    "get_backup_stats",
]
