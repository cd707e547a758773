# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Environment-based configuration helpers.

create_config_from_env() is a small wrapper around create_config() that
reads a handful of well-known environment variables.
"""

from __future__ import annotations

import os

from dbcatalog.builder import create_config
from dbcatalog.config import CatalogConfig, DatabaseEngine
from dbcatalog.errors import (
    explain_invalid_engine_env,
    explain_invalid_timeout_env,
    explain_missing_database_env,
)
from dbcatalog.exceptions import ConfigurationError


def _parse_timeout(value: str | None) -> float | None:
    if not value:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(explain_invalid_timeout_env(value)) from exc
    if seconds <= 0:
        raise ConfigurationError(explain_invalid_timeout_env(value))
    return seconds


def _infer_engine_from_url(url: str) -> DatabaseEngine | None:
    """Best-effort engine inference from DATABASE_URL."""

    lower = url.lower()
    if lower.startswith(("postgres://", "postgresql://")):
        return DatabaseEngine.POSTGRES
    if lower.startswith(("mysql://", "mariadb://")):
        return DatabaseEngine.MYSQL
    return None


def _parse_engine(value: str | None, db_url: str | None) -> DatabaseEngine:
    if value:
        try:
            return DatabaseEngine(value.lower())
        except ValueError as exc:
            raise ConfigurationError(explain_invalid_engine_env(value)) from exc

    if db_url:
        return _infer_engine_from_url(db_url) or DatabaseEngine.MYSQL

    return DatabaseEngine.MYSQL


def create_config_from_env() -> CatalogConfig:
    """
    Create a CatalogConfig from environment variables.

    Required:
        - BACKUP_DATABASE: Database the dump/restore tool targets

    Optional environment variables:
        - BACKUP_CATALOG_DIR: Backup directory (default: ./storage/backup)
        - BACKUP_ENGINE: 'mysql' | 'postgres' (default: inferred from
          DATABASE_URL, else mysql)
        - BACKUP_TOOL_TIMEOUT: Seconds per dump/restore (default: 3600)
        - BACKUP_DUMP_COMMAND: Custom dump command template
        - BACKUP_RESTORE_COMMAND: Custom restore command template
        - BACKUP_SHELL: Shell used to run commands (default: /bin/bash)
    """

    database = os.getenv("BACKUP_DATABASE")
    if not database:
        raise ConfigurationError(explain_missing_database_env())

    engine = _parse_engine(os.getenv("BACKUP_ENGINE"), os.getenv("DATABASE_URL"))

    return create_config(
        database,
        catalog_dir=os.getenv("BACKUP_CATALOG_DIR") or None,
        engine=engine,
        tool_timeout_seconds=_parse_timeout(os.getenv("BACKUP_TOOL_TIMEOUT")),
        dump_command=os.getenv("BACKUP_DUMP_COMMAND") or None,
        restore_command=os.getenv("BACKUP_RESTORE_COMMAND") or None,
        shell=os.getenv("BACKUP_SHELL") or None,
    )
