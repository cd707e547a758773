# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Human-friendly error message helpers for the backup catalog.

These helpers centralize wording for common configuration errors so that
all modules present consistent, actionable messages.
"""


def explain_missing_database_env() -> str:
    """
    Explain that the database environment variable is missing.
    """

    return (
        "Target database is not configured. "
        "Set the BACKUP_DATABASE environment variable or pass database=... to create_config()."
    )


def explain_invalid_timeout_env(value: str | None) -> str:
    """
    Explain that BACKUP_TOOL_TIMEOUT is invalid.
    """

    return (
        f"Invalid BACKUP_TOOL_TIMEOUT value: {value!r}. "
        "It must be a positive number of seconds."
    )


def explain_invalid_engine_env(value: str | None) -> str:
    """
    Explain that BACKUP_ENGINE is invalid.
    """

    return (
        f"Invalid BACKUP_ENGINE value: {value!r}. "
        "Expected 'mysql' or 'postgres'."
    )


def explain_missing_artifact_placeholder(setting: str, template: str) -> str:
    """
    Explain that a custom tool command cannot locate the backup artifact.
    """

    return (
        f"{setting} must reference the backup file through the {{artifact}} placeholder, "
        f"got {template!r}."
    )
