# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Catalog Exceptions - Custom exceptions for the dbcatalog package.
"""


class DBCatalogError(Exception):
    """Base exception for all dbcatalog errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DBCatalogError):
    """Raised when configuration is invalid."""

    pass


class CatalogError(DBCatalogError):
    """Raised when the catalog directory cannot be read or prepared."""

    pass


class InvalidBackupName(DBCatalogError):
    """Raised when a filename does not follow the backup naming convention."""

    pass


class ToolError(DBCatalogError):
    """Raised when the external dump/restore tool fails."""

    pass
