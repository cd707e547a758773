# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Catalog Builder - Functional builder pattern for configuration.

This module provides pure functions for building CatalogConfig objects.
Each function takes a config dict and returns a new dict with the
modification applied (immutable updates).
"""

from pathlib import Path
from typing import Any, Callable, Dict

from dbcatalog.config import CatalogConfig, DatabaseEngine
from dbcatalog.errors import explain_invalid_engine_env


# Type alias for builder functions
ConfigDict = Dict[str, Any]
BuilderFunc = Callable[[ConfigDict], ConfigDict]


def create_empty_config() -> ConfigDict:
    """
    Create an initial empty configuration dictionary.

    Returns:
        Dict with default values for all configuration fields
    """
    return {
        "database": "",
        "catalog_dir": Path("./storage/backup"),
        "engine": DatabaseEngine.MYSQL,
        "tool_timeout_seconds": 3600.0,
        "dump_command": None,
        "restore_command": None,
        "shell": "/bin/bash",
    }


def with_database(config: ConfigDict, database: str) -> ConfigDict:
    """
    Set the database the dump/restore tool targets.

    Args:
        config: Current configuration dictionary
        database: Logical database name (e.g., 'monitoring')

    Returns:
        New configuration dictionary with database set
    """
    return {**config, "database": database}


def with_catalog_dir(config: ConfigDict, catalog_dir: Path | str) -> ConfigDict:
    """
    Set the directory holding backup artifacts.

    Args:
        config: Current configuration dictionary
        catalog_dir: Path to the catalog directory

    Returns:
        New configuration dictionary with catalog_dir set
    """
    path = Path(catalog_dir) if isinstance(catalog_dir, str) else catalog_dir
    return {**config, "catalog_dir": path}


def use_engine(config: ConfigDict, engine: DatabaseEngine | str) -> ConfigDict:
    """
    Select the database engine whose default commands are used.

    Args:
        config: Current configuration dictionary
        engine: DatabaseEngine or its string value ('mysql', 'postgres')

    Returns:
        New configuration dictionary with engine set
    """
    if isinstance(engine, str):
        try:
            engine = DatabaseEngine(engine.lower())
        except ValueError as exc:
            from dbcatalog.exceptions import ConfigurationError

            raise ConfigurationError(explain_invalid_engine_env(engine)) from exc
    return {**config, "engine": engine}


def with_tool_timeout(config: ConfigDict, seconds: float) -> ConfigDict:
    """
    Bound how long a single dump or restore may run.

    Args:
        config: Current configuration dictionary
        seconds: Timeout in seconds (must be > 0)

    Returns:
        New configuration dictionary with tool_timeout_seconds set
    """
    return {**config, "tool_timeout_seconds": float(seconds)}


def with_dump_command(config: ConfigDict, template: str) -> ConfigDict:
    """
    Override the dump command template.

    The template is a shell command; {database}, {artifact}, {catalog_dir}
    and {filename} are substituted (shell-quoted) before execution.
    """
    return {**config, "dump_command": template}


def with_restore_command(config: ConfigDict, template: str) -> ConfigDict:
    """Override the restore command template."""
    return {**config, "restore_command": template}


def with_shell(config: ConfigDict, shell: str) -> ConfigDict:
    """Set the shell used to run dump/restore commands."""
    return {**config, "shell": shell}


def build_config(config_dict: ConfigDict) -> CatalogConfig:
    """
    Validate and build an immutable CatalogConfig from a configuration dictionary.

    Args:
        config_dict: Configuration dictionary built using builder functions

    Returns:
        Validated, immutable CatalogConfig instance

    Raises:
        ConfigurationError: If validation fails
    """
    if not config_dict.get("database"):
        from dbcatalog.exceptions import ConfigurationError

        raise ConfigurationError("database is required")

    return CatalogConfig(**config_dict)


def pipe(*funcs: BuilderFunc) -> BuilderFunc:
    """
    Compose multiple builder functions into a single function.

    This allows a more readable pipeline style:

        config = pipe(
            lambda c: with_database(c, "monitoring"),
            lambda c: with_catalog_dir(c, "/var/backups/monitoring"),
        )(create_empty_config())

    Args:
        *funcs: Builder functions to compose

    Returns:
        A single function that applies all functions in sequence
    """

    def composed(config: ConfigDict) -> ConfigDict:
        result = config
        for func in funcs:
            result = func(result)
        return result

    return composed


def build_from_steps(*steps: BuilderFunc) -> CatalogConfig:
    """
    Build config by applying a sequence of builder functions.

    This is a convenience function that combines pipe() and build_config().

    Args:
        *steps: Builder functions to apply in sequence

    Returns:
        Validated, immutable CatalogConfig instance
    """
    return build_config(pipe(*steps)(create_empty_config()))


def create_config(
    database: str,
    *,
    catalog_dir: str | Path | None = None,
    engine: str | DatabaseEngine = "mysql",
    tool_timeout_seconds: float | None = None,
    dump_command: str | None = None,
    restore_command: str | None = None,
    shell: str | None = None,
) -> CatalogConfig:
    """
    Create a catalog configuration from simple parameters.

    This is the recommended user-facing API for creating configurations.

    Args:
        database: Database the dump/restore tool targets (required)
        catalog_dir: Backup directory (default: "./storage/backup")
        engine: "mysql" or "postgres" (default: "mysql")
        tool_timeout_seconds: Timeout for a single tool run (default: 3600)
        dump_command: Custom dump command template (optional)
        restore_command: Custom restore command template (optional)
        shell: Shell used to run commands (default: "/bin/bash")

    Returns:
        Validated, immutable CatalogConfig instance

    Example:
        config = create_config(
            "monitoring",
            catalog_dir="/var/lib/monitoring/backup",
            engine="postgres",
            tool_timeout_seconds=900,
        )
    """
    config_dict = with_database(create_empty_config(), database)
    config_dict = use_engine(config_dict, engine)

    if catalog_dir:
        config_dict = with_catalog_dir(config_dict, catalog_dir)

    if tool_timeout_seconds is not None:
        config_dict = with_tool_timeout(config_dict, tool_timeout_seconds)

    if dump_command:
        config_dict = with_dump_command(config_dict, dump_command)

    if restore_command:
        config_dict = with_restore_command(config_dict, restore_command)

    if shell:
        config_dict = with_shell(config_dict, shell)

    return build_config(config_dict)
