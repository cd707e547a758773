# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Integration Tests for dbcatalog.

These tests verify the integration between components:
- Shell tool execution (real bash + gzip)
- Catalog operations driven through the shell tool
- Pruning and statistics
- Runtime state and metrics
"""

import asyncio
import gzip
import shutil
from datetime import datetime
from pathlib import Path

import pytest

from dbcatalog.backup import (
    create_backup,
    get_backup_stats,
    list_backups,
    prune_backups,
    restore_backup,
)
from dbcatalog.config import CatalogConfig, DatabaseEngine
from dbcatalog.core import ErrorKind, get_metrics, initialize_catalog_state
from dbcatalog.exceptions import ToolError
from dbcatalog.tools import ToolRequest, create_backup_tool
from dbcatalog.tools.shell import ShellBackupTool

requires_shell = pytest.mark.skipif(
    shutil.which("bash") is None or shutil.which("gzip") is None,
    reason="bash and gzip are required",
)


# ============================================================================
# Shell Tool Tests
# ============================================================================

def test_default_tool_uses_engine_commands(test_config: CatalogConfig):
    tool = create_backup_tool(test_config)

    assert isinstance(tool, ShellBackupTool)
    assert tool.dump_command.startswith("mysqldump")
    assert tool.restore_command.endswith("mysql {database}")
    assert tool.timeout_seconds == 30

    pg_tool = create_backup_tool(test_config.with_updates(engine=DatabaseEngine.POSTGRES))
    assert pg_tool.dump_command.startswith("pg_dump")
    # psql exits 0 on script errors unless told to stop
    assert "-v ON_ERROR_STOP=1" in pg_tool.restore_command


@requires_shell
@pytest.mark.asyncio
async def test_failing_restore_pipeline_is_restore_failed(
    test_config: CatalogConfig, make_backup
):
    """A non-zero exit at the end of the restore pipeline is reported."""
    config = test_config.with_updates(
        restore_command="gunzip -c {artifact} 2>/dev/null | (cat > /dev/null; exit 3)",
    )
    state = await initialize_catalog_state(config)
    make_backup("backup_01-02-2023_10-00-00.gz", 10)

    result = await restore_backup(config, state, "backup_01-02-2023_10-00-00.gz")

    assert result.ok is False
    assert result.error == ErrorKind.RESTORE_FAILED
    assert "status 3" in result.message


def test_render_quotes_placeholders(catalog_dir: Path):
    tool = ShellBackupTool(
        dump_command="dump {database} > {artifact}",
        restore_command="load {artifact}",
    )
    request = ToolRequest(
        database="prod; rm -rf /",
        path="backup_01-02-2023_10-00-00",
        catalog_dir=catalog_dir,
    )

    command = tool.render(tool.dump_command, request)

    assert "'prod; rm -rf /'" in command
    assert command.endswith("backup_01-02-2023_10-00-00.gz")


def test_render_rejects_unknown_placeholder(catalog_dir: Path):
    tool = ShellBackupTool(dump_command="dump {nope}", restore_command="x")
    request = ToolRequest(database="db", path="b", catalog_dir=catalog_dir)

    with pytest.raises(ToolError):
        tool.render(tool.dump_command, request)


@requires_shell
@pytest.mark.asyncio
async def test_shell_dump_writes_artifact(catalog_dir: Path):
    tool = ShellBackupTool(
        dump_command="printf 'CREATE TABLE %s;' {database} | gzip -c > {artifact}",
        restore_command="gunzip -c {artifact} > /dev/null",
    )
    request = ToolRequest(
        database="monitoring",
        path="backup_01-02-2023_10-00-00",
        catalog_dir=catalog_dir,
    )

    await tool.dump(request)

    with gzip.open(request.artifact_path, "rb") as f:
        assert f.read() == b"CREATE TABLE monitoring;"


@requires_shell
@pytest.mark.asyncio
async def test_shell_failure_raises_with_stderr(catalog_dir: Path):
    tool = ShellBackupTool(
        dump_command="echo 'access denied' >&2; exit 3 # {artifact}",
        restore_command="true {artifact}",
    )
    request = ToolRequest(database="db", path="b", catalog_dir=catalog_dir)

    with pytest.raises(ToolError) as exc_info:
        await tool.dump(request)

    assert "status 3" in exc_info.value.message
    assert "access denied" in exc_info.value.message


@requires_shell
@pytest.mark.asyncio
async def test_shell_pipeline_failure_is_not_masked(catalog_dir: Path):
    """A failing dump piped into gzip must still fail (pipefail)."""
    tool = ShellBackupTool(
        dump_command="false | gzip -c > {artifact}",
        restore_command="true {artifact}",
    )
    request = ToolRequest(database="db", path="b", catalog_dir=catalog_dir)

    with pytest.raises(ToolError):
        await tool.dump(request)


@requires_shell
@pytest.mark.asyncio
async def test_shell_timeout_kills_command(catalog_dir: Path):
    tool = ShellBackupTool(
        dump_command="sleep 10 # {artifact}",
        restore_command="true {artifact}",
        timeout_seconds=0.2,
    )
    request = ToolRequest(database="db", path="b", catalog_dir=catalog_dir)

    started = datetime.now()
    with pytest.raises(ToolError) as exc_info:
        await tool.dump(request)

    assert "timed out" in exc_info.value.message
    assert (datetime.now() - started).total_seconds() < 5


@pytest.mark.asyncio
async def test_missing_shell_raises_tool_error(catalog_dir: Path):
    tool = ShellBackupTool(
        dump_command="true {artifact}",
        restore_command="true {artifact}",
        shell=str(catalog_dir / "no-such-shell"),
    )
    request = ToolRequest(database="db", path="b", catalog_dir=catalog_dir)

    with pytest.raises(ToolError):
        await tool.restore(request)


# ============================================================================
# Catalog Through Shell Tool
# ============================================================================

@requires_shell
@pytest.mark.asyncio
async def test_create_and_restore_through_shell(test_config: CatalogConfig, temp_dir: Path):
    restored = temp_dir / "restored.sql"
    config = test_config.with_updates(
        dump_command="printf 'INSERT 1;' | gzip -c > {artifact}",
        restore_command="gunzip -c {artifact} > " + str(restored),
    )
    state = await initialize_catalog_state(config)

    created = await create_backup(config, state)
    assert created.ok is True

    entries = await list_backups(config)
    assert [e.filename for e in entries] == [created.filename]
    assert entries[0].size_bytes > 0

    result = await restore_backup(config, state, created.filename)
    assert result.ok is True
    assert restored.read_bytes() == b"INSERT 1;"


@requires_shell
@pytest.mark.asyncio
async def test_failed_shell_dump_leaves_no_artifact(test_config: CatalogConfig, catalog_dir: Path):
    config = test_config.with_updates(
        dump_command="printf 'partial' | gzip -c > {artifact}; exit 1",
    )
    state = await initialize_catalog_state(config)

    result = await create_backup(config, state)

    assert result.error == ErrorKind.BACKUP_FAILED
    assert list(catalog_dir.iterdir()) == []


@requires_shell
@pytest.mark.asyncio
async def test_cancelled_shell_dump_kills_pipeline(test_config: CatalogConfig, catalog_dir: Path):
    """
    Cancelling a create kills the dump's process group: the partial
    artifact is removed and later pipeline steps never run.
    """
    marker = catalog_dir / "late.txt"
    config = test_config.with_updates(
        dump_command=(
            "printf partial | gzip -c > {artifact}; sleep 1; printf late > "
            + str(marker)
        ),
    )
    state = await initialize_catalog_state(config)

    task = asyncio.create_task(create_backup(config, state))
    await asyncio.sleep(0.3)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    await asyncio.sleep(1.5)

    assert not marker.exists()
    assert list(catalog_dir.iterdir()) == []
    assert await list_backups(config) == []


# ============================================================================
# Pruning and Statistics
# ============================================================================

@pytest.fixture
def five_backups(make_backup):
    names = [
        "backup_01-01-2023_00-00-00.gz",
        "backup_01-02-2023_00-00-00.gz",
        "backup_01-03-2023_00-00-00.gz",
        "backup_01-04-2023_00-00-00.gz",
        "backup_01-05-2023_00-00-00.gz",
    ]
    for size, name in enumerate(names, start=1):
        make_backup(name, size * 100)
    return names


@pytest.mark.asyncio
async def test_prune_keep_last(test_config, test_state, five_backups):
    deleted, freed = await prune_backups(test_config, test_state, keep_last=2)

    assert (deleted, freed) == (3, 600)
    remaining = [e.filename for e in await list_backups(test_config)]
    assert remaining == five_backups[-2:]


@pytest.mark.asyncio
async def test_prune_by_age_respects_keep_last(test_config, test_state, five_backups):
    now = datetime(2023, 5, 1)

    deleted, _ = await prune_backups(
        test_config, test_state, keep_last=4, max_age_days=45, now=now
    )

    # Only January is both older than 45 days and outside the newest four
    assert deleted == 1
    remaining = [e.filename for e in await list_backups(test_config)]
    assert remaining == five_backups[1:]


@pytest.mark.asyncio
async def test_prune_dry_run_deletes_nothing(test_config, test_state, five_backups, listing, catalog_dir):
    before = listing(catalog_dir)

    deleted, freed = await prune_backups(
        test_config, test_state, max_age_days=30, dry_run=True, now=datetime(2023, 5, 1)
    )

    assert deleted == 3
    assert freed == 600
    assert listing(catalog_dir) == before
    assert test_state["total_deleted"] == 0


@pytest.mark.asyncio
async def test_prune_without_limits_is_noop(test_config, test_state, five_backups):
    assert await prune_backups(test_config, test_state) == (0, 0)


@pytest.mark.asyncio
@pytest.mark.parametrize("limits", [{"keep_last": -1}, {"max_age_days": -1}])
async def test_prune_rejects_negative_limits(
    test_config, test_state, five_backups, listing, catalog_dir, limits
):
    before = listing(catalog_dir)

    with pytest.raises(ValueError):
        await prune_backups(test_config, test_state, now=datetime(2023, 5, 1), **limits)

    assert listing(catalog_dir) == before


@pytest.mark.asyncio
async def test_backup_stats(test_config, five_backups, make_backup):
    make_backup("README", 1)

    stats = await get_backup_stats(test_config)

    assert stats == {
        "backup_files": 5,
        "backup_bytes": 1500,
        "oldest_backup": "2023-01-01T00:00:00",
        "newest_backup": "2023-05-01T00:00:00",
        "skipped_files": 1,
    }


# ============================================================================
# State and Metrics
# ============================================================================

@pytest.mark.asyncio
async def test_initialize_creates_catalog_dir(test_config, temp_dir, fake_tool):
    config = test_config.with_updates(catalog_dir=temp_dir / "nested" / "backup")

    state = await initialize_catalog_state(config, tool=fake_tool)

    assert config.catalog_dir.is_dir()
    assert state["catalog_dir"] == config.catalog_dir
    assert state["tool"] is fake_tool
    assert state["total_created"] == 0


@pytest.mark.asyncio
async def test_metrics_track_operations(test_config, test_state, make_backup):
    make_backup("backup_01-02-2023_10-00-00.gz", 500)

    await create_backup(test_config, test_state, now=datetime(2023, 2, 2, 9, 0, 0))
    await restore_backup(test_config, test_state, "backup_09-09-2023_00-00-00.gz")

    metrics = await get_metrics(test_config, test_state)

    assert metrics.total_created == 1
    assert metrics.total_failed == 1
    assert metrics.last_backup_at == datetime(2023, 2, 2, 9, 0, 0)
    assert metrics.last_error == "Backup file not found: backup_09-09-2023_00-00-00.gz"
    assert metrics.backup_count == 2
    assert metrics.catalog_size_bytes == 500 + 402
