# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Test fixtures for dbcatalog tests.

Provides a temporary catalog, test configuration and a recording fake
dump/restore tool.
"""

import asyncio
import tempfile
from pathlib import Path
from typing import Callable, Generator, List

import pytest
import pytest_asyncio

from dbcatalog.exceptions import ToolError
from dbcatalog.tools import ToolRequest


class FakeBackupTool:
    """In-process BackupTool that records every call."""

    def __init__(
        self,
        fail_dump: bool = False,
        fail_restore: bool = False,
        write_partial: bool = False,
        write_artifact: bool = True,
        delay: float = 0.0,
    ):
        self.fail_dump = fail_dump
        self.fail_restore = fail_restore
        self.write_partial = write_partial
        self.write_artifact = write_artifact
        self.delay = delay
        self.dump_calls: List[ToolRequest] = []
        self.restore_calls: List[ToolRequest] = []

    async def dump(self, request: ToolRequest) -> None:
        self.dump_calls.append(request)
        if self.write_partial:
            request.artifact_path.write_bytes(b"\x1f\x8b partial")
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_dump:
            raise ToolError("mysqldump: Got error: 1045: Access denied")
        if self.write_artifact:
            request.artifact_path.write_bytes(b"\x1f\x8b" + b"dump" * 100)

    async def restore(self, request: ToolRequest) -> None:
        self.restore_calls.append(request)
        if self.fail_restore:
            raise ToolError("ERROR 1064 (42000) at line 12: syntax error")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def catalog_dir(temp_dir: Path) -> Path:
    path = temp_dir / "backup"
    path.mkdir()
    return path


@pytest.fixture
def test_config(catalog_dir: Path):
    """Create a test configuration."""
    from dbcatalog.config import CatalogConfig, DatabaseEngine

    return CatalogConfig(
        database="monitoring",
        catalog_dir=catalog_dir,
        engine=DatabaseEngine.MYSQL,
        tool_timeout_seconds=30,
    )


@pytest.fixture
def fake_tool() -> FakeBackupTool:
    return FakeBackupTool()


@pytest_asyncio.fixture
async def test_state(test_config, fake_tool):
    """Create initialized catalog state backed by the fake tool."""
    from dbcatalog.core import initialize_catalog_state

    return await initialize_catalog_state(test_config, tool=fake_tool)


@pytest.fixture
def make_backup(catalog_dir: Path) -> Callable[[str, int], Path]:
    """Place an artifact of the given size in the catalog."""

    def _make(filename: str, size: int) -> Path:
        path = catalog_dir / filename
        path.write_bytes(b"x" * size)
        return path

    return _make


@pytest.fixture
def tool_factory() -> Callable[..., FakeBackupTool]:
    return FakeBackupTool


def catalog_listing(catalog_dir: Path) -> List[str]:
    return sorted(p.name for p in catalog_dir.iterdir())


@pytest.fixture
def listing() -> Callable[[Path], List[str]]:
    return catalog_listing
