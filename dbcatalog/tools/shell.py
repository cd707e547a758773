# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Shell Backup Tool - Runs dump/restore command templates in a subprocess.

Templates are ordinary shell pipelines such as

    mysqldump --single-transaction {database} | gzip -c > {artifact}

Placeholders are shell-quoted before substitution. Commands run under
`<shell> -o pipefail -c`, so a failing dump is not masked by gzip
exiting 0.
"""

import asyncio
import os
import shlex
import signal

import structlog

from dbcatalog.exceptions import ToolError
from dbcatalog.tools import ToolRequest

logger = structlog.get_logger()

# Bytes of stderr kept in error messages
STDERR_TAIL_BYTES = 2000


class ShellBackupTool:
    """BackupTool implementation backed by shell commands."""

    def __init__(
        self,
        dump_command: str,
        restore_command: str,
        timeout_seconds: float = 3600.0,
        shell: str = "/bin/bash",
    ):
        self.dump_command = dump_command
        self.restore_command = restore_command
        self.timeout_seconds = timeout_seconds
        self.shell = shell

    async def dump(self, request: ToolRequest) -> None:
        await self._run("dump", self.dump_command, request)

    async def restore(self, request: ToolRequest) -> None:
        await self._run("restore", self.restore_command, request)

    def render(self, template: str, request: ToolRequest) -> str:
        """Substitute shell-quoted request values into a command template."""
        try:
            return template.format(
                database=shlex.quote(request.database),
                artifact=shlex.quote(str(request.artifact_path)),
                catalog_dir=shlex.quote(str(request.catalog_dir)),
                filename=shlex.quote(request.path),
            )
        except (KeyError, IndexError, ValueError) as e:
            raise ToolError(
                f"Invalid command template: {e}",
                details={"template": template},
            )

    async def _run(self, action: str, template: str, request: ToolRequest) -> None:
        command = self.render(template, request)

        logger.debug(
            "backup_tool_started",
            action=action,
            database=request.database,
            artifact=str(request.artifact_path),
        )

        try:
            process = await asyncio.create_subprocess_exec(
                self.shell,
                "-o",
                "pipefail",
                "-c",
                command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except OSError as e:
            raise ToolError(
                f"Failed to start {action} command: {e}",
                details={"shell": self.shell},
            )

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            await _terminate(process)
            logger.error(
                "backup_tool_timeout",
                action=action,
                timeout_seconds=self.timeout_seconds,
            )
            raise ToolError(
                f"{action} timed out after {self.timeout_seconds}s",
                details={"database": request.database},
            )
        except BaseException:
            # Cancelled: the pipeline must not outlive the caller
            await _terminate(process)
            logger.warning("backup_tool_cancelled", action=action)
            raise

        if process.returncode != 0:
            message = stderr[-STDERR_TAIL_BYTES:].decode(errors="replace").strip()
            raise ToolError(
                f"{action} exited with status {process.returncode}: {message}",
                details={
                    "database": request.database,
                    "returncode": process.returncode,
                },
            )


def _kill_process_group(pid: int) -> None:
    """Kill the shell and every command in its pipeline."""
    try:
        os.killpg(pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


async def _terminate(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        _kill_process_group(process.pid)
    await process.wait()
