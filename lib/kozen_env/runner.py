"""Command execution boundary.

The engine treats running a command as an opaque capability: run the
command string, return a CommandResult on exit 0, raise
CommandExecutionError otherwise. Output is captured but never parsed.
"""

from __future__ import annotations

import asyncio
import os
import signal
import time
from typing import Protocol, runtime_checkable

from .errors import CommandExecutionError
from .models import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Runs one shell command string."""

    async def run(self, cmd: str) -> CommandResult:
        """Run cmd; raise CommandExecutionError unless it exits with status 0."""
        ...


class ShellCommandRunner:
    """Runs commands through the platform shell with asyncio subprocesses.

    There is no timeout unless one is given; a hung command then hangs the
    caller.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout

    async def run(self, cmd: str) -> CommandResult:
        start = time.monotonic()
        try:
            proc = await asyncio.create_subprocess_shell(
                cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=os.name == "posix",
            )
        except OSError as exc:
            raise CommandExecutionError(cmd, stderr=str(exc)) from exc
        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            await self._terminate(proc)
            raise CommandExecutionError(cmd, timed_out=True) from None
        elapsed_ms = int((time.monotonic() - start) * 1000)
        result = CommandResult(
            stdout=stdout.decode("utf-8", errors="replace") if stdout else "",
            stderr=stderr.decode("utf-8", errors="replace") if stderr else "",
            exit_code=proc.returncode or 0,
            duration_ms=elapsed_ms,
        )
        if result.exit_code != 0:
            raise CommandExecutionError(
                cmd, exit_code=result.exit_code, stderr=result.stderr
            )
        return result

    @staticmethod
    async def _terminate(proc: asyncio.subprocess.Process) -> None:
        """SIGTERM the process group, then SIGKILL after a 2s grace period."""
        if os.name != "posix":
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.communicate()
            return
        try:
            os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
        except (ProcessLookupError, OSError):
            pass
        try:
            await asyncio.wait_for(proc.communicate(), timeout=2.0)
        except asyncio.TimeoutError:
            try:
                os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
            except (ProcessLookupError, OSError):
                pass
            await proc.communicate()
