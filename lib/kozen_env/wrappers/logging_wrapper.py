"""LoggingRunner — composable command tracing for any CommandRunner."""

from __future__ import annotations

import logging
import time

from ..errors import CommandExecutionError
from ..models import CommandResult
from ..runner import CommandRunner


class LoggingRunner:
    """Logs every command passing through to an inner runner.

    Commands are logged before they run and again with their exit status.
    Failures are logged and re-raised unchanged.
    """

    def __init__(self, inner: CommandRunner, logger_name: str = "kozen_env.runner") -> None:
        self._inner = inner
        self._logger = logging.getLogger(logger_name)

    async def run(self, cmd: str) -> CommandResult:
        self._logger.debug("exec %r", cmd)
        t0 = time.monotonic()
        try:
            result = await self._inner.run(cmd)
        except CommandExecutionError as exc:
            duration_ms = int((time.monotonic() - t0) * 1000)
            self._logger.warning(
                "exec %r → exit %s in %dms: %s",
                cmd,
                exc.exit_code,
                duration_ms,
                exc.stderr.strip() or exc.message,
            )
            raise
        duration_ms = int((time.monotonic() - t0) * 1000)
        self._logger.info("exec %r → exit %d in %dms", cmd, result.exit_code, duration_ms)
        return result
