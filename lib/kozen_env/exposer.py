"""EnvExposer — publishes key/value configuration to the OS environment.

Variables are sanitized, set in the current process, and persisted with one
external command each so that other processes and future shell sessions can
read them. All commands of one call run concurrently; a failure does not
cancel its siblings, and the first failure is raised once every command has
settled.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, find_dotenv

from . import codec
from .dispatch import is_unix, select_backend
from .errors import ExposureError, InvalidInputError
from .logsink import LoggingSink, StructuredLogger
from .models import (
    ExposureReport,
    ExposureRequest,
    PersistenceOutcome,
    PersistenceScope,
    SanitizedVariable,
)
from .profile import detect_os, determine_profile_path, normalize_os
from .protocol import PersistenceBackend
from .runner import CommandRunner, ShellCommandRunner
from .sanitizer import Sanitizer
from .settings import DEFAULT_PREFIX, EnvSettingsProvider, ExposureSettings, SettingsProvider
from .wrappers.logging_wrapper import LoggingRunner

logger = logging.getLogger(__name__)

SRC = "kozen_env:EnvExposer.expose"


def is_exposable(value: Any) -> bool:
    """False for "", 0, NaN, False and None; those entries are never exposed.

    Empty containers are exposable.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == value and value != 0
    return True


class EnvExposer:
    """Exposes variables globally for inter-process communication.

    Args:
        prefix: Namespace for variable names. Defaults to KOZEN_ENV_PREFIX,
            then "KOZEN_PL". An empty string disables namespacing.
        logger: Structured record sink. Defaults to a LoggingSink.
        runner: Command runner. Defaults to a logged ShellCommandRunner.
        settings: Configuration provider, read on every call.
        platform: OS identifier override; detected from sys.platform if unset.
        environ: In-process environment to update; defaults to os.environ.
    """

    def __init__(
        self,
        prefix: str | None = None,
        logger: StructuredLogger | None = None,
        runner: CommandRunner | None = None,
        settings: SettingsProvider | None = None,
        platform: str | None = None,
        environ: MutableMapping[str, str] | None = None,
    ) -> None:
        self._settings = settings or EnvSettingsProvider()
        if prefix is None:
            configured = self._settings.snapshot().prefix
            prefix = configured if configured is not None else DEFAULT_PREFIX
        self._sanitizer = Sanitizer(self._settings, prefix)
        self.logger = logger or LoggingSink()
        self._runner = runner or LoggingRunner(ShellCommandRunner())
        self._platform = platform
        self._environ = environ

    @property
    def prefix(self) -> str | None:
        return self._sanitizer.prefix

    @property
    def environ(self) -> MutableMapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def platform(self) -> str:
        """The OS this exposer targets: 'linux', 'darwin', 'windows' or a raw id."""
        return normalize_os(self._platform) if self._platform else detect_os()

    def backend_for(self, settings: ExposureSettings, os_name: str) -> PersistenceBackend:
        """Select the persistence backend for a settings snapshot."""
        profile_path = None
        if settings.scope is PersistenceScope.GLOBAL and is_unix(os_name):
            profile_path = determine_profile_path(settings.shell, os_name, settings.home)
        return select_backend(os_name, settings.scope, profile_path, self._runner)

    async def expose(
        self,
        content: Any,
        *,
        prefix: str | None = None,
        flow: str | None = None,
    ) -> ExposureReport:
        """Expose every truthy entry of content as an environment variable.

        Raises:
            InvalidInputError: content is not a mapping, or a key cannot be
                turned into a valid variable name.
            UnsupportedPlatformError: the OS has no persistence strategy.
            CommandExecutionError: a persistence command failed; raised after
                all sibling commands have finished.
        """
        request = ExposureRequest.build(content, prefix=prefix, flow=flow)
        settings = self._settings.snapshot()
        current_os = self.platform()

        try:
            variables, skipped = self._prepare(request)
            backend = self.backend_for(settings, current_os) if variables else None
        except ExposureError as exc:
            self._log_failure(request, current_os, exc)
            raise

        report = ExposureReport(
            os=current_os, scope=settings.scope, flow=request.flow, skipped=skipped
        )
        if backend is None:
            return report

        for variable in variables:
            self.environ[variable.key] = variable.value
            self.logger.info(
                {
                    "flow": request.flow,
                    "src": SRC,
                    "message": "exposing environment variables",
                    "data": {
                        "key": variable.key,
                        "value": variable.value,
                        "os": current_os,
                    },
                }
            )

        results = await asyncio.gather(
            *(
                self._persist_one(backend, variable, request.flow, current_os)
                for variable in variables
            ),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            self._log_failure(request, current_os, failures[0])
            raise failures[0]
        report.outcomes = [r for r in results if isinstance(r, PersistenceOutcome)]
        return report

    def _prepare(
        self, request: ExposureRequest
    ) -> tuple[list[SanitizedVariable], list[str]]:
        """Sanitize truthy entries; later keys win over case-insensitive duplicates."""
        by_key: dict[str, SanitizedVariable] = {}
        skipped: list[str] = []
        for raw_key, raw_value in request.content.items():
            if not is_exposable(raw_value):
                skipped.append(raw_key)
                continue
            variable = self._sanitizer.sanitize(raw_key, raw_value, request.prefix)
            normalized = variable.key.upper()
            if normalized in by_key:
                logger.debug("exposer: %s overrides an earlier entry", variable.key)
                del by_key[normalized]
            by_key[normalized] = variable
        return list(by_key.values()), skipped

    async def _persist_one(
        self,
        backend: PersistenceBackend,
        variable: SanitizedVariable,
        flow: str | None,
        current_os: str,
    ) -> PersistenceOutcome:
        try:
            outcome = await backend.persist(variable)
        except Exception as exc:
            self.logger.error(
                {
                    "flow": flow,
                    "src": SRC,
                    "message": "failed to expose environment variable",
                    "data": {
                        "key": variable.key,
                        "backend": backend.name,
                        "os": current_os,
                        "error": str(exc),
                    },
                }
            )
            raise
        self.logger.info(
            {
                "flow": flow,
                "src": SRC,
                "message": "environment variable exposed",
                "data": {
                    "key": variable.key,
                    "backend": backend.name,
                    "os": current_os,
                },
            }
        )
        return outcome

    def _log_failure(
        self, request: ExposureRequest, current_os: str, error: BaseException
    ) -> None:
        data: dict[str, Any] = {
            "os": current_os,
            "content": codec.clean(request.content),
            "error": str(error),
        }
        if isinstance(error, InvalidInputError) and error.key is not None:
            data["key"] = error.key
        self.logger.error(
            {
                "flow": request.flow,
                "src": SRC,
                "message": "Error while exposing environment variables",
                "data": data,
            }
        )

    def load(self, path: str | Path | None = None, override: bool = False) -> bool:
        """Load a .env file into the process environment.

        Without a path, the nearest .env from the working directory upward is
        used. Existing variables are kept unless override is set. Returns True
        if any variable was read.
        """
        dotenv_path = path if path is not None else find_dotenv(usecwd=True)
        if not dotenv_path:
            return False
        values = dotenv_values(dotenv_path)
        environ = self.environ
        for key, value in values.items():
            if value is None:
                continue
            if override or key not in environ:
                environ[key] = value
        logger.debug("exposer: loaded %d variables from %s", len(values), dotenv_path)
        return bool(values)
