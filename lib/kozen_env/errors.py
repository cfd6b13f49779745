"""Exception taxonomy for environment exposure.

Three failures surface to callers:
- InvalidInputError: the request or one of its keys is malformed
- UnsupportedPlatformError: no persistence strategy exists for the detected OS
- CommandExecutionError: an external command exited non-zero or could not start

Serialization fallbacks are not errors; the codec logs them and degrades to
the value's plain text form.
"""

from __future__ import annotations

from typing import Any


class ExposureError(Exception):
    """Base class for every failure raised by the exposure engine."""

    error_code = "exposure_failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_error_record(self) -> dict[str, Any]:
        """Convert to the dict shape carried in error log records."""
        return {"error_code": self.error_code, "message": self.message}


class InvalidInputError(ExposureError, ValueError):
    """The exposure request (or a key inside it) cannot be processed."""

    error_code = "invalid_input"

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key

    def to_error_record(self) -> dict[str, Any]:
        record = super().to_error_record()
        if self.key is not None:
            record["key"] = self.key
        return record


class UnsupportedPlatformError(ExposureError):
    """The detected operating system has no persistence strategy."""

    error_code = "unsupported_platform"

    def __init__(self, os_name: str) -> None:
        super().__init__(f"Unsupported operating system: {os_name}")
        self.os_name = os_name

    def to_error_record(self) -> dict[str, Any]:
        return {**super().to_error_record(), "os": self.os_name}


class CommandExecutionError(ExposureError):
    """An external command failed to spawn, timed out, or exited non-zero."""

    error_code = "command_failed"

    def __init__(
        self,
        command: str,
        exit_code: int | None = None,
        stderr: str = "",
        timed_out: bool = False,
    ) -> None:
        if timed_out:
            message = f"Command timed out: {command}"
        elif exit_code is None:
            message = f"Command could not be started: {command}"
        else:
            message = f"Command failed (exit {exit_code}): {command}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.timed_out = timed_out

    def to_error_record(self) -> dict[str, Any]:
        return {
            **super().to_error_record(),
            "command": self.command,
            "exit_code": self.exit_code,
            "timed_out": self.timed_out,
        }
