"""Unix backends: append to the shell profile, or export for the session."""

from __future__ import annotations

import shlex
from pathlib import Path

from ..models import SanitizedVariable
from ..runner import CommandRunner
from .base import CommandBackend

# Characters still special inside a double-quoted shell word.
_DOUBLE_QUOTE_SPECIAL = ("\\", "$", "`", '"')


def quote_double(value: str) -> str:
    """Wrap a value in double quotes, escaping expansion characters."""
    for char in _DOUBLE_QUOTE_SPECIAL:
        value = value.replace(char, "\\" + char)
    return f'"{value}"'


def export_line(variable: SanitizedVariable) -> str:
    """The ``export KEY="value"`` line written to profiles and run in sessions."""
    return f"export {variable.key}={quote_double(variable.value)}"


class UnixProfileBackend(CommandBackend):
    """Appends an export line to the user's shell profile.

    The variable shows up in every shell session started afterwards.
    Concurrent appends to the same profile are not serialized.
    """

    backend_name = "unix-profile"

    def __init__(self, runner: CommandRunner, profile_path: str | Path) -> None:
        super().__init__(runner)
        self._profile_path = Path(profile_path)

    @property
    def profile_path(self) -> Path:
        return self._profile_path

    def render(self, variable: SanitizedVariable) -> str:
        line = shlex.quote(export_line(variable))
        return f"printf '%s\\n' {line} >> {shlex.quote(str(self._profile_path))}"


class UnixSessionBackend(CommandBackend):
    """Runs ``export`` in a subshell; only that shell's children see it."""

    backend_name = "unix-session"

    def render(self, variable: SanitizedVariable) -> str:
        return export_line(variable)
