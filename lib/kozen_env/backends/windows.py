"""Windows backends: ``setx`` for persistent user variables, ``set`` for the session."""

from __future__ import annotations

from ..models import SanitizedVariable
from .base import CommandBackend


def quote_windows(value: str) -> str:
    """Wrap a value in double quotes for cmd.exe.

    Trailing backslashes are doubled so they cannot escape the closing quote.
    """
    stripped = value.rstrip("\\")
    trailing = len(value) - len(stripped)
    tail = "\\" * (trailing * 2)
    return f'"{stripped}{tail}"'


class WindowsRegistryBackend(CommandBackend):
    """Persists a user variable in the registry; visible to new processes."""

    backend_name = "windows-registry"

    def render(self, variable: SanitizedVariable) -> str:
        return f"setx {variable.key} {quote_windows(variable.value)}"


class WindowsSessionBackend(CommandBackend):
    """Sets a variable for the current cmd.exe session only."""

    backend_name = "windows-session"

    def render(self, variable: SanitizedVariable) -> str:
        return f"set {variable.key}={quote_windows(variable.value)}"
