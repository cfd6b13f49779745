"""Backend selection: a pure mapping from (OS, scope, profile) to a backend."""

from __future__ import annotations

from pathlib import Path

from .backends.unix import UnixProfileBackend, UnixSessionBackend
from .backends.windows import WindowsRegistryBackend, WindowsSessionBackend
from .errors import UnsupportedPlatformError
from .models import PersistenceScope
from .profile import normalize_os
from .protocol import PersistenceBackend
from .runner import CommandRunner

UNIX_PLATFORMS = frozenset({"linux", "darwin"})


def is_unix(os_name: str) -> bool:
    return normalize_os(os_name) in UNIX_PLATFORMS


def select_backend(
    os_name: str,
    scope: PersistenceScope,
    profile_path: Path | None,
    runner: CommandRunner,
) -> PersistenceBackend:
    """Pick the persistence backend for one exposure call.

    Unix GLOBAL without a resolved profile degrades to a session export.
    Raises UnsupportedPlatformError for anything but Windows, Linux and macOS.
    """
    platform = normalize_os(os_name)
    if platform == "windows":
        if scope is PersistenceScope.GLOBAL:
            return WindowsRegistryBackend(runner)
        return WindowsSessionBackend(runner)
    if platform in UNIX_PLATFORMS:
        if scope is PersistenceScope.GLOBAL and profile_path is not None:
            return UnixProfileBackend(runner, profile_path)
        return UnixSessionBackend(runner)
    raise UnsupportedPlatformError(os_name)
