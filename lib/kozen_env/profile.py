"""Shell profile discovery for Unix-like systems."""

from __future__ import annotations

import sys
from pathlib import Path

# Checked in order; the first shell name found in $SHELL wins.
PROFILE_BY_SHELL: tuple[tuple[str, str], ...] = (
    ("zsh", ".zshrc"),
    ("bash", ".bashrc"),
    ("fish", ".config/fish/config.fish"),
)

DARWIN_FALLBACK = ".bash_profile"


def normalize_os(name: str) -> str:
    """Map platform spellings to 'linux', 'darwin' or 'windows'.

    Accepts sys.platform values ('linux', 'win32'), platform.system() values
    ('Linux', 'Windows') and 'Windows_NT'. Unknown names are returned as-is.
    """
    lowered = name.strip().lower()
    if lowered.startswith("linux"):
        return "linux"
    if lowered == "darwin":
        return "darwin"
    if lowered.startswith("win"):
        return "windows"
    return name


def detect_os() -> str:
    """Return the current platform: 'linux', 'darwin', 'windows', or the raw value."""
    return normalize_os(sys.platform)


def determine_profile_path(shell: str, os_name: str, home: str | Path) -> Path | None:
    """Return the profile file that should receive persisted exports.

    Returns None when the shell is not recognised and the OS is not macOS;
    callers then fall back to a session-only export.
    """
    for name, relative in PROFILE_BY_SHELL:
        if name in shell:
            return Path(home) / relative
    if normalize_os(os_name) == "darwin":
        return Path(home) / DARWIN_FALLBACK
    return None
