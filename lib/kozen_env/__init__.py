"""Cross-process environment variable exposure.

This package makes in-memory configuration visible to other processes and
future shell sessions on Windows, Linux and macOS:
- exposer: EnvExposer — validate, sanitize and persist a key/value mapping
- codec: encode/decode plus cycle-safe clean/clone
- sanitizer: shell-safe keys and bounded, escaped values
- dispatch/backends: one persistence strategy per OS and scope
"""

from .codec import CyclePolicy, clean, clone, decode, encode, walk
from .dispatch import select_backend
from .errors import (
    CommandExecutionError,
    ExposureError,
    InvalidInputError,
    UnsupportedPlatformError,
)
from .exposer import EnvExposer, is_exposable
from .logsink import LoggingSink, StructuredLogger
from .models import (
    CommandResult,
    ExposureReport,
    ExposureRequest,
    PersistenceOutcome,
    PersistenceScope,
    SanitizedVariable,
)
from .profile import detect_os, determine_profile_path
from .protocol import PersistenceBackend
from .runner import CommandRunner, ShellCommandRunner
from .sanitizer import Sanitizer
from .settings import (
    EnvSettingsProvider,
    ExposureSettings,
    SettingsProvider,
    StaticSettingsProvider,
)

__all__ = [
    "CyclePolicy",
    "clean",
    "clone",
    "decode",
    "encode",
    "walk",
    "select_backend",
    "CommandExecutionError",
    "ExposureError",
    "InvalidInputError",
    "UnsupportedPlatformError",
    "EnvExposer",
    "is_exposable",
    "LoggingSink",
    "StructuredLogger",
    "CommandResult",
    "ExposureReport",
    "ExposureRequest",
    "PersistenceOutcome",
    "PersistenceScope",
    "SanitizedVariable",
    "detect_os",
    "determine_profile_path",
    "PersistenceBackend",
    "CommandRunner",
    "ShellCommandRunner",
    "Sanitizer",
    "EnvSettingsProvider",
    "ExposureSettings",
    "SettingsProvider",
    "StaticSettingsProvider",
]
