"""PersistenceBackend protocol — the uniform interface for every OS strategy.

Each backend (Windows registry/session, Unix profile/session) persists one
sanitized variable with a single external command. The exposer depends only
on this protocol; dispatch.select_backend picks the variant.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import PersistenceOutcome, SanitizedVariable


@runtime_checkable
class PersistenceBackend(Protocol):
    """Uniform interface for persisting a variable into the OS environment."""

    @property
    def name(self) -> str:
        """Variant identifier, e.g. 'windows-registry' or 'unix-profile'."""
        ...

    def render(self, variable: SanitizedVariable) -> str:
        """Return the command that would persist the variable."""
        ...

    async def persist(self, variable: SanitizedVariable) -> PersistenceOutcome:
        """Persist the variable. Raises CommandExecutionError on failure."""
        ...
