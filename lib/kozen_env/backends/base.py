"""Shared plumbing for backends that persist with one shell command."""

from __future__ import annotations

from ..models import PersistenceOutcome, SanitizedVariable
from ..runner import CommandRunner


class CommandBackend:
    """Renders a variable into a command and runs it once."""

    backend_name = "command"

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner

    @property
    def name(self) -> str:
        return self.backend_name

    def render(self, variable: SanitizedVariable) -> str:
        raise NotImplementedError

    async def persist(self, variable: SanitizedVariable) -> PersistenceOutcome:
        command = self.render(variable)
        result = await self._runner.run(command)
        return PersistenceOutcome(
            key=variable.key,
            backend=self.name,
            command=command,
            exit_code=result.exit_code,
            duration_ms=result.duration_ms,
        )
