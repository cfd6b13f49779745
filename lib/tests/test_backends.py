"""Tests for persistence backends and backend selection."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from kozen_env.backends.unix import (
    UnixProfileBackend,
    UnixSessionBackend,
    export_line,
    quote_double,
)
from kozen_env.backends.windows import (
    WindowsRegistryBackend,
    WindowsSessionBackend,
    quote_windows,
)
from kozen_env.dispatch import select_backend
from kozen_env.errors import CommandExecutionError, UnsupportedPlatformError
from kozen_env.models import CommandResult, PersistenceScope, SanitizedVariable
from kozen_env.protocol import PersistenceBackend
from kozen_env.runner import ShellCommandRunner


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeRunner:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[str] = []
        self._fail = fail

    async def run(self, cmd: str) -> CommandResult:
        self.calls.append(cmd)
        if self._fail:
            raise CommandExecutionError(cmd, exit_code=1, stderr="boom")
        return CommandResult(exit_code=0, duration_ms=5)


def var(value: str, key: str = "APP_X") -> SanitizedVariable:
    return SanitizedVariable(key=key, value=value)


posix_only = pytest.mark.skipif(
    sys.platform.startswith("win"), reason="uses POSIX shell syntax"
)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------


class TestSelectBackend:
    def test_windows_global(self):
        backend = select_backend("windows", PersistenceScope.GLOBAL, None, FakeRunner())
        assert isinstance(backend, WindowsRegistryBackend)

    def test_windows_local(self):
        backend = select_backend("Windows_NT", PersistenceScope.LOCAL, None, FakeRunner())
        assert isinstance(backend, WindowsSessionBackend)

    def test_unix_global_with_profile(self):
        backend = select_backend(
            "linux", PersistenceScope.GLOBAL, Path("/h/.bashrc"), FakeRunner()
        )
        assert isinstance(backend, UnixProfileBackend)
        assert backend.profile_path == Path("/h/.bashrc")

    def test_unix_global_without_profile_degrades(self):
        backend = select_backend("linux", PersistenceScope.GLOBAL, None, FakeRunner())
        assert isinstance(backend, UnixSessionBackend)

    def test_unix_local_ignores_profile(self):
        backend = select_backend(
            "darwin", PersistenceScope.LOCAL, Path("/h/.zshrc"), FakeRunner()
        )
        assert isinstance(backend, UnixSessionBackend)

    def test_unsupported_platform(self):
        runner = FakeRunner()
        with pytest.raises(UnsupportedPlatformError, match="sunos5"):
            select_backend("sunos5", PersistenceScope.GLOBAL, None, runner)
        assert runner.calls == []

    @pytest.mark.parametrize(
        "backend",
        [
            WindowsRegistryBackend(FakeRunner()),
            WindowsSessionBackend(FakeRunner()),
            UnixProfileBackend(FakeRunner(), "/h/.bashrc"),
            UnixSessionBackend(FakeRunner()),
        ],
    )
    def test_satisfies_protocol(self, backend):
        assert isinstance(backend, PersistenceBackend)


# ---------------------------------------------------------------------------
# Windows rendering
# ---------------------------------------------------------------------------


class TestWindowsRender:
    def test_setx(self):
        assert (
            WindowsRegistryBackend(FakeRunner()).render(var("hello world"))
            == 'setx APP_X "hello world"'
        )

    def test_set(self):
        assert (
            WindowsSessionBackend(FakeRunner()).render(var("hello world"))
            == 'set APP_X="hello world"'
        )

    def test_trailing_backslashes_doubled(self):
        assert quote_windows("C:\\dir\\") == '"C:\\dir\\\\"'

    def test_inner_backslashes_kept(self):
        assert quote_windows("C:\\a\\b") == '"C:\\a\\b"'


# ---------------------------------------------------------------------------
# Unix rendering
# ---------------------------------------------------------------------------


class TestUnixRender:
    def test_expansion_characters_escaped(self):
        assert quote_double("a $HOME `id` \\") == '"a \\$HOME \\`id\\` \\\\"'

    def test_export_line(self):
        assert export_line(var("v")) == 'export APP_X="v"'

    def test_session_command(self):
        assert UnixSessionBackend(FakeRunner()).render(var("v")) == 'export APP_X="v"'

    def test_profile_command(self):
        backend = UnixProfileBackend(FakeRunner(), "/h/.bashrc")
        assert backend.render(var("v")) == (
            "printf '%s\\n' 'export APP_X=\"v\"' >> /h/.bashrc"
        )

    def test_profile_path_quoted(self):
        backend = UnixProfileBackend(FakeRunner(), "/h/my dir/.bashrc")
        assert backend.render(var("v")).endswith(">> '/h/my dir/.bashrc'")


# ---------------------------------------------------------------------------
# persist
# ---------------------------------------------------------------------------


class TestPersist:
    @pytest.mark.asyncio
    async def test_single_command_and_outcome(self):
        runner = FakeRunner()
        outcome = await WindowsRegistryBackend(runner).persist(var("v"))
        assert runner.calls == ['setx APP_X "v"']
        assert outcome.key == "APP_X"
        assert outcome.backend == "windows-registry"
        assert outcome.command == 'setx APP_X "v"'
        assert outcome.duration_ms == 5

    @pytest.mark.asyncio
    async def test_failure_propagates(self):
        with pytest.raises(CommandExecutionError, match="boom"):
            await UnixSessionBackend(FakeRunner(fail=True)).persist(var("v"))

    @posix_only
    @pytest.mark.asyncio
    async def test_profile_append_on_disk(self, tmp_path):
        profile = tmp_path / ".bashrc"
        profile.write_text("# existing\n")
        backend = UnixProfileBackend(ShellCommandRunner(), profile)
        await backend.persist(var("one"))
        await backend.persist(var("it's", key="APP_Y"))
        assert profile.read_text() == (
            "# existing\n" 'export APP_X="one"\n' "export APP_Y=\"it's\"\n"
        )

    @posix_only
    @pytest.mark.asyncio
    async def test_profile_line_cannot_expand(self, tmp_path):
        profile = tmp_path / ".zshrc"
        payload = "a $HOME `id` $(whoami) \\"
        await UnixProfileBackend(ShellCommandRunner(), profile).persist(var(payload))
        result = await ShellCommandRunner().run(
            f". {shlex.quote(str(profile))}; printf '%s' \"$APP_X\""
        )
        assert result.stdout == payload

    @posix_only
    @pytest.mark.asyncio
    async def test_missing_profile_directory_fails(self, tmp_path):
        profile = tmp_path / "missing" / "config.fish"
        with pytest.raises(CommandExecutionError):
            await UnixProfileBackend(ShellCommandRunner(), profile).persist(var("v"))
